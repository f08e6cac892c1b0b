from __future__ import annotations

from typing import Any, Optional

from ...schemas import Contract, ContractPdfOptions, CreateContractRequest, GeneratedPdf, ListPage
from ..result import ApiResult
from .base import EndpointGroup, QueryParams

BASE_PATH = "/api/contracts"


class ContractsApi(EndpointGroup):
    async def list(
        self, params: QueryParams = None, *, default_limit: Optional[int] = None
    ) -> ApiResult[ListPage[Contract]]:
        return await self._page(
            BASE_PATH,
            Contract,
            params,
            fallback="Failed to load contracts",
            default_limit=default_limit or 20,
        )

    async def get(self, contract_id: str) -> ApiResult[Contract]:
        return await self._entity(f"{BASE_PATH}/{contract_id}", Contract, fallback="Failed to load contract")

    async def create(self, data: CreateContractRequest) -> ApiResult[Contract]:
        return await self._entity(
            BASE_PATH,
            Contract,
            method="POST",
            json=data,
            fallback="Failed to create contract",
        )

    async def auto_generate(self, rental_id: str) -> ApiResult[Contract]:
        return await self._entity(
            f"{BASE_PATH}/auto-generate/{rental_id}",
            Contract,
            method="POST",
            fallback="Failed to generate contract",
        )

    async def generate_pdf(
        self, contract_id: str, options: Optional[ContractPdfOptions] = None
    ) -> ApiResult[GeneratedPdf]:
        return await self._entity(
            f"{BASE_PATH}/{contract_id}/pdf",
            GeneratedPdf,
            method="POST",
            json=options or ContractPdfOptions(),
            fallback="Failed to generate contract PDF",
        )

    async def download_pdf(self, contract_id: str) -> ApiResult[bytes]:
        """Raw PDF bytes. A 404 status means the PDF has not been generated yet."""
        return await self.client.request(
            f"{BASE_PATH}/{contract_id}/download",
            fallback="Failed to download contract",
            response_type="bytes",
        )

    async def fetch_pdf_url(self, url: str) -> ApiResult[bytes]:
        return await self.client.request(url, fallback="Failed to download contract", response_type="bytes")

    async def delete(self, contract_id: str) -> ApiResult[Any]:
        return await self._command(f"{BASE_PATH}/{contract_id}", method="DELETE", fallback="Failed to delete contract")


__all__ = ["ContractsApi"]
