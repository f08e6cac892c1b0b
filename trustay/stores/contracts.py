from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

from ..api.endpoints import ContractsApi
from ..log import log_store_action
from ..schemas import Contract, ContractPdfOptions, CreateContractRequest
from ..store import EntityStore, StatePersistence

logger = logging.getLogger(__name__)


class ContractStore(EntityStore):
    name = "contracts"

    def __init__(
        self,
        contracts: ContractsApi,
        *,
        persistence: Optional[StatePersistence] = None,
        page_size: int = 20,
        pdf_retry_delay_seconds: float = 1.0,
    ) -> None:
        super().__init__(persistence=persistence)
        self._contracts = contracts
        self.page_size = page_size
        self.pdf_retry_delay_seconds = pdf_retry_delay_seconds
        self.contracts = self._list("contracts", Contract, self._fetch, fallback="Failed to load contracts")
        self.current = self._detail("current", Contract, fallback="Failed to load contract")
        self.downloading = False
        self.pdf_url: Optional[str] = None

    async def _fetch(self, params: Mapping[str, Any]):
        return await self._contracts.list(params, default_limit=self.page_size)

    async def load_contracts(
        self, params: Optional[Mapping[str, Any]] = None, append: bool = False, *, force: bool = False
    ) -> bool:
        query = {key: value for key, value in dict(params or {}).items() if value is not None}
        query.setdefault("page", 1)
        query.setdefault("limit", self.page_size)
        return await self.contracts.search(query, append=append, force=force)

    async def load_by_id(self, contract_id: str) -> bool:
        return await self.current.load(contract_id, lambda: self._contracts.get(contract_id))

    async def create(self, data: CreateContractRequest) -> Optional[Contract]:
        result = await self._mutate(
            "create",
            lambda: self._contracts.create(data),
            apply=self.contracts.prepend,
            fallback="Failed to create contract",
        )
        return result.data if result.success else None

    async def auto_generate(self, rental_id: str) -> Optional[Contract]:
        result = await self._mutate(
            "auto_generate",
            lambda: self._contracts.auto_generate(rental_id),
            apply=self.contracts.prepend,
            fallback="Failed to generate contract",
        )
        return result.data if result.success else None

    async def generate_pdf(self, contract_id: str, options: Optional[ContractPdfOptions] = None) -> Optional[str]:
        """Render the contract PDF and return where it can be downloaded."""

        def apply(generated: Any) -> None:
            self.pdf_url = generated.download_url or generated.pdf_url

        result = await self._mutate(
            "generate_pdf",
            lambda: self._contracts.generate_pdf(contract_id, options),
            apply=apply,
            fallback="Failed to generate contract PDF",
        )
        if not result.success:
            return None
        return result.data.download_url or result.data.pdf_url

    async def download_pdf(self, contract_id: str) -> Optional[bytes]:
        """Download the PDF, generating it first when the backend has none yet."""
        self.downloading = True
        self.submit_error = None
        self._notify()
        try:
            return await self._download(contract_id)
        finally:
            self.downloading = False
            self._notify()

    async def _download(self, contract_id: str) -> Optional[bytes]:
        result = await self._contracts.download_pdf(contract_id)
        if result.success:
            log_store_action(self.name, "download_pdf", "applied", contract_id=contract_id)
            return result.data
        if result.status != 404:
            return self._download_failed(contract_id, result.error)

        logger.info("PDF for contract %s not found, generating it", contract_id)
        generated = await self._contracts.generate_pdf(contract_id)
        if not generated.success:
            return self._download_failed(contract_id, generated.error)

        url = generated.data.download_url or generated.data.pdf_url
        if url:
            self.pdf_url = url
            fetched = await self._contracts.fetch_pdf_url(url)
            if fetched.success:
                log_store_action(self.name, "download_pdf", "applied", contract_id=contract_id, regenerated=True)
                return fetched.data
            logger.info("Fetching generated PDF from %s failed: %s", url, fetched.error)

        await asyncio.sleep(self.pdf_retry_delay_seconds)
        retried = await self._contracts.download_pdf(contract_id)
        if not retried.success:
            return self._download_failed(contract_id, retried.error)
        log_store_action(self.name, "download_pdf", "applied", contract_id=contract_id, regenerated=True)
        return retried.data

    def _download_failed(self, contract_id: str, message: str) -> None:
        self.submit_error = message
        log_store_action(self.name, "download_pdf", "failed", contract_id=contract_id, error=message)
        return None

    async def delete(self, contract_id: str) -> bool:
        def apply(_: Any) -> None:
            self.contracts.remove_by_id(contract_id)
            if self.current.matches(contract_id):
                self.current.set(None)

        result = await self._mutate(
            "delete",
            lambda: self._contracts.delete(contract_id),
            apply=apply,
            fallback="Failed to delete contract",
        )
        return result.success

    def clear_current(self) -> None:
        self.current.clear()
        self.pdf_url = None


__all__ = ["ContractStore"]
