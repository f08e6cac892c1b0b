from __future__ import annotations

import enum
from typing import Any, List, Optional

from pydantic import Field

from .common import Entity, WireModel


class ContractStatus(str, enum.Enum):
    DRAFT = "draft"
    PENDING_SIGNATURES = "pending_signatures"
    PARTIALLY_SIGNED = "partially_signed"
    FULLY_SIGNED = "fully_signed"
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"


class Contract(Entity):
    contract_code: Optional[str] = None
    rental_id: Optional[str] = None
    landlord_id: Optional[str] = None
    tenant_id: Optional[str] = None
    room_instance_id: Optional[str] = None
    contract_type: Optional[str] = None
    status: ContractStatus = ContractStatus.DRAFT
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    contract_data: Optional[dict[str, Any]] = None
    pdf_url: Optional[str] = None


class ContractTerms(WireModel):
    monthly_rent: Any
    deposit_amount: Any
    additional_terms: Optional[str] = None
    rules: List[str] = Field(default_factory=list)
    amenities: List[str] = Field(default_factory=list)


class CreateContractRequest(WireModel):
    landlord_id: str
    tenant_id: str
    room_instance_id: str
    contract_type: str
    start_date: str
    end_date: str
    contract_data: ContractTerms


class ContractPdfOptions(WireModel):
    include_signatures: bool = True
    format: str = "A4"
    print_background: bool = True


class GeneratedPdf(WireModel):
    pdf_url: Optional[str] = None
    download_url: Optional[str] = None
    hash: Optional[str] = None


__all__ = [
    "ContractStatus",
    "Contract",
    "ContractTerms",
    "CreateContractRequest",
    "ContractPdfOptions",
    "GeneratedPdf",
]
