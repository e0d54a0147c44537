"""
Creator request/response schemas
"""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from creatorpay.vat import BusinessCategory, normalize_country_code


class CreatorCreate(BaseModel):
    """Full creator profile, as submitted from onboarding"""
    email: str = Field(..., min_length=3)
    full_name: str = Field(..., min_length=1)
    country: str = Field(..., description="ISO 3166-1 alpha-2, e.g. NL")
    business_type: BusinessCategory
    vat_id: Optional[str] = None
    company_name: Optional[str] = None
    invoice_method: Literal["auto", "manual"] = "auto"

    @field_validator("country")
    @classmethod
    def _normalize_country(cls, value: str) -> str:
        return normalize_country_code(value)

    @model_validator(mode="after")
    def _vat_registered_needs_vat_id(self) -> "CreatorCreate":
        if self.business_type is BusinessCategory.VAT_REGISTERED and not (self.vat_id or "").strip():
            raise ValueError("vat_id is required for vat_registered creators")
        return self


class CreatorQuickCreate(BaseModel):
    """Admin shortcut: name and email only, the rest is filled in during onboarding"""
    email: str = Field(..., min_length=3)
    full_name: str = Field(..., min_length=1)


class CreatorUpdate(BaseModel):
    """Partial update; the merged profile is validated in the router"""
    full_name: Optional[str] = None
    country: Optional[str] = None
    business_type: Optional[BusinessCategory] = None
    vat_id: Optional[str] = None
    company_name: Optional[str] = None
    invoice_method: Optional[Literal["auto", "manual"]] = None

    @field_validator("country")
    @classmethod
    def _normalize_country(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return normalize_country_code(value)


class CreatorSummary(BaseModel):
    id: str
    email: str
    full_name: str
    country: str
    business_type: str


class CreatorResponse(BaseModel):
    id: str
    email: str
    full_name: str
    country: str
    business_type: str
    vat_id: Optional[str] = None
    company_name: Optional[str] = None
    invoice_method: str
    payout_account_id: Optional[str] = None
    charges_enabled: bool = False
    payouts_enabled: bool = False
    created_at: datetime
    updated_at: datetime


class QuickCreateResponse(BaseModel):
    creator: CreatorResponse
    onboarding_url: str
