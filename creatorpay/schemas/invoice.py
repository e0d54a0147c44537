"""
Invoice schemas
"""
from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


class InvoiceCreate(BaseModel):
    """Reference to an invoice document that is already stored"""
    type: Literal["uploaded", "generated"]
    filename: Optional[str] = None
    file_url: Optional[str] = Field(default=None, description="Storage reference of the document")

    @model_validator(mode="after")
    def _uploaded_needs_file(self) -> "InvoiceCreate":
        if self.type == "uploaded" and not self.file_url:
            raise ValueError("file_url is required for uploaded invoices")
        return self


class InvoiceResponse(BaseModel):
    id: str
    payment_request_id: str
    type: str
    filename: Optional[str] = None
    file_url: Optional[str] = None
    validation_status: str
    validation_notes: Optional[str] = None
    created_at: datetime
