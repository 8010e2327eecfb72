import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field
from pydantic import model_validator

from app.db.schema import QuotationStatus
from app.models.fields import NonBlankStr, NormalizedEmail, TrimmedStr

# ==========================================
# Create Model
# ==========================================


class QuotationCreate(SQLModel):
    """
    Public submission payload. Every field is required and must not be blank.
    """
    name: NonBlankStr = Field(
        max_length=100,
        schema_extra={"examples": ["Alice"]},
        description="Contact person."
    )
    email: NormalizedEmail = Field(
        schema_extra={"examples": ["alice@acme.com"]},
        description="Contact email."
    )
    phone_number: NonBlankStr = Field(max_length=50)
    business_address: NonBlankStr = Field(max_length=500)
    company_name: NonBlankStr = Field(max_length=200)
    industrial_experience: NonBlankStr
    qualification: NonBlankStr
    product_details: NonBlankStr

# ==========================================
# Update Model
# ==========================================


class QuotationUpdate(SQLModel):
    """
    Administrative edit.

    Only fields present in the payload are applied. Sending `null` clears
    `admin_notes`; the submitted fields cannot be cleared.
    """
    name: Optional[NonBlankStr] = Field(default=None, max_length=100)
    email: Optional[NormalizedEmail] = None
    phone_number: Optional[NonBlankStr] = Field(default=None, max_length=50)
    business_address: Optional[NonBlankStr] = Field(
        default=None, max_length=500)
    company_name: Optional[NonBlankStr] = Field(default=None, max_length=200)
    industrial_experience: Optional[NonBlankStr] = None
    qualification: Optional[NonBlankStr] = None
    product_details: Optional[NonBlankStr] = None
    admin_notes: Optional[TrimmedStr] = Field(
        default=None,
        max_length=2000,
        description="Internal notes. Send null to clear."
    )

    @model_validator(mode='after')
    def reject_cleared_required_fields(self) -> 'QuotationUpdate':
        cleared = [
            name for name in self.model_fields_set
            if name != "admin_notes" and getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(
                f"Field(s) cannot be cleared: {', '.join(sorted(cleared))}")
        return self

# ==========================================
# Read Models
# ==========================================


class QuotationRead(SQLModel):
    id: uuid.UUID
    name: str
    email: str
    phone_number: str
    business_address: str
    company_name: str
    industrial_experience: str
    qualification: str
    product_details: str
    status: QuotationStatus
    admin_notes: Optional[str] = None
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    rejected_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class QuotationSummary(SQLModel):
    """Minimal projection used for selection lists and supplier listings."""
    id: uuid.UUID
    name: str
    email: str
    company_name: str


class QuotationContact(QuotationSummary):
    """Wider projection shown on the supplier detail view."""
    business_address: str
    phone_number: str


class QuotationMessage(SQLModel):
    message: str
    quotation: QuotationRead
