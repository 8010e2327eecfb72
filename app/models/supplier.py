import uuid
from datetime import datetime
from typing import Optional
from sqlmodel import SQLModel, Field
from pydantic import model_validator

from app.db.schema import SupplierStatus
from app.models.fields import NonBlankStr
from app.models.quotation import QuotationSummary, QuotationContact


class SupplierCreate(SQLModel):
    """
    Input: an APPROVED quotation plus the product on offer.
    Name and email are taken from the quotation, not from this payload.
    """
    quotation_id: uuid.UUID = Field(
        description="The approved Quotation to provision from.")
    quantity: int = Field(
        gt=0,
        schema_extra={"examples": [10]},
        description="Units on offer. Must be positive."
    )
    product_name: NonBlankStr = Field(max_length=200)
    product_image: NonBlankStr = Field(
        max_length=1000,
        schema_extra={"examples": ["https://cdn.example.com/widget.png"]}
    )
    product_code: NonBlankStr = Field(
        max_length=100,
        schema_extra={"examples": ["W-001"]},
        description="Must be unique across all suppliers."
    )


class SupplierUpdate(SQLModel):
    """
    Partial update. Absent fields are left untouched; none of them can be
    cleared with `null`.
    """
    quantity: Optional[int] = Field(default=None, gt=0)
    product_name: Optional[NonBlankStr] = Field(default=None, max_length=200)
    product_image: Optional[NonBlankStr] = Field(
        default=None, max_length=1000)
    product_code: Optional[NonBlankStr] = Field(default=None, max_length=100)
    status: Optional[SupplierStatus] = None

    @model_validator(mode='after')
    def reject_cleared_fields(self) -> 'SupplierUpdate':
        cleared = [
            name for name in self.model_fields_set if getattr(self, name) is None
        ]
        if cleared:
            raise ValueError(
                f"Field(s) cannot be cleared: {', '.join(sorted(cleared))}")
        return self


class SupplierRead(SQLModel):
    id: uuid.UUID
    name: str
    email: str
    quantity: int
    product_name: str
    product_image: str
    product_code: str
    status: SupplierStatus
    created_by: str
    quotation_id: uuid.UUID
    quotation: Optional[QuotationSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SupplierDetail(SupplierRead):
    quotation: Optional[QuotationContact] = None


class SupplierMessage(SQLModel):
    message: str
    supplier: SupplierRead


class MessageResponse(SQLModel):
    message: str
