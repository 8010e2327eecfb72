from typing import Optional, List, Dict, Any
from datetime import datetime, timezone
import uuid
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field, Relationship, Column, JSON
from enum import Enum


class UserRole(str, Enum):
    CUSTOMER = "customer"
    ADMINISTRATOR = "administrator"


class QuotationStatus(str, Enum):
    PENDING = "PENDING"      # Submitted, awaiting review
    APPROVED = "APPROVED"    # Terminal. Suppliers may be provisioned
    REJECTED = "REJECTED"    # Terminal. Hidden from the default listing

    def can_transition_to(self, target: "QuotationStatus") -> bool:
        """
        Only PENDING quotations may be decided. APPROVED and REJECTED are
        terminal states.
        """
        return self == QuotationStatus.PENDING and target in (
            QuotationStatus.APPROVED, QuotationStatus.REJECTED)


class SupplierStatus(str, Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class AuditAction(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    APPROVE = "approve"
    REJECT = "reject"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin(SQLModel):
    """
    A foundational mixin that provides standard audit timestamps for database records.
    Every entity inheriting from this mixin tracks when it was originally created
    and when it was last modified.
    """
    created_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        description="The exact UTC timestamp when this record was first persisted in the database. Example: '2023-10-27 14:30:00'"
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": utc_now},
        description="The exact UTC timestamp when this record was last modified. Updates automatically. Example: '2023-10-28 09:15:00'"
    )


class User(TimestampMixin, SQLModel, table=True):
    """
    Represents an account that can sign in to the storefront.
    Customers shop; Administrators review quotations and provision suppliers.
    The role is an explicit field, never inferred from the email address.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the user."
    )
    email: str = Field(
        unique=True,
        index=True,
        description="The login email address. Example: 'john.doe@example.com'"
    )
    hashed_password: str = Field(
        description="The bcrypt hash of the password. Never store plain text. Example: '$2b$12$EixZaYVK1fsdf31...'"
    )
    name: str = Field(
        description="The user's display name. Example: 'John Doe'"
    )
    role: UserRole = Field(
        default=UserRole.CUSTOMER,
        description="Authorization role. Example: 'customer'"
    )
    is_active: bool = Field(
        default=True,
        description="Soft delete flag. If False, user cannot log in. Example: True"
    )


class Quotation(TimestampMixin, SQLModel, table=True):
    """
    A business-relationship request submitted publicly by a prospective supplier.
    Starts PENDING and is decided exactly once by an administrator. Only an
    APPROVED quotation can back the creation of Supplier records.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the quotation."
    )
    name: str = Field(description="Contact person. Example: 'Alice'")
    email: str = Field(
        index=True,
        description="Contact email, stored lower-case. Example: 'alice@acme.com'"
    )
    phone_number: str = Field(description="Example: '1234567890'")
    business_address: str = Field(description="Example: '1 Main St'")
    company_name: str = Field(description="Example: 'Acme'")
    industrial_experience: str = Field(
        description="Free text. Example: '5 yrs in injection moulding'")
    qualification: str = Field(description="Free text. Example: 'ISO 9001'")
    product_details: str = Field(
        description="Free text describing what the applicant can supply.")

    status: QuotationStatus = Field(
        default=QuotationStatus.PENDING,
        index=True,
        description="Review state. Example: 'PENDING'"
    )
    admin_notes: Optional[str] = Field(
        default=None,
        description="Internal notes visible only to administrators."
    )

    # Decision metadata
    approved_at: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True))
    approved_by: Optional[str] = Field(
        default=None,
        description="Email of the approving administrator."
    )
    rejected_at: Optional[datetime] = Field(
        default=None, sa_type=DateTime(timezone=True))

    suppliers: List["Supplier"] = Relationship(back_populates="quotation")


class Supplier(TimestampMixin, SQLModel, table=True):
    """
    A provisioned product-supply record.
    Contact fields are a snapshot of the originating Quotation at creation
    time and are not re-synced afterwards.
    """
    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        description="The unique identifier for the supplier."
    )
    name: str = Field(description="Copied from the Quotation.")
    email: str = Field(description="Copied from the Quotation.")
    quantity: int = Field(gt=0, description="Units on offer. Example: 10")
    product_name: str = Field(description="Example: 'Widget'")
    product_image: str = Field(
        description="Image URL. Example: 'https://cdn.example.com/w.png'")
    product_code: str = Field(
        unique=True,
        index=True,
        description="Globally unique product code. Example: 'W-001'"
    )
    status: SupplierStatus = Field(default=SupplierStatus.ACTIVE)
    created_by: str = Field(
        description="Email of the administrator who provisioned the record.")

    quotation_id: uuid.UUID = Field(
        foreign_key="quotation.id",
        index=True,
        description="The approved Quotation this supplier originates from."
    )
    quotation: Optional[Quotation] = Relationship(back_populates="suppliers")


class AuditLog(SQLModel, table=True):
    """
    Append-only record of administrative mutations.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    actor_user_id: uuid.UUID = Field(index=True)
    entity_type: str = Field(index=True, description="Example: 'Quotation'")
    entity_id: uuid.UUID = Field(index=True)
    action: AuditAction
    changes: Dict[str, Any] = Field(
        default_factory=dict, sa_column=Column(JSON))
    timestamp: datetime = Field(
        default_factory=utc_now, sa_type=DateTime(timezone=True))
