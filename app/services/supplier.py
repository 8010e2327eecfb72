from typing import List, Optional
import uuid
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select
from fastapi import HTTPException, BackgroundTasks

from app.db.schema import (
    User, Quotation, QuotationStatus, Supplier, SupplierStatus, AuditAction
)
from app.models.quotation import QuotationSummary
from app.models.supplier import (
    SupplierCreate, SupplierUpdate, SupplierRead, SupplierDetail
)
from app.core.audit import _perform_audit_log


PRODUCT_CODE_CONFLICT = "Product code already exists"


class SupplierService:
    """
    Provisions Supplier records from APPROVED quotations.

    Product-code uniqueness is checked up front for a friendly error, but the
    unique index on `supplier.product_code` is the authoritative guard: two
    concurrent requests can both pass the pre-check, and the loser fails at
    commit with an IntegrityError that is reported as the same conflict.
    """

    def __init__(self, session: Session):
        self.session = session

    def _get_or_404(self, supplier_id: uuid.UUID) -> Supplier:
        supplier = self.session.get(Supplier, supplier_id)
        if not supplier:
            raise HTTPException(status_code=404, detail="Supplier not found.")
        return supplier

    def _product_code_taken(self, code: str, exclude_id: Optional[uuid.UUID] = None) -> bool:
        statement = select(Supplier.id).where(Supplier.product_code == code)

        # Exclude current record (for Updates)
        if exclude_id:
            statement = statement.where(Supplier.id != exclude_id)

        return self.session.exec(statement).first() is not None

    def _commit(self, supplier: Supplier, action: str, exclude_id: Optional[uuid.UUID] = None):
        # Read before commit: a rollback expires the instance
        code = supplier.product_code
        try:
            self.session.add(supplier)
            self.session.commit()
            self.session.refresh(supplier)
        except IntegrityError as e:
            self.session.rollback()
            if self._product_code_taken(code, exclude_id=exclude_id):
                logger.warning(
                    f"Product code '{code}' lost a concurrent {action}")
                raise HTTPException(
                    status_code=400, detail=PRODUCT_CODE_CONFLICT)
            logger.error(f"Supplier {action} integrity error: {e}")
            raise HTTPException(
                status_code=500, detail=f"Could not {action} supplier.")
        except Exception as e:
            self.session.rollback()
            logger.exception(f"Supplier {action} failed: {e}")
            raise HTTPException(
                status_code=500, detail=f"Could not {action} supplier.")

    def _to_read(self, supplier: Supplier) -> SupplierRead:
        # Relationship is expanded to the summary projection
        return SupplierRead.model_validate(supplier)

    # ==========================================================================
    # READ OPERATIONS
    # ==========================================================================

    def list_approved_quotations(self) -> List[QuotationSummary]:
        """
        Selection list for provisioning. The only read path filtered
        strictly on APPROVED.
        """
        statement = (
            select(Quotation)
            .where(Quotation.status == QuotationStatus.APPROVED)
            .order_by(Quotation.approved_at.desc())
        )
        results = self.session.exec(statement).all()

        return [QuotationSummary.model_validate(q) for q in results]

    def list_suppliers(self) -> List[SupplierRead]:
        statement = select(Supplier).order_by(Supplier.created_at.desc())
        results = self.session.exec(statement).all()

        return [self._to_read(s) for s in results]

    def get_supplier(self, supplier_id: uuid.UUID) -> SupplierDetail:
        supplier = self._get_or_404(supplier_id)

        return SupplierDetail.model_validate(supplier)

    # ==========================================================================
    # WRITE OPERATIONS
    # ==========================================================================

    def create_supplier(
        self,
        user: User,
        data: SupplierCreate,
        background_tasks: BackgroundTasks
    ) -> SupplierRead:
        """
        Creates a supplier from an APPROVED quotation.

        The supplier's name and email are copied from the quotation at this
        moment and do not follow later quotation edits. The quotation row is
        read FOR UPDATE so a concurrent decision cannot interleave.

        Args:
            user (User): The administrator creating the supplier.
            data (SupplierCreate): Quotation reference and product details.
            background_tasks (BackgroundTasks): Queue for the audit entry.

        Returns:
            SupplierRead: The created supplier with its quotation summary.

        Raises:
            HTTPException(404): If the quotation does not exist.
            HTTPException(400): If the quotation is not APPROVED, or the
                product code is already used by another supplier.
        """
        # 1. Resolve the quotation, locking the row where the dialect allows
        quotation = self.session.exec(
            select(Quotation)
            .where(Quotation.id == data.quotation_id)
            .with_for_update()
        ).first()

        if not quotation:
            raise HTTPException(
                status_code=404, detail="Quotation not found.")

        # 2. Only APPROVED quotations can be provisioned
        if quotation.status != QuotationStatus.APPROVED:
            raise HTTPException(
                status_code=400,
                detail="Quotation must be approved to create supplier"
            )

        # 3. Fast-path uniqueness check
        if self._product_code_taken(data.product_code):
            logger.warning(
                f"Duplicate product code rejected: {data.product_code}")
            raise HTTPException(status_code=400, detail=PRODUCT_CODE_CONFLICT)

        # 4. Snapshot contact details from the quotation
        supplier = Supplier(
            name=quotation.name,
            email=quotation.email,
            quantity=data.quantity,
            product_name=data.product_name,
            product_image=data.product_image,
            product_code=data.product_code,
            status=SupplierStatus.ACTIVE,
            created_by=user.email,
            quotation_id=quotation.id
        )
        self._commit(supplier, "create")

        background_tasks.add_task(
            _perform_audit_log,
            user_id=user.id,
            entity_type="Supplier",
            entity_id=supplier.id,
            action=AuditAction.CREATE,
            changes=data.model_dump(mode='json')
        )

        logger.info(
            f"New supplier created: {supplier.id} ({supplier.product_code}) from quotation {quotation.id}")
        return self._to_read(supplier)

    def update_supplier(
        self,
        user: User,
        supplier_id: uuid.UUID,
        data: SupplierUpdate,
        background_tasks: BackgroundTasks
    ) -> SupplierRead:
        """
        Applies only the fields present in the payload.

        Uniqueness is re-checked only when the product code actually changes.
        The linked quotation is not re-validated, so a supplier stays editable
        even if its quotation is no longer APPROVED.

        Args:
            user (User): The administrator making the change.
            supplier_id (UUID): The supplier to update.
            data (SupplierUpdate): The partial fields to update.
            background_tasks (BackgroundTasks): Queue for the audit entry.

        Returns:
            SupplierRead: The updated supplier.

        Raises:
            HTTPException(404): If the supplier does not exist.
            HTTPException(400): If the new product code belongs to another supplier.
        """
        supplier = self._get_or_404(supplier_id)

        old_state = supplier.model_dump(mode="json")
        updates = data.model_dump(exclude_unset=True)

        # Re-check uniqueness only if the code actually changes
        new_code = updates.get("product_code")
        if new_code and new_code != supplier.product_code:
            if self._product_code_taken(new_code, exclude_id=supplier.id):
                logger.warning(
                    f"Duplicate product code rejected on update: {new_code}")
                raise HTTPException(
                    status_code=400, detail=PRODUCT_CODE_CONFLICT)

        for key, value in updates.items():
            setattr(supplier, key, value)

        self._commit(supplier, "update", exclude_id=supplier.id)

        changes = {k: {"old": old_state.get(k), "new": v}
                   for k, v in data.model_dump(mode="json", exclude_unset=True).items()}

        background_tasks.add_task(
            _perform_audit_log,
            user_id=user.id,
            entity_type="Supplier",
            entity_id=supplier.id,
            action=AuditAction.UPDATE,
            changes=changes
        )

        logger.info(f"Supplier updated: {supplier.id} fields={sorted(updates)}")
        return self._to_read(supplier)

    def delete_supplier(
        self,
        user: User,
        supplier_id: uuid.UUID,
        background_tasks: BackgroundTasks
    ):
        supplier = self._get_or_404(supplier_id)
        snapshot = {"product_code": supplier.product_code,
                    "quotation_id": str(supplier.quotation_id)}

        try:
            self.session.delete(supplier)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.exception(f"Supplier delete failed: {e}")
            raise HTTPException(
                status_code=500, detail="Could not delete supplier.")

        background_tasks.add_task(
            _perform_audit_log,
            user_id=user.id,
            entity_type="Supplier",
            entity_id=supplier_id,
            action=AuditAction.DELETE,
            changes=snapshot
        )

        logger.info(f"Supplier deleted: {supplier_id}")
        return {"message": "Supplier deleted successfully"}
