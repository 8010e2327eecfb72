import uuid
from typing import List
from loguru import logger
from sqlalchemy import update
from sqlmodel import Session, select
from fastapi import HTTPException, BackgroundTasks

from app.db.schema import (
    User, Quotation, QuotationStatus, Supplier, AuditAction, utc_now
)
from app.models.quotation import QuotationCreate, QuotationUpdate
from app.core.audit import _perform_audit_log


class QuotationService:
    """
    Owns the Quotation lifecycle: public submission, administrative review
    (PENDING -> APPROVED | REJECTED) and edits.
    """

    def __init__(self, session: Session):
        self.session = session

    def _get_or_404(self, quotation_id: uuid.UUID) -> Quotation:
        quotation = self.session.get(Quotation, quotation_id)
        if not quotation:
            raise HTTPException(
                status_code=404, detail="Quotation not found.")
        return quotation

    def _check_transition(self, quotation: Quotation, target: QuotationStatus):
        if not quotation.status.can_transition_to(target):
            logger.warning(
                f"Rejected transition {quotation.status.value} -> {target.value} "
                f"for quotation {quotation.id}")
            raise HTTPException(
                status_code=400,
                detail=f"Quotation is already {quotation.status.value.lower()} and cannot be {target.value.lower()}."
            )

    def _decide(self, quotation_id: uuid.UUID, target: QuotationStatus, **stamps) -> Quotation:
        quotation = self._get_or_404(quotation_id)
        self._check_transition(quotation, target)

        # Guarded write: only a row that is still PENDING in the database changes
        statement = (
            update(Quotation)
            .where(Quotation.id == quotation_id)
            .where(Quotation.status == QuotationStatus.PENDING)
            .values(status=target, **stamps)
        )
        try:
            result = self.session.exec(statement)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.exception(f"Quotation {target.value.lower()} failed: {e}")
            raise HTTPException(
                status_code=500, detail="Could not update quotation status.")

        self.session.expire_all()
        quotation = self._get_or_404(quotation_id)
        if result.rowcount == 0:
            # Decided by another request after it was read
            self._check_transition(quotation, target)
        return quotation

    def _save(self, quotation: Quotation, action: str) -> Quotation:
        try:
            self.session.add(quotation)
            self.session.commit()
            self.session.refresh(quotation)
            return quotation
        except Exception as e:
            self.session.rollback()
            logger.exception(f"Quotation {action} failed: {e}")
            raise HTTPException(
                status_code=500, detail=f"Could not {action} quotation.")

    # ==========================================================================
    # PUBLIC
    # ==========================================================================

    def submit(self, data: QuotationCreate) -> Quotation:
        """
        Records a quotation sent through the public form.

        The payload has already been trimmed and validated, so every field is
        present and non-blank. The new quotation always starts as PENDING.

        Args:
            data (QuotationCreate): The applicant's contact and business details.

        Returns:
            Quotation: The persisted quotation.

        Raises:
            HTTPException(500): If the record could not be stored.
        """
        quotation = Quotation(
            **data.model_dump(), status=QuotationStatus.PENDING)
        quotation = self._save(quotation, "submit")

        logger.info(
            f"New quotation submitted: {quotation.id} ({quotation.company_name})")
        return quotation

    # ==========================================================================
    # READ OPERATIONS (Admin)
    # ==========================================================================

    def list_quotations(self, include_rejected: bool = False) -> List[Quotation]:
        statement = select(Quotation)
        if not include_rejected:
            statement = statement.where(
                Quotation.status != QuotationStatus.REJECTED)

        statement = statement.order_by(Quotation.created_at.desc())
        return self.session.exec(statement).all()

    def get_quotation(self, quotation_id: uuid.UUID) -> Quotation:
        return self._get_or_404(quotation_id)

    # ==========================================================================
    # WRITE OPERATIONS (Admin)
    # ==========================================================================

    def approve(
        self,
        user: User,
        quotation_id: uuid.UUID,
        background_tasks: BackgroundTasks
    ) -> Quotation:
        """
        Moves a PENDING quotation to APPROVED, making it eligible for
        supplier creation.

        The status change is written only if the row is still PENDING, so an
        approve racing a reject cannot both succeed.

        Args:
            user (User): The administrator taking the decision.
            quotation_id (UUID): The quotation to approve.
            background_tasks (BackgroundTasks): Queue for the audit entry.

        Returns:
            Quotation: The approved quotation with `approved_at` and `approved_by` set.

        Raises:
            HTTPException(404): If the quotation does not exist.
            HTTPException(400): If the quotation was already approved or rejected.
        """
        quotation = self._decide(
            quotation_id,
            QuotationStatus.APPROVED,
            approved_at=utc_now(),
            approved_by=user.email,
        )

        background_tasks.add_task(
            _perform_audit_log,
            user_id=user.id,
            entity_type="Quotation",
            entity_id=quotation.id,
            action=AuditAction.APPROVE,
            changes={"status": quotation.status.value,
                     "approved_by": quotation.approved_by}
        )

        logger.info(f"Quotation approved: {quotation.id} by {user.email}")
        return quotation

    def reject(
        self,
        user: User,
        quotation_id: uuid.UUID,
        background_tasks: BackgroundTasks
    ) -> Quotation:
        """
        Moves a PENDING quotation to REJECTED. Same guarded write as `approve`.
        """
        quotation = self._decide(
            quotation_id,
            QuotationStatus.REJECTED,
            rejected_at=utc_now(),
        )

        background_tasks.add_task(
            _perform_audit_log,
            user_id=user.id,
            entity_type="Quotation",
            entity_id=quotation.id,
            action=AuditAction.REJECT,
            changes={"status": quotation.status.value}
        )

        logger.info(f"Quotation rejected: {quotation.id} by {user.email}")
        return quotation

    def update(
        self,
        user: User,
        quotation_id: uuid.UUID,
        data: QuotationUpdate,
        background_tasks: BackgroundTasks
    ) -> Quotation:
        """
        Applies only the fields present in the payload.
        """
        quotation = self._get_or_404(quotation_id)

        # Snapshot for audit
        old_state = quotation.model_dump(mode="json")
        updates = data.model_dump(exclude_unset=True)

        for key, value in updates.items():
            setattr(quotation, key, value)

        quotation = self._save(quotation, "update")

        changes = {k: {"old": old_state.get(k), "new": v}
                   for k, v in updates.items()}

        background_tasks.add_task(
            _perform_audit_log,
            user_id=user.id,
            entity_type="Quotation",
            entity_id=quotation.id,
            action=AuditAction.UPDATE,
            changes=changes
        )

        logger.info(
            f"Quotation updated: {quotation.id} fields={sorted(updates)}")
        return quotation

    def delete(
        self,
        user: User,
        quotation_id: uuid.UUID,
        background_tasks: BackgroundTasks
    ):
        quotation = self._get_or_404(quotation_id)

        linked = self.session.exec(
            select(Supplier.id).where(Supplier.quotation_id == quotation.id)
        ).first()
        if linked:
            raise HTTPException(
                status_code=400,
                detail="Cannot delete a quotation that has suppliers. Delete its suppliers first."
            )

        snapshot = {"company_name": quotation.company_name,
                    "status": quotation.status.value}

        try:
            self.session.delete(quotation)
            self.session.commit()
        except Exception as e:
            self.session.rollback()
            logger.exception(f"Quotation delete failed: {e}")
            raise HTTPException(
                status_code=500, detail="Could not delete quotation.")

        background_tasks.add_task(
            _perform_audit_log,
            user_id=user.id,
            entity_type="Quotation",
            entity_id=quotation_id,
            action=AuditAction.DELETE,
            changes=snapshot
        )

        logger.info(f"Quotation deleted: {quotation_id}")
        return {"message": "Quotation deleted successfully."}
