import uuid
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from app.core.dependencies import get_quotation_service, require_admin
from app.db.schema import User
from app.models.quotation import (
    QuotationCreate, QuotationUpdate, QuotationRead, QuotationMessage
)
from app.models.supplier import MessageResponse
from app.services.quotation import QuotationService


router = APIRouter()


@router.post(
    "/",
    response_model=QuotationMessage,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a Quotation",
    description="Public endpoint. Creates a PENDING quotation for administrator review."
)
def submit_quotation(
    data: QuotationCreate,
    service: QuotationService = Depends(get_quotation_service)
):
    quotation = service.submit(data)
    return QuotationMessage(
        message="Quotation submitted successfully",
        quotation=QuotationRead.model_validate(quotation)
    )


@router.get(
    "/",
    response_model=List[QuotationRead],
    summary="List Quotations",
    description="Newest first. Rejected quotations are hidden unless `include_rejected=true`. (Admin only)"
)
def list_quotations(
    include_rejected: bool = Query(
        False, description="Include REJECTED quotations"),
    admin: User = Depends(require_admin),
    service: QuotationService = Depends(get_quotation_service)
):
    return service.list_quotations(include_rejected=include_rejected)


@router.get(
    "/{quotation_id}",
    response_model=QuotationRead,
    summary="Get Quotation",
    description="(Admin only)"
)
def get_quotation(
    quotation_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: QuotationService = Depends(get_quotation_service)
):
    return service.get_quotation(quotation_id)


@router.put(
    "/{quotation_id}/approve",
    response_model=QuotationMessage,
    summary="Approve Quotation",
    description="PENDING -> APPROVED. Records the approver and timestamp. (Admin only)"
)
def approve_quotation(
    quotation_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    service: QuotationService = Depends(get_quotation_service)
):
    quotation = service.approve(admin, quotation_id, background_tasks)
    return QuotationMessage(
        message="Quotation approved successfully",
        quotation=QuotationRead.model_validate(quotation)
    )


@router.put(
    "/{quotation_id}/reject",
    response_model=QuotationMessage,
    summary="Reject Quotation",
    description="PENDING -> REJECTED. The quotation is kept but hidden from the default listing. (Admin only)"
)
def reject_quotation(
    quotation_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    service: QuotationService = Depends(get_quotation_service)
):
    quotation = service.reject(admin, quotation_id, background_tasks)
    return QuotationMessage(
        message="Quotation rejected successfully",
        quotation=QuotationRead.model_validate(quotation)
    )


@router.put(
    "/{quotation_id}",
    response_model=QuotationMessage,
    summary="Update Quotation",
    description="Only the fields present in the body are changed. (Admin only)"
)
@router.patch(
    "/{quotation_id}",
    response_model=QuotationMessage,
    summary="Update Quotation",
    description="Only the fields present in the body are changed. (Admin only)"
)
def update_quotation(
    quotation_id: uuid.UUID,
    data: QuotationUpdate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    service: QuotationService = Depends(get_quotation_service)
):
    quotation = service.update(admin, quotation_id, data, background_tasks)
    return QuotationMessage(
        message="Quotation updated successfully",
        quotation=QuotationRead.model_validate(quotation)
    )


@router.delete(
    "/{quotation_id}",
    response_model=MessageResponse,
    summary="Delete Quotation",
    description="Permanently removes a quotation that has no suppliers. (Admin only)"
)
def delete_quotation(
    quotation_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    service: QuotationService = Depends(get_quotation_service)
):
    return service.delete(admin, quotation_id, background_tasks)
