import uuid
from typing import List
from fastapi import APIRouter, BackgroundTasks, Depends, status

from app.core.dependencies import get_supplier_service, require_admin
from app.db.schema import User
from app.models.quotation import QuotationSummary
from app.models.supplier import (
    SupplierCreate, SupplierUpdate, SupplierRead, SupplierDetail,
    SupplierMessage, MessageResponse
)
from app.services.supplier import SupplierService


router = APIRouter()


@router.get(
    "/",
    response_model=List[SupplierRead],
    summary="List Suppliers",
    description="Newest first, with the originating quotation summarised. (Admin only)"
)
def list_suppliers(
    admin: User = Depends(require_admin),
    service: SupplierService = Depends(get_supplier_service)
):
    return service.list_suppliers()


@router.get(
    "/approved-quotations",
    response_model=List[QuotationSummary],
    summary="List Approved Quotations",
    description="Quotations eligible for supplier provisioning, most recently approved first. (Admin only)"
)
def list_approved_quotations(
    admin: User = Depends(require_admin),
    service: SupplierService = Depends(get_supplier_service)
):
    return service.list_approved_quotations()


@router.post(
    "/",
    response_model=SupplierMessage,
    status_code=status.HTTP_201_CREATED,
    summary="Provision a Supplier",
    description=(
        "Creates a supplier from an **approved** quotation. "
        "Name and email are copied from the quotation; `product_code` must be unique. (Admin only)"
    )
)
def create_supplier(
    data: SupplierCreate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    service: SupplierService = Depends(get_supplier_service)
):
    supplier = service.create_supplier(admin, data, background_tasks)
    return SupplierMessage(message="Supplier created successfully", supplier=supplier)


@router.get(
    "/{supplier_id}",
    response_model=SupplierDetail,
    summary="Get Supplier",
    description="Includes the quotation's address and phone number. (Admin only)"
)
def get_supplier(
    supplier_id: uuid.UUID,
    admin: User = Depends(require_admin),
    service: SupplierService = Depends(get_supplier_service)
):
    return service.get_supplier(supplier_id)


@router.put(
    "/{supplier_id}",
    response_model=SupplierMessage,
    summary="Update Supplier",
    description="Only the fields present in the body are changed. (Admin only)"
)
@router.patch(
    "/{supplier_id}",
    response_model=SupplierMessage,
    summary="Update Supplier",
    description="Only the fields present in the body are changed. (Admin only)"
)
def update_supplier(
    supplier_id: uuid.UUID,
    data: SupplierUpdate,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    service: SupplierService = Depends(get_supplier_service)
):
    supplier = service.update_supplier(
        admin, supplier_id, data, background_tasks)
    return SupplierMessage(message="Supplier updated successfully", supplier=supplier)


@router.delete(
    "/{supplier_id}",
    response_model=MessageResponse,
    summary="Delete Supplier",
    description="Permanently removes the supplier. The quotation is untouched. (Admin only)"
)
def delete_supplier(
    supplier_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    admin: User = Depends(require_admin),
    service: SupplierService = Depends(get_supplier_service)
):
    return service.delete_supplier(admin, supplier_id, background_tasks)
