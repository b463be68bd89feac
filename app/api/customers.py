"""
Customer API - CRUD, installments, bulk import and received-amount reports
"""
from fastapi import APIRouter, Body, Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Any, List, Optional
from uuid import UUID
from datetime import date

from app.core import get_db, settings
from app.core.exceptions import CustomerNotFoundError, CustomerValidationError, DuplicateCustomerError
from app.models import Customer
from app.schemas.customer import (
    CustomerCreate, CustomerUpdate, InstallmentCreate,
    CustomerResponse, InstallmentResponse, EditHistoryResponse,
)
from app.services import CustomerService, BulkImportService, CustomerReportService

router = APIRouter(prefix="/customers", tags=["Customers"])


def get_actor(x_user: Optional[str] = Header(None)) -> Optional[str]:
    """Acting user from the X-User header, if the front end sends one"""
    return x_user


def _actor(body_user: Optional[str], header_user: Optional[str]) -> str:
    return body_user or header_user or settings.DEFAULT_ACTOR


def _out(customer: Customer) -> dict:
    return CustomerResponse.model_validate(customer).model_dump(by_alias=True, mode="json")


# ===================== LISTS & REPORTS =====================

@router.get("")
def list_customers(
    status: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    return [_out(c) for c in CustomerService.list_customers(db, status, search)]


@router.get("/active")
def list_active_customers(db: Session = Depends(get_db)):
    return [_out(c) for c in CustomerReportService.active_customers(db)]


@router.get("/total-received")
def total_received(
    start: Optional[date] = Query(None, description="Created on or after (YYYY-MM-DD)"),
    end: Optional[date] = Query(None, description="Created on or before (YYYY-MM-DD)"),
    db: Session = Depends(get_db)
):
    customers, total = CustomerReportService.total_received(db, start, end)
    return {
        "totalReceivedCustomers": [_out(c) for c in customers],
        "totalReceivedAmount": float(total)
    }


@router.get("/received/monthly")
def monthly_received(
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db)
):
    return CustomerReportService.monthly_received(db, start, end)


@router.get("/received/installments")
def installment_receipts(db: Session = Depends(get_db)):
    return CustomerReportService.installment_receipts(db)


# ===================== CREATE & BULK =====================

@router.post("", status_code=201)
def create_customer(
    data: CustomerCreate,
    actor: Optional[str] = Depends(get_actor),
    db: Session = Depends(get_db)
):
    try:
        customer = CustomerService.create_customer(db, data, _actor(data.user, actor))
    except DuplicateCustomerError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except CustomerValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _out(customer)


@router.post("/bulk")
def bulk_import(
    rows: Any = Body(...),
    skip_duplicates: bool = Query(False, description="Skip rows whose payment is already on the plan"),
    actor: Optional[str] = Depends(get_actor),
    db: Session = Depends(get_db)
):
    if not isinstance(rows, list):
        raise HTTPException(status_code=400, detail="Invalid data format, expected array")

    result = BulkImportService.import_rows(
        db, rows, _actor(None, actor), skip_duplicates=skip_duplicates
    )
    return result.to_dict()


# ===================== SINGLE CUSTOMER =====================

@router.get("/{customer_uuid}")
def get_customer(customer_uuid: UUID, db: Session = Depends(get_db)):
    try:
        return _out(CustomerService.get_customer(db, customer_uuid))
    except CustomerNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")


@router.put("/{customer_uuid}")
def update_customer(
    customer_uuid: UUID,
    data: CustomerUpdate,
    actor: Optional[str] = Depends(get_actor),
    db: Session = Depends(get_db)
):
    try:
        customer = CustomerService.update_customer(db, customer_uuid, data, _actor(data.user, actor))
    except CustomerNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")
    except CustomerValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "success": True,
        "message": "Customer updated successfully",
        "customer": _out(customer)
    }


@router.post("/{customer_uuid}/installments", status_code=201)
def add_installment(
    customer_uuid: UUID,
    data: InstallmentCreate,
    actor: Optional[str] = Depends(get_actor),
    db: Session = Depends(get_db)
):
    try:
        installment = CustomerService.add_installment(db, customer_uuid, data, _actor(None, actor))
    except CustomerNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")
    except CustomerValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return {
        "installment": InstallmentResponse.model_validate(installment).model_dump(by_alias=True, mode="json"),
        "customer": _out(installment.customer)
    }


@router.get("/{customer_uuid}/history", response_model=List[EditHistoryResponse])
def get_edit_history(customer_uuid: UUID, db: Session = Depends(get_db)):
    try:
        return CustomerService.get_edit_history(db, customer_uuid)
    except CustomerNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")


@router.delete("/{customer_uuid}")
def delete_customer(
    customer_uuid: UUID,
    actor: Optional[str] = Depends(get_actor),
    db: Session = Depends(get_db)
):
    try:
        CustomerService.delete_customer(db, customer_uuid, _actor(None, actor))
    except CustomerNotFoundError:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"success": True, "message": "Customer deleted successfully"}
