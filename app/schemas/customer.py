"""
Customer Schemas
"""
from pydantic import BaseModel, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Any
from datetime import datetime
from decimal import Decimal
from uuid import UUID
import json

from app.core.money import to_amount
from app.models.customer import CustomerStatus, InstallmentStatus

AMOUNT_FIELDS = (
    "booking_area", "plot_area", "rate", "discount", "booking_amount",
    "stamp_duty_charges", "mou_charge",
)
STAFF_FIELDS = ("calling_by", "site_visit_by", "attending_by", "closing_by")


def optional_amount(value: Any) -> Optional[Decimal]:
    """Absent stays absent; anything else is coerced leniently."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return to_amount(value)


def parse_staff_list(value: Any) -> Optional[List[str]]:
    """
    Staff assignment fields arrive either as a list or as a JSON-encoded list string.
    Returns an ordered list of distinct, non-empty names.
    """
    if value is None:
        return None
    if isinstance(value, str):
        if not value.strip():
            return []
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            raise ValueError("expected a JSON array of staff names")
    if not isinstance(value, (list, tuple)):
        raise ValueError("expected a list of staff names")

    names: List[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ValueError("staff names must be strings")
        name = item.strip()
        if name and name not in names:
            names.append(name)
    return names


class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        # spreadsheet exports send ids, phones and cheque numbers as numbers
        coerce_numbers_to_str = True


# ===================== INPUT =====================

class InstallmentCreate(CamelModel):
    installment_date: Optional[str] = None
    installment_amount: Optional[Decimal] = None
    received_amount: Optional[Decimal] = None
    balance_amount: Optional[Decimal] = None
    bank_name: Optional[str] = None
    payment_mode: Optional[str] = None
    cheque_no: Optional[str] = None
    cheque_date: Optional[str] = None
    remark: Optional[str] = None
    status: Optional[InstallmentStatus] = None

    @field_validator("installment_amount", "received_amount", "balance_amount", mode="before")
    @classmethod
    def lenient_amount(cls, v):
        return optional_amount(v)


class CustomerFields(CamelModel):
    """Descriptive fields a caller may set on a customer"""
    old_customer_id: Optional[str] = None
    is_transferred: Optional[bool] = None

    phone: Optional[str] = None
    alternate_phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    zipcode: Optional[str] = None
    pan_card: Optional[str] = None
    aadhar_card: Optional[str] = None

    booking_area: Optional[Decimal] = None
    plot_area: Optional[Decimal] = None
    rate: Optional[Decimal] = None
    discount: Optional[Decimal] = None
    booking_amount: Optional[Decimal] = None
    stamp_duty_charges: Optional[Decimal] = None
    mou_charge: Optional[Decimal] = None

    location: Optional[str] = None
    village: Optional[str] = None
    bank: Optional[str] = None
    bank_name: Optional[str] = None
    payment_mode: Optional[str] = None
    utr_cheque_no: Optional[str] = None
    cheque_no: Optional[str] = None
    cheque_date: Optional[str] = None
    remark: Optional[str] = None

    due_date: Optional[str] = None
    clear_date: Optional[str] = None

    calling_by: Optional[List[str]] = None
    site_visit_by: Optional[List[str]] = None
    attending_by: Optional[List[str]] = None
    closing_by: Optional[List[str]] = None

    status: Optional[CustomerStatus] = None

    @field_validator(*AMOUNT_FIELDS, mode="before")
    @classmethod
    def lenient_amount(cls, v):
        return optional_amount(v)

    @field_validator(*STAFF_FIELDS, mode="before")
    @classmethod
    def staff_list(cls, v):
        return parse_staff_list(v)


class CustomerCreate(CustomerFields):
    customer_id: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None
    total_amount: Optional[Decimal] = None
    paid_by_customer_id: Optional[str] = None
    user: Optional[str] = None  # actor for the activity log

    @field_validator("total_amount", mode="before")
    @classmethod
    def lenient_total(cls, v):
        return optional_amount(v)


class CustomerUpdate(CustomerFields):
    """
    Whitelisted update. customer_id, received/balance amounts, installments and
    edit history are not writable here.
    """
    name: Optional[str] = None
    date: Optional[str] = None
    total_amount: Optional[Decimal] = None
    paid_by_customer_id: Optional[str] = None
    user: Optional[str] = None

    @field_validator("total_amount", mode="before")
    @classmethod
    def lenient_total(cls, v):
        return optional_amount(v)


class BulkPaymentRow(CustomerFields):
    """One row of a payment import, keyed by customer_id"""
    customer_id: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None
    total_amount: Optional[Decimal] = None
    received_amount: Optional[Decimal] = None

    @field_validator("total_amount", "received_amount", mode="before")
    @classmethod
    def lenient_totals(cls, v):
        return optional_amount(v)


# ===================== OUTPUT =====================

class InstallmentResponse(CamelModel):
    installment_no: int
    installment_date: Optional[str] = ""
    installment_amount: float = 0
    received_amount: float = 0
    balance_amount: float = 0
    bank_name: Optional[str] = ""
    payment_mode: Optional[str] = ""
    cheque_no: Optional[str] = ""
    cheque_date: Optional[str] = ""
    remark: Optional[str] = ""
    status: str

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class EditHistoryResponse(CamelModel):
    seq: int
    edited_at: datetime
    edited_by: Optional[str] = ""
    previous_data: dict

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class CustomerResponse(CamelModel):
    id: UUID
    customer_id: str
    name: str
    date: Optional[str] = ""
    old_customer_id: Optional[str] = ""
    is_transferred: Optional[bool] = False

    phone: Optional[str] = ""
    alternate_phone: Optional[str] = ""
    email: Optional[str] = ""
    address: Optional[str] = ""
    zipcode: Optional[str] = ""
    pan_card: Optional[str] = ""
    aadhar_card: Optional[str] = ""

    booking_area: float = 0
    plot_area: float = 0
    rate: float = 0
    discount: float = 0
    total_amount: float = 0
    booking_amount: float = 0
    received_amount: float = 0
    balance_amount: float = 0
    stamp_duty_charges: float = 0
    mou_charge: float = 0

    location: Optional[str] = ""
    village: Optional[str] = ""
    bank: Optional[str] = ""
    bank_name: Optional[str] = ""
    payment_mode: Optional[str] = ""
    utr_cheque_no: Optional[str] = ""
    cheque_no: Optional[str] = ""
    cheque_date: Optional[str] = ""
    remark: Optional[str] = ""
    due_date: Optional[str] = ""
    clear_date: Optional[str] = ""

    calling_by: List[str] = []
    site_visit_by: List[str] = []
    attending_by: List[str] = []
    closing_by: List[str] = []

    status: str
    paid_by_customer_id: Optional[str] = ""
    cross_payment_flag: Optional[str] = ""

    installments: List[InstallmentResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class ActivityLogResponse(CamelModel):
    id: UUID
    user: str
    action: str
    customer_id: Optional[str] = None
    details: Optional[str] = None
    created_at: datetime

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True
