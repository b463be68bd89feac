"""
Payment Plan Manager - installment append/recompute, cross-payment linking, edit snapshots

Everything here works on an already loaded Customer and never touches a session;
callers load, call, then commit.
"""
from typing import Any, Callable, Dict, Optional
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
import enum

from sqlalchemy import inspect as sa_inspect

from app.core.exceptions import CustomerValidationError
from app.core.money import ZERO, to_amount
from app.models.customer import (
    Customer, Installment, CustomerEditHistory, CustomerStatus, InstallmentStatus, today_iso
)
from app.models.base import utcnow
from app.schemas.customer import InstallmentCreate, BulkPaymentRow


BULK_DEFAULT_REMARK = "SaleDeed Pending"
TRANSFER_FLAG = "Transferred to {target}"

# Row fields that describe the payment itself rather than the customer
PAYMENT_ROW_FIELDS = {
    "customer_id", "name", "date", "total_amount", "received_amount",
    "bank_name", "payment_mode", "cheque_no", "cheque_date", "remark", "status",
}


def enum_value(value):
    return value.value if isinstance(value, enum.Enum) else value


def _require_identity(customer_id: Optional[str]) -> str:
    customer_id = (customer_id or "").strip()
    if not customer_id:
        raise CustomerValidationError("customerId is required")
    return customer_id


# ===================== INSTALLMENTS =====================

def next_installment_no(customer: Customer) -> int:
    """Max existing installment number + 1 (1 for an empty plan)"""
    return max((i.installment_no or 0 for i in customer.installments), default=0) + 1


def recompute_totals(customer: Customer) -> None:
    """received = sum of installment receipts; balance = total - received"""
    received = sum((to_amount(i.received_amount) for i in customer.installments), ZERO)
    customer.received_amount = received
    customer.balance_amount = to_amount(customer.total_amount) - received


def append_installment(
    customer: Customer,
    installment_input: InstallmentCreate,
    fallback_total: Optional[Decimal] = None,
) -> Installment:
    """
    Append the next installment to the customer's plan and recompute totals.

    Missing installment_amount falls back to received_amount. When the customer has
    no total yet, fallback_total (or the installment amount) becomes the total.
    """
    _require_identity(customer.customer_id)

    received = to_amount(installment_input.received_amount)
    if installment_input.installment_amount is None:
        amount = received
    else:
        amount = to_amount(installment_input.installment_amount)

    installment = Installment(
        installment_no=next_installment_no(customer),
        installment_date=installment_input.installment_date or "",
        installment_amount=amount,
        received_amount=received,
        balance_amount=to_amount(installment_input.balance_amount),
        bank_name=installment_input.bank_name or "",
        payment_mode=installment_input.payment_mode or "",
        cheque_no=installment_input.cheque_no or "",
        cheque_date=installment_input.cheque_date or "",
        remark=installment_input.remark or "",
        status=enum_value(installment_input.status) or InstallmentStatus.PENDING.value,
    )

    if to_amount(customer.total_amount) == ZERO:
        fallback = to_amount(fallback_total)
        customer.total_amount = fallback if fallback > ZERO else amount

    customer.installments.append(installment)
    recompute_totals(customer)
    return installment


# ===================== CROSS PAYMENT =====================

def link_cross_payment(source: Optional[Customer], target_customer_id: str) -> bool:
    """
    Mark `source` as having its payment transferred to `target_customer_id`.
    Returns False (and changes nothing) when there is no source or it names itself.
    Setting paid_by_customer_id on the target is the caller's job.
    """
    if source is None:
        return False
    if source.customer_id == target_customer_id:
        return False
    source.cross_payment_flag = TRANSFER_FLAG.format(target=target_customer_id)
    return True


# ===================== EDIT HISTORY =====================

def _json_safe(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, list):
        return [_json_safe(v) for v in value]
    return value


def _columns(obj, skip=()) -> Dict[str, Any]:
    return {
        attr.key: _json_safe(getattr(obj, attr.key))
        for attr in sa_inspect(type(obj)).column_attrs
        if attr.key not in skip
    }


def snapshot_customer(customer: Customer) -> Dict[str, Any]:
    """JSON-safe copy of the customer's fields and installments"""
    data = _columns(customer)
    data["installments"] = [
        _columns(i, skip=("id", "customer_ref")) for i in customer.installments
    ]
    return data


def record_edit(
    customer: Customer,
    prior_data: Optional[Dict[str, Any]] = None,
    edited_by: Optional[str] = None,
) -> CustomerEditHistory:
    """Append a snapshot of the customer as it is now; call before applying an update."""
    entry = CustomerEditHistory(
        seq=len(customer.edit_history) + 1,
        edited_at=utcnow(),
        edited_by=edited_by or "",
        previous_data=prior_data if prior_data is not None else snapshot_customer(customer),
    )
    customer.edit_history.append(entry)
    return entry


# ===================== BULK =====================

def _new_customer_from_row(customer_id: str, row: BulkPaymentRow) -> Customer:
    extra = row.model_dump(exclude_unset=True, exclude=PAYMENT_ROW_FIELDS)
    customer = Customer(
        customer_id=customer_id,
        name=(row.name or "").strip() or customer_id,
        date=row.date or today_iso(),
        status=enum_value(row.status) or CustomerStatus.ACTIVE.value,
        bank_name=row.bank_name or "",
        payment_mode=row.payment_mode or "",
        cheque_no=row.cheque_no or "",
        cheque_date=row.cheque_date or "",
        remark=row.remark or "",
        **{k: enum_value(v) for k, v in extra.items() if v is not None},
    )
    return customer


def bulk_apply_payment(customer: Optional[Customer], row: BulkPaymentRow) -> Customer:
    """
    Apply one import row. Creates the customer with a single completed installment
    when it does not exist yet, otherwise appends the next installment.
    Re-applying the same row appends it again.
    """
    customer_id = _require_identity(row.customer_id)
    total = to_amount(row.total_amount)
    received = to_amount(row.received_amount)

    payment = InstallmentCreate(
        installment_date=row.date or "",
        installment_amount=received,
        received_amount=received,
        bank_name=row.bank_name,
        payment_mode=row.payment_mode,
        cheque_no=row.cheque_no,
        cheque_date=row.cheque_date,
        remark=row.remark or BULK_DEFAULT_REMARK,
        status=InstallmentStatus.COMPLETED,
    )

    if customer is None:
        customer = _new_customer_from_row(customer_id, row)
        installment = append_installment(customer, payment)
        # a new customer's totals come straight from the row
        customer.total_amount = total
        recompute_totals(customer)
    else:
        installment = append_installment(customer, payment, fallback_total=total)

    installment.balance_amount = customer.balance_amount
    return customer


DedupHook = Callable[[Optional[Customer], BulkPaymentRow], bool]


def payment_already_recorded(customer: Optional[Customer], row: BulkPaymentRow) -> bool:
    """Opt-in dedup: same date, amount and cheque number already on the plan."""
    if customer is None:
        return False
    received = to_amount(row.received_amount)
    for inst in customer.installments:
        if (
            (inst.installment_date or "") == (row.date or "")
            and to_amount(inst.received_amount) == received
            and (inst.cheque_no or "") == (row.cheque_no or "")
        ):
            return True
    return False
