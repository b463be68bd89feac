"""
Customer Models - plot booking aggregate with its payment plan and edit history
"""
from sqlalchemy import Column, String, Numeric, Integer, Boolean, DateTime, ForeignKey, Text, JSON, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import date
import enum

from app.core import Base
from .base import UUIDMixin, TimestampMixin, utcnow


class CustomerStatus(str, enum.Enum):
    ACTIVE = "Active Customer"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"
    SALEDEED_DONE = "SALEDEED DONE"
    BOOKING_CANCELLED = "BOOKING CANCELLED"
    CHEQUE_BOUNCE = "Cheque Bounce"
    BOUNCED = "Bounced"
    CHEQUE_NOT_CLEAR = "Cheque not clear"


class InstallmentStatus(str, enum.Enum):
    ACTIVE = "Active Customer"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"
    SALEDEED_DONE = "SALEDEED DONE"
    BOOKING_CANCELLED = "BOOKING CANCELLED"
    CHEQUE_BOUNCE = "Cheque Bounce"
    BOUNCED = "Bounced"
    CHEQUE_NOT_CLEAR = "Cheque not clear"
    PENDING = "Pending"
    PAID = "Paid"
    COMPLETED = "Completed"  # written by bulk import


def today_iso() -> str:
    return date.today().isoformat()


class Customer(Base, UUIDMixin, TimestampMixin):
    """Customer booking record (aggregate root)"""
    __tablename__ = "customer"

    date = Column(String(10), default=today_iso)
    customer_id = Column(String(50), unique=True, nullable=False, index=True)

    # Linking (old <-> new customer)
    old_customer_id = Column(String(50), default="")
    is_transferred = Column(Boolean, default=False)

    # Basic info
    name = Column(String(200), nullable=False, index=True)
    phone = Column(String(20), default="", index=True)
    alternate_phone = Column(String(20), default="")
    email = Column(String(200), default="")
    address = Column(Text, default="")
    zipcode = Column(String(10), default="")
    pan_card = Column(String(20), default="")
    aadhar_card = Column(String(20), default="")

    # Booking details
    booking_area = Column(Numeric(12, 2), default=0)
    plot_area = Column(Numeric(12, 2), default=0)
    rate = Column(Numeric(12, 2), default=0)
    discount = Column(Numeric(12, 2), default=0)
    total_amount = Column(Numeric(12, 2), default=0)
    booking_amount = Column(Numeric(12, 2), default=0)
    received_amount = Column(Numeric(12, 2), default=0)  # derived from installments
    balance_amount = Column(Numeric(12, 2), default=0)   # total_amount - received_amount

    # Additional charges
    stamp_duty_charges = Column(Numeric(12, 2), default=0)
    mou_charge = Column(Numeric(12, 2), default=0)

    # Location & bank details
    location = Column(String(200), default="")
    village = Column(String(200), default="")
    bank = Column(String(100), default="")
    bank_name = Column(String(100), default="")
    payment_mode = Column(String(50), default="")
    utr_cheque_no = Column(String(100), default="")
    cheque_no = Column(String(50), default="")
    cheque_date = Column(String(10), default="")
    remark = Column(Text, default="")

    # Dates
    due_date = Column(String(10), default="")  # next due date
    clear_date = Column(String(10), default="")

    # Staff assignment: ordered lists of staff names
    calling_by = Column(JSON, default=list)
    site_visit_by = Column(JSON, default=list)
    attending_by = Column(JSON, default=list)
    closing_by = Column(JSON, default=list)

    status = Column(String(30), default=CustomerStatus.ACTIVE.value, nullable=False, index=True)

    # Cross-payment handling
    paid_by_customer_id = Column(String(50), default="")
    cross_payment_flag = Column(String(200), default="")  # "Transferred to <customer_id>"

    # Relationships
    installments = relationship(
        "Installment",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="Installment.installment_no",
    )
    edit_history = relationship(
        "CustomerEditHistory",
        back_populates="customer",
        cascade="all, delete-orphan",
        order_by="CustomerEditHistory.seq",
    )


class Installment(Base, UUIDMixin):
    """One payment line of a customer's plan"""
    __tablename__ = "installment"
    __table_args__ = (
        UniqueConstraint("customer_ref", "installment_no", name="uq_installment_customer_no"),
    )

    customer_ref = Column(Uuid(as_uuid=True), ForeignKey("customer.id", ondelete="CASCADE"), nullable=False, index=True)

    installment_no = Column(Integer, nullable=False)
    installment_date = Column(String(10), default="")
    installment_amount = Column(Numeric(12, 2), default=0)
    received_amount = Column(Numeric(12, 2), default=0)
    balance_amount = Column(Numeric(12, 2), default=0)
    bank_name = Column(String(100), default="")
    payment_mode = Column(String(50), default="")
    cheque_no = Column(String(50), default="")
    cheque_date = Column(String(10), default="")
    remark = Column(Text, default="")
    status = Column(String(30), default=InstallmentStatus.PENDING.value, nullable=False)

    customer = relationship("Customer", back_populates="installments")


class CustomerEditHistory(Base, UUIDMixin):
    """Snapshot of a customer taken right before an update"""
    __tablename__ = "customer_edit_history"

    customer_ref = Column(Uuid(as_uuid=True), ForeignKey("customer.id", ondelete="CASCADE"), nullable=False, index=True)

    seq = Column(Integer, nullable=False)  # 1-based append order
    edited_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    edited_by = Column(String(100), default="")
    previous_data = Column(JSON, nullable=False)

    customer = relationship("Customer", back_populates="edit_history")
