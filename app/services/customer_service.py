"""
Customer Service - Business Logic for Customers
"""
from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from typing import List, Optional
from uuid import UUID

from app.core.exceptions import CustomerNotFoundError, CustomerValidationError, DuplicateCustomerError
from app.core.money import to_amount
from app.models import Customer, CustomerEditHistory, Installment
from app.models.customer import today_iso
from app.schemas.customer import CustomerCreate, CustomerUpdate, InstallmentCreate
from app.services import payment_plan
from app.services.activity_log_service import ActivityLogService

import logging
logger = logging.getLogger(__name__)


class CustomerService:
    """Customer business logic"""

    @staticmethod
    def list_customers(
        db: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Customer]:
        """Newest first, optionally filtered by status or a search term"""
        query = db.query(Customer)

        if status and status != "all":
            query = query.filter(Customer.status == status)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Customer.customer_id.ilike(search_term),
                    Customer.name.ilike(search_term),
                    Customer.phone.ilike(search_term)
                )
            )

        return query.order_by(Customer.created_at.desc()).all()

    @staticmethod
    def get_customer(db: Session, id: UUID) -> Customer:
        customer = db.query(Customer).filter(Customer.id == id).first()
        if not customer:
            raise CustomerNotFoundError(f"Customer {id} not found")
        return customer

    @staticmethod
    def get_by_customer_id(db: Session, customer_id: str) -> Optional[Customer]:
        return db.query(Customer).filter(Customer.customer_id == customer_id).first()

    @staticmethod
    def _link_payer(db: Session, target: Customer, paid_by_customer_id: Optional[str]) -> None:
        """Record that `target` is paid by another customer and flag that customer."""
        if paid_by_customer_id is None:
            return
        paid_by = paid_by_customer_id.strip()
        if not paid_by:
            # explicit blank clears the link; the source keeps its flag
            if target.paid_by_customer_id:
                logger.info(f"Customer {target.customer_id} unlinked from {target.paid_by_customer_id}")
            target.paid_by_customer_id = ""
            return
        if paid_by == target.customer_id:
            return

        source = CustomerService.get_by_customer_id(db, paid_by)
        if source is None:
            logger.info(f"Cross-payment source {paid_by} not found; linking {target.customer_id} anyway")
        else:
            payment_plan.link_cross_payment(source, target.customer_id)
            logger.info(f"Customer {paid_by} flagged as transferred to {target.customer_id}")

        target.paid_by_customer_id = paid_by

    @staticmethod
    def _commit(db: Session, customer_id: str) -> None:
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise DuplicateCustomerError(f"Customer ID {customer_id} already exists") from e

    @staticmethod
    def create_customer(db: Session, data: CustomerCreate, user: str) -> Customer:
        """Create new customer"""
        customer_id = (data.customer_id or "").strip()
        name = (data.name or "").strip()
        if not customer_id:
            raise CustomerValidationError("customerId is required")
        if not name:
            raise CustomerValidationError("name is required")

        if CustomerService.get_by_customer_id(db, customer_id):
            raise DuplicateCustomerError(f"Customer ID {customer_id} already exists")

        fields = data.model_dump(
            exclude_unset=True,
            exclude={"customer_id", "name", "date", "total_amount", "paid_by_customer_id", "user"},
        )
        total = to_amount(data.total_amount)

        values = {"calling_by": [], "site_visit_by": [], "attending_by": [], "closing_by": []}
        values.update({k: payment_plan.enum_value(v) for k, v in fields.items() if v is not None})

        customer = Customer(
            customer_id=customer_id,
            name=name,
            date=data.date or today_iso(),
            total_amount=total,
            received_amount=0,
            balance_amount=total,
            **values,
        )

        CustomerService._link_payer(db, customer, data.paid_by_customer_id)

        db.add(customer)
        CustomerService._commit(db, customer_id)
        db.refresh(customer)
        logger.info(f"Customer {customer_id} created")

        ActivityLogService.record(
            db, user, "Added Customer", customer.customer_id,
            f"Name: {customer.name}, Location: {customer.location}, Village: {customer.village}",
        )
        return customer

    @staticmethod
    def update_customer(db: Session, id: UUID, data: CustomerUpdate, user: str) -> Customer:
        """Snapshot, then apply the whitelisted fields"""
        customer = CustomerService.get_customer(db, id)

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True, exclude={"paid_by_customer_id", "user"}).items()
            if value is not None
        }
        if "name" in changes:
            changes["name"] = changes["name"].strip()
            if not changes["name"]:
                raise CustomerValidationError("name is required")

        payment_plan.record_edit(customer, edited_by=user)

        for field, value in changes.items():
            setattr(customer, field, payment_plan.enum_value(value))

        if "total_amount" in changes:
            payment_plan.recompute_totals(customer)

        CustomerService._link_payer(db, customer, data.paid_by_customer_id)

        db.commit()
        db.refresh(customer)
        logger.info(f"Customer {customer.customer_id} updated ({', '.join(changes) or 'no field changes'})")

        ActivityLogService.record(
            db, user, "Updated Customer", customer.customer_id,
            f"Updated {customer.name}, Location: {customer.location}, Village: {customer.village}",
        )
        return customer

    @staticmethod
    def add_installment(db: Session, id: UUID, data: InstallmentCreate, user: str) -> Installment:
        """Append the next installment to a customer's plan"""
        customer = CustomerService.get_customer(db, id)

        payment_plan.record_edit(customer, edited_by=user)
        installment = payment_plan.append_installment(customer, data)

        db.commit()
        db.refresh(customer)
        logger.info(
            f"Customer {customer.customer_id}: installment #{installment.installment_no} "
            f"received {installment.received_amount}, balance {customer.balance_amount}"
        )

        ActivityLogService.record(
            db, user, "Added Installment", customer.customer_id,
            f"Installment #{installment.installment_no}: received {installment.received_amount}",
        )
        return installment

    @staticmethod
    def delete_customer(db: Session, id: UUID, user: str) -> None:
        """Hard delete; installments and history go with it"""
        customer = CustomerService.get_customer(db, id)
        customer_id = customer.customer_id
        details = f"Deleted {customer.name}, Location: {customer.location}, Village: {customer.village}"

        db.delete(customer)
        db.commit()
        logger.info(f"Customer {customer_id} deleted")

        ActivityLogService.record(db, user, "Deleted Customer", customer_id, details)

    @staticmethod
    def get_edit_history(db: Session, id: UUID) -> List[CustomerEditHistory]:
        return list(CustomerService.get_customer(db, id).edit_history)
