"""
Customer Report Service - received-amount dashboards
"""
from sqlalchemy.orm import Session
from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, List, Any, Optional, Tuple

from app.core.money import ZERO
from app.models import Customer, Installment, CustomerStatus


class CustomerReportService:
    """Read-only reporting over customers and their installments"""

    @staticmethod
    def active_customers(db: Session) -> List[Customer]:
        return db.query(Customer).filter(
            Customer.status == CustomerStatus.ACTIVE.value
        ).order_by(Customer.created_at.desc()).all()

    @staticmethod
    def _received_customers(db: Session, start: Optional[date], end: Optional[date]) -> List[Customer]:
        query = db.query(Customer).filter(Customer.received_amount > 0)

        if start and end:
            query = query.filter(
                Customer.created_at >= datetime.combine(start, time.min),
                Customer.created_at <= datetime.combine(end, time.max)
            )

        return query.order_by(Customer.created_at.desc()).all()

    @staticmethod
    def total_received(
        db: Session,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> Tuple[List[Customer], Decimal]:
        """
        Customers with money received, optionally limited to those created
        between start and end (both inclusive). Returns (customers, total).
        """
        customers = CustomerReportService._received_customers(db, start, end)
        total = sum((c.received_amount or ZERO for c in customers), ZERO)
        return customers, total

    @staticmethod
    def monthly_received(
        db: Session,
        start: Optional[date] = None,
        end: Optional[date] = None
    ) -> List[Dict[str, Any]]:
        """Received amount grouped by the month the customer was created, oldest first"""
        customers = CustomerReportService._received_customers(db, start, end)

        buckets: Dict[Tuple[int, int], Decimal] = {}
        for c in customers:
            key = (c.created_at.year, c.created_at.month)
            buckets[key] = buckets.get(key, ZERO) + (c.received_amount or ZERO)

        return [
            {
                "month": date(year, month, 1).strftime("%b %Y"),
                "total": float(total)
            }
            for (year, month), total in sorted(buckets.items())
        ]

    @staticmethod
    def installment_receipts(db: Session) -> Dict[str, Any]:
        """One line per installment that actually received money"""
        rows = db.query(Customer, Installment).join(
            Installment, Installment.customer_ref == Customer.id
        ).filter(
            Installment.received_amount > 0
        ).order_by(Customer.created_at.desc(), Installment.installment_no).all()

        total = ZERO
        receipts = []
        for customer, inst in rows:
            total += inst.received_amount
            receipts.append({
                "customerId": customer.customer_id,
                "name": customer.name,
                "location": customer.location,
                "installmentNo": inst.installment_no,
                "receivedAmount": float(inst.received_amount),
                "receivedDate": inst.installment_date,
                "createdAt": customer.date,
            })

        return {
            "totalReceivedAmount": float(total),
            "totalReceivedCustomers": receipts
        }
