"""
Bulk Import Service - apply payment rows keyed by customer_id
"""
from dataclasses import dataclass, field
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from pydantic import ValidationError
from typing import Any, Dict, List, Optional

from app.core.exceptions import CustomerValidationError
from app.models import Customer
from app.schemas.customer import BulkPaymentRow
from app.services import payment_plan
from app.services.activity_log_service import ActivityLogService

import logging
logger = logging.getLogger(__name__)


@dataclass
class BulkImportResult:
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": not self.errors,
            "created": self.created,
            "updated": self.updated,
            "skipped": self.skipped,
            "errors": self.errors,
        }


class BulkImportService:
    """
    Rows are committed one at a time; a failing row is rolled back and reported
    while the rest of the batch continues.
    """

    @staticmethod
    def import_rows(
        db: Session,
        rows: List[Dict[str, Any]],
        user: str,
        skip_duplicates: bool = False,
        dedup: Optional[payment_plan.DedupHook] = None,
    ) -> BulkImportResult:
        if dedup is None and skip_duplicates:
            dedup = payment_plan.payment_already_recorded

        result = BulkImportResult()

        for index, raw in enumerate(rows):
            try:
                row = BulkPaymentRow.model_validate(raw)
                customer_id = (row.customer_id or "").strip()
                customer = None
                if customer_id:
                    customer = db.query(Customer).filter(Customer.customer_id == customer_id).first()

                if dedup is not None and dedup(customer, row):
                    result.skipped += 1
                    logger.info(f"Bulk row {index}: payment for {customer_id} already recorded, skipped")
                    continue

                is_new = customer is None
                if not is_new:
                    payment_plan.record_edit(customer, edited_by=user)
                customer = payment_plan.bulk_apply_payment(customer, row)
                if is_new:
                    db.add(customer)
                db.commit()

                if is_new:
                    result.created += 1
                else:
                    result.updated += 1

            except (ValidationError, CustomerValidationError, SQLAlchemyError) as e:
                db.rollback()
                logger.error(f"Bulk row {index} failed: {e}")
                row_id = None
                if isinstance(raw, dict):
                    row_id = raw.get("customerId") or raw.get("customer_id")
                result.errors.append({"row": index, "customerId": row_id, "error": str(e)})

        logger.info(
            f"Bulk import finished: {result.created} created, {result.updated} updated, "
            f"{result.skipped} skipped, {len(result.errors)} failed"
        )
        ActivityLogService.record(
            db, user, "Bulk Import", None,
            f"Rows: {len(rows)}, Created: {result.created}, Updated: {result.updated}, "
            f"Skipped: {result.skipped}, Failed: {len(result.errors)}",
        )
        return result
