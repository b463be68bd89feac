"""
Activity Log Service - fire-and-forget audit sink
"""
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional

from app.models import ActivityLog

import logging
logger = logging.getLogger(__name__)


class ActivityLogService:
    """Writes never fail the caller"""

    @staticmethod
    def record(
        db: Session,
        user: str,
        action: str,
        customer_id: Optional[str] = None,
        details: Optional[str] = None,
    ) -> Optional[ActivityLog]:
        """Persist one action record. Returns None if the write failed."""
        try:
            entry = ActivityLog(user=user, action=action, customer_id=customer_id, details=details)
            db.add(entry)
            db.commit()
            return entry
        except SQLAlchemyError as e:
            db.rollback()
            logger.warning(f"Activity log write failed ({action} / {customer_id}): {e}")
            return None

    @staticmethod
    def list_logs(db: Session, customer_id: Optional[str] = None, limit: int = 100) -> List[ActivityLog]:
        query = db.query(ActivityLog)
        if customer_id:
            query = query.filter(ActivityLog.customer_id == customer_id)
        return query.order_by(ActivityLog.created_at.desc()).limit(limit).all()
