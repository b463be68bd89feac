"""
Activity Log API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from app.core import get_db
from app.schemas.customer import ActivityLogResponse
from app.services import ActivityLogService

router = APIRouter(prefix="/activity-log", tags=["Activity Log"])


@router.get("", response_model=List[ActivityLogResponse])
def list_activity(
    customer_id: Optional[str] = Query(None, alias="customerId"),
    limit: int = Query(100, ge=1, le=1000),
    db: Session = Depends(get_db)
):
    """Most recent actions first"""
    return ActivityLogService.list_logs(db, customer_id, limit)
