"""
Activity Log Model
"""
from sqlalchemy import Column, String, DateTime, Text
from app.core import Base
from .base import UUIDMixin, utcnow

class ActivityLog(Base, UUIDMixin):
    """Who did what to which customer"""
    __tablename__ = "activity_log"

    user = Column(String(100), nullable=False, default="Admin")
    action = Column(String(50), nullable=False, index=True)  # Added Customer, Updated Customer, ...
    customer_id = Column(String(50), index=True)
    details = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
