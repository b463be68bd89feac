from .base import TimestampMixin, UUIDMixin
from .customer import Customer, Installment, CustomerEditHistory, CustomerStatus, InstallmentStatus
from .activity_log import ActivityLog

__all__ = [
    # Base
    "TimestampMixin", "UUIDMixin",
    # Customer
    "Customer", "Installment", "CustomerEditHistory", "CustomerStatus", "InstallmentStatus",
    # Activity
    "ActivityLog",
]
