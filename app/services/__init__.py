# Services Package
from . import payment_plan
from .activity_log_service import ActivityLogService
from .customer_service import CustomerService
from .bulk_import_service import BulkImportService, BulkImportResult
from .report_service import CustomerReportService

__all__ = [
    "payment_plan",
    "ActivityLogService",
    "CustomerService",
    "BulkImportService",
    "BulkImportResult",
    "CustomerReportService",
]
