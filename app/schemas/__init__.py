# Pydantic Schemas Package
from .customer import (
    InstallmentCreate, CustomerCreate, CustomerUpdate, BulkPaymentRow,
    InstallmentResponse, EditHistoryResponse, CustomerResponse, ActivityLogResponse,
)

__all__ = [
    "InstallmentCreate", "CustomerCreate", "CustomerUpdate", "BulkPaymentRow",
    "InstallmentResponse", "EditHistoryResponse", "CustomerResponse", "ActivityLogResponse",
]
