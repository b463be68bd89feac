"""
CRM Exception Hierarchy
"""


class CRMError(Exception):
    """Base exception for all CRM errors."""


class CustomerNotFoundError(CRMError):
    """Raised when a customer record does not exist."""


class CustomerValidationError(CRMError):
    """Raised when a customer payload is missing mandatory identity."""


class DuplicateCustomerError(CustomerValidationError):
    """Raised when a customer_id is already taken."""
