from .config import settings
from .database import engine, SessionLocal, get_db, Base
from .exceptions import CRMError, CustomerNotFoundError, CustomerValidationError, DuplicateCustomerError

__all__ = [
    "settings", "engine", "SessionLocal", "get_db", "Base",
    "CRMError", "CustomerNotFoundError", "CustomerValidationError", "DuplicateCustomerError",
]
