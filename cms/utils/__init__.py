from .exceptions import (
    CMSError,
    ConfigError,
    ConflictError,
    Forbidden,
    NotFoundError,
    StorageError,
    TransientStoreError,
    Unauthorized,
    ValidationError,
)
from .logger import get_logger, setup_logger

__all__ = [
    "CMSError",
    "ConfigError",
    "ConflictError",
    "Forbidden",
    "NotFoundError",
    "StorageError",
    "TransientStoreError",
    "Unauthorized",
    "ValidationError",
    "get_logger",
    "setup_logger",
]
