"""Custom exceptions for the Ledger1 CMS backend"""

from typing import Optional


class CMSError(Exception):
    """Base exception for the CMS"""
    pass


class Unauthorized(CMSError):
    """Missing, invalid or expired session token"""
    pass


class Forbidden(CMSError):
    """Valid session without the required role"""
    pass


class NotFoundError(CMSError):
    """Requested resource does not exist"""
    pass


class ValidationError(CMSError):
    """Request is missing required fields or carries invalid values"""

    def __init__(self, message: str, fields: Optional[list] = None):
        self.fields = fields or []
        super().__init__(message)


class ConflictError(CMSError):
    """A document with the same id already exists in its partition"""
    pass


class StorageError(CMSError):
    """Underlying document store operation failed or is unavailable"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class TransientStoreError(StorageError):
    """Store failure that is safe to retry (throttling, timeouts)"""
    pass


class ConfigError(CMSError):
    """Configuration error"""
    pass
