"""Service-layer exceptions, translated to HTTP responses in campusfin.main."""
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """Base exception for service errors"""
    status_code = 400

    def __init__(self, message: str, code: str = "BAD_REQUEST", details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Request is well-formed but violates a business rule."""
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class NotFoundError(ServiceError):
    """Resource is missing or belongs to another user."""
    status_code = 404

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="NOT_FOUND", details=details)
