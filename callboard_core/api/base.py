"""
API Base Types and Models Module

This module provides error codes, response envelopes and exception
classes for the REST API layer.
"""

import secrets
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class ErrorCode(str, Enum):
    """Standardized error codes."""

    # Authentication errors (1xxx)
    AUTHENTICATION_REQUIRED = "AUTH_1001"

    # Validation errors (2xxx)
    VALIDATION_ERROR = "VAL_2001"
    INVALID_QUERY_PARAMETER = "VAL_2005"

    # Resource errors (3xxx)
    RESOURCE_NOT_FOUND = "RES_3001"

    # Server errors (5xxx)
    INTERNAL_ERROR = "SRV_5001"
    DEPENDENCY_FAILURE = "SRV_5003"


# =============================================================================
# Response Models
# =============================================================================


class APIError(BaseModel):
    """API error response model."""

    model_config = ConfigDict(use_enum_values=True)

    code: ErrorCode = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None,
        description="Additional error details",
    )
    field: Optional[str] = Field(
        default=None,
        description="Field that caused the error (for validation errors)",
    )
    request_id: Optional[str] = Field(
        default=None,
        description="Request ID for tracking",
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Error timestamp",
    )


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    success: bool = Field(default=True, description="Whether request succeeded")
    data: Optional[Dict[str, Any]] = Field(default=None, description="Response data")
    error: Optional[APIError] = Field(default=None, description="Error information")
    request_id: Optional[str] = Field(default=None, description="Unique request identifier")
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="Response timestamp",
    )


# =============================================================================
# Exception Classes
# =============================================================================


class APIException(Exception):
    """Base exception for API errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details
        self.field = field
        super().__init__(message)

    def to_error(self, request_id: Optional[str] = None) -> APIError:
        """Convert to APIError model."""
        return APIError(
            code=self.code,
            message=self.message,
            details=self.details,
            field=self.field,
            request_id=request_id,
        )


class AuthenticationError(APIException):
    """Authentication failure."""

    def __init__(
        self,
        message: str = "Authentication required",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            code=ErrorCode.AUTHENTICATION_REQUIRED,
            message=message,
            status_code=401,
            details=details,
        )


# =============================================================================
# Utility Functions
# =============================================================================


def generate_request_id() -> str:
    """Generate a unique request ID."""
    timestamp = int(time.time() * 1000)
    random_part = secrets.token_hex(8)
    return f"req_{timestamp}_{random_part}"


def success_response(
    data: Any,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Create a success response."""
    return {
        "success": True,
        "data": data,
        "error": None,
        "request_id": request_id or generate_request_id(),
        "timestamp": _utcnow().isoformat(),
    }


def error_response(
    error: APIError,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Create an error response."""
    return {
        "success": False,
        "data": None,
        "error": error.model_dump(mode="json"),
        "request_id": request_id or generate_request_id(),
        "timestamp": _utcnow().isoformat(),
    }


__all__ = [
    "ErrorCode",
    "APIError",
    "APIResponse",
    "APIException",
    "AuthenticationError",
    "generate_request_id",
    "success_response",
    "error_response",
]
