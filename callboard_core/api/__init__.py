"""
REST API Module

HTTP surface of the Callboard analytics service.

Features:
- FastAPI-based analytics endpoints
- Tenant-scoped caller context
- Request ID tracking and structured access logs
- Uniform JSON error envelopes
"""

from .base import (
    APIError,
    APIException,
    APIResponse,
    AuthenticationError,
    ErrorCode,
    error_response,
    generate_request_id,
    success_response,
)
from .app import create_app


__all__ = [
    "ErrorCode",
    "APIError",
    "APIResponse",
    "APIException",
    "AuthenticationError",
    "generate_request_id",
    "success_response",
    "error_response",
    "create_app",
]
