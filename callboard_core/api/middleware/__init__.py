"""
API Middleware Module

Request tracking for the REST API.
"""

from .tracking import RequestTrackingMiddleware


__all__ = [
    "RequestTrackingMiddleware",
]
