"""
API Routes Module

This module exports all API route routers.
"""

from .analytics import router as analytics_router


__all__ = [
    "analytics_router",
]
