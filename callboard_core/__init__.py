"""
Callboard
=========

Analytics backend for the Callboard call-center dashboard.

This package provides:
- Session analytics aggregation (metrics, trends, breakdowns)
- Read-only repositories over the session store
- The analytics REST API
"""

__version__ = "1.0.0"
