"""
Analytics API Routes

This module provides REST API endpoints for dashboard analytics.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from ...analytics import AnalyticsFacade, CallerContext
from ..base import APIResponse, success_response
from ..dependencies import get_analytics_facade, get_caller_context


router = APIRouter(prefix="/analytics", tags=["Analytics"])


def _request_id(request: Request) -> Optional[str]:
    return getattr(request.state, "request_id", None)


@router.get(
    "",
    response_model=APIResponse,
    summary="Get Analytics",
    description="Key metrics and trend series for a date range, optionally scoped to one agent.",
)
async def get_analytics(
    request: Request,
    date_from: Optional[str] = Query(None, description="ISO-8601 start (default: 7 days ago)"),
    date_to: Optional[str] = Query(None, description="ISO-8601 end (default: now)"),
    agent_id: Optional[str] = Query(None, description="Restrict to one agent ('all' for every agent)"),
    caller: CallerContext = Depends(get_caller_context),
    facade: AnalyticsFacade = Depends(get_analytics_facade),
):
    """Get tenant-wide analytics."""
    report = await facade.get_analytics(
        caller,
        date_from=date_from,
        date_to=date_to,
        agent_id=agent_id,
    )
    return success_response(report.to_dict(), request_id=_request_id(request))


@router.get(
    "/realtime",
    response_model=APIResponse,
    summary="Get Realtime Metrics",
    description="Call counters for the last hour and the last 24 hours.",
)
async def get_realtime_metrics(
    request: Request,
    caller: CallerContext = Depends(get_caller_context),
    facade: AnalyticsFacade = Depends(get_analytics_facade),
):
    """Get live dashboard counters."""
    metrics = await facade.get_realtime(caller)
    return success_response(metrics.to_dict(), request_id=_request_id(request))


@router.get(
    "/agent/{agent_id}",
    response_model=APIResponse,
    summary="Get Agent Analytics",
    description="Analytics, descriptive record and recent calls for a single agent.",
)
async def get_agent_analytics(
    request: Request,
    agent_id: str,
    date_from: Optional[str] = Query(None, description="ISO-8601 start (default: 30 days ago)"),
    date_to: Optional[str] = Query(None, description="ISO-8601 end (default: now)"),
    caller: CallerContext = Depends(get_caller_context),
    facade: AnalyticsFacade = Depends(get_analytics_facade),
):
    """Get analytics for one agent."""
    report = await facade.get_agent_analytics(
        caller,
        agent_id,
        date_from=date_from,
        date_to=date_to,
    )
    return success_response(report.to_dict(), request_id=_request_id(request))
