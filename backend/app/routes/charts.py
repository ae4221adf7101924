"""
Chartwise Backend — Saved Chart Route Handlers
================================================

What:  /api/saved-charts: CRUD over saved charts plus per-user statistics.
How:   Extracts path/query/body values, delegates to ChartService, returns JSON.
Who:   Called by the frontend dashboard and "My Charts" pages.

Route Inventory:
    GET    /api/saved-charts/{userId}          paginated list (no image data)
    GET    /api/saved-charts/chart/{chartId}   full chart
    POST   /api/saved-charts                   save a chart (201)
    PUT    /api/saved-charts/{chartId}         partial update
    DELETE /api/saved-charts/{chartId}         delete
    GET    /api/saved-charts/stats/{userId}    totals, per-type counts, recent charts
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db_session
from app.schemas.chart import (
    ChartCreate,
    ChartListResponse,
    ChartResponse,
    ChartStatsResponse,
    ChartSummary,
    ChartUpdate,
)
from app.schemas.common import ErrorResponse, MessageResponse
from app.services.chart_service import chart_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/saved-charts", tags=["Saved Charts"])


@router.get(
    "/chart/{chart_id}",
    response_model=ChartResponse,
    responses={404: {"description": "Chart not found", "model": ErrorResponse}},
    summary="Get a saved chart with its image data",
)
async def get_chart(
    chart_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ChartResponse:
    return await chart_service.get_chart(db=db, chart_id=chart_id)


@router.get(
    "/stats/{user_id}",
    response_model=ChartStatsResponse,
    summary="Chart statistics for a user",
    description=(
        "Total chart count, chart count per chart type (most used first) "
        "and the most recently saved charts."
    ),
)
async def chart_stats(
    user_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> ChartStatsResponse:
    return await chart_service.chart_stats(db=db, user_id=user_id)


@router.get(
    "/{user_id}",
    response_model=ChartListResponse,
    responses={400: {"description": "Unknown sort field", "model": ErrorResponse}},
    summary="List a user's saved charts",
)
async def list_charts(
    user_id: str,
    page: int = Query(default=1, ge=1, description="1-based page number"),
    limit: int = Query(
        default=settings.default_page_size,
        ge=1,
        le=settings.max_page_size,
        description="Items per page",
    ),
    chart_type: Optional[str] = Query(
        default=None,
        alias="chartType",
        description="Only charts of this type; 'all' disables the filter",
    ),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(
        default="desc",
        alias="sortOrder",
        description="'desc' for descending, anything else ascending",
    ),
    db: AsyncSession = Depends(get_db_session),
) -> ChartListResponse:
    """
    Example:
        GET /api/saved-charts/auth0|123?page=2&limit=10&chartType=bar&sortBy=title&sortOrder=asc
    """
    return await chart_service.list_charts(
        db=db,
        user_id=user_id,
        page=page,
        limit=limit,
        chart_type=chart_type,
        sort_by=sort_by,
        sort_order=sort_order,
    )


@router.post(
    "",
    status_code=201,
    response_model=ChartSummary,
    responses={400: {"description": "Missing required fields", "model": ErrorResponse}},
    summary="Save a new chart",
)
async def create_chart(
    payload: ChartCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ChartSummary:
    return await chart_service.create_chart(db=db, payload=payload)


@router.put(
    "/{chart_id}",
    response_model=ChartResponse,
    responses={404: {"description": "Chart not found", "model": ErrorResponse}},
    summary="Update a saved chart",
)
async def update_chart(
    chart_id: str,
    updates: ChartUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ChartResponse:
    return await chart_service.update_chart(db=db, chart_id=chart_id, updates=updates)


@router.delete(
    "/{chart_id}",
    response_model=MessageResponse,
    responses={404: {"description": "Chart not found", "model": ErrorResponse}},
    summary="Delete a saved chart",
)
async def delete_chart(
    chart_id: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await chart_service.delete_chart(db=db, chart_id=chart_id)
    return MessageResponse(message="Chart deleted successfully")
