"""
Chartwise Backend — Saved Chart Schemas
=========================================

What:  Request/response contracts for /api/saved-charts.

Request bodies are deliberately permissive (every field optional) so that
missing required fields reach ChartService and come back as a 400 with the
list of required fields, instead of FastAPI's generic 422.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field

from app.schemas.common import CamelModel, Pagination

REQUIRED_CHART_FIELDS = ("title", "chartType", "chartConfig", "fileName", "user")

# Wire name → model attribute for the sortBy query parameter
SORTABLE_FIELDS = {
    "createdAt": "created_at",
    "updatedAt": "updated_at",
    "title": "title",
    "chartType": "chart_type",
    "fileName": "file_name",
}


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class ChartCreate(CamelModel):
    """Body of POST /api/saved-charts."""
    title: Optional[str] = Field(default=None, max_length=255)
    chart_type: Optional[str] = Field(default=None, max_length=50)
    chart_config: Optional[Dict[str, Any]] = None
    chart_image_data: Optional[str] = None
    file_name: Optional[str] = Field(default=None, max_length=255)
    user: Optional[str] = Field(default=None, max_length=255)
    tags: List[str] = Field(default_factory=list)
    is_public: bool = False


class ChartUpdate(CamelModel):
    """
    Body of PUT /api/saved-charts/{chartId}.

    Only fields present in the request are applied (exclude_unset). The
    owner (`user`) cannot be changed through this endpoint.
    """
    title: Optional[str] = Field(default=None, max_length=255)
    chart_type: Optional[str] = Field(default=None, max_length=50)
    chart_config: Optional[Dict[str, Any]] = None
    chart_image_data: Optional[str] = None
    file_name: Optional[str] = Field(default=None, max_length=255)
    tags: Optional[List[str]] = None
    is_public: Optional[bool] = None


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ChartSummary(CamelModel):
    """Chart without its image payload. Used by list and create responses."""
    id: uuid.UUID
    user: str
    title: str
    chart_type: str
    chart_config: Dict[str, Any]
    file_name: str
    tags: List[str]
    is_public: bool
    created_at: datetime
    updated_at: datetime


class ChartResponse(ChartSummary):
    """Full chart document including the rendered image."""
    chart_image_data: Optional[str] = None


class ChartListResponse(CamelModel):
    charts: List[ChartSummary]
    pagination: Pagination


class ChartTypeCount(CamelModel):
    """One row of the group-by-type aggregation."""
    chart_type: str
    count: int


class RecentChart(CamelModel):
    id: uuid.UUID
    title: str
    chart_type: str
    created_at: datetime


class ChartStatsResponse(CamelModel):
    total_charts: int
    chart_type_stats: List[ChartTypeCount]
    recent_charts: List[RecentChart]
