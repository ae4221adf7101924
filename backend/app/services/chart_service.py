"""
Chartwise Backend — Saved Chart Service
=========================================

What:  Business logic for saved charts: CRUD, paginated listing, statistics.
Who:   Called by the /api/saved-charts route handlers.

Every operation is a direct pass-through to the database:
    list   → filtered SELECT with ORDER BY / OFFSET / LIMIT + COUNT
    stats  → COUNT, one GROUP BY aggregation, and a recent-items SELECT
    others → single-row get / insert / update / delete

Error Handling Strategy:
    Missing rows raise NotFoundError, bad input raises ValidationError.
    Anything unexpected is logged with its traceback and re-raised as
    DatabaseError carrying a generic, client-safe message.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import asc, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from app.config import settings
from app.exceptions import DatabaseError, NotFoundError, ValidationError
from app.models.chart import SavedChart
from app.schemas.chart import (
    REQUIRED_CHART_FIELDS,
    SORTABLE_FIELDS,
    ChartCreate,
    ChartListResponse,
    ChartResponse,
    ChartStatsResponse,
    ChartSummary,
    ChartTypeCount,
    ChartUpdate,
    RecentChart,
)
from app.schemas.common import Pagination

logger = logging.getLogger(__name__)

# Columns that may be cleared with an explicit null in an update
NULLABLE_UPDATE_FIELDS = {"chart_image_data"}

# Required on create, where an empty string counts as missing
REQUIRED_STRING_FIELDS = {"title", "chart_type", "file_name"}


def parse_uuid(value: str) -> Optional[uuid.UUID]:
    """Parse a path id; a malformed id is treated the same as a missing row."""
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError):
        return None


def _summary(chart: SavedChart) -> ChartSummary:
    return ChartSummary(
        id=chart.id,
        user=chart.user,
        title=chart.title,
        chart_type=chart.chart_type,
        chart_config=chart.chart_config,
        file_name=chart.file_name,
        tags=list(chart.tags or []),
        is_public=chart.is_public,
        created_at=chart.created_at,
        updated_at=chart.updated_at,
    )


def _full(chart: SavedChart) -> ChartResponse:
    return ChartResponse(
        **_summary(chart).model_dump(),
        chart_image_data=chart.chart_image_data,
    )


class ChartService:
    """
    Business logic layer for saved charts.

    Stateless: receives the request's AsyncSession on every call. Writes are
    flushed here and committed by the get_db_session dependency.
    """

    async def list_charts(
        self,
        db: AsyncSession,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        chart_type: Optional[str] = None,
        sort_by: str = "createdAt",
        sort_order: str = "desc",
    ) -> ChartListResponse:
        """
        List a user's charts, newest first by default, without image data.

        Args:
            chart_type: Exact type filter; None or "all" disables it.
            sort_by:    One of SORTABLE_FIELDS (wire names).
            sort_order: "desc" sorts descending; any other value ascending.

        Raises:
            ValidationError: sort_by is not a sortable field (→ 400)
            DatabaseError:   Query execution failed (→ 500)
        """
        sort_attr = SORTABLE_FIELDS.get(sort_by)
        if sort_attr is None:
            raise ValidationError(
                message=f"Cannot sort by '{sort_by}'. Allowed: {', '.join(SORTABLE_FIELDS)}",
                field="sortBy",
            )

        try:
            filters = [SavedChart.user == user_id]
            if chart_type and chart_type != "all":
                filters.append(SavedChart.chart_type == chart_type)

            skip = (page - 1) * limit
            column = getattr(SavedChart, sort_attr)
            direction = desc if sort_order == "desc" else asc

            query = (
                select(SavedChart)
                .options(defer(SavedChart.chart_image_data))
                .where(*filters)
                .order_by(direction(column), direction(SavedChart.id))
                .offset(skip)
                .limit(limit)
            )
            result = await db.execute(query)
            charts = list(result.scalars().all())

            count_result = await db.execute(
                select(func.count()).select_from(SavedChart).where(*filters)
            )
            total = count_result.scalar() or 0

            return ChartListResponse(
                charts=[_summary(chart) for chart in charts],
                pagination=Pagination.build(page=page, limit=limit, total=total),
            )

        except Exception as e:
            logger.error("Error fetching saved charts for %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch saved charts",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def get_chart(self, db: AsyncSession, chart_id: str) -> ChartResponse:
        """Return one chart including its image data, or raise NotFoundError."""
        chart = await self._load(db, chart_id, "Failed to fetch chart")
        return _full(chart)

    async def create_chart(self, db: AsyncSession, payload: ChartCreate) -> ChartSummary:
        """
        Save a new chart.

        Presence check covers title, chartType, chartConfig, fileName and
        user; an empty string counts as missing, an empty config object
        does not.

        Returns:
            The stored chart without chartImageData (keeps the 201 small).
        """
        required_strings = [
            payload.title,
            payload.chart_type,
            payload.file_name,
            payload.user,
        ]
        if not all(required_strings) or payload.chart_config is None:
            raise ValidationError(
                message="Missing required fields: " + ", ".join(REQUIRED_CHART_FIELDS),
                context={"required": list(REQUIRED_CHART_FIELDS)},
            )

        try:
            chart = SavedChart(
                user=payload.user,
                title=payload.title,
                chart_type=payload.chart_type,
                chart_config=payload.chart_config,
                chart_image_data=payload.chart_image_data,
                file_name=payload.file_name,
                tags=payload.tags,
                is_public=payload.is_public,
            )
            db.add(chart)
            await db.flush()
            logger.info("Chart saved: %s (user=%s, type=%s)", chart.id, chart.user, chart.chart_type)
            return _summary(chart)

        except Exception as e:
            logger.error("Error saving chart: %s", e, exc_info=True)
            raise DatabaseError(
                message="Failed to save chart",
                context={"error_type": type(e).__name__},
            )

    async def update_chart(
        self, db: AsyncSession, chart_id: str, updates: ChartUpdate
    ) -> ChartResponse:
        """
        Apply the fields present in `updates` and return the full document.

        Raises:
            ValidationError: A non-nullable field was sent as null (→ 400)
            ValidationError: title, chartType or fileName sent as "" (→ 400)
            NotFoundError:   No chart with this id (→ 404)
        """
        data = updates.model_dump(exclude_unset=True)
        for field, value in data.items():
            if value is None and field not in NULLABLE_UPDATE_FIELDS:
                raise ValidationError(
                    message=f"Field '{field}' cannot be null",
                    field=field,
                )
            if field in REQUIRED_STRING_FIELDS and value == "":
                raise ValidationError(
                    message=f"Field '{field}' cannot be empty",
                    field=field,
                )

        chart = await self._load(db, chart_id, "Failed to update chart")
        try:
            for field, value in data.items():
                setattr(chart, field, value)
            chart.updated_at = datetime.now(timezone.utc)
            await db.flush()
            logger.info("Chart updated: %s (%s)", chart.id, ", ".join(sorted(data)) or "no fields")
            return _full(chart)

        except Exception as e:
            logger.error("Error updating chart %s: %s", chart_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to update chart",
                context={"chart_id": chart_id, "error_type": type(e).__name__},
            )

    async def delete_chart(self, db: AsyncSession, chart_id: str) -> None:
        chart = await self._load(db, chart_id, "Failed to delete chart")
        try:
            await db.delete(chart)
            await db.flush()
            logger.info("Chart deleted: %s", chart_id)
        except Exception as e:
            logger.error("Error deleting chart %s: %s", chart_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to delete chart",
                context={"chart_id": chart_id, "error_type": type(e).__name__},
            )

    async def chart_stats(self, db: AsyncSession, user_id: str) -> ChartStatsResponse:
        """
        Per-user statistics.

        chartTypeStats is a three-stage aggregation executed by the database:
            WHERE user = :user_id           (match)
            GROUP BY chart_type, COUNT(*)   (group)
            ORDER BY count DESC, chart_type (sort)
        """
        try:
            total_result = await db.execute(
                select(func.count())
                .select_from(SavedChart)
                .where(SavedChart.user == user_id)
            )
            total_charts = total_result.scalar() or 0

            count_col = func.count(SavedChart.id).label("count")
            type_result = await db.execute(
                select(SavedChart.chart_type, count_col)
                .where(SavedChart.user == user_id)
                .group_by(SavedChart.chart_type)
                .order_by(count_col.desc(), SavedChart.chart_type.asc())
            )
            chart_type_stats = [
                ChartTypeCount(chart_type=row.chart_type, count=row.count)
                for row in type_result.all()
            ]

            recent_result = await db.execute(
                select(
                    SavedChart.id,
                    SavedChart.title,
                    SavedChart.chart_type,
                    SavedChart.created_at,
                )
                .where(SavedChart.user == user_id)
                .order_by(desc(SavedChart.created_at))
                .limit(settings.recent_charts_limit)
            )
            recent_charts = [
                RecentChart(
                    id=row.id,
                    title=row.title,
                    chart_type=row.chart_type,
                    created_at=row.created_at,
                )
                for row in recent_result.all()
            ]

            return ChartStatsResponse(
                total_charts=total_charts,
                chart_type_stats=chart_type_stats,
                recent_charts=recent_charts,
            )

        except Exception as e:
            logger.error("Error fetching chart statistics for %s: %s", user_id, e, exc_info=True)
            raise DatabaseError(
                message="Failed to fetch statistics",
                context={"user_id": user_id, "error_type": type(e).__name__},
            )

    async def _load(self, db: AsyncSession, chart_id: str, failure_message: str) -> SavedChart:
        """Fetch a chart by id or raise NotFoundError."""
        chart_uuid = parse_uuid(chart_id)
        if chart_uuid is None:
            raise NotFoundError(resource="chart", resource_id=chart_id)
        try:
            chart = await db.get(SavedChart, chart_uuid)
        except Exception as e:
            logger.error("Error loading chart %s: %s", chart_id, e, exc_info=True)
            raise DatabaseError(
                message=failure_message,
                context={"chart_id": chart_id, "error_type": type(e).__name__},
            )
        if chart is None:
            raise NotFoundError(resource="chart", resource_id=chart_id)
        return chart


# ── Singleton Instance ────────────────────────────────────────────────────
chart_service = ChartService()
