"""Analytics service layer.

Pull-model reporting: every call reads committed rows and recomputes the
report for the requested window.  Nothing is cached or written.

``as_of`` (the end of the last, still open dwell interval) is
``min(now, end_date)``.  A window that lies entirely in the past is
therefore deterministic, while a window reaching "now" shows open dwell
times that keep growing between calls.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable, Dict, Optional, Tuple

import structlog
from django.conf import settings
from django.utils import timezone

from modules.analytics import engine
from modules.analytics.dtos import (
    AnalyticsReportDTO,
    DailyCountDTO,
    DurationDTO,
    DwellDTO,
    ReportWindowDTO,
    StatusCountDTO,
    SummaryDTO,
    TransitionCountDTO,
)
from modules.analytics.exceptions import InvalidReportWindow
from modules.analytics.repositories.interfaces import IAnalyticsRepository

logger = structlog.get_logger(__name__)


def _duration(ms: float) -> DurationDTO:
    return DurationDTO(
        ms=round(ms, 2),
        hours=engine.to_hours(ms),
        days=engine.to_days(ms),
        formatted=engine.format_duration(ms),
    )


class AnalyticsService:
    """Builds ``AnalyticsReportDTO`` from the analytics read model.

    ``clock`` returns the current aware datetime; tests may inject one.
    """

    def __init__(
        self,
        repository: IAnalyticsRepository,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._repo = repository
        self._clock = clock

    def resolve_window(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> Tuple[datetime, datetime]:
        """Apply defaults: end = now, start = end - ``ANALYTICS_DEFAULT_WINDOW_DAYS``.

        Raises:
            InvalidReportWindow: start is after end.
        """
        end = end or self._clock()
        if start is None:
            days = settings.STATUS_WORKFLOW["ANALYTICS_DEFAULT_WINDOW_DAYS"]
            start = end - timedelta(days=days)
        if start > end:
            raise InvalidReportWindow(
                "start_date must be before end_date.",
                start_date=start.isoformat(),
                end_date=end.isoformat(),
            )
        return start, end

    def compute(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> AnalyticsReportDTO:
        start, end = self.resolve_window(start, end)
        as_of = min(self._clock(), end)
        log = logger.bind(start_date=start.isoformat(), end_date=end.isoformat())

        names = self._repo.status_names()
        counts = self._repo.order_counts_by_status(start, end)
        total_orders = sum(counts.values())

        history = self._repo.history_for_window(start, end)
        dwell = engine.compute_dwell(history, as_of)
        time_in_status = sorted(
            (self._dwell_dto(slug, acc, names) for slug, acc in dwell.per_status.items()),
            key=lambda item: item.status,
        )
        slowest = [
            self._dwell_dto(slug, acc, names)
            for slug, acc in engine.bottlenecks(dwell.per_status)
        ]

        in_window = [row for row in history if start <= row.created_at <= end]
        matrix = [
            TransitionCountDTO(from_status=src, to_status=dst, count=n)
            for src, dst, n in engine.transition_matrix(in_window)
        ]

        tz = timezone.get_current_timezone()
        series = engine.daily_series(
            (timezone.localtime(ts, tz).date() for ts in self._repo.order_creation_times(start, end)),
            timezone.localtime(start, tz).date(),
            timezone.localtime(end, tz).date(),
        )

        summary = SummaryDTO(
            total_orders=total_orders,
            active_statuses=sum(1 for n in counts.values() if n > 0),
            total_statuses=len(names),
            average_processing_time=_duration(
                engine.weighted_average_ms(dwell.per_status, counts, total_orders)
            ),
            exact_average_processing_time=_duration(
                engine.exact_average_ms(dwell.per_order_ms)
            ),
            slowest_status=slowest[0].status if slowest else None,
        )

        log.info(
            "analytics.computed",
            total_orders=total_orders,
            tracked_orders=len(dwell.per_order_ms),
        )
        return AnalyticsReportDTO(
            window=ReportWindowDTO(start_date=start, end_date=end, as_of=as_of),
            order_counts_by_status=[
                StatusCountDTO(status=slug, name=names.get(slug, slug), count=n)
                for slug, n in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
            ],
            time_in_status=time_in_status,
            bottlenecks=slowest,
            transition_matrix=matrix,
            time_series=[DailyCountDTO(day=day, count=n) for day, n in series],
            summary=summary,
        )

    @staticmethod
    def _dwell_dto(
        slug: str, acc: engine.DwellAccumulator, names: Dict[str, str]
    ) -> DwellDTO:
        average = acc.average_ms
        return DwellDTO(
            status=slug,
            # Slugs of deleted statuses still appear in old history rows.
            name=names.get(slug, slug),
            average_ms=round(average, 2),
            average_hours=engine.to_hours(average),
            average_days=engine.to_days(average),
            formatted=engine.format_duration(average),
            samples=acc.samples,
        )
