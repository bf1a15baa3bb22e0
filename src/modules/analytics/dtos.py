"""Analytics report DTOs.

Immutable Pydantic v2 models returned by ``AnalyticsService.compute``;
views dump them with ``model_dump(mode="json")``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ReportWindowDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_date: datetime
    end_date: datetime
    as_of: datetime


class StatusCountDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    name: str
    count: int


class DwellDTO(BaseModel):
    """Average time spent in one status."""

    model_config = ConfigDict(frozen=True)

    status: str
    name: str
    average_ms: float
    average_hours: float
    average_days: float
    formatted: str
    samples: int


class TransitionCountDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_status: str
    to_status: str
    count: int


class DailyCountDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    day: date
    count: int


class DurationDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    ms: float
    hours: float
    days: float
    formatted: str


class SummaryDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_orders: int
    active_statuses: int
    total_statuses: int
    average_processing_time: DurationDTO
    exact_average_processing_time: DurationDTO
    slowest_status: Optional[str] = None


class AnalyticsReportDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    window: ReportWindowDTO
    order_counts_by_status: List[StatusCountDTO]
    time_in_status: List[DwellDTO]
    bottlenecks: List[DwellDTO]
    transition_matrix: List[TransitionCountDTO]
    time_series: List[DailyCountDTO]
    summary: SummaryDTO
