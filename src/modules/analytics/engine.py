"""Dwell-time analytics over the order status history.

Pure functions: no ORM access, no clock.  The service feeds them plain
``HistoryEntry`` rows and an ``as_of`` instant, which keeps the maths
testable and deterministic.

Durations are milliseconds internally.  Display values are rounded to two
decimals, and ``format_duration`` picks days if >= 1, else hours if >= 1,
else minutes.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Dict, Hashable, Iterable, List, Mapping, Optional, Tuple

MS_PER_MINUTE = 60_000
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR

BOTTLENECK_LIMIT = 5


@dataclass(frozen=True)
class HistoryEntry:
    order_id: Hashable
    from_status: Optional[str]
    to_status: str
    created_at: datetime


@dataclass
class DwellAccumulator:
    total_ms: float = 0.0
    samples: int = 0

    @property
    def average_ms(self) -> float:
        return self.total_ms / self.samples if self.samples else 0.0


@dataclass(frozen=True)
class DwellResult:
    per_status: Dict[str, DwellAccumulator]
    per_order_ms: Dict[Hashable, float]


def _ms(delta: timedelta) -> float:
    return delta.total_seconds() * 1000


def compute_dwell(entries: Iterable[HistoryEntry], as_of: datetime) -> DwellResult:
    """Walk each order's history pairwise and accumulate time per status.

    ``dwell(i) = t(i+1) - t(i)``; the open (last) entry runs until
    ``as_of``.  Entries written after ``as_of`` are ignored.
    """
    by_order: Dict[Hashable, List[HistoryEntry]] = defaultdict(list)
    for entry in entries:
        if entry.created_at <= as_of:
            by_order[entry.order_id].append(entry)

    per_status: Dict[str, DwellAccumulator] = defaultdict(DwellAccumulator)
    per_order: Dict[Hashable, float] = {}
    for order_id, rows in by_order.items():
        rows.sort(key=lambda row: row.created_at)
        order_total = 0.0
        for current, following in zip(rows, rows[1:] + [None]):
            exited_at = following.created_at if following is not None else as_of
            dwell = _ms(exited_at - current.created_at)
            bucket = per_status[current.to_status]
            bucket.total_ms += dwell
            bucket.samples += 1
            order_total += dwell
        per_order[order_id] = order_total
    return DwellResult(per_status=dict(per_status), per_order_ms=per_order)


def bottlenecks(
    per_status: Mapping[str, DwellAccumulator], limit: int = BOTTLENECK_LIMIT
) -> List[Tuple[str, DwellAccumulator]]:
    """Statuses with non-zero average dwell, slowest first (ties by slug)."""
    ranked = [
        (slug, acc) for slug, acc in per_status.items() if acc.average_ms > 0
    ]
    ranked.sort(key=lambda item: (-item[1].average_ms, item[0]))
    return ranked[:limit]


def transition_matrix(entries: Iterable[HistoryEntry]) -> List[Tuple[str, str, int]]:
    """``(from, to, count)`` edge list; creation rows are skipped."""
    counts = Counter(
        (entry.from_status, entry.to_status)
        for entry in entries
        if entry.from_status is not None
    )
    return sorted(
        ((src, dst, n) for (src, dst), n in counts.items()),
        key=lambda item: (-item[2], item[0], item[1]),
    )


def daily_series(days: Iterable[date], start: date, end: date) -> List[Tuple[date, int]]:
    """Per-day counts between *start* and *end* inclusive, zero-filled."""
    counts = Counter(days)
    series = []
    current = start
    while current <= end:
        series.append((current, counts.get(current, 0)))
        current += timedelta(days=1)
    return series


def weighted_average_ms(
    per_status: Mapping[str, DwellAccumulator],
    order_counts: Mapping[str, int],
    total_orders: int,
) -> float:
    """``sum(avg_dwell_s * order_count_s) / total_orders``.

    An approximation of the per-order mean, kept for report compatibility;
    see ``exact_average_ms`` for the true mean.
    """
    if not total_orders:
        return 0.0
    weighted = sum(
        acc.average_ms * order_counts.get(slug, 0) for slug, acc in per_status.items()
    )
    return weighted / total_orders


def exact_average_ms(per_order_ms: Mapping[Hashable, float]) -> float:
    """Mean over orders of each order's total tracked dwell."""
    if not per_order_ms:
        return 0.0
    return sum(per_order_ms.values()) / len(per_order_ms)


def to_hours(ms: float) -> float:
    return round(ms / MS_PER_HOUR, 2)


def to_days(ms: float) -> float:
    return round(ms / MS_PER_DAY, 2)


def format_duration(ms: float) -> str:
    """Human-readable duration: ``"1.50 days"``, ``"3.00 hours"``, ``"12 minutes"``."""
    if ms >= MS_PER_DAY:
        return f"{ms / MS_PER_DAY:.2f} days"
    if ms >= MS_PER_HOUR:
        return f"{ms / MS_PER_HOUR:.2f} hours"
    return f"{round(ms / MS_PER_MINUTE)} minutes"
