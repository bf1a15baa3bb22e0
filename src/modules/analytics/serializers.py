"""Analytics query-string validation."""

from __future__ import annotations

from datetime import datetime, time

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime
from rest_framework import serializers


class WindowBoundField(serializers.Field):
    """Accepts an ISO date or datetime.

    A bare date means the start of that day, or the end of it when
    ``end_of_day`` is set.  Naive values are read in the current time zone.
    """

    default_error_messages = {
        "invalid": "Use an ISO 8601 date (YYYY-MM-DD) or datetime.",
    }

    def __init__(self, end_of_day: bool = False, **kwargs) -> None:
        self.end_of_day = end_of_day
        super().__init__(**kwargs)

    def to_internal_value(self, data) -> datetime:
        raw = str(data).strip()
        try:
            value = parse_datetime(raw)
            if value is None:
                day = parse_date(raw)
                if day is None:
                    self.fail("invalid")
                value = datetime.combine(day, time.max if self.end_of_day else time.min)
        except ValueError:
            self.fail("invalid")
        if timezone.is_naive(value):
            value = timezone.make_aware(value)
        return value

    def to_representation(self, value: datetime) -> str:
        return value.isoformat()


class AnalyticsQuerySerializer(serializers.Serializer):
    """``startDate``/``endDate`` (or ``start_date``/``end_date``)."""

    start_date = WindowBoundField(required=False)
    end_date = WindowBoundField(required=False, end_of_day=True)

    ALIASES = {"startDate": "start_date", "endDate": "end_date"}

    def __init__(self, *args, **kwargs) -> None:
        data = kwargs.get("data")
        if data is not None:
            normalised = {}
            for key, value in data.items():
                if value in ("", None):
                    continue
                normalised[self.ALIASES.get(key, key)] = value
            kwargs["data"] = normalised
        super().__init__(*args, **kwargs)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and start > end:
            raise serializers.ValidationError(
                {"start_date": "start_date must be before end_date."}
            )
        return attrs
