"""Validation of the start/end date query parameters."""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass

from pos_reporting.core.errors import InvalidDateFormat, MissingDateRange

# Accepted spellings, checked in order; the first non-empty value wins.
START_DATE_ALIASES: tuple[str, ...] = ("start-Date", "start-date", "startDate", "startdate")
END_DATE_ALIASES: tuple[str, ...] = ("end-Date", "end-date", "endDate", "enddate")

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


@dataclass(frozen=True, slots=True)
class DateRange:
    """Validated ``YYYY-MM-DD`` strings, passed to the query untouched."""

    start: str
    end: str


def _first_present(params: Mapping[str, str | None], aliases: tuple[str, ...]) -> str | None:
    for alias in aliases:
        value = params.get(alias)
        if value:
            return value
    return None


def parse_date_range(params: Mapping[str, str | None] | None) -> DateRange:
    """Pick the start and end dates out of ``params`` and check their shape.

    Only the literal ``YYYY-MM-DD`` pattern is enforced; ``2024-13-99`` passes
    and is left for the database to judge.
    """
    params = params or {}
    start = _first_present(params, START_DATE_ALIASES)
    end = _first_present(params, END_DATE_ALIASES)
    if not start or not end:
        raise MissingDateRange()
    if not DATE_PATTERN.fullmatch(start) or not DATE_PATTERN.fullmatch(end):
        raise InvalidDateFormat()
    return DateRange(start=start, end=end)


__all__ = ["DATE_PATTERN", "DateRange", "END_DATE_ALIASES", "START_DATE_ALIASES", "parse_date_range"]
