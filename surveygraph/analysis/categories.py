"""Single-field frequency tables (bar chart) and two-level cross-tabs."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable, Iterable

from surveygraph.analysis.models import FrequencyEntry
from surveygraph.models import SurveyField, SurveyRecord
from surveygraph.normalize import format_label

logger = logging.getLogger(__name__)

Selector = Callable[[SurveyRecord], str]
CrossTab = dict[str, dict[str, int]]


def resolve_selector(field: SurveyField | str | Selector) -> Selector:
    """Turn a field, a field name, or a callable into a record → value function."""
    if isinstance(field, SurveyField):
        return field.value_of
    if isinstance(field, str):
        return SurveyField.from_name(field).value_of
    return field


def percentage(count: int, total: int) -> float:
    """Share of *total* as a percentage (0.0 when total is zero)."""
    if total == 0:
        return 0.0
    return count / total * 100


def _ranked(counts: Counter[str]) -> list[tuple[str, int]]:
    # Counter keeps insertion order, and sorted() is stable: ties stay first-seen.
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def aggregate(
    records: Iterable[SurveyRecord],
    field: SurveyField | str | Selector,
) -> list[FrequencyEntry]:
    """Count each normalised value of *field*, most frequent first.

    Rows with an empty value are left out of both the counts and the
    percentage denominator.
    """
    select = resolve_selector(field)
    counts: Counter[str] = Counter()
    skipped = 0
    for record in records:
        value = select(record)
        if not value:
            skipped += 1
            continue
        counts[value] += 1

    if skipped:
        logger.debug("aggregate: %d row(s) with no value skipped", skipped)

    total = sum(counts.values())
    return [
        FrequencyEntry(
            value=value,
            count=count,
            percentage_of_total=percentage(count, total),
            label=format_label(value),
        )
        for value, count in _ranked(counts)
    ]


def aggregate_cross_tab(
    records: Iterable[SurveyRecord],
    field: SurveyField | str | Selector,
    secondary: SurveyField | str | Selector,
) -> CrossTab:
    """Break each value of *field* down by the values of *secondary*.

    Outer keys follow ``aggregate`` order (descending count), inner keys are
    first-seen.  A row needs both values to be counted.
    """
    select = resolve_selector(field)
    select_secondary = resolve_selector(secondary)

    totals: Counter[str] = Counter()
    cells: dict[str, Counter[str]] = {}
    for record in records:
        value = select(record)
        sub_value = select_secondary(record)
        if not value or not sub_value:
            continue
        totals[value] += 1
        cells.setdefault(value, Counter())[sub_value] += 1

    return {value: dict(cells[value]) for value, _ in _ranked(totals)}


def aggregate_all(records: Iterable[SurveyRecord]) -> dict[str, list[FrequencyEntry]]:
    """Frequency tables for every selectable field, keyed by display name."""
    rows = list(records)
    return {field.value: aggregate(rows, field) for field in SurveyField}
