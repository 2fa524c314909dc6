"""Frequency of condition combinations (pie chart) with a gender breakdown."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable

from surveygraph.analysis.categories import percentage
from surveygraph.analysis.models import CombinationEntry
from surveygraph.models import ALL_CONDITIONS, Condition, SurveyRecord
from surveygraph.normalize import format_label, normalize_case, parse_flag

logger = logging.getLogger(__name__)

NO_CONDITIONS = "No Conditions"
COMBINATION_SEPARATOR = " + "


def combination_key(names: Iterable[str]) -> str:
    """Canonical key for a set of active conditions.

    Names are sorted alphabetically so the same set can only ever produce
    one key, whatever order the flags were checked in.
    """
    active = sorted(set(names))
    if not active:
        return NO_CONDITIONS
    return COMBINATION_SEPARATOR.join(active)


def active_conditions(
    record: SurveyRecord,
    conditions: Iterable[Condition] = ALL_CONDITIONS,
) -> list[Condition] | None:
    """Conditions answered "yes" on *record*, or None if any answer is missing."""
    active: list[Condition] = []
    for condition in conditions:
        flag = parse_flag(getattr(record, condition.attribute))
        if flag is None:
            return None
        if flag:
            active.append(condition)
    return active


def record_combination(
    record: SurveyRecord,
    conditions: Iterable[Condition] = ALL_CONDITIONS,
) -> str | None:
    """Combination key for one record (None when a flag is unanswered)."""
    active = active_conditions(record, conditions)
    if active is None:
        return None
    return combination_key(c.short_name for c in active)


def gender_label(record: SurveyRecord) -> str:
    return format_label(normalize_case(record.gender))


def aggregate_combinations(
    records: Iterable[SurveyRecord],
    conditions: Iterable[Condition] = ALL_CONDITIONS,
) -> list[CombinationEntry]:
    """Count records per condition combination, most frequent first.

    Records with an unanswered condition flag are excluded entirely.  A
    record with no gender still counts toward its combination's total but
    not toward the breakdown.
    """
    conditions = tuple(conditions)
    totals: Counter[str] = Counter()
    by_gender: dict[str, Counter[str]] = {}
    skipped = 0

    for record in records:
        key = record_combination(record, conditions)
        if key is None:
            skipped += 1
            continue
        totals[key] += 1
        breakdown = by_gender.setdefault(key, Counter())
        gender = gender_label(record)
        if gender:
            breakdown[gender] += 1

    if skipped:
        logger.debug("aggregate_combinations: %d row(s) with unanswered flags skipped", skipped)

    included = sum(totals.values())
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [
        CombinationEntry(
            value=key,
            count=count,
            percentage_of_total=percentage(count, included),
            breakdown=dict(by_gender[key]),
        )
        for key, count in ranked
    ]
