"""Canonicalise free-text survey answers into stable comparison keys.

Every function here is pure and total: unrecognised input is passed through
rather than rejected, so a single odd answer never aborts an aggregation.
"""

from __future__ import annotations

import re

_YEAR_PREFIX_RE = re.compile(r"^year\s*")
_DIGITS_RE = re.compile(r"\d+", re.ASCII)
_WHITESPACE_RE = re.compile(r"\s+")
_RANGE_RE = re.compile(r"(\d+\.?\d*)-(\d+\.?\d*)")
_YES = "yes"
_NO = "no"


def normalize_case(raw: str) -> str:
    """Trim and lower-case a value for categorical comparison."""
    return raw.strip().lower()


def normalize_year(raw: str) -> str:
    """Map year-of-study text to ``"Year N"``.

    ``"year 1"``, ``"Year1"`` and ``" YEAR 01 "`` all become ``"Year 1"``.
    Anything that does not end in a whole number after the optional ``year``
    token is returned verbatim.
    """
    rest = _YEAR_PREFIX_RE.sub("", raw.strip().lower())
    if _DIGITS_RE.fullmatch(rest) is None:
        return raw
    return f"Year {rest.lstrip('0') or '0'}"


def normalize_range(raw: str) -> str:
    """Canonicalise a ``low-high`` numeric range to ``"low.xx - high.xx"``.

    Spacing and precision in the input don't matter: ``"3.00 - 3.49"`` and
    ``"3-3.49"`` both become ``"3.00 - 3.49"``.
    """
    compact = _WHITESPACE_RE.sub("", raw.lower())
    match = _RANGE_RE.search(compact)
    if match is None:
        return raw
    low, high = match.groups()
    return f"{float(low):.2f} - {float(high):.2f}"


def format_label(value: str) -> str:
    """Display form of a normalised value: each word capitalised."""
    return " ".join(word[:1].upper() + word[1:] for word in value.split(" "))


def parse_age(raw: str) -> int | None:
    """Whole-number age, or None when the cell is empty or not an integer."""
    text = raw.strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not value.is_integer():
        return None
    return int(value)


def parse_flag(raw: str) -> bool | None:
    """Yes/No answer as a bool; None for anything else (including blank)."""
    text = normalize_case(raw)
    if text == _YES:
        return True
    if text == _NO:
        return False
    return None
