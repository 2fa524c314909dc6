"""Age × condition co-occurrence matrix for the chord diagram."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from surveygraph.analysis.models import AdjacencyMatrix
from surveygraph.models import ALL_CONDITIONS, Condition, SurveyRecord
from surveygraph.normalize import parse_age, parse_flag

logger = logging.getLogger(__name__)

DEFAULT_AGES: tuple[int, ...] = tuple(range(18, 25))


def build_matrix(
    records: Iterable[SurveyRecord],
    ages: Sequence[int] = DEFAULT_AGES,
    conditions: Sequence[Condition] = ALL_CONDITIONS,
) -> AdjacencyMatrix:
    """Count, per age and condition, the records with that condition.

    The node set is the ages followed by the conditions.  Each hit bumps
    the age→condition cell and its mirror together, so the matrix is
    symmetric by construction and the diagonal stays zero.  Records with an
    age outside *ages* (or no parseable age) contribute nothing.
    """
    age_index = {age: i for i, age in enumerate(ages)}
    offset = len(ages)
    size = offset + len(conditions)
    cells = [[0] * size for _ in range(size)]
    out_of_range = 0

    for record in records:
        age = parse_age(record.age)
        row = age_index.get(age) if age is not None else None
        if row is None:
            out_of_range += 1
            continue
        for j, condition in enumerate(conditions):
            if parse_flag(getattr(record, condition.attribute)) is True:
                col = offset + j
                cells[row][col] += 1
                cells[col][row] += 1

    if out_of_range:
        logger.debug("build_matrix: %d record(s) outside the age range skipped", out_of_range)

    names = tuple(str(age) for age in ages) + tuple(c.value for c in conditions)
    return AdjacencyMatrix(names=names, matrix=tuple(tuple(row) for row in cells))
