"""Multi-stage weighted flow graphs for Sankey diagrams.

A flow is an ordered list of stages.  Each stage classifies a record into
one label (or None when the record can't be placed).  A record is either
placed on one complete path through every stage or dropped: partial paths
are never emitted, so the weight leaving the first stage always equals the
number of placed records.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from functools import partial

from surveygraph.analysis.combinations import active_conditions
from surveygraph.analysis.hierarchy import match_category
from surveygraph.analysis.models import FlowGraph, GraphEdge, GraphNode
from surveygraph.models import DEFAULT_CATEGORIES, CategoryDefinition, Condition, SurveyField, SurveyRecord
from surveygraph.normalize import normalize_year, parse_age, parse_flag

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Stage:
    """One column of a flow diagram."""

    name: str
    classify: Callable[[SurveyRecord], str | None]


class NodeRegistry:
    """Insertion-ordered label → id mapping for one flow build.

    Labels are unique across the whole run, whatever stage they come from;
    the first stage to register a label owns it.
    """

    def __init__(self) -> None:
        self._ids: dict[str, int] = {}
        self._nodes: list[GraphNode] = []

    def register(self, label: str, stage: str) -> int:
        node_id = self._ids.get(label)
        if node_id is None:
            node_id = len(self._nodes)
            self._ids[label] = node_id
            self._nodes.append(GraphNode(id=node_id, label=label, stage=stage))
        return node_id

    def get(self, label: str) -> int | None:
        return self._ids.get(label)

    def __len__(self) -> int:
        return len(self._nodes)

    def nodes(self) -> tuple[GraphNode, ...]:
        return tuple(self._nodes)


# ---------------------------------------------------------------------------
# Stage classifiers
# ---------------------------------------------------------------------------

STUDY_YEARS = ("Year 1", "Year 2", "Year 3", "Year 4")

# (low, high, label), inclusive bounds
AGE_BRACKETS: tuple[tuple[int, int, str], ...] = (
    (18, 20, "18-20"),
    (21, 22, "21-22"),
    (23, 24, "23-24"),
)

MULTIPLE_CONDITIONS = "Multiple Conditions"
SOUGHT_TREATMENT = "Sought Treatment"
NO_TREATMENT = "No Treatment"

_CONDITION_FLOW_LABELS: dict[Condition, str] = {
    Condition.DEPRESSION: "Depression",
    Condition.ANXIETY: "Anxiety",
    Condition.PANIC_ATTACK: "Panic Attack",
}


def classify_year(record: SurveyRecord) -> str | None:
    year = normalize_year(record.year_of_study)
    return year if year in STUDY_YEARS else None


def classify_age_bracket(record: SurveyRecord) -> str | None:
    age = parse_age(record.age)
    if age is None:
        return None
    for low, high, label in AGE_BRACKETS:
        if low <= age <= high:
            return label
    return None


def classify_condition(record: SurveyRecord) -> str | None:
    """Collapse the condition flags into one of five buckets."""
    active = active_conditions(record)
    if active is None:
        return None
    if not active:
        return "No Conditions"
    if len(active) > 1:
        return MULTIPLE_CONDITIONS
    return _CONDITION_FLOW_LABELS[active[0]]


def classify_treatment(record: SurveyRecord) -> str | None:
    flag = parse_flag(record.treatment)
    if flag is None:
        return None
    return SOUGHT_TREATMENT if flag else NO_TREATMENT


def classify_course_category(
    record: SurveyRecord,
    categories: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
) -> str | None:
    category = match_category(record.course, categories)
    return category.name if category is not None else None


def classify_cgpa(record: SurveyRecord) -> str | None:
    return SurveyField.CGPA.value_of(record) or None


def course_category_stage(
    categories: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
) -> Stage:
    """Course stage that groups courses by *categories*, as the tree does."""
    return Stage("course", partial(classify_course_category, categories=categories))


YEAR_STAGE = Stage("year", classify_year)
AGE_BRACKET_STAGE = Stage("age", classify_age_bracket)
CONDITION_STAGE = Stage("condition", classify_condition)
TREATMENT_STAGE = Stage("treatment", classify_treatment)
COURSE_CATEGORY_STAGE = course_category_stage()
CGPA_STAGE = Stage("cgpa", classify_cgpa)

MENTAL_HEALTH_FLOW: tuple[Stage, ...] = (
    YEAR_STAGE,
    AGE_BRACKET_STAGE,
    CONDITION_STAGE,
    TREATMENT_STAGE,
)


def flow_presets(
    categories: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
) -> dict[str, tuple[Stage, ...]]:
    """Named flows; the academic one uses *categories* for its course stage."""
    return {
        "mental-health": MENTAL_HEALTH_FLOW,
        "academic": (course_category_stage(categories), YEAR_STAGE, CONDITION_STAGE),
    }


FLOW_PRESETS = flow_presets()
ACADEMIC_FLOW = FLOW_PRESETS["academic"]


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


def build_flow(records: Iterable[SurveyRecord], stages: Sequence[Stage]) -> FlowGraph:
    """Build nodes and stage-to-stage edges from *records*.

    Edges are unique per (source, target) pair; every record that traverses
    a pair adds 1 to its weight.
    """
    if len(stages) < 2:
        raise ValueError("A flow needs at least two stages")

    registry = NodeRegistry()
    weights: dict[tuple[int, int], int] = {}
    placed = 0
    skipped = 0

    for record in records:
        path = [stage.classify(record) for stage in stages]
        if any(label is None for label in path):
            skipped += 1
            continue
        ids = [registry.register(label, stage.name) for label, stage in zip(path, stages)]  # type: ignore[arg-type]
        for source_id, target_id in zip(ids, ids[1:]):
            weights[(source_id, target_id)] = weights.get((source_id, target_id), 0) + 1
        placed += 1

    logger.debug(
        "build_flow(%s): %d placed, %d skipped, %d nodes, %d edges",
        " → ".join(s.name for s in stages), placed, skipped, len(registry), len(weights),
    )

    return FlowGraph(
        nodes=registry.nodes(),
        edges=tuple(
            GraphEdge(source_id=s, target_id=t, weight=w) for (s, t), w in weights.items()
        ),
        stages=tuple(s.name for s in stages),
        records_placed=placed,
        records_skipped=skipped,
    )
