"""Output structures handed to the rendering collaborators.

These are plain frozen dataclasses (not Pydantic): they're ephemeral,
rebuilt wholesale on every pipeline run, and never patched in place.
``to_dict()`` gives the JSON shape each chart consumes.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from surveygraph.models import SurveyRecord
from surveygraph.normalize import parse_flag


@dataclass(frozen=True)
class FrequencyEntry:
    """One bar (or pie slice): a normalised value and how often it occurs."""

    value: str
    count: int
    percentage_of_total: float
    label: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "value": self.value,
            "label": self.label or self.value,
            "count": self.count,
            "percentage": self.percentage_of_total,
        }


@dataclass(frozen=True)
class CombinationEntry:
    """A condition-combination slice with its per-gender sub-counts."""

    value: str
    count: int
    percentage_of_total: float
    breakdown: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        return {
            "value": self.value,
            "count": self.count,
            "percentage": self.percentage_of_total,
            "breakdown": dict(self.breakdown),
        }


@dataclass(frozen=True)
class GraphNode:
    id: int
    label: str
    stage: str

    def to_dict(self) -> dict[str, object]:
        return {"id": self.id, "name": self.label, "category": self.stage}


@dataclass(frozen=True)
class GraphEdge:
    source_id: int
    target_id: int
    weight: int

    def to_dict(self) -> dict[str, object]:
        return {"source": self.source_id, "target": self.target_id, "value": self.weight}


@dataclass(frozen=True)
class FlowGraph:
    """Nodes and weighted edges of a multi-stage flow (Sankey) diagram."""

    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]
    stages: tuple[str, ...]
    records_placed: int = 0
    records_skipped: int = 0

    def nodes_in_stage(self, stage: str) -> list[GraphNode]:
        return [n for n in self.nodes if n.stage == stage]

    def node_by_label(self, label: str) -> GraphNode | None:
        for node in self.nodes:
            if node.label == label:
                return node
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "stages": list(self.stages),
            "nodes": [n.to_dict() for n in self.nodes],
            "links": [e.to_dict() for e in self.edges],
            "records_placed": self.records_placed,
            "records_skipped": self.records_skipped,
        }


@dataclass(frozen=True)
class AdjacencyMatrix:
    """Square, symmetric co-occurrence matrix for a chord diagram."""

    names: tuple[str, ...]
    matrix: tuple[tuple[int, ...], ...]

    def index_of(self, name: str) -> int:
        return self.names.index(name)

    def cell(self, row: str, col: str) -> int:
        return self.matrix[self.index_of(row)][self.index_of(col)]

    def to_dict(self) -> dict[str, object]:
        return {"names": list(self.names), "matrix": [list(row) for row in self.matrix]}


@dataclass(frozen=True)
class TreeMetadata:
    """Counters rolled up at every node of the hierarchy."""

    depression: int = 0
    anxiety: int = 0
    panic: int = 0
    treatment: int = 0
    total: int = 0

    def with_record(self, record: SurveyRecord) -> TreeMetadata:
        """Return new counters with *record* folded in."""
        return TreeMetadata(
            depression=self.depression + (parse_flag(record.depression) is True),
            anxiety=self.anxiety + (parse_flag(record.anxiety) is True),
            panic=self.panic + (parse_flag(record.panic_attack) is True),
            treatment=self.treatment + (parse_flag(record.treatment) is True),
            total=self.total + 1,
        )

    def __add__(self, other: TreeMetadata) -> TreeMetadata:
        return TreeMetadata(
            depression=self.depression + other.depression,
            anxiety=self.anxiety + other.anxiety,
            panic=self.panic + other.panic,
            treatment=self.treatment + other.treatment,
            total=self.total + other.total,
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "depression": self.depression,
            "anxiety": self.anxiety,
            "panic": self.panic,
            "treatment": self.treatment,
            "total": self.total,
        }


@dataclass(frozen=True)
class TreeNode:
    name: str
    metadata: TreeMetadata
    children: tuple[TreeNode, ...] = ()

    def walk(self) -> Iterator[TreeNode]:
        """Yield this node and every descendant, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def child(self, name: str) -> TreeNode | None:
        for node in self.children:
            if node.name == name:
                return node
        return None

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"name": self.name, "metadata": self.metadata.to_dict()}
        if self.children:
            out["children"] = [c.to_dict() for c in self.children]
        else:
            out["value"] = self.metadata.total
        return out
