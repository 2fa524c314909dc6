"""Chart data endpoints: one per output shape.

Each endpoint rebuilds its structure from the records loaded at start-up,
so a changed selection (field, preset, category) is just a new request.

- ``GET /api/frequencies?field=&by=``: bar chart (or cross-tab with ``by``)
- ``GET /api/combinations``: pie chart with gender breakdown
- ``GET /api/flow?preset=``: Sankey nodes and links
- ``GET /api/matrix``: chord diagram matrix
- ``GET /api/tree?category=``: collapsible tree (whole tree or one category)
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel

from surveygraph.analysis.adjacency import build_matrix
from surveygraph.analysis.categories import aggregate, aggregate_cross_tab
from surveygraph.analysis.combinations import aggregate_combinations
from surveygraph.analysis.flow import FLOW_PRESETS, build_flow
from surveygraph.analysis.hierarchy import build_category_node, build_tree
from surveygraph.analysis.models import TreeNode
from surveygraph.models import DEFAULT_CATEGORIES, SurveyField, SurveyRecord, find_category

router = APIRouter(prefix="/api")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class FrequencyOut(BaseModel):
    value: str
    label: str
    count: int
    percentage: float


class FrequenciesResponse(BaseModel):
    field: str
    total: int
    entries: list[FrequencyOut]
    cross_tab: dict[str, dict[str, int]] | None = None


class CombinationOut(BaseModel):
    value: str
    count: int
    percentage: float
    breakdown: dict[str, int]


class FlowNodeOut(BaseModel):
    id: int
    name: str
    category: str


class FlowLinkOut(BaseModel):
    source: int
    target: int
    value: int


class FlowResponse(BaseModel):
    preset: str
    stages: list[str]
    nodes: list[FlowNodeOut]
    links: list[FlowLinkOut]
    records_placed: int
    records_skipped: int


class MatrixResponse(BaseModel):
    names: list[str]
    matrix: list[list[int]]


class TreeMetadataOut(BaseModel):
    depression: int
    anxiety: int
    panic: int
    treatment: int
    total: int


class TreeNodeOut(BaseModel):
    """Same shape as ``TreeNode.to_dict()``: inner nodes carry ``children``, leaves ``value``."""

    name: str
    metadata: TreeMetadataOut
    children: list[TreeNodeOut] | None = None
    value: int | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_records(request: Request) -> list[SurveyRecord]:
    """Get the loaded records from app state."""
    return request.app.state.records


def _resolve_field(name: str) -> SurveyField:
    """Return the field or raise 404."""
    try:
        return SurveyField.from_name(name)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown field: {name}") from None


def _serialize_tree(node: TreeNode) -> TreeNodeOut:
    return TreeNodeOut.model_validate(node.to_dict())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.get("/frequencies", response_model=FrequenciesResponse)
def frequencies(
    request: Request,
    field: str = Query(SurveyField.GENDER.value),
    by: str | None = Query(None),
) -> FrequenciesResponse:
    records = _get_records(request)
    selected = _resolve_field(field)
    entries = aggregate(records, selected)
    cross_tab = None
    if by is not None:
        cross_tab = aggregate_cross_tab(records, selected, _resolve_field(by))
    return FrequenciesResponse(
        field=selected.value,
        total=sum(e.count for e in entries),
        entries=[
            FrequencyOut(
                value=e.value,
                label=e.label,
                count=e.count,
                percentage=round(e.percentage_of_total, 2),
            )
            for e in entries
        ],
        cross_tab=cross_tab,
    )


@router.get("/combinations", response_model=list[CombinationOut])
def combinations(request: Request) -> list[CombinationOut]:
    return [
        CombinationOut(
            value=e.value,
            count=e.count,
            percentage=round(e.percentage_of_total, 2),
            breakdown=dict(e.breakdown),
        )
        for e in aggregate_combinations(_get_records(request))
    ]


@router.get("/flow", response_model=FlowResponse)
def flow(request: Request, preset: str = Query("mental-health")) -> FlowResponse:
    stages = FLOW_PRESETS.get(preset)
    if stages is None:
        raise HTTPException(status_code=404, detail=f"Unknown flow preset: {preset}")
    graph = build_flow(_get_records(request), stages)
    return FlowResponse(
        preset=preset,
        stages=list(graph.stages),
        nodes=[FlowNodeOut(id=n.id, name=n.label, category=n.stage) for n in graph.nodes],
        links=[FlowLinkOut(source=e.source_id, target=e.target_id, value=e.weight) for e in graph.edges],
        records_placed=graph.records_placed,
        records_skipped=graph.records_skipped,
    )


@router.get("/matrix", response_model=MatrixResponse)
def matrix(request: Request) -> MatrixResponse:
    result = build_matrix(_get_records(request), ages=request.app.state.settings.ages)
    return MatrixResponse(names=list(result.names), matrix=[list(row) for row in result.matrix])


@router.get("/tree", response_model=TreeNodeOut, response_model_exclude_none=True)
def tree(request: Request, category: str | None = Query(None)) -> TreeNodeOut:
    records = _get_records(request)
    if category is None or category.lower() == "all":
        return _serialize_tree(build_tree(records, DEFAULT_CATEGORIES))
    try:
        selected = find_category(category)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown course category: {category}") from None
    return _serialize_tree(build_category_node(records, selected, DEFAULT_CATEGORIES))
