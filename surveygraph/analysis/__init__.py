"""Aggregation and graph construction: frequency tables, flows, matrices, trees."""

from surveygraph.analysis.adjacency import build_matrix
from surveygraph.analysis.categories import aggregate, aggregate_all, aggregate_cross_tab
from surveygraph.analysis.combinations import aggregate_combinations, combination_key
from surveygraph.analysis.flow import (
    ACADEMIC_FLOW,
    FLOW_PRESETS,
    MENTAL_HEALTH_FLOW,
    Stage,
    build_flow,
    course_category_stage,
    flow_presets,
)
from surveygraph.analysis.hierarchy import build_category_node, build_tree, match_category
from surveygraph.analysis.models import (
    AdjacencyMatrix,
    CombinationEntry,
    FlowGraph,
    FrequencyEntry,
    GraphEdge,
    GraphNode,
    TreeMetadata,
    TreeNode,
)

__all__ = [
    "ACADEMIC_FLOW",
    "FLOW_PRESETS",
    "MENTAL_HEALTH_FLOW",
    "AdjacencyMatrix",
    "CombinationEntry",
    "FlowGraph",
    "FrequencyEntry",
    "GraphEdge",
    "GraphNode",
    "Stage",
    "TreeMetadata",
    "TreeNode",
    "aggregate",
    "aggregate_all",
    "aggregate_combinations",
    "aggregate_cross_tab",
    "build_category_node",
    "build_flow",
    "build_matrix",
    "build_tree",
    "combination_key",
    "course_category_stage",
    "flow_presets",
    "match_category",
]
