"""Pipeline orchestrator: build every output shape from one set of records."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from surveygraph import __version__
from surveygraph.analysis.adjacency import DEFAULT_AGES, build_matrix
from surveygraph.analysis.categories import aggregate_all
from surveygraph.analysis.combinations import aggregate_combinations
from surveygraph.analysis.flow import build_flow, flow_presets
from surveygraph.analysis.hierarchy import build_tree
from surveygraph.analysis.models import (
    AdjacencyMatrix,
    CombinationEntry,
    FlowGraph,
    FrequencyEntry,
    TreeNode,
)
from surveygraph.models import DEFAULT_CATEGORIES, CategoryDefinition, SurveyRecord

logger = logging.getLogger(__name__)

# Output file names, one per rendering surface
FREQUENCIES_FILE = "frequencies.json"
COMBINATIONS_FILE = "combinations.json"
FLOW_FILE = "flow.json"
MATRIX_FILE = "matrix.json"
TREE_FILE = "tree.json"
SUMMARY_FILE = "summary.json"


@dataclass(frozen=True)
class PipelineResult:
    """Everything one run produces, ready to serialise."""

    records_loaded: int
    frequencies: dict[str, list[FrequencyEntry]]
    combinations: list[CombinationEntry]
    flows: dict[str, FlowGraph]
    matrix: AdjacencyMatrix
    tree: TreeNode
    elapsed: float = field(default=0.0, compare=False)

    def summary(self) -> dict[str, object]:
        return {
            "version": __version__,
            "records_loaded": self.records_loaded,
            "records_in_tree": self.tree.metadata.total,
            "combinations": len(self.combinations),
            "flows": {
                name: {
                    "nodes": len(flow.nodes),
                    "edges": len(flow.edges),
                    "records_placed": flow.records_placed,
                    "records_skipped": flow.records_skipped,
                }
                for name, flow in self.flows.items()
            },
            "elapsed_seconds": round(self.elapsed, 3),
        }


def run_pipeline(
    records: Sequence[SurveyRecord],
    *,
    categories: Sequence[CategoryDefinition] = DEFAULT_CATEGORIES,
    ages: Sequence[int] = DEFAULT_AGES,
) -> PipelineResult:
    """Run every builder over *records*.  Pure: nothing is written."""
    t0 = time.perf_counter()
    result = PipelineResult(
        records_loaded=len(records),
        frequencies=aggregate_all(records),
        combinations=aggregate_combinations(records),
        flows={
            name: build_flow(records, stages)
            for name, stages in flow_presets(categories).items()
        },
        matrix=build_matrix(records, ages=ages),
        tree=build_tree(records, categories),
        elapsed=time.perf_counter() - t0,
    )
    logger.info(
        "Pipeline built %d frequency tables, %d combinations, %d flows from %d records",
        len(result.frequencies), len(result.combinations), len(result.flows), len(records),
    )
    return result


def _write_json(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.debug("Wrote %s", path)
    return path


def write_outputs(result: PipelineResult, output_dir: Path) -> list[Path]:
    """Write one JSON file per output shape into *output_dir*."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written = [
        _write_json(
            output_dir / FREQUENCIES_FILE,
            {name: [e.to_dict() for e in entries] for name, entries in result.frequencies.items()},
        ),
        _write_json(output_dir / COMBINATIONS_FILE, [e.to_dict() for e in result.combinations]),
        _write_json(
            output_dir / FLOW_FILE,
            {name: flow.to_dict() for name, flow in result.flows.items()},
        ),
        _write_json(output_dir / MATRIX_FILE, result.matrix.to_dict()),
        _write_json(output_dir / TREE_FILE, result.tree.to_dict()),
        _write_json(output_dir / SUMMARY_FILE, result.summary()),
    ]
    logger.info("Wrote %d output files to %s", len(written), output_dir)
    return written
