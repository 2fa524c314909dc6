"""Command-line interface for surveygraph."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from surveygraph import __version__
from surveygraph.config import SurveyGraphSettings, load_settings
from surveygraph.models import SurveyRecord

app = typer.Typer(
    name="surveygraph",
    help="Aggregate survey responses into chart-ready frequency tables, flows, matrices and trees.",
    no_args_is_help=True,
)
console = Console(width=min(100, Console().width))

SourceArg = Annotated[
    str | None,
    typer.Argument(help="Survey CSV path or http(s) URL. [default: SURVEYGRAPH_DATA_SOURCE]"),
]
VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Enable verbose logging.")]


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"surveygraph {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version", "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Aggregate survey responses into chart-ready frequency tables, flows, matrices and trees."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load(
    source: str | None,
    settings: SurveyGraphSettings,
    *,
    verbose: bool = False,
    log_to_file: bool = False,
) -> list[SurveyRecord]:
    """Load records or exit with code 1 on a LoadError."""
    from surveygraph.logging import setup_logging
    from surveygraph.stages.load import LoadError, load_records

    setup_logging(output_dir=settings.output_dir if log_to_file else None, verbose=verbose)
    try:
        return load_records(source or settings.data_source, timeout=settings.http_timeout)
    except LoadError as exc:
        console.print(f"[red]Could not load dataset:[/red] {exc}")
        raise typer.Exit(1) from None


def _pct(value: float) -> str:
    return f"{value:.1f}%"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def run(
    source: SourceArg = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output directory for JSON files. [default: surveygraph-output]"),
    ] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Build every chart structure and write them as JSON."""
    from surveygraph.pipeline import run_pipeline, write_outputs

    settings = load_settings(output_dir=output_dir)
    records = _load(source, settings, verbose=verbose, log_to_file=True)
    result = run_pipeline(records, ages=settings.ages)
    written = write_outputs(result, settings.output_dir)

    console.print(f"\n  [bold]{settings.project_name}[/bold]  [dim]surveygraph v{__version__}[/dim]\n")
    console.print(f" [green]✓[/green] Loaded {result.records_loaded} records")
    console.print(f" [green]✓[/green] {len(result.combinations)} condition combinations")
    for name, flow in result.flows.items():
        console.print(
            f" [green]✓[/green] Flow [bold]{name}[/bold]: {len(flow.nodes)} nodes, "
            f"{len(flow.edges)} links [dim]({flow.records_skipped} skipped)[/dim]"
        )
    console.print(f" [green]✓[/green] Tree: {result.tree.metadata.total} records placed")
    console.print(f"\n  Wrote {len(written)} files to [bold]{settings.output_dir}[/bold]\n")


@app.command()
def frequencies(
    source: SourceArg = None,
    field: Annotated[str, typer.Option("--field", "-f", help="Field to count.")] = "Gender",
    by: Annotated[str | None, typer.Option("--by", "-b", help="Break each value down by this field.")] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show the frequency table for one field."""
    from surveygraph.analysis.categories import aggregate, aggregate_cross_tab
    from surveygraph.models import SurveyField

    try:
        selected = SurveyField.from_name(field)
        secondary = SurveyField.from_name(by) if by else None
    except KeyError as exc:
        console.print(f"[red]{exc.args[0]}[/red]")
        raise typer.Exit(1) from None

    records = _load(source, load_settings(), verbose=verbose)
    entries = aggregate(records, selected)

    table = Table(title=f"Distribution of {selected.value}")
    table.add_column(selected.value)
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")
    if secondary is not None:
        table.add_column(f"By {secondary.value}")
        cross_tab = aggregate_cross_tab(records, selected, secondary)
    for entry in entries:
        row = [entry.label, str(entry.count), _pct(entry.percentage_of_total)]
        if secondary is not None:
            row.append(", ".join(f"{k}: {v}" for k, v in cross_tab.get(entry.value, {}).items()))
        table.add_row(*row)
    console.print(table)


@app.command()
def combinations(source: SourceArg = None, verbose: VerboseOpt = False) -> None:
    """Show condition combinations with their gender breakdown."""
    from surveygraph.analysis.combinations import aggregate_combinations

    records = _load(source, load_settings(), verbose=verbose)
    table = Table(title="Mental Health Condition Combinations")
    table.add_column("Combination")
    table.add_column("Count", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("By gender")
    for entry in aggregate_combinations(records):
        table.add_row(
            entry.value,
            str(entry.count),
            _pct(entry.percentage_of_total),
            ", ".join(f"{k}: {v}" for k, v in entry.breakdown.items()),
        )
    console.print(table)


@app.command()
def flow(
    source: SourceArg = None,
    preset: Annotated[str, typer.Option("--preset", "-p", help="mental-health or academic.")] = "mental-health",
    verbose: VerboseOpt = False,
) -> None:
    """Show the nodes and weighted links of a flow diagram."""
    from surveygraph.analysis.flow import FLOW_PRESETS, build_flow

    stages = FLOW_PRESETS.get(preset)
    if stages is None:
        console.print(f"[red]Unknown preset {preset!r}.[/red] Choose from: {', '.join(FLOW_PRESETS)}")
        raise typer.Exit(1)

    records = _load(source, load_settings(), verbose=verbose)
    graph = build_flow(records, stages)
    labels = {n.id: n.label for n in graph.nodes}

    table = Table(title=" → ".join(graph.stages))
    table.add_column("From")
    table.add_column("To")
    table.add_column("Records", justify="right")
    for edge in graph.edges:
        table.add_row(labels[edge.source_id], labels[edge.target_id], str(edge.weight))
    console.print(table)
    console.print(
        f"  {graph.records_placed} records placed, "
        f"[dim]{graph.records_skipped} skipped (incomplete path)[/dim]"
    )


@app.command()
def matrix(source: SourceArg = None, verbose: VerboseOpt = False) -> None:
    """Show the age × condition co-occurrence matrix."""
    from surveygraph.analysis.adjacency import build_matrix

    settings = load_settings()
    result = build_matrix(_load(source, settings, verbose=verbose), ages=settings.ages)

    table = Table(title="Age × condition")
    table.add_column("")
    for name in result.names:
        table.add_column(name, justify="right")
    for name, row in zip(result.names, result.matrix):
        table.add_row(name, *(str(v) if v else "[dim]·[/dim]" for v in row))
    console.print(table)


@app.command()
def tree(
    source: SourceArg = None,
    category: Annotated[
        str | None,
        typer.Option("--category", "-c", help="Show one course category instead of all."),
    ] = None,
    verbose: VerboseOpt = False,
) -> None:
    """Show the course-category → study-year tree with condition counts."""
    from surveygraph.analysis.hierarchy import build_category_node, build_tree
    from surveygraph.analysis.models import TreeNode
    from surveygraph.models import DEFAULT_CATEGORIES, find_category

    selected = None
    if category and category.lower() != "all":
        try:
            selected = find_category(category)
        except KeyError as exc:
            console.print(f"[red]{exc.args[0]}[/red]")
            raise typer.Exit(1) from None

    records = _load(source, load_settings(), verbose=verbose)
    root = (
        build_category_node(records, selected, DEFAULT_CATEGORIES)
        if selected is not None
        else build_tree(records, DEFAULT_CATEGORIES)
    )

    def _label(node: TreeNode) -> str:
        m = node.metadata
        return (
            f"[bold]{node.name}[/bold] [dim]({m.total} students: "
            f"{m.depression} depression, {m.anxiety} anxiety, {m.panic} panic, "
            f"{m.treatment} treated)[/dim]"
        )

    def _add(branch: Tree, node: TreeNode) -> None:
        for child in node.children:
            _add(branch.add(_label(child)), child)

    rendered = Tree(_label(root))
    _add(rendered, root)
    console.print(rendered)


@app.command()
def serve(
    source: SourceArg = None,
    port: Annotated[int, typer.Option("--port", "-p", help="Port to serve on.")] = 8160,
    verbose: VerboseOpt = False,
) -> None:
    """Serve the chart structures as a JSON API for the dashboard."""
    try:
        import uvicorn
    except ImportError:
        console.print("[red]Server dependencies not installed.[/red]")
        console.print("Install with: [bold]pip install surveygraph[serve][/bold]")
        raise typer.Exit(1) from None

    from surveygraph.server.app import create_app
    from surveygraph.stages.load import LoadError

    try:
        app_instance = create_app(source=source, verbose=verbose)
    except LoadError as exc:
        console.print(f"[red]Could not load dataset:[/red] {exc}")
        raise typer.Exit(1) from None

    console.print(f"\n  API: [bold cyan]http://127.0.0.1:{port}/api/docs[/bold cyan]\n")
    uvicorn.run(
        app_instance,
        host="127.0.0.1",
        port=port,
        log_level="info" if verbose else "warning",
    )
