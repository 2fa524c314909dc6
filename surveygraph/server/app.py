"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from fastapi import FastAPI

from surveygraph.config import SurveyGraphSettings, load_settings
from surveygraph.models import SurveyRecord
from surveygraph.server.routes.charts import router as charts_router
from surveygraph.server.routes.health import router as health_router

logger = logging.getLogger(__name__)


def create_app(
    source: str | None = None,
    records: Sequence[SurveyRecord] | None = None,
    settings: SurveyGraphSettings | None = None,
    verbose: bool = False,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        source: Dataset path or URL.  Falls back to ``settings.data_source``.
        records: Pre-loaded records (tests); skips loading entirely.
        settings: Settings override; loaded from the environment if omitted.
        verbose: When True, terminal handler shows DEBUG-level messages.

    Records are loaded once here.  A ``LoadError`` propagates: the server
    does not start on a dataset it cannot read.
    """
    if settings is None:
        settings = load_settings()

    if records is None:
        from surveygraph.logging import setup_logging
        from surveygraph.stages.load import load_records

        setup_logging(output_dir=settings.output_dir, verbose=verbose)
        records = load_records(source or settings.data_source, timeout=settings.http_timeout)

    app = FastAPI(title="surveygraph", docs_url="/api/docs", redoc_url=None)
    app.state.records = list(records)
    app.state.settings = settings

    app.include_router(health_router)
    app.include_router(charts_router)

    logger.info("Serving %d records", len(app.state.records))
    return app
