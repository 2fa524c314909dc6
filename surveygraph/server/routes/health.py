"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request

from surveygraph import __version__

router = APIRouter(prefix="/api")


@router.get("/health")
def health(request: Request) -> dict[str, object]:
    """Return server status, version and the number of loaded records."""
    return {
        "status": "ok",
        "version": __version__,
        "records": len(request.app.state.records),
    }
