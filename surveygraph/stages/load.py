"""Stage 1: read the survey export into typed records.

Headers are mapped onto ``SurveyRecord`` attributes once, here, through
``HEADER_FIELDS``.  Nothing downstream looks fields up by header text.
"""

from __future__ import annotations

import asyncio
import csv
import io
import logging
from pathlib import Path

import httpx

from surveygraph.models import HEADER_FIELDS, OPTIONAL_HEADERS, SurveyRecord

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class LoadError(Exception):
    """The dataset could not be read, or is not a well-formed survey export."""


def _is_url(source: str | Path) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _map_headers(header: list[str], source: str) -> dict[int, str]:
    """Map column index → record attribute, failing if a required header is absent."""
    wanted = {h.lower(): attr for h, attr in HEADER_FIELDS.items()}
    columns: dict[int, str] = {}
    for index, text in enumerate(header):
        attr = wanted.get(text.strip().lower())
        if attr is not None and attr not in columns.values():
            columns[index] = attr

    found = set(columns.values())
    missing = [
        h for h, attr in HEADER_FIELDS.items()
        if attr not in found and h not in OPTIONAL_HEADERS
    ]
    if missing:
        raise LoadError(f"{source}: missing required column(s): {', '.join(missing)}")
    return columns


def parse_records(text: str, *, source: str = "<string>") -> list[SurveyRecord]:
    """Parse CSV text (header row first) into records.

    Raises LoadError for an empty document, a missing required header, or a
    row whose column count differs from the header's.
    """
    reader = csv.reader(io.StringIO(text.lstrip("\ufeff")))
    try:
        header = next(reader)
    except StopIteration:
        raise LoadError(f"{source}: no header row") from None
    except csv.Error as exc:
        raise LoadError(f"{source}: malformed CSV: {exc}") from exc

    columns = _map_headers(header, source)

    records: list[SurveyRecord] = []
    try:
        for row in reader:
            if not any(cell.strip() for cell in row):
                continue
            if len(row) != len(header):
                raise LoadError(
                    f"{source}: line {reader.line_num} has {len(row)} columns, "
                    f"expected {len(header)}"
                )
            records.append(SurveyRecord(**{attr: row[i] for i, attr in columns.items()}))
    except csv.Error as exc:
        raise LoadError(f"{source}: malformed CSV at line {reader.line_num}: {exc}") from exc

    logger.info("Loaded %d records from %s", len(records), source)
    return records


def _read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise LoadError(f"{path}: file not found") from None
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"{path}: cannot read file: {exc}") from exc


def _check_response(resp: httpx.Response, url: str) -> str:
    if not resp.is_success:
        raise LoadError(f"{url}: unexpected status {resp.status_code}")
    return resp.text


def load_records(source: str | Path, *, timeout: float = DEFAULT_TIMEOUT) -> list[SurveyRecord]:
    """Load records from a file path or an http(s) URL."""
    if _is_url(source):
        url = str(source)
        try:
            resp = httpx.get(url, timeout=timeout, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise LoadError(f"{url}: network error: {exc}") from exc
        return parse_records(_check_response(resp, url), source=url)

    path = Path(source)
    return parse_records(_read_file(path), source=str(path))


async def load_records_async(
    source: str | Path,
    *,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[SurveyRecord]:
    """Async variant of ``load_records``; the pipeline's only I/O wait."""
    if _is_url(source):
        url = str(source)
        try:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
                resp = await client.get(url)
        except httpx.HTTPError as exc:
            raise LoadError(f"{url}: network error: {exc}") from exc
        return parse_records(_check_response(resp, url), source=url)

    path = Path(source)
    text = await asyncio.to_thread(_read_file, path)
    return parse_records(text, source=str(path))
