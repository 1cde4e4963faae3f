"""
Row fetching (gviz endpoint -> list of row dicts).

The gviz endpoint answers with a JSON object wrapped in a JavaScript call:

    /*O_o*/
    google.visualization.Query.setResponse({...});

We cut everything between the first "{" and the last "}" and decode that.
This is a micro-format, not a contract: a body with several objects or
stray braces outside the payload is not supported.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional

import requests

from repositorio.config import SheetConfig
from repositorio.errors import FetchError, NetworkError, ParseError


logger = logging.getLogger(__name__)

Row = Dict[str, Any]


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------


def extract_json_text(text: str) -> str:
    """
    Return the substring from the first "{" to the last "}" (inclusive).
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise ParseError("Response does not contain a JSON object")
    return text[start : end + 1]


def parse_payload(text: str) -> Dict[str, Any]:
    """
    Decode the wrapped gviz response body into the payload dict.
    """
    try:
        payload = json.loads(extract_json_text(text))
    except json.JSONDecodeError as exc:
        raise ParseError(f"Malformed JSON payload: {exc}") from exc

    if not isinstance(payload, dict) or not isinstance(payload.get("table"), dict):
        details = ""
        if isinstance(payload, dict):
            errors = payload.get("errors") or []
            msgs = [str(e.get("detailed_message") or e.get("message") or "") for e in errors if isinstance(e, dict)]
            details = "; ".join(m for m in msgs if m)
        raise ParseError("Payload has no table" + (f": {details}" if details else ""))

    return payload


def _column_keys(cols: List[Any]) -> List[str]:
    keys: List[str] = []
    for idx, col in enumerate(cols):
        key = ""
        if isinstance(col, dict):
            key = str(col.get("label") or col.get("id") or "")
        keys.append(key or f"col_{idx}")
    return keys


def rows_from_payload(payload: Dict[str, Any]) -> List[Row]:
    """
    Convert a gviz table into rows keyed by column label.

    - key: column label, else column id, else "col_<index>"
    - value: the raw cell value ("v"); missing/null cells become ""
    """
    table = payload.get("table") or {}
    keys = _column_keys(list(table.get("cols") or []))

    rows: List[Row] = []
    for raw_row in table.get("rows") or []:
        cells = raw_row.get("c") if isinstance(raw_row, dict) else None
        row: Row = {}
        for idx, cell in enumerate(cells or []):
            key = keys[idx] if idx < len(keys) else f"col_{idx}"
            value = cell.get("v") if isinstance(cell, dict) else None
            row[key] = "" if value is None else value
        rows.append(row)

    return rows


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


def fetch_sheet_rows(sheet: str, config: Optional[SheetConfig] = None) -> List[Row]:
    """
    Fetch one tab of the spreadsheet and return its rows in sheet order.

    Raises:
        NetworkError: non-success HTTP status
        FetchError:   transport failure (DNS, connection reset, timeout, ...)
        ParseError:   body is not a gviz payload

    No retries: a failed fetch is reported to the caller as-is.
    """
    cfg = config or SheetConfig()
    url = cfg.gviz_url()
    params = {"sheet": sheet, "headers": "1"}

    logger.info("FETCH sheet=%s", sheet)
    try:
        resp = requests.get(url, params=params, timeout=cfg.timeout)
    except requests.RequestException as exc:
        raise FetchError(f"Could not fetch sheet {sheet!r}: {exc}") from exc

    if not resp.ok:
        raise NetworkError(resp.status_code, resp.url or url, resp.reason)

    rows = rows_from_payload(parse_payload(resp.text))
    logger.info("FETCHED sheet=%s rows=%d", sheet, len(rows))
    return rows
