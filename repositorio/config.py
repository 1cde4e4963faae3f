"""
Spreadsheet configuration.

How to point the site at another spreadsheet:
1. In Google Sheets, share the file as "anyone with the link can view".
2. Copy the id from the URL: https://docs.google.com/spreadsheets/d/<ID>/edit
3. Set REPOSITORIO_SPREADSHEET_ID (or pass --spreadsheet-id on the CLI).

Tab names can be overridden the same way (REPOSITORIO_SHEET_*).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

SPREADSHEET_ID = "1WREleFc-FAj-4w1RiWwNEsgB_ZNbmjShe4377HoXx5g"
BASE_URL = "https://docs.google.com/spreadsheets/d"

SHEET_PROJETOS = "Projetos"
SHEET_CALENDARIO = "Calendario"
SHEET_ORIENTADORES = "Orientadores"


@dataclass(frozen=True)
class SheetNames:
    projetos: str = SHEET_PROJETOS
    calendario: str = SHEET_CALENDARIO
    orientadores: str = SHEET_ORIENTADORES


@dataclass(frozen=True)
class SheetConfig:
    """
    Where the rows come from.

    timeout=None means no timeout of our own: requests waits as long as
    the transport does.
    """

    spreadsheet_id: str = SPREADSHEET_ID
    sheets: SheetNames = field(default_factory=SheetNames)
    base_url: str = BASE_URL
    timeout: Optional[float] = None

    def gviz_url(self) -> str:
        """
        Return the gviz query endpoint of the spreadsheet (without query string).
        """
        return f"{self.base_url.rstrip('/')}/{self.spreadsheet_id}/gviz/tq"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SheetConfig":
        """
        Build a config from REPOSITORIO_* environment variables, falling back
        to the module defaults for anything unset or blank.
        """
        env = os.environ if environ is None else environ

        def pick(name: str, default: str) -> str:
            value = (env.get(name) or "").strip()
            return value or default

        timeout_raw = (env.get("REPOSITORIO_TIMEOUT") or "").strip()
        timeout: Optional[float] = None
        if timeout_raw:
            try:
                timeout = float(timeout_raw)
            except ValueError:
                raise ValueError(f"Invalid REPOSITORIO_TIMEOUT: {timeout_raw!r}") from None

        return cls(
            spreadsheet_id=pick("REPOSITORIO_SPREADSHEET_ID", SPREADSHEET_ID),
            sheets=SheetNames(
                projetos=pick("REPOSITORIO_SHEET_PROJETOS", SHEET_PROJETOS),
                calendario=pick("REPOSITORIO_SHEET_CALENDARIO", SHEET_CALENDARIO),
                orientadores=pick("REPOSITORIO_SHEET_ORIENTADORES", SHEET_ORIENTADORES),
            ),
            base_url=pick("REPOSITORIO_BASE_URL", BASE_URL),
            timeout=timeout,
        )
