"""
Per-page-session state.

A PageSession holds the three collections of one page load. Each collection
starts as None (not loaded yet) and is fetched at most once; later calls
return the cached list, even when it is empty.

Design rationale:
- the session is passed explicitly to controllers (no module-level caches)
- the fetcher is injectable, so tests and the CLI can swap the transport
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from repositorio.config import SheetConfig
from repositorio.fetch import fetch_sheet_rows
from repositorio.model import Advisor, CalendarEvent, Project
from repositorio.normalize import normalize_advisors, normalize_calendar_events, normalize_projects


logger = logging.getLogger(__name__)

Fetcher = Callable[[str, SheetConfig], List[Dict[str, Any]]]


@dataclass
class PageSession:
    config: SheetConfig = field(default_factory=SheetConfig)
    fetcher: Fetcher = fetch_sheet_rows
    projects: Optional[List[Project]] = None
    calendar_events: Optional[List[CalendarEvent]] = None
    advisors: Optional[List[Advisor]] = None

    def rows(self, sheet: str) -> List[Dict[str, Any]]:
        return self.fetcher(sheet, self.config)


def load_projects(session: PageSession) -> List[Project]:
    if session.projects is not None:
        logger.debug("cache hit: projects (%d)", len(session.projects))
        return session.projects

    session.projects = normalize_projects(session.rows(session.config.sheets.projetos))
    return session.projects


def load_calendar_events(session: PageSession) -> List[CalendarEvent]:
    if session.calendar_events is not None:
        logger.debug("cache hit: calendar events (%d)", len(session.calendar_events))
        return session.calendar_events

    session.calendar_events = normalize_calendar_events(session.rows(session.config.sheets.calendario))
    return session.calendar_events


def load_advisors(session: PageSession) -> List[Advisor]:
    if session.advisors is not None:
        logger.debug("cache hit: advisors (%d)", len(session.advisors))
        return session.advisors

    session.advisors = normalize_advisors(session.rows(session.config.sheets.orientadores))
    return session.advisors
