"""
In-memory filtering, sorting and grouping.

Everything here is a pure function of its inputs, so the filter loops of the
repository and calendar pages can re-run it on every control change.

Ordering rules:
    projects        ano desc, titulo asc
    calendar events ano desc, semestre asc, data asc
    advisors        nome asc
Years, semesters and dates are plain strings and compare as strings;
titles and names use a locale-aware key (accents and case folded).
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from itertools import groupby
from typing import Iterable, List, Sequence, Tuple

from repositorio.errors import NotFoundError
from repositorio.model import Advisor, CalendarEvent, Project


def locale_key(text: str) -> Tuple[str, str]:
    """
    Sort key approximating a locale-aware comparison for Portuguese text.

    "Álvaro" sorts next to "alvaro"; the raw text breaks ties so the order
    stays total.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return folded, text


def _distinct(values: Iterable[str]) -> List[str]:
    return list({v for v in values if v})


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectFilters:
    """
    Current values of the repository page controls ("" = no constraint).
    """

    term: str = ""
    year: str = ""
    author: str = ""
    advisor: str = ""


@dataclass(frozen=True)
class ProjectFilterOptions:
    years: List[str]
    authors: List[str]
    advisors: List[str]


def project_haystack(project: Project) -> str:
    return " ".join([project.titulo, project.autor, project.orientador, project.palavras_chave]).lower()


def project_matches(project: Project, filters: ProjectFilters) -> bool:
    if filters.year and project.ano != filters.year:
        return False
    if filters.author and project.autor != filters.author:
        return False
    if filters.advisor and project.orientador != filters.advisor:
        return False

    term = filters.term.strip().lower()
    if term and term not in project_haystack(project):
        return False

    return True


def filter_projects(projects: Iterable[Project], filters: ProjectFilters) -> List[Project]:
    return [p for p in projects if project_matches(p, filters)]


def sort_projects(projects: Iterable[Project]) -> List[Project]:
    # two stable passes: secondary key first, then primary
    out = sorted(projects, key=lambda p: locale_key(p.titulo))
    out.sort(key=lambda p: p.ano, reverse=True)
    return out


def group_projects_by_year(projects: Iterable[Project]) -> List[Tuple[str, List[Project]]]:
    """
    Sort projects and group them under their year.

    Projects without ano come last, under the "" group (rendered without heading).
    """
    return [(year, list(items)) for year, items in groupby(sort_projects(projects), key=lambda p: p.ano)]


def project_filter_options(projects: Sequence[Project]) -> ProjectFilterOptions:
    return ProjectFilterOptions(
        years=sorted(_distinct(p.ano for p in projects), reverse=True),
        authors=sorted(_distinct(p.autor for p in projects), key=locale_key),
        advisors=sorted(_distinct(p.orientador for p in projects), key=locale_key),
    )


def find_project(projects: Iterable[Project], project_id: str) -> Project:
    for p in projects:
        if p.id == project_id:
            return p
    raise NotFoundError(project_id)


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CalendarFilters:
    term: str = ""
    year: str = ""
    semester: str = ""
    type: str = ""


@dataclass(frozen=True)
class CalendarFilterOptions:
    years: List[str]
    semesters: List[str]
    types: List[str]


def calendar_event_matches(event: CalendarEvent, filters: CalendarFilters) -> bool:
    if filters.year and event.ano != filters.year:
        return False
    if filters.semester and event.semestre != filters.semester:
        return False
    if filters.type and event.tipo != filters.type:
        return False

    term = filters.term.strip().lower()
    if term:
        hay = " ".join([event.atividade, event.tipo, event.descricao]).lower()
        if term not in hay:
            return False

    return True


def filter_calendar_events(events: Iterable[CalendarEvent], filters: CalendarFilters) -> List[CalendarEvent]:
    return [e for e in events if calendar_event_matches(e, filters)]


def sort_calendar_events(events: Iterable[CalendarEvent]) -> List[CalendarEvent]:
    out = sorted(events, key=lambda e: (e.semestre, e.data))
    out.sort(key=lambda e: e.ano, reverse=True)
    return out


def calendar_group_label(event: CalendarEvent) -> str:
    if event.semestre:
        return f"{event.ano} - {event.semestre}º semestre"
    return event.ano


def group_calendar_events(events: Iterable[CalendarEvent]) -> List[Tuple[str, List[CalendarEvent]]]:
    return [(label, list(items)) for label, items in groupby(sort_calendar_events(events), key=calendar_group_label)]


def calendar_filter_options(events: Sequence[CalendarEvent]) -> CalendarFilterOptions:
    return CalendarFilterOptions(
        years=sorted(_distinct(e.ano for e in events), reverse=True),
        semesters=sorted(_distinct(e.semestre for e in events)),
        types=sorted(_distinct(e.tipo for e in events), key=locale_key),
    )


# ---------------------------------------------------------------------------
# Advisors
# ---------------------------------------------------------------------------


def sort_advisors(advisors: Iterable[Advisor]) -> List[Advisor]:
    return sorted(advisors, key=lambda a: locale_key(a.nome))
