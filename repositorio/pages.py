"""
Page controllers.

One controller per page of the site. Each one owns a BeautifulSoup document
(a site template or the built-in skeleton) and moves through:

    LOADING -> ERROR | EMPTY | READY

`load()` runs once; there is no way back to LOADING. Whatever goes wrong while
loading (network, payload, missing template element...) ends in ERROR with
the page's fixed message; the exception itself only goes to the log.

The repository and calendar controllers also have a filter loop: while READY,
`apply_filters()` recomputes the visible subset and re-renders the list only.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Type
from urllib.parse import parse_qs

from bs4 import BeautifulSoup, Tag

from repositorio.errors import NotFoundError
from repositorio.model import Advisor, CalendarEvent, Project
from repositorio.query import (
    CalendarFilters,
    ProjectFilters,
    calendar_filter_options,
    filter_calendar_events,
    filter_projects,
    find_project,
    project_filter_options,
    sort_advisors,
    sort_calendar_events,
    sort_projects,
)
from repositorio.render import (
    ADVISORS_PAGE,
    CALENDAR_PAGE,
    PROJECT_DETAIL_PAGE,
    REPOSITORY_PAGE,
    by_id,
    fill_project_detail,
    hide,
    page_skeleton,
    populate_select,
    render_advisors_list,
    render_calendar,
    render_project_list,
    set_control_value,
    show,
)
from repositorio.session import PageSession, load_advisors, load_calendar_events, load_projects


logger = logging.getLogger(__name__)


class PageState(str, Enum):
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


class PageController:
    """
    Shared state machine; subclasses implement `_load()`.
    """

    page_id = ""
    prefix = ""
    error_message = ""

    def __init__(self, session: PageSession, document: Optional[BeautifulSoup] = None) -> None:
        self.session = session
        self.document = document if document is not None else page_skeleton(self.page_id)
        self.state = PageState.LOADING
        self.message = ""

    @classmethod
    def for_request(cls, session: PageSession, document: Optional[BeautifulSoup] = None, query: str = "") -> "PageController":
        return cls(session, document)

    def load(self) -> PageState:
        if self.state is not PageState.LOADING:
            return self.state

        try:
            self.state = self._load()
        except Exception:
            logger.exception("Failed to load %s", self.page_id)
            self.state = self._fail(self.error_message)

        return self.state

    def html(self) -> str:
        return str(self.document)

    # -- subclass API -------------------------------------------------------

    def _load(self) -> PageState:
        raise NotImplementedError

    def _panel(self, suffix: str) -> Tag:
        return by_id(self.document, f"{self.prefix}-{suffix}")

    def _control(self, element_id: str) -> Optional[Tag]:
        # filter controls are optional in site templates
        return self.document.find(id=element_id)

    def _finish_loading(self) -> None:
        hide(self._panel("loading"))

    def _show_empty(self) -> PageState:
        show(self._panel("empty"))
        return PageState.EMPTY

    def _fail(self, message: str) -> PageState:
        self.message = message

        loading = self.document.find(id=f"{self.prefix}-loading")
        if loading is not None:
            hide(loading)

        error = self.document.find(id=f"{self.prefix}-error")
        if error is not None:
            error.string = message
            show(error)

        return PageState.ERROR

    def _require_ready(self) -> None:
        if self.state is not PageState.READY:
            raise RuntimeError(f"{self.page_id} is not ready (state={self.state.value})")


# ---------------------------------------------------------------------------
# Repository listing
# ---------------------------------------------------------------------------


class RepositoryController(PageController):
    page_id = REPOSITORY_PAGE
    prefix = "repository"
    error_message = (
        "Ocorreu um erro ao carregar o repositório. Verifique a configuração da planilha e tente novamente."
    )

    def __init__(self, session: PageSession, document: Optional[BeautifulSoup] = None) -> None:
        super().__init__(session, document)
        self.projects: List[Project] = []
        self.filters = ProjectFilters()

    def _load(self) -> PageState:
        projects = load_projects(self.session)
        self._finish_loading()

        if not projects:
            return self._show_empty()

        self.projects = projects
        options = project_filter_options(projects)
        for element_id, values in (
            ("year-filter", options.years),
            ("author-filter", options.authors),
            ("advisor-filter", options.advisors),
        ):
            select = self._control(element_id)
            if select is not None:
                populate_select(self.document, select, values)

        render_project_list(self.document, self._panel("results"), projects)
        return PageState.READY

    def apply_filters(self, filters: ProjectFilters) -> List[Project]:
        """
        Re-render the list for the given control values and return the
        visible projects in display order.
        """
        self._require_ready()
        self.filters = filters

        filtered = filter_projects(self.projects, filters)

        empty = self._panel("empty")
        if filtered:
            hide(empty)
        else:
            show(empty)

        for element_id, value in (
            ("search-input", filters.term),
            ("year-filter", filters.year),
            ("author-filter", filters.author),
            ("advisor-filter", filters.advisor),
        ):
            control = self._control(element_id)
            if control is not None:
                set_control_value(control, value)

        render_project_list(self.document, self._panel("results"), filtered)
        return sort_projects(filtered)


# ---------------------------------------------------------------------------
# Project detail
# ---------------------------------------------------------------------------


class ProjectDetailController(PageController):
    page_id = PROJECT_DETAIL_PAGE
    prefix = "project"
    error_message = (
        "Ocorreu um erro ao carregar os dados do trabalho. Verifique a configuração da planilha e tente novamente."
    )
    missing_id_message = (
        "Nenhum identificador de trabalho foi informado. Volte ao repositório e selecione um trabalho."
    )
    not_found_message = (
        "Não foi possível encontrar este trabalho. Verifique se o link está correto ou volte ao repositório."
    )

    def __init__(
        self, session: PageSession, project_id: str = "", document: Optional[BeautifulSoup] = None
    ) -> None:
        super().__init__(session, document)
        self.project_id = (project_id or "").strip()
        self.project: Optional[Project] = None

    @classmethod
    def for_request(cls, session: PageSession, document: Optional[BeautifulSoup] = None, query: str = "") -> "PageController":
        """
        Read the `id` parameter from a query string ("?id=42" or "id=42").
        """
        params = parse_qs(query.lstrip("?"))
        project_id = params.get("id", [""])[0]
        return cls(session, project_id, document)

    def _load(self) -> PageState:
        if not self.project_id:
            return self._fail(self.missing_id_message)

        projects = load_projects(self.session)
        try:
            project = find_project(projects, self.project_id)
        except NotFoundError as exc:
            logger.info("%s", exc)
            return self._fail(self.not_found_message)

        self._finish_loading()
        fill_project_detail(self.document, project)
        show(self._panel("content"))
        self.project = project
        return PageState.READY


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


class CalendarController(PageController):
    page_id = CALENDAR_PAGE
    prefix = "calendar"
    error_message = "Ocorreu um erro ao carregar o calendário. Verifique a configuração da planilha e tente novamente."

    def __init__(self, session: PageSession, document: Optional[BeautifulSoup] = None) -> None:
        super().__init__(session, document)
        self.events: List[CalendarEvent] = []
        self.filters = CalendarFilters()

    def _load(self) -> PageState:
        events = load_calendar_events(self.session)
        self._finish_loading()

        if not events:
            return self._show_empty()

        self.events = events
        options = calendar_filter_options(events)
        for element_id, values in (
            ("calendar-year-filter", options.years),
            ("calendar-semester-filter", options.semesters),
            ("calendar-type-filter", options.types),
        ):
            select = self._control(element_id)
            if select is not None:
                populate_select(self.document, select, values)

        render_calendar(self.document, self._panel("table-body"), events)
        return PageState.READY

    def apply_filters(self, filters: CalendarFilters) -> List[CalendarEvent]:
        self._require_ready()
        self.filters = filters

        filtered = filter_calendar_events(self.events, filters)

        empty = self._panel("empty")
        if filtered:
            hide(empty)
        else:
            show(empty)

        for element_id, value in (
            ("calendar-search", filters.term),
            ("calendar-year-filter", filters.year),
            ("calendar-semester-filter", filters.semester),
            ("calendar-type-filter", filters.type),
        ):
            control = self._control(element_id)
            if control is not None:
                set_control_value(control, value)

        render_calendar(self.document, self._panel("table-body"), filtered)
        return sort_calendar_events(filtered)


# ---------------------------------------------------------------------------
# Advisors
# ---------------------------------------------------------------------------


class AdvisorsController(PageController):
    page_id = ADVISORS_PAGE
    prefix = "advisors"
    error_message = (
        "Ocorreu um erro ao carregar a lista de orientadores. Verifique a configuração da planilha e tente novamente."
    )

    def __init__(self, session: PageSession, document: Optional[BeautifulSoup] = None) -> None:
        super().__init__(session, document)
        self.advisors: List[Advisor] = []

    def _load(self) -> PageState:
        advisors = load_advisors(self.session)
        self._finish_loading()

        if not advisors:
            return self._show_empty()

        self.advisors = sort_advisors(advisors)
        render_advisors_list(self.document, self._panel("list"), advisors)
        return PageState.READY


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

# checked in this order; a document is expected to carry exactly one root id
CONTROLLERS: List[Type[PageController]] = [
    RepositoryController,
    ProjectDetailController,
    CalendarController,
    AdvisorsController,
]


def controller_for_document(
    document: BeautifulSoup, session: PageSession, query: str = ""
) -> Optional[PageController]:
    """
    Pick the controller whose root element id is present in the document.
    """
    for cls in CONTROLLERS:
        if document.find(id=cls.page_id) is not None:
            return cls.for_request(session, document, query)
    return None


def render_page(
    session: PageSession,
    page_id: Optional[str] = None,
    template: Optional[str] = None,
    query: str = "",
) -> PageController:
    """
    Load one page end to end and return its controller (state + document).

    Either `template` (HTML text of a site page) or `page_id` must be given;
    without a template the built-in skeleton of `page_id` is used.
    """
    if template is not None:
        document = BeautifulSoup(template, "html.parser")
    elif page_id is not None:
        document = page_skeleton(page_id)
    else:
        raise ValueError("render_page needs a page_id or a template")

    controller = controller_for_document(document, session, query)
    if controller is None:
        raise ValueError("Document has no known page root element")

    controller.load()
    return controller
