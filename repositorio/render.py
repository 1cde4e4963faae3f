"""
HTML rendering (records -> BeautifulSoup elements).

Renderers work on a BeautifulSoup document the same way a browser script
works on the DOM: look up containers by id, clear them, append new tags.
That keeps the site templates free to add markup around the ids.

Visibility is the HTML `hidden` attribute. Empty fields are either not
rendered at all (cards) or hidden (detail page).
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence
from urllib.parse import quote

from bs4 import BeautifulSoup, Tag

from repositorio.model import Advisor, CalendarEvent, Project
from repositorio.query import group_calendar_events, group_projects_by_year, sort_advisors


# ---------------------------------------------------------------------------
# Page ids
# ---------------------------------------------------------------------------

REPOSITORY_PAGE = "repository-page"
PROJECT_DETAIL_PAGE = "project-detail-page"
CALENDAR_PAGE = "calendar-page"
ADVISORS_PAGE = "advisors-page"

PAGE_TITLES: Dict[str, str] = {
    REPOSITORY_PAGE: "Repositório de Trabalhos",
    PROJECT_DETAIL_PAGE: "Trabalho",
    CALENDAR_PAGE: "Calendário",
    ADVISORS_PAGE: "Orientadores",
}

DETAIL_HREF = "projeto.html"
DRIVE_THUMBNAIL_URL = "https://drive.google.com/thumbnail?id={file_id}&sz=w1000"
URI_SAFE = "-_.!~*'()"
DEFAULT_ABSTRACT = "Resumo não informado. Entre em contato com a coordenação para mais informações."


# ---------------------------------------------------------------------------
# Element helpers
# ---------------------------------------------------------------------------


def element(doc: BeautifulSoup, name: str, text: Optional[str] = None, cls: Optional[str] = None, **attrs: str) -> Tag:
    """
    Create a tag; `cls` becomes the class attribute, other kwargs are attributes.
    """
    tag = doc.new_tag(name, attrs=attrs)
    if cls:
        tag["class"] = cls
    if text is not None:
        tag.string = text
    return tag


def by_id(doc: BeautifulSoup, element_id: str) -> Tag:
    tag = doc.find(id=element_id)
    if tag is None:
        raise LookupError(f"Element #{element_id} not found in document")
    return tag


def hide(tag: Tag) -> None:
    tag["hidden"] = ""


def show(tag: Tag) -> None:
    tag.attrs.pop("hidden", None)


def is_hidden(tag: Tag) -> bool:
    return tag.has_attr("hidden")


def _external_link(doc: BeautifulSoup, href: str, text: str, cls: Optional[str] = None) -> Tag:
    return element(doc, "a", text, cls, href=href, target="_blank", rel="noopener noreferrer")


def project_detail_href(project_id: str) -> str:
    # URI_SAFE matches JavaScript's encodeURIComponent
    return f"{DETAIL_HREF}?id={quote(project_id, safe=URI_SAFE)}"


def drive_thumbnail_url(url: str) -> str:
    """
    Turn a Google Drive share link (".../file/d/<id>/view") into a direct
    thumbnail URL. Anything else is returned unchanged.
    """
    if "drive.google.com" not in url:
        return url
    m = re.search(r"/d/(.*?)(/|$)", url)
    if not m:
        return url
    return DRIVE_THUMBNAIL_URL.format(file_id=m.group(1))


def period_label(ano: str, semestre: str) -> str:
    return " - ".join(v for v in (ano, semestre) if v)


# ---------------------------------------------------------------------------
# Form controls
# ---------------------------------------------------------------------------


def populate_select(doc: BeautifulSoup, select: Tag, values: Iterable[str]) -> None:
    """
    Append one <option> per value, keeping options already in the template
    (e.g. the "all" placeholder).
    """
    for value in values:
        select.append(element(doc, "option", value, value=value))


def set_control_value(control: Tag, value: str) -> None:
    """
    Reflect a control value in the markup (input value / selected option).
    """
    if control.name == "select":
        for option in control.find_all("option"):
            if option.get("value", option.get_text()) == value:
                option["selected"] = ""
            else:
                option.attrs.pop("selected", None)
        return
    if value:
        control["value"] = value
    else:
        control.attrs.pop("value", None)


# ---------------------------------------------------------------------------
# Repository listing
# ---------------------------------------------------------------------------


def _project_card(doc: BeautifulSoup, project: Project) -> Tag:
    card = element(doc, "article", cls="project-card")

    href = project_detail_href(project.id)
    title_el = element(doc, "h3", cls="project-card-title")
    title_el.append(element(doc, "a", project.titulo or "(Sem título)", "project-title-link", href=href))
    card.append(title_el)

    meta: List[str] = []
    if project.autor:
        meta.append(f"Autor(a): {project.autor}")
    if project.orientador:
        meta.append(f"Orientador(a): {project.orientador}")
    if project.ano or project.semestre:
        meta.append(f"Período: {period_label(project.ano, project.semestre)}")
    card.append(element(doc, "p", " | ".join(meta), "project-card-meta"))

    if project.palavras_chave:
        card.append(element(doc, "p", f"Palavras-chave: {project.palavras_chave}", "project-card-keywords"))

    actions = element(doc, "div", cls="project-card-actions")
    actions.append(element(doc, "a", "Ver detalhes", "project-card-button", href=href))
    if project.link_pdf:
        actions.append(
            _external_link(doc, project.link_pdf, "Baixar PDF", "project-card-button project-card-button-secondary")
        )
    card.append(actions)

    return card


def render_project_list(doc: BeautifulSoup, container: Tag, projects: Sequence[Project]) -> None:
    """
    Replace the container content with project cards grouped under year headings.
    """
    container.clear()
    for year, items in group_projects_by_year(projects):
        if year:
            container.append(element(doc, "h2", year, "repository-year-heading"))
        for project in items:
            container.append(_project_card(doc, project))


# ---------------------------------------------------------------------------
# Project detail
# ---------------------------------------------------------------------------


def _labelled(doc: BeautifulSoup, target: Tag, parts: Sequence[tuple]) -> None:
    """
    Fill target with "<strong>label</strong>value" pairs separated by " | ".
    """
    for idx, (label, value) in enumerate(parts):
        if idx > 0:
            target.append(" | ")
        target.append(element(doc, "strong", label))
        target.append(value)


def fill_project_detail(doc: BeautifulSoup, project: Project) -> None:
    by_id(doc, "project-title").string = project.titulo or "Trabalho sem título"

    author_el = by_id(doc, "project-author")
    advisors_el = by_id(doc, "project-advisors")
    banca_el = by_id(doc, "project-banca")
    extra_el = by_id(doc, "project-extra-meta")
    keywords_el = by_id(doc, "project-keywords")
    image_wrapper = by_id(doc, "project-image-wrapper")
    links_el = by_id(doc, "project-links")

    for tag in (author_el, advisors_el, banca_el, extra_el, keywords_el, image_wrapper, links_el):
        tag.clear()

    if project.autor:
        _labelled(doc, author_el, [("Autor(a): ", project.autor)])
    else:
        hide(author_el)

    advisor_parts = []
    if project.orientador:
        advisor_parts.append(("Orientador(a): ", project.orientador))
    if project.coorientador:
        advisor_parts.append(("Coorientador(a): ", project.coorientador))
    if advisor_parts:
        _labelled(doc, advisors_el, advisor_parts)
    else:
        hide(advisors_el)

    if project.banca:
        _labelled(doc, banca_el, [("Banca: ", project.banca)])
    else:
        hide(banca_el)

    extra: List[str] = []
    if project.curso:
        extra.append(f"Curso: {project.curso}")
    if project.ano or project.semestre:
        extra.append(f"Período: {period_label(project.ano, project.semestre)}")
    if project.data_defesa:
        extra.append(f"Data da defesa: {project.data_defesa}")
    if project.licenca:
        extra.append(f"Licença: {project.licenca}")
    if extra:
        extra_el.string = " | ".join(extra)
    else:
        hide(extra_el)

    if project.palavras_chave:
        keywords_el.string = f"Palavras-chave: {project.palavras_chave}"

    by_id(doc, "project-abstract").string = project.resumo or DEFAULT_ABSTRACT

    if project.imagem:
        image_wrapper.append(
            element(
                doc,
                "img",
                src=drive_thumbnail_url(project.imagem),
                alt=f"Imagem ilustrativa do trabalho: {project.titulo}",
            )
        )

    if project.link_pdf:
        links_el.append(_external_link(doc, project.link_pdf, "Baixar PDF do trabalho", "project-card-button"))
    if project.link_outros:
        links_el.append(
            _external_link(
                doc, project.link_outros, "Outros materiais", "project-card-button project-card-button-secondary"
            )
        )


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def render_calendar(doc: BeautifulSoup, tbody: Tag, events: Sequence[CalendarEvent]) -> None:
    """
    Replace the table body with one group row per "<ano> - <semestre>º semestre"
    followed by the events of that group.
    """
    tbody.clear()
    for label, items in group_calendar_events(events):
        group_row = element(doc, "tr", cls="calendar-group-row")
        group_row.append(element(doc, "td", label, colspan="4"))
        tbody.append(group_row)

        for ev in items:
            row = element(doc, "tr")
            for value in (ev.data, ev.tipo, ev.atividade, ev.descricao):
                row.append(element(doc, "td", value))
            tbody.append(row)


# ---------------------------------------------------------------------------
# Advisors
# ---------------------------------------------------------------------------


def _advisor_card(doc: BeautifulSoup, adv: Advisor) -> Tag:
    card = element(doc, "article", cls="advisor-card", **{"data-advisor-id": adv.id})
    card.append(element(doc, "h3", adv.nome, "advisor-name"))

    if adv.areas:
        card.append(element(doc, "p", f"Áreas de orientação: {adv.areas}", "advisor-areas"))
    if adv.palavras_chave:
        card.append(element(doc, "p", f"Palavras-chave: {adv.palavras_chave}", "advisor-keywords"))

    meta: List[str] = []
    if adv.disponibilidade:
        meta.append(f"Disponibilidade: {adv.disponibilidade}")
    if adv.observacoes:
        meta.append(adv.observacoes)
    if meta:
        card.append(element(doc, "p", " | ".join(meta), "advisor-meta"))

    links = element(doc, "div", cls="advisor-links")
    if adv.lattes:
        links.append(_external_link(doc, adv.lattes, "Currículo Lattes"))
    if adv.email:
        links.append(element(doc, "a", adv.email, href=f"mailto:{adv.email}"))
    if links.contents:
        card.append(links)

    return card


def render_advisors_list(doc: BeautifulSoup, container: Tag, advisors: Sequence[Advisor]) -> None:
    container.clear()
    for adv in sort_advisors(advisors):
        container.append(_advisor_card(doc, adv))


# ---------------------------------------------------------------------------
# Skeletons (used when no site template is given)
# ---------------------------------------------------------------------------


def _status_panels(doc: BeautifulSoup, root: Tag, prefix: str, loading: str, empty: Optional[str]) -> None:
    root.append(element(doc, "p", loading, "status-loading", id=f"{prefix}-loading"))
    error = element(doc, "p", cls="status-error", id=f"{prefix}-error", role="alert")
    hide(error)
    root.append(error)
    if empty is not None:
        empty_el = element(doc, "p", empty, "status-empty", id=f"{prefix}-empty")
        hide(empty_el)
        root.append(empty_el)


def _select(doc: BeautifulSoup, element_id: str, placeholder: str) -> Tag:
    select = element(doc, "select", id=element_id)
    select.append(element(doc, "option", placeholder, value=""))
    return select


def _repository_skeleton(doc: BeautifulSoup, root: Tag) -> None:
    controls = element(doc, "section", cls="repository-filters")
    controls.append(
        element(
            doc,
            "input",
            type="search",
            id="search-input",
            placeholder="Buscar por título, autor, orientador ou palavra-chave",
        )
    )
    controls.append(_select(doc, "year-filter", "Todos os anos"))
    controls.append(_select(doc, "author-filter", "Todos os autores"))
    controls.append(_select(doc, "advisor-filter", "Todos os orientadores"))
    root.append(controls)

    _status_panels(doc, root, "repository", "Carregando trabalhos...", "Nenhum trabalho encontrado.")
    root.append(element(doc, "div", id="repository-results"))


def _project_detail_skeleton(doc: BeautifulSoup, root: Tag) -> None:
    _status_panels(doc, root, "project", "Carregando trabalho...", None)

    content = element(doc, "article", id="project-content")
    hide(content)
    content.append(element(doc, "h1", id="project-title"))
    for element_id in ("project-author", "project-advisors", "project-banca", "project-extra-meta", "project-keywords"):
        content.append(element(doc, "p", id=element_id))
    content.append(element(doc, "div", id="project-image-wrapper"))
    content.append(element(doc, "h2", "Resumo"))
    content.append(element(doc, "p", id="project-abstract"))
    content.append(element(doc, "div", cls="project-links", id="project-links"))
    root.append(content)


def _calendar_skeleton(doc: BeautifulSoup, root: Tag) -> None:
    controls = element(doc, "section", cls="calendar-filters")
    controls.append(element(doc, "input", type="search", id="calendar-search", placeholder="Buscar atividade"))
    controls.append(_select(doc, "calendar-year-filter", "Todos os anos"))
    controls.append(_select(doc, "calendar-semester-filter", "Todos os semestres"))
    controls.append(_select(doc, "calendar-type-filter", "Todos os tipos"))
    root.append(controls)

    _status_panels(doc, root, "calendar", "Carregando calendário...", "Nenhuma atividade encontrada.")

    table = element(doc, "table", cls="calendar-table")
    head_row = element(doc, "tr")
    for label in ("Data", "Tipo", "Atividade", "Descrição"):
        head_row.append(element(doc, "th", label))
    thead = element(doc, "thead")
    thead.append(head_row)
    table.append(thead)
    table.append(element(doc, "tbody", id="calendar-table-body"))
    root.append(table)


def _advisors_skeleton(doc: BeautifulSoup, root: Tag) -> None:
    _status_panels(doc, root, "advisors", "Carregando orientadores...", "Nenhum orientador cadastrado.")
    root.append(element(doc, "div", cls="advisors-list", id="advisors-list"))


_SKELETONS = {
    REPOSITORY_PAGE: _repository_skeleton,
    PROJECT_DETAIL_PAGE: _project_detail_skeleton,
    CALENDAR_PAGE: _calendar_skeleton,
    ADVISORS_PAGE: _advisors_skeleton,
}


def page_skeleton(page_id: str) -> BeautifulSoup:
    """
    Build a minimal standalone document for one page, with every element id
    its controller expects.
    """
    if page_id not in _SKELETONS:
        raise ValueError(f"Unknown page: {page_id!r}")

    doc = BeautifulSoup(
        '<!DOCTYPE html><html lang="pt-BR"><head><meta charset="utf-8"/><title></title></head><body></body></html>',
        "html.parser",
    )
    doc.title.string = PAGE_TITLES[page_id]

    root = element(doc, "main", id=page_id)
    doc.body.append(root)
    _SKELETONS[page_id](doc, root)
    return doc
