"""
CLI (Command Line Interface).

Terminal access to the same page controllers the site uses, e.g.:

    repositorio projects --search "redes" --year 2023
    repositorio project 42
    repositorio calendar --semester 1
    repositorio advisors
    repositorio render repository --out repositorio.html
    repositorio render --template site/projeto.html --id 42 --out projeto.html
    repositorio export-calendar calendario.ics
    repositorio interactive

Note:
- The interactive UI lives in repositorio/interactive.py
- This CLI prints plain text; logs go to stderr through rich
- One invocation = one page session: each sheet is fetched at most once
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
from pathlib import Path
from urllib.parse import urlencode

from rich.console import Console
from rich.logging import RichHandler

from repositorio.config import SheetConfig
from repositorio.export_ics import export_calendar_to_ics
from repositorio.pages import (
    AdvisorsController,
    CalendarController,
    PageController,
    PageState,
    ProjectDetailController,
    RepositoryController,
    render_page,
)
from repositorio.query import CalendarFilters, ProjectFilters, group_calendar_events
from repositorio.render import ADVISORS_PAGE, CALENDAR_PAGE, PROJECT_DETAIL_PAGE, REPOSITORY_PAGE, period_label
from repositorio.session import PageSession


PAGE_CHOICES = {
    "repository": REPOSITORY_PAGE,
    "project": PROJECT_DETAIL_PAGE,
    "calendar": CALENDAR_PAGE,
    "advisors": ADVISORS_PAGE,
}


def _configure_logging(verbose: int) -> None:
    """
    -v -> INFO, -vv -> DEBUG, default WARNING. Logs go to stderr.
    """
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _build_session(args: argparse.Namespace) -> PageSession:
    config = SheetConfig.from_env()
    if args.spreadsheet_id:
        config = dataclasses.replace(config, spreadsheet_id=args.spreadsheet_id.strip())
    if args.timeout is not None:
        config = dataclasses.replace(config, timeout=args.timeout)
    return PageSession(config=config)


def _report_not_ready(controller: PageController, empty_text: str) -> int | None:
    """
    Print the outcome of a page that is not READY and return its exit code;
    None when the page is READY.
    """
    if controller.state is PageState.ERROR:
        print(controller.message)
        return 1
    if controller.state is PageState.EMPTY:
        print(empty_text)
        return 0
    return None


def _cmd_projects(args: argparse.Namespace, session: PageSession) -> int:
    """
    List projects (year desc, title asc) matching the given filters.
    """
    controller = RepositoryController(session)
    controller.load()
    code = _report_not_ready(controller, "Nenhum trabalho encontrado.")
    if code is not None:
        return code

    filters = ProjectFilters(
        term=args.search or "",
        year=(args.year or "").strip(),
        author=(args.author or "").strip(),
        advisor=(args.advisor or "").strip(),
    )
    projects = controller.apply_filters(filters)
    if not projects:
        print("Nenhum trabalho encontrado.")
        return 0

    for p in projects:
        title = p.titulo or "(Sem título)"
        bits = [p.id, p.ano or "-", title]
        if p.autor:
            bits.append(p.autor)
        print(" | ".join(bits))

    print(f"{len(projects)} trabalho(s)")
    return 0


def _cmd_project(args: argparse.Namespace, session: PageSession) -> int:
    """
    Print the detail of one project.
    """
    controller = ProjectDetailController(session, args.project_id)
    controller.load()
    if controller.state is not PageState.READY or controller.project is None:
        print(controller.message)
        return 1

    p = controller.project
    print(p.titulo or "Trabalho sem título")
    for label, value in (
        ("Autor(a)", p.autor),
        ("Orientador(a)", p.orientador),
        ("Coorientador(a)", p.coorientador),
        ("Banca", p.banca),
        ("Curso", p.curso),
        ("Período", period_label(p.ano, p.semestre)),
        ("Data da defesa", p.data_defesa),
        ("Licença", p.licenca),
        ("Palavras-chave", p.palavras_chave),
        ("PDF", p.link_pdf),
        ("Outros materiais", p.link_outros),
    ):
        if value:
            print(f"{label}: {value}")

    if p.resumo:
        print()
        print(p.resumo)
    return 0


def _calendar_filters(args: argparse.Namespace) -> CalendarFilters:
    return CalendarFilters(
        term=args.search or "",
        year=(args.year or "").strip(),
        semester=(args.semester or "").strip(),
        type=(args.type or "").strip(),
    )


def _cmd_calendar(args: argparse.Namespace, session: PageSession) -> int:
    """
    Print calendar events grouped by year/semester.
    """
    controller = CalendarController(session)
    controller.load()
    code = _report_not_ready(controller, "Nenhuma atividade encontrada.")
    if code is not None:
        return code

    events = controller.apply_filters(_calendar_filters(args))
    if not events:
        print("Nenhuma atividade encontrada.")
        return 0

    for label, items in group_calendar_events(events):
        print(f"== {label}")
        for ev in items:
            bits = [ev.data, ev.tipo, ev.atividade, ev.descricao]
            print("  " + " | ".join(b for b in bits if b))
    return 0


def _cmd_advisors(args: argparse.Namespace, session: PageSession) -> int:
    """
    Print advisors sorted by name.
    """
    controller = AdvisorsController(session)
    controller.load()
    code = _report_not_ready(controller, "Nenhum orientador cadastrado.")
    if code is not None:
        return code

    for adv in controller.advisors:
        bits = [adv.nome]
        if adv.email:
            bits.append(adv.email)
        if adv.areas:
            bits.append(adv.areas)
        if adv.disponibilidade:
            bits.append(f"Disponibilidade: {adv.disponibilidade}")
        print(" | ".join(bits))
    return 0


def _cmd_render(args: argparse.Namespace, session: PageSession) -> int:
    """
    Render one page (site template or built-in skeleton) to HTML.
    """
    template = None
    if args.template:
        try:
            template = Path(args.template).read_text(encoding="utf-8")
        except OSError as exc:
            print(f"Could not read template: {exc}")
            return 1

    if template is None and not args.page:
        print("Please provide a page name or --template.")
        return 1

    query = urlencode({"id": args.id}) if args.id else ""
    try:
        controller = render_page(
            session,
            page_id=PAGE_CHOICES[args.page] if args.page else None,
            template=template,
            query=query,
        )
    except ValueError as exc:
        print(str(exc))
        return 1

    html = controller.html()
    out_path = (args.out or "").strip()
    if out_path:
        out = Path(out_path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(html, encoding="utf-8")
        print(f"{controller.page_id}: {controller.state.value} -> {out}")
    else:
        print(html)

    return 1 if controller.state is PageState.ERROR else 0


def _cmd_export_calendar(args: argparse.Namespace, session: PageSession) -> int:
    """
    Export (filtered) calendar events into an iCalendar (.ics) file.
    """
    out_path = (args.out or "").strip()
    if not out_path:
        print("Please provide output .ics path.")
        return 1

    controller = CalendarController(session)
    controller.load()
    code = _report_not_ready(controller, "Nenhuma atividade para exportar.")
    if code is not None:
        return code

    events = controller.apply_filters(_calendar_filters(args))
    if not events:
        print("Nenhuma atividade para exportar.")
        return 0

    n = export_calendar_to_ics(events, out_path)
    print(f"Exported {n} events to: {out_path}")
    return 0


def _add_calendar_filter_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--search", "-q", type=str, default="", help="Text in activity, type or description")
    p.add_argument("--year", type=str, default="", help="Exact year (e.g. 2024)")
    p.add_argument("--semester", type=str, default="", help="Exact semester (e.g. 1)")
    p.add_argument("--type", type=str, default="", help="Exact event type")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="repositorio", description="Repositório de trabalhos acadêmicos")
    parser.add_argument("--spreadsheet-id", type=str, default="", help="Google Sheets id (overrides env/default)")
    parser.add_argument("--timeout", type=float, default=None, help="HTTP timeout in seconds (default: none)")
    parser.add_argument("--verbose", "-v", action="count", default=0, help="More logging (-v, -vv)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_projects = sub.add_parser("projects", help="List and filter projects")
    p_projects.add_argument("--search", "-q", type=str, default="", help="Text in title, author, advisor or keywords")
    p_projects.add_argument("--year", type=str, default="", help="Exact year (e.g. 2023)")
    p_projects.add_argument("--author", type=str, default="", help="Exact author name")
    p_projects.add_argument("--advisor", type=str, default="", help="Exact advisor name")

    p_project = sub.add_parser("project", help="Show one project")
    p_project.add_argument("project_id", type=str, help="Project ID (column ID of the sheet)")

    p_calendar = sub.add_parser("calendar", help="Show the academic calendar")
    _add_calendar_filter_args(p_calendar)

    sub.add_parser("advisors", help="List advisors")

    p_render = sub.add_parser("render", help="Render a page to HTML")
    p_render.add_argument("page", nargs="?", choices=sorted(PAGE_CHOICES), help="Page (ignored with --template)")
    p_render.add_argument("--template", type=str, default="", help="Site HTML page to fill in")
    p_render.add_argument("--id", type=str, default="", help="Project id for the detail page")
    p_render.add_argument("--out", "-o", type=str, default="", help="Output file (default: stdout)")

    p_export = sub.add_parser("export-calendar", help="Export calendar events to .ics")
    p_export.add_argument("out", type=str, help="Output file path (e.g. calendario.ics)")
    _add_calendar_filter_args(p_export)

    sub.add_parser("interactive", help="Interactive menu mode")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)
    try:
        session = _build_session(args)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command == "projects":
        raise SystemExit(_cmd_projects(args, session))
    if args.command == "project":
        raise SystemExit(_cmd_project(args, session))
    if args.command == "calendar":
        raise SystemExit(_cmd_calendar(args, session))
    if args.command == "advisors":
        raise SystemExit(_cmd_advisors(args, session))
    if args.command == "render":
        raise SystemExit(_cmd_render(args, session))
    if args.command == "export-calendar":
        raise SystemExit(_cmd_export_calendar(args, session))

    if args.command == "interactive":
        from repositorio.interactive import run_interactive

        run_interactive(session)
        raise SystemExit(0)

    raise SystemExit(2)
