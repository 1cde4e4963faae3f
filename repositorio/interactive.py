from __future__ import annotations

import dataclasses
from typing import Any, List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from repositorio.export_ics import export_calendar_to_ics
from repositorio.pages import (
    AdvisorsController,
    CalendarController,
    PageController,
    PageState,
    ProjectDetailController,
    RepositoryController,
)
from repositorio.query import (
    CalendarFilters,
    ProjectFilters,
    calendar_filter_options,
    calendar_group_label,
    project_filter_options,
)
from repositorio.render import period_label
from repositorio.session import PageSession


console = Console()

MAX_ROWS = 20


def _println(msg: str = "") -> None:
    console.print(msg)


def _prompt(msg: str) -> str:
    return console.input(msg)


def run_interactive(session: PageSession) -> None:
    """
    Interactive menu loop. All flows share one session, so every sheet is
    fetched at most once while the menu is open.
    """
    while True:
        _println("\n=== Repositório (interativo) ===")
        choice = _prompt(
            "\n[1] Buscar trabalhos\n"
            "[2] Ver trabalho (por ID)\n"
            "[3] Calendário\n"
            "[4] Orientadores\n"
            "[5] Exportar calendário (.ics)\n"
            "[0] Sair\n"
            "Escolha: "
        ).strip()

        if choice == "0":
            _println("Até logo.")
            return

        if choice == "1":
            _flow_projects(session)
        elif choice == "2":
            project_id = _prompt("ID do trabalho [vazio = voltar]: ").strip()
            if project_id:
                _flow_project_detail(session, project_id)
        elif choice == "3":
            _flow_calendar(session)
        elif choice == "4":
            _flow_advisors(session)
        elif choice == "5":
            _flow_export(session)
        else:
            _println("Opção inválida.")


def _loaded(controller: PageController, empty_text: str) -> bool:
    """
    Load the page and tell the user when it is not READY.
    """
    controller.load()
    if controller.state is PageState.ERROR:
        _println(f"[red]{escape(controller.message)}[/]")
        return False
    if controller.state is PageState.EMPTY:
        _println(empty_text)
        return False
    return True


def _pick(label: str, options: Sequence[str]) -> Optional[str]:
    """
    Let the user pick one option by number.

    Returns the option, "" to clear the filter, or None on invalid input.
    """
    if not options:
        _println(f"Nenhum valor disponível para {label}.")
        return None

    table = Table(title=label, box=box.SIMPLE)
    table.add_column("#", justify="right")
    table.add_column("Valor")
    for i, value in enumerate(options, start=1):
        table.add_row(str(i), escape(value))
    console.print(table)

    pick = _prompt("Número [vazio = todos]: ").strip()
    if not pick:
        return ""
    if not pick.isdigit() or not (1 <= int(pick) <= len(options)):
        _println("Número inválido.")
        return None
    return options[int(pick) - 1]


def _show_more(rows: List[Any]) -> None:
    if len(rows) > MAX_ROWS:
        _println(f"... e mais {len(rows) - MAX_ROWS} resultado(s)")


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


def _describe_project_filters(f: ProjectFilters) -> str:
    bits = []
    if f.term:
        bits.append(f"texto='{f.term}'")
    if f.year:
        bits.append(f"ano={f.year}")
    if f.author:
        bits.append(f"autor={f.author}")
    if f.advisor:
        bits.append(f"orientador={f.advisor}")
    return ", ".join(bits) if bits else "nenhum"


def _flow_projects(session: PageSession) -> None:
    """
    Filter loop of the repository page: every change re-runs the filter
    over the cached projects.
    """
    controller = RepositoryController(session)
    if not _loaded(controller, "Nenhum trabalho cadastrado."):
        return

    options = project_filter_options(controller.projects)
    filters = ProjectFilters()

    while True:
        projects = controller.apply_filters(filters)

        title = f"Trabalhos ({len(projects)}) – filtros: {_describe_project_filters(filters)}"
        table = Table(title=escape(title), box=box.SIMPLE)
        table.add_column("ID", style="bold cyan")
        table.add_column("Ano", style="yellow")
        table.add_column("Título")
        table.add_column("Autor(a)", style="magenta")
        table.add_column("Orientador(a)", style="green")
        for p in projects[:MAX_ROWS]:
            table.add_row(
                escape(p.id), escape(p.ano), escape(p.titulo or "(Sem título)"), escape(p.autor), escape(p.orientador)
            )
        console.print(table)
        _show_more(projects)

        cmd = _prompt(
            "[t] texto  [a] ano  [u] autor  [o] orientador  [l] limpar  [d] detalhe  [vazio = voltar]: "
        ).strip().lower()

        if not cmd:
            return
        if cmd == "t":
            filters = dataclasses.replace(filters, term=_prompt("Texto: ").strip())
        elif cmd == "a":
            value = _pick("Ano", options.years)
            if value is not None:
                filters = dataclasses.replace(filters, year=value)
        elif cmd == "u":
            value = _pick("Autor(a)", options.authors)
            if value is not None:
                filters = dataclasses.replace(filters, author=value)
        elif cmd == "o":
            value = _pick("Orientador(a)", options.advisors)
            if value is not None:
                filters = dataclasses.replace(filters, advisor=value)
        elif cmd == "l":
            filters = ProjectFilters()
        elif cmd == "d":
            project_id = _prompt("ID do trabalho: ").strip()
            if project_id:
                _flow_project_detail(session, project_id)
        else:
            _println("Opção inválida.")


def _flow_project_detail(session: PageSession, project_id: str) -> None:
    controller = ProjectDetailController(session, project_id)
    controller.load()
    if controller.project is None:
        _println(f"[red]{escape(controller.message)}[/]")
        return

    p = controller.project
    table = Table(title=escape(p.titulo or "Trabalho sem título"), box=box.SIMPLE, show_header=False)
    table.add_column("Campo", style="bold")
    table.add_column("Valor")
    for label, value in (
        ("ID", p.id),
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
            table.add_row(label, escape(value))
    console.print(table)

    _println(escape(p.resumo) if p.resumo else "[dim]Resumo não informado.[/]")


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def _flow_calendar(session: PageSession) -> None:
    controller = CalendarController(session)
    if not _loaded(controller, "Nenhuma atividade cadastrada."):
        return

    options = calendar_filter_options(controller.events)
    filters = CalendarFilters()

    while True:
        events = controller.apply_filters(filters)

        table = Table(title=f"Calendário ({len(events)})", box=box.SIMPLE)
        table.add_column("Período", style="yellow")
        table.add_column("Data", style="bold cyan")
        table.add_column("Tipo", style="green")
        table.add_column("Atividade")
        table.add_column("Descrição")
        for ev in events[:MAX_ROWS]:
            table.add_row(
                escape(calendar_group_label(ev)),
                escape(ev.data),
                escape(ev.tipo),
                escape(ev.atividade),
                escape(ev.descricao),
            )
        console.print(table)
        _show_more(events)

        cmd = _prompt("[t] texto  [a] ano  [s] semestre  [i] tipo  [l] limpar  [vazio = voltar]: ").strip().lower()

        if not cmd:
            return
        if cmd == "t":
            filters = dataclasses.replace(filters, term=_prompt("Texto: ").strip())
        elif cmd == "a":
            value = _pick("Ano", options.years)
            if value is not None:
                filters = dataclasses.replace(filters, year=value)
        elif cmd == "s":
            value = _pick("Semestre", options.semesters)
            if value is not None:
                filters = dataclasses.replace(filters, semester=value)
        elif cmd == "i":
            value = _pick("Tipo", options.types)
            if value is not None:
                filters = dataclasses.replace(filters, type=value)
        elif cmd == "l":
            filters = CalendarFilters()
        else:
            _println("Opção inválida.")


def _flow_export(session: PageSession) -> None:
    controller = CalendarController(session)
    if not _loaded(controller, "Nenhuma atividade para exportar."):
        return

    out_path = _prompt("Arquivo .ics [calendario.ics]: ").strip() or "calendario.ics"
    try:
        n = export_calendar_to_ics(controller.events, out_path)
    except OSError as exc:
        _println(f"[red]Falha ao exportar:[/] {escape(str(exc))}")
        return
    _println(f"Exportadas {n} atividade(s) para: {escape(out_path)}")


# ---------------------------------------------------------------------------
# Advisors
# ---------------------------------------------------------------------------


def _flow_advisors(session: PageSession) -> None:
    controller = AdvisorsController(session)
    if not _loaded(controller, "Nenhum orientador cadastrado."):
        return

    table = Table(title=f"Orientadores ({len(controller.advisors)})", box=box.SIMPLE)
    table.add_column("Nome", style="bold cyan")
    table.add_column("Áreas")
    table.add_column("Disponibilidade", style="green")
    table.add_column("Email", style="magenta")
    for adv in controller.advisors:
        table.add_row(escape(adv.nome), escape(adv.areas), escape(adv.disponibilidade), escape(adv.email))
    console.print(table)
