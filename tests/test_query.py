"""
Unit tests for in-memory filtering and ordering.

Definitions used here:
- exact match on year/author/advisor, "" = no constraint
- search term: case-insensitive substring of titulo/autor/orientador/palavras_chave
- projects: ano desc, titulo asc; events: ano desc, semestre asc, data asc
"""

import unittest

from repositorio.errors import NotFoundError
from repositorio.model import Advisor, CalendarEvent, Project
from repositorio.query import (
    CalendarFilters,
    ProjectFilters,
    calendar_filter_options,
    calendar_group_label,
    filter_calendar_events,
    filter_projects,
    find_project,
    group_calendar_events,
    group_projects_by_year,
    locale_key,
    project_filter_options,
    sort_advisors,
    sort_calendar_events,
    sort_projects,
)


PROJECTS = [
    Project(id="1", ano="2023", titulo="Sistema X", autor="J. Silva", orientador="M. Souza", palavras_chave="web"),
    Project(id="2", ano="2022", titulo="Redes", autor="A. Lima", orientador="M. Souza", palavras_chave="redes"),
    Project(id="3", ano="2023", titulo="alfa", autor="B. Costa", orientador="É. Alves", palavras_chave="IA"),
    Project(id="4", ano="", titulo="Sem ano", autor="C. Dias"),
]


class TestFilterProjects(unittest.TestCase):
    def test_year_filter(self) -> None:
        projects = [Project(id="a", ano="2023"), Project(id="b", ano="2022")]
        self.assertEqual(filter_projects(projects, ProjectFilters(year="2023")), [projects[0]])

    def test_search_is_case_insensitive(self) -> None:
        result = filter_projects(PROJECTS, ProjectFilters(term="silva"))
        self.assertEqual([p.id for p in result], ["1"])

    def test_search_covers_keywords_and_advisor(self) -> None:
        self.assertEqual([p.id for p in filter_projects(PROJECTS, ProjectFilters(term=" REDES "))], ["2"])
        self.assertEqual([p.id for p in filter_projects(PROJECTS, ProjectFilters(term="souza"))], ["1", "2"])

    def test_criteria_are_and_combined(self) -> None:
        f = ProjectFilters(advisor="M. Souza", year="2022")
        self.assertEqual([p.id for p in filter_projects(PROJECTS, f)], ["2"])

    def test_empty_filters_keep_everything(self) -> None:
        self.assertEqual(filter_projects(PROJECTS, ProjectFilters()), PROJECTS)

    def test_adding_constraint_never_grows_result(self) -> None:
        steps = [
            ProjectFilters(),
            ProjectFilters(advisor="M. Souza"),
            ProjectFilters(advisor="M. Souza", term="s"),
            ProjectFilters(advisor="M. Souza", term="s", year="2023"),
            ProjectFilters(advisor="M. Souza", term="s", year="2023", author="nobody"),
        ]
        sizes = [len(filter_projects(PROJECTS, f)) for f in steps]
        self.assertEqual(sizes, sorted(sizes, reverse=True))
        self.assertEqual(sizes[-1], 0)


class TestSortProjects(unittest.TestCase):
    def test_year_desc_then_title_asc(self) -> None:
        self.assertEqual([p.id for p in sort_projects(PROJECTS)], ["3", "1", "2", "4"])

    def test_sorting_twice_is_identical(self) -> None:
        once = sort_projects(reversed(PROJECTS))
        self.assertEqual(sort_projects(once), once)

    def test_group_by_year(self) -> None:
        groups = group_projects_by_year(PROJECTS)
        self.assertEqual([year for year, _ in groups], ["2023", "2022", ""])
        self.assertEqual([p.id for p in groups[0][1]], ["3", "1"])

    def test_filter_options(self) -> None:
        options = project_filter_options(PROJECTS)
        self.assertEqual(options.years, ["2023", "2022"])
        self.assertEqual(options.advisors, ["É. Alves", "M. Souza"])
        self.assertEqual(options.authors, ["A. Lima", "B. Costa", "C. Dias", "J. Silva"])

    def test_find_project(self) -> None:
        self.assertEqual(find_project(PROJECTS, "2").titulo, "Redes")
        with self.assertRaises(NotFoundError):
            find_project(PROJECTS, "99")


EVENTS = [
    CalendarEvent(ano="2023", semestre="2", data="2023-09-01", tipo="Prazo", atividade="Entrega final"),
    CalendarEvent(ano="2024", semestre="2", data="2024-08-10", tipo="Defesa", atividade="Bancas"),
    CalendarEvent(ano="2024", semestre="1", data="2024-05-20", tipo="Prazo", atividade="Entrega parcial"),
    CalendarEvent(ano="2024", semestre="1", data="2024-03-01", tipo="Aula", atividade="Início", descricao="Aula inaugural"),
]


class TestCalendarQueries(unittest.TestCase):
    def test_sort_year_desc_semester_asc_date_asc(self) -> None:
        ordered = sort_calendar_events(EVENTS)
        self.assertEqual([e.data for e in ordered], ["2024-03-01", "2024-05-20", "2024-08-10", "2023-09-01"])

    def test_group_labels(self) -> None:
        labels = [label for label, _ in group_calendar_events(EVENTS)]
        self.assertEqual(labels, ["2024 - 1º semestre", "2024 - 2º semestre", "2023 - 2º semestre"])
        self.assertEqual(calendar_group_label(CalendarEvent(ano="2025", data="x")), "2025")

    def test_filters(self) -> None:
        self.assertEqual(len(filter_calendar_events(EVENTS, CalendarFilters(type="Prazo"))), 2)
        self.assertEqual(len(filter_calendar_events(EVENTS, CalendarFilters(type="Prazo", year="2024"))), 1)
        self.assertEqual(len(filter_calendar_events(EVENTS, CalendarFilters(term="inaugural"))), 1)
        self.assertEqual(len(filter_calendar_events(EVENTS, CalendarFilters(semester="1"))), 2)

    def test_options(self) -> None:
        options = calendar_filter_options(EVENTS)
        self.assertEqual(options.years, ["2024", "2023"])
        self.assertEqual(options.semesters, ["1", "2"])
        self.assertEqual(options.types, ["Aula", "Defesa", "Prazo"])


class TestSortAdvisors(unittest.TestCase):
    def test_locale_aware_name_order(self) -> None:
        advisors = [Advisor(nome="Zélia"), Advisor(nome="álvaro"), Advisor(nome="Bruno"), Advisor(nome="Álvaro")]
        names = [a.nome for a in sort_advisors(advisors)]
        self.assertEqual(names, ["Álvaro", "álvaro", "Bruno", "Zélia"])

    def test_locale_key_is_total(self) -> None:
        self.assertNotEqual(locale_key("Ana"), locale_key("ana"))
        self.assertEqual(locale_key("Ána")[0], "ana")


if __name__ == "__main__":
    unittest.main()
