"""
Tests for HTML rendering of cards, detail fields and links.
"""

import unittest

from repositorio.model import Advisor, Project
from repositorio.render import (
    DEFAULT_ABSTRACT,
    drive_thumbnail_url,
    fill_project_detail,
    is_hidden,
    page_skeleton,
    project_detail_href,
    render_advisors_list,
    render_project_list,
)


class TestLinks(unittest.TestCase):
    def test_drive_share_link_becomes_thumbnail(self) -> None:
        url = "https://drive.google.com/file/d/1AbC_d-E/view?usp=sharing"
        self.assertEqual(drive_thumbnail_url(url), "https://drive.google.com/thumbnail?id=1AbC_d-E&sz=w1000")

    def test_other_links_unchanged(self) -> None:
        self.assertEqual(drive_thumbnail_url("https://example.org/a.png"), "https://example.org/a.png")
        self.assertEqual(
            drive_thumbnail_url("https://drive.google.com/open?id=xyz"), "https://drive.google.com/open?id=xyz"
        )

    def test_detail_href_is_uri_encoded(self) -> None:
        self.assertEqual(project_detail_href("TCC 1/2"), "projeto.html?id=TCC%201%2F2")
        self.assertEqual(project_detail_href("a(b)"), "projeto.html?id=a(b)")


class TestProjectCards(unittest.TestCase):
    def test_card_without_optional_fields(self) -> None:
        doc = page_skeleton("repository-page")
        container = doc.find(id="repository-results")
        render_project_list(doc, container, [Project(id="1")])

        self.assertEqual(container.find_all("h2"), [])
        card = container.find("article")
        self.assertEqual(card.find("a", class_="project-title-link").get_text(), "(Sem título)")
        self.assertIsNone(card.find(class_="project-card-keywords"))
        self.assertEqual(len(card.find(class_="project-card-actions").find_all("a")), 1)

    def test_card_with_pdf_and_meta(self) -> None:
        doc = page_skeleton("repository-page")
        container = doc.find(id="repository-results")
        p = Project(id="7", ano="2023", semestre="2", autor="Ana", orientador="Bia", link_pdf="https://x/y.pdf")
        render_project_list(doc, container, [p])

        meta = container.find(class_="project-card-meta").get_text()
        self.assertEqual(meta, "Autor(a): Ana | Orientador(a): Bia | Período: 2023 - 2")
        pdf = container.find("a", string="Baixar PDF")
        self.assertEqual(pdf["href"], "https://x/y.pdf")
        self.assertEqual(pdf["target"], "_blank")
        self.assertEqual(" ".join(pdf.get_attribute_list("rel")), "noopener noreferrer")


class TestProjectDetail(unittest.TestCase):
    def test_empty_fields_hidden_and_default_abstract(self) -> None:
        doc = page_skeleton("project-detail-page")
        fill_project_detail(doc, Project(id="1"))

        self.assertEqual(doc.find(id="project-title").get_text(), "Trabalho sem título")
        for element_id in ("project-author", "project-advisors", "project-banca", "project-extra-meta"):
            self.assertTrue(is_hidden(doc.find(id=element_id)), element_id)
        self.assertEqual(doc.find(id="project-abstract").get_text(), DEFAULT_ABSTRACT)
        self.assertIsNone(doc.find(id="project-image-wrapper").find("img"))
        self.assertEqual(doc.find(id="project-links").find_all("a"), [])

    def test_full_project(self) -> None:
        doc = page_skeleton("project-detail-page")
        p = Project(
            id="1",
            titulo="Sistema X",
            autor="Ana",
            orientador="Bia",
            coorientador="Caio",
            curso="Computação",
            ano="2023",
            licenca="CC-BY",
            resumo="Resumo.",
            imagem="https://drive.google.com/file/d/IMG/view",
            link_pdf="https://x/p.pdf",
            link_outros="https://x/o",
        )
        fill_project_detail(doc, p)

        self.assertEqual(doc.find(id="project-advisors").get_text(), "Orientador(a): Bia | Coorientador(a): Caio")
        self.assertEqual(doc.find(id="project-extra-meta").get_text(), "Curso: Computação | Período: 2023 | Licença: CC-BY")
        img = doc.find(id="project-image-wrapper").find("img")
        self.assertEqual(img["src"], "https://drive.google.com/thumbnail?id=IMG&sz=w1000")
        self.assertEqual([a.get_text() for a in doc.find(id="project-links").find_all("a")],
                         ["Baixar PDF do trabalho", "Outros materiais"])


class TestAdvisorCards(unittest.TestCase):
    def test_links_and_meta(self) -> None:
        doc = page_skeleton("advisors-page")
        container = doc.find(id="advisors-list")
        render_advisors_list(
            doc,
            container,
            [
                Advisor(id="b", nome="Bia"),
                Advisor(id="a", nome="Ana", email="ana@uni.br", lattes="http://lattes", disponibilidade="2", observacoes="obs"),
            ],
        )

        cards = container.find_all("article")
        self.assertEqual([c["data-advisor-id"] for c in cards], ["a", "b"])
        self.assertEqual(cards[0].find(class_="advisor-meta").get_text(), "Disponibilidade: 2 | obs")
        self.assertEqual(cards[0].find("a", string="ana@uni.br")["href"], "mailto:ana@uni.br")
        # no links, no meta -> nothing rendered for them
        self.assertIsNone(cards[1].find(class_="advisor-links"))
        self.assertIsNone(cards[1].find(class_="advisor-meta"))


class TestSkeleton(unittest.TestCase):
    def test_unknown_page(self) -> None:
        with self.assertRaises(ValueError):
            page_skeleton("nope")

    def test_initial_visibility(self) -> None:
        doc = page_skeleton("calendar-page")
        self.assertFalse(is_hidden(doc.find(id="calendar-loading")))
        self.assertTrue(is_hidden(doc.find(id="calendar-error")))
        self.assertTrue(is_hidden(doc.find(id="calendar-empty")))
        self.assertIsNotNone(doc.find(id="calendar-table-body"))


if __name__ == "__main__":
    unittest.main()
