"""
Tests for CLI entry points.

These tests focus on:
- exit codes for READY / ERROR outcomes
- one fetch per sheet per invocation
- writing rendered pages and .ics files to temporary paths
"""

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

from repositorio.cli import main


def _gviz_body(labels, rows):
    payload = {
        "status": "ok",
        "table": {
            "cols": [{"id": chr(65 + i), "label": label} for i, label in enumerate(labels)],
            "rows": [{"c": [{"v": v} for v in row]} for row in rows],
        },
    }
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + json.dumps(payload) + ");"


SHEET_BODIES = {
    "Projetos": _gviz_body(
        ["ID", "Ano", "Título", "Autor", "Orientador"],
        [["1", 2023, "Sistema X", "J. Silva", "M. Souza"], ["2", 2022, "Redes", "A. Lima", "M. Souza"]],
    ),
    "Calendario": _gviz_body(
        ["Ano", "Semestre", "Data", "Tipo", "Atividade"],
        [["2024", "1", "Date(2024,2,1)", "Aula", "Início"], ["2024", "1", "30/06/2024", "Prazo", "Entrega"]],
    ),
    "Orientadores": _gviz_body(["Nome", "Email"], [["Ana", "ana@uni.br"]]),
}


def _fake_get(url, params=None, timeout=None):
    resp = mock.MagicMock()
    body = SHEET_BODIES.get(params["sheet"])
    resp.ok = body is not None
    resp.status_code = 200 if body is not None else 404
    resp.reason = "OK" if body is not None else "Not Found"
    resp.text = body or ""
    resp.url = url
    return resp


class _ExitCode:
    """Capture the SystemExit code raised by main()."""

    def __enter__(self):
        self.code = None
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is SystemExit:
            self.code = exc.code
            return True
        return False


def _run(argv):
    buf = io.StringIO()
    with mock.patch("repositorio.fetch.requests.get", side_effect=_fake_get) as get:
        with redirect_stdout(buf):
            with _ExitCode() as ctx:
                main(argv)
    return ctx.code, buf.getvalue(), get


class TestCLI(unittest.TestCase):
    def test_projects_filtered_by_search(self) -> None:
        code, out, get = _run(["projects", "--search", "silva"])
        self.assertEqual(code, 0)
        self.assertIn("1 | 2023 | Sistema X | J. Silva", out)
        self.assertNotIn("Redes", out)
        self.assertEqual(get.call_count, 1)

    def test_project_detail(self) -> None:
        code, out, _ = _run(["project", "2"])
        self.assertEqual(code, 0)
        self.assertIn("Redes", out)
        self.assertIn("Orientador(a): M. Souza", out)

    def test_unknown_project_exits_nonzero(self) -> None:
        code, out, _ = _run(["project", "99"])
        self.assertNotEqual(code, 0)
        self.assertIn("Não foi possível encontrar este trabalho", out)

    def test_calendar_grouped(self) -> None:
        code, out, _ = _run(["calendar", "--type", "Prazo"])
        self.assertEqual(code, 0)
        self.assertIn("== 2024 - 1º semestre", out)
        self.assertIn("Entrega", out)
        self.assertNotIn("Início", out)

    def test_sheet_error_exits_nonzero(self) -> None:
        with mock.patch.dict(SHEET_BODIES, {}, clear=True):
            with self.assertLogs("repositorio.pages", level="ERROR"):
                code, out, _ = _run(["advisors"])
        self.assertEqual(code, 1)
        self.assertIn("Ocorreu um erro ao carregar a lista de orientadores", out)

    def test_render_and_export_write_files(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            html_path = Path(d) / "site" / "orientadores.html"
            code, _, _ = _run(["render", "advisors", "--out", str(html_path)])
            self.assertEqual(code, 0)
            html = html_path.read_text(encoding="utf-8")
            self.assertIn('id="advisors-page"', html)
            self.assertIn("mailto:ana@uni.br", html)

            ics_path = Path(d) / "calendario.ics"
            code, out, _ = _run(["export-calendar", str(ics_path)])
            self.assertEqual(code, 0)
            self.assertIn("Exported 2 events", out)
            self.assertTrue(ics_path.exists())

    def test_render_requires_page_or_template(self) -> None:
        code, out, _ = _run(["render"])
        self.assertEqual(code, 1)


if __name__ == "__main__":
    unittest.main()
