"""
Normalization (raw sheet rows -> fixed-shape records).

Sheet headers are written by hand and drift ("Título", "Titulo", "TITULO"...),
so every record field has an ordered tuple of accepted header names.
The first header with a non-blank value wins; nothing matched -> "".

Each tuple ends with the record's own field name, which makes
normalize(asdict(record)) == record.
"""

from __future__ import annotations

import hashlib
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from repositorio.model import Advisor, CalendarEvent, Project


Synonyms = Dict[str, Tuple[str, ...]]


# ---------------------------------------------------------------------------
# Synonym tables
# ---------------------------------------------------------------------------

PROJECT_SYNONYMS: Synonyms = {
    "id": ("ID", "Id", "id"),
    "ano": ("Ano", "ANO", "ano"),
    "semestre": ("Semestre", "semestre"),
    "autor": ("Autor", "Autores", "Autor(es)", "autor"),
    "titulo": ("Título", "Titulo", "TITULO", "titulo"),
    "orientador": ("Orientador", "orientador"),
    "coorientador": ("Coorientador", "coorientador"),
    "curso": ("Curso", "curso"),
    "data_defesa": ("Data de defesa", "Data", "data", "data_defesa"),
    "banca": ("Banca / Avaliadores", "Banca", "banca"),
    "palavras_chave": ("Palavras-chave", "Palavras chave", "palavras-chave", "palavrasChave", "palavras_chave"),
    "resumo": ("Resumo", "RESUMO", "resumo"),
    "link_pdf": ("Link PDF", "PDF", "Link", "link", "link_pdf"),
    "link_outros": ("Link Outros Materiais", "Outros materiais", "outros", "link_outros"),
    "licenca": ("Licença", "Licenca", "licenca"),
    "imagem": ("Link Imagem", "Imagem", "Image", "imagem"),
}

CALENDAR_SYNONYMS: Synonyms = {
    "ano": ("Ano", "ano"),
    "semestre": ("Semestre", "semestre"),
    "data": ("Data", "data"),
    "tipo": ("Tipo", "tipo"),
    "atividade": ("Atividade", "Título", "Titulo", "atividade"),
    "descricao": ("Descrição", "Descricao", "descrição", "descricao"),
}

ADVISOR_SYNONYMS: Synonyms = {
    "nome": ("Nome", "nome"),
    "lattes": ("Lattes", "lattes"),
    "email": ("Email", "email"),
    "areas": ("Áreas de atuação", "areas"),
    "palavras_chave": ("Palavras-chave", "palavras_chave"),
    "disponibilidade": ("Disponibilidade", "disponibilidade"),
    "observacoes": ("Observações", "observacoes"),
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def cell_text(value: Any) -> str:
    """
    Text form of a cell value as the sheet displays it.

    gviz sends numbers as JSON numbers, so a year arrives as 2023 or 2023.0;
    both must read "2023".
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def first_present(raw: Mapping[str, Any], keys: Sequence[str]) -> str:
    """
    Return the trimmed text of the first key with a non-blank value, else "".
    """
    for key in keys:
        text = cell_text(raw.get(key)).strip()
        if text:
            return text
    return ""


def _normalize(raw: Mapping[str, Any], synonyms: Synonyms) -> Dict[str, str]:
    return {name: first_present(raw, keys) for name, keys in synonyms.items()}


def advisor_id(nome: str, email: str) -> str:
    """
    Stable identifier for an advisor: first 12 hex chars of sha1(nome, email).
    """
    digest = hashlib.sha1(f"{nome}\x1f{email}".encode("utf-8")).hexdigest()
    return digest[:12]


# ---------------------------------------------------------------------------
# Normalizers
# ---------------------------------------------------------------------------


def normalize_project(raw: Mapping[str, Any]) -> Project:
    return Project(**_normalize(raw, PROJECT_SYNONYMS))


def normalize_calendar_event(raw: Mapping[str, Any]) -> CalendarEvent:
    return CalendarEvent(**_normalize(raw, CALENDAR_SYNONYMS))


def normalize_advisor(raw: Mapping[str, Any]) -> Advisor:
    values = _normalize(raw, ADVISOR_SYNONYMS)
    return Advisor(id=advisor_id(values["nome"], values["email"]), **values)


def normalize_projects(rows: Iterable[Mapping[str, Any]]) -> List[Project]:
    """
    Normalize rows, keeping only projects with an id.
    """
    projects = [normalize_project(r) for r in rows]
    return [p for p in projects if p.id]


def normalize_calendar_events(rows: Iterable[Mapping[str, Any]]) -> List[CalendarEvent]:
    """
    Normalize rows, keeping only events with both ano and data.
    """
    events = [normalize_calendar_event(r) for r in rows]
    return [e for e in events if e.ano and e.data]


def normalize_advisors(rows: Iterable[Mapping[str, Any]]) -> List[Advisor]:
    """
    Normalize rows, keeping only advisors with a nome.
    """
    advisors = [normalize_advisor(r) for r in rows]
    return [a for a in advisors if a.nome]

