"""
Central data model definitions used across the project.

Every record is flat and string-valued:
- missing columns become "" (never None)
- years and dates stay strings and are compared lexicographically
- records are frozen: built once per page session, never mutated
"""

from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class Project:
    """
    One academic project (row of the "Projetos" tab).
    """

    id: str = ""
    ano: str = ""
    semestre: str = ""
    autor: str = ""
    titulo: str = ""
    orientador: str = ""
    coorientador: str = ""
    curso: str = ""
    data_defesa: str = ""
    banca: str = ""
    palavras_chave: str = ""
    resumo: str = ""
    link_pdf: str = ""
    link_outros: str = ""
    licenca: str = ""
    imagem: str = ""


@dataclass(frozen=True)
class CalendarEvent:
    """
    One entry of the academic calendar ("Calendario" tab).
    """

    ano: str = ""
    semestre: str = ""
    data: str = ""
    tipo: str = ""
    atividade: str = ""
    descricao: str = ""


@dataclass(frozen=True)
class Advisor:
    """
    One advisor ("Orientadores" tab).

    The sheet has no id column; `id` is derived from nome + email
    (see repositorio.normalize.advisor_id).
    """

    id: str = ""
    nome: str = ""
    lattes: str = ""
    email: str = ""
    areas: str = ""
    palavras_chave: str = ""
    disponibilidade: str = ""
    observacoes: str = ""
