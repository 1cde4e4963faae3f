"""
iCalendar (.ics) export of the academic calendar.

Calendar rows only carry a date (no time), so every entry becomes an
all-day event. Dates come from the sheet in whatever form the editors use;
accepted forms:

    Date(2024,2,15)   gviz date cell (month is 0-based)
    15/03/2024        dd/mm/yyyy
    2024-03-15        ISO

Rows with any other date text are skipped.
"""

from __future__ import annotations

import hashlib
import re
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, Optional

from repositorio.model import CalendarEvent


GVIZ_DATE_RE = re.compile(r"^Date\((\d{4}),\s*(\d{1,2}),\s*(\d{1,2})")


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def parse_event_date(text: str) -> Optional[date]:
    """
    Parse a calendar cell into a date, or None when the format is unknown.
    """
    raw = text.strip()
    if not raw:
        return None

    m = GVIZ_DATE_RE.match(raw)
    if m:
        year, month, day = (int(g) for g in m.groups())
        try:
            return date(year, month + 1, day)
        except ValueError:
            return None

    for fmt in ("%d/%m/%Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    return None


def _event_uid(ev: CalendarEvent) -> str:
    digest = hashlib.sha1("\x1f".join([ev.ano, ev.semestre, ev.data, ev.tipo, ev.atividade]).encode("utf-8"))
    return f"{digest.hexdigest()[:16]}@repositorio"


def export_calendar_to_ics(events: Iterable[CalendarEvent], out_path: str | Path) -> int:
    """
    Export calendar events to an .ics file. Returns number of exported events.
    """
    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//Repositorio//Calendario//PT")
    lines.append("CALSCALE:GREGORIAN")

    dtstamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")

    count = 0
    for ev in events:
        day = parse_event_date(ev.data)
        if day is None:
            continue

        summary = ev.atividade or ev.tipo or "Atividade"

        lines.append("BEGIN:VEVENT")
        lines.append(f"UID:{_ics_escape(_event_uid(ev))}")
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART;VALUE=DATE:{day.strftime('%Y%m%d')}")
        lines.append(f"DTEND;VALUE=DATE:{(day + timedelta(days=1)).strftime('%Y%m%d')}")
        lines.append(f"SUMMARY:{_ics_escape(summary)}")
        if ev.tipo:
            lines.append(f"CATEGORIES:{_ics_escape(ev.tipo)}")
        if ev.descricao:
            lines.append(f"DESCRIPTION:{_ics_escape(ev.descricao)}")
        lines.append("END:VEVENT")
        count += 1

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    out.write_text("\r\n".join(lines) + "\r\n", encoding="utf-8")
    return count
