from __future__ import annotations

from html import escape
from pathlib import Path
from typing import Iterable

from sarif_report.models import FindingRow

REPORT_TITLE = "CodeQL Security Report"

LEVEL_RANK = {"error": 0, "warning": 1, "note": 2}
OTHER_RANK = 3

LEVEL_CLASS = {"error": "critical", "warning": "high", "note": "medium"}
OTHER_CLASS = "low"

LEVEL_LABEL = {"error": "Error", "warning": "Warning", "note": "Note"}

COLUMNS = ("Rule ID", "Severity", "Rule", "Message", "Location")

_STYLE = """\
    body { font-family: system-ui, sans-serif; margin: 2rem; background: #1e1e1e; color: #d4d4d4; }
    h1 { color: #fff; }
    table { border-collapse: collapse; width: 100%; }
    th, td { border: 1px solid #444; padding: 0.5rem 0.75rem; text-align: left; }
    th { background: #2d2d2d; color: #fff; }
    tr.critical { background: #3d1f1f; }
    tr.high    { background: #3d2f1f; }
    tr.medium  { background: #2f3d1f; }
    tr.low     { background: #1f2f3d; }
    code { font-size: 0.9em; background: #333; padding: 0.2em 0.4em; border-radius: 3px; }
    .meta { color: #888; margin-bottom: 1rem; }"""


def escape_html(value: object) -> str:
    if value is None:
        return ""
    # single quotes stay literal
    return escape(str(value), quote=False).replace('"', "&quot;")


def severity_rank(level: str) -> int:
    return LEVEL_RANK.get(level, OTHER_RANK)


def sort_rows(rows: Iterable[FindingRow]) -> list[FindingRow]:
    return sorted(rows, key=lambda row: severity_rank(row.level))


def render_row(row: FindingRow) -> str:
    css_class = LEVEL_CLASS.get(row.level, OTHER_CLASS)
    label = LEVEL_LABEL.get(row.level, row.level)
    # location is escaped when the row is built
    return (
        f'<tr class="{css_class}">'
        f"<td>{escape_html(row.rule_id)}</td>"
        f"<td>{escape_html(label)}</td>"
        f"<td>{escape_html(row.name)}</td>"
        f"<td>{escape_html(row.message)}</td>"
        f"<td><code>{row.location}</code></td>"
        "</tr>"
    )


def render_html(rows: list[FindingRow]) -> str:
    """Render already sorted rows as one standalone HTML document."""

    body = "".join(render_row(row) for row in rows)
    if not body:
        body = f'<tr><td colspan="{len(COLUMNS)}">No results.</td></tr>'
    header = "".join(f"<th>{column}</th>" for column in COLUMNS)

    parts = [
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '  <meta charset="UTF-8">',
        f"  <title>{REPORT_TITLE}</title>",
        "  <style>",
        _STYLE,
        "  </style>",
        "</head>",
        "<body>",
        f"  <h1>{REPORT_TITLE}</h1>",
        f'  <p class="meta">Generated from CodeQL analysis. {len(rows)} finding(s).</p>',
        "  <table>",
        f"    <thead><tr>{header}</tr></thead>",
        f"    <tbody>{body}</tbody>",
        "  </table>",
        "</body>",
        "</html>",
    ]
    return "\n".join(parts)


def write_report(rows: list[FindingRow], output: str | Path) -> Path:
    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with out_path.open("w", encoding="utf-8") as handle:
        handle.write(render_html(sort_rows(rows)))
    return out_path
