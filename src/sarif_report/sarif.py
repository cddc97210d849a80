"""Flatten SARIF documents into report rows.

SARIF producers disagree on which optional fields they fill in, so every
column is read through a small extractor with its own fallback chain.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any

from sarif_report.locator import find_sarif_files
from sarif_report.models import FindingRow
from sarif_report.reporting import escape_html

logger = logging.getLogger(__name__)

DEFAULT_LEVEL = "warning"
PARSE_ERROR_NAME = "Parse error"

# Naive tag removal; markdown constructs such as code spans are left alone.
_MARKUP_TAG_RE = re.compile(r"<[^>]+>")


class SarifFormatError(ValueError):
    pass


def collect_results(sarif_dir: str | Path) -> list[FindingRow]:
    rows: list[FindingRow] = []
    for path in find_sarif_files(sarif_dir):
        rows.extend(parse_sarif_file(path))
    return rows


def parse_sarif_file(path: str | Path) -> list[FindingRow]:
    """Normalize one file, turning any read or parse failure into a single row."""

    file_path = Path(path)
    try:
        document = json.loads(file_path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise SarifFormatError("SARIF document must be a JSON object")
    except (OSError, ValueError) as exc:
        logger.warning("Failed to parse %s: %s", file_path, exc)
        return [
            FindingRow(
                rule_id="-",
                level="error",
                message=str(exc),
                location=escape_html(str(file_path)),
                name=PARSE_ERROR_NAME,
            )
        ]

    rows = normalize_sarif(document)
    logger.debug("Read %d result(s) from %s", len(rows), file_path)
    return rows


def normalize_sarif(document: dict[str, Any]) -> list[FindingRow]:
    rows: list[FindingRow] = []
    for run in _as_list(document.get("runs")):
        if not isinstance(run, dict):
            continue
        rules = build_rule_map(run)
        for result in _as_list(run.get("results")):
            if not isinstance(result, dict):
                continue
            rule = rules.get(_result_rule_key(result))
            rows.append(
                FindingRow(
                    rule_id=get_rule_id(result),
                    level=get_level(result),
                    message=get_message(result),
                    location=get_location(result),
                    name=get_rule_name(result, rule),
                )
            )
    return rows


def build_rule_map(run: dict[str, Any]) -> dict[str, dict[str, Any]]:
    tool = _as_dict(run.get("tool"))
    components = [_as_dict(tool.get("driver"))]
    components.extend(_as_dict(item) for item in _as_list(tool.get("extensions")))

    # The driver is listed first so its definitions win over extension packs.
    rules: dict[str, dict[str, Any]] = {}
    for component in components:
        for rule in _as_list(component.get("rules")):
            if isinstance(rule, dict) and rule.get("id"):
                rules.setdefault(str(rule["id"]), rule)
    return rules


def get_rule_id(result: dict[str, Any]) -> str:
    rule_id = result.get("ruleId") or _as_dict(result.get("rule")).get("id")
    return str(rule_id) if rule_id else "-"


def get_level(result: dict[str, Any]) -> str:
    level = result.get("level") or _default_level(_as_dict(result.get("rule")))
    return str(level) if level else DEFAULT_LEVEL


def get_message(result: dict[str, Any]) -> str:
    message = result.get("message")
    if not message:
        return ""
    if isinstance(message, str):
        return message
    if not isinstance(message, dict):
        return ""

    text = message.get("text")
    if text:
        return str(text)
    markdown = message.get("markdown")
    if markdown:
        return _MARKUP_TAG_RE.sub("", str(markdown))
    return ""


def get_location(result: dict[str, Any]) -> str:
    locations = _as_list(result.get("locations"))
    physical = _as_dict(locations[0]).get("physicalLocation") if locations else None
    if not isinstance(physical, dict):
        return "-"

    uri = _as_dict(physical.get("artifactLocation")).get("uri")
    file_part = escape_html(str(uri)) if uri else "-"

    region = physical.get("region")
    if not isinstance(region, dict):
        return file_part

    line = region.get("startLine") or "-"
    column = region.get("startColumn")
    suffix = f"{line}:{column}" if column is not None else f"{line}"
    return f"{file_part}:{suffix}"


def get_rule_name(result: dict[str, Any], rule: dict[str, Any] | None = None) -> str:
    text = _as_dict(_as_dict(rule).get("shortDescription")).get("text")
    if text:
        return str(text)
    rule_id = result.get("ruleId")
    return str(rule_id) if rule_id else ""


def _result_rule_key(result: dict[str, Any]) -> str | None:
    key = result.get("ruleId") or _as_dict(result.get("rule")).get("id")
    return str(key) if key else None


def _default_level(rule: dict[str, Any]) -> Any:
    return _as_dict(rule.get("defaultConfiguration")).get("level")


def _as_dict(value: object) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: object) -> list[Any]:
    return value if isinstance(value, list) else []
