from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from sarif_report.models import ReportConfig

logger = logging.getLogger(__name__)

CONFIG_SECTION = "html-report"
CONFIG_EXTENSIONS = (".yml", ".yaml")
DEFAULT_SARIF_DIR = "codeql-results"
DEFAULT_OUTPUT = "codeql-report.html"

_SECTION_RE = re.compile(rf"^{re.escape(CONFIG_SECTION)}\s*:")
_SARIF_DIR_RE = re.compile(r"^\s*sarif-dir\s*:\s*(.+)")
_OUTPUT_RE = re.compile(r"^\s*output\s*:\s*(.+)")
_TOP_LEVEL_RE = re.compile(r"^\w")


class ConfigError(ValueError):
    pass


def load_report_config(path: str | Path) -> ReportConfig:
    """Read ``sarif-dir`` and ``output`` from the ``html-report`` section.

    Only the two flat keys one level under the section are understood; the
    rest of the document is skipped line by line.
    """

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")

    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Unable to read config file {config_path}: {exc}") from exc

    in_section = False
    sarif_dir: str | None = None
    output: str | None = None
    for line in re.split(r"\r?\n", content):
        if _SECTION_RE.match(line.strip()):
            in_section = True
            continue
        if not in_section:
            continue

        if _TOP_LEVEL_RE.match(line) and not line.strip().startswith("#"):
            break

        match = _SARIF_DIR_RE.match(line)
        if match:
            sarif_dir = match.group(1).strip()
        match = _OUTPUT_RE.match(line)
        if match:
            output = match.group(1).strip()

    missing = [
        key
        for key, value in (("sarif-dir", sarif_dir), ("output", output))
        if not value
    ]
    if missing:
        raise ConfigError(
            f"Config section '{CONFIG_SECTION}' in {config_path} is missing keys: {', '.join(missing)}"
        )

    return ReportConfig(sarif_dir=sarif_dir, output=output)


def read_report_config(path: str | Path) -> ReportConfig | None:
    try:
        return load_report_config(path)
    except ConfigError as exc:
        logger.debug("Ignoring config: %s", exc)
        return None


def resolve_config(args: Sequence[str | None]) -> ReportConfig:
    """Pick input and output paths for one invocation.

    A config document given as the first argument wins when it is valid,
    then positional ``[sarif_dir, output]`` arguments, then the defaults.
    """

    first = args[0] if len(args) > 0 else None
    second = args[1] if len(args) > 1 else None

    if first and first.endswith(CONFIG_EXTENSIONS):
        config = read_report_config(first)
        if config is not None:
            return config
        logger.debug("Falling back to positional arguments for %s", first)

    return ReportConfig(
        sarif_dir=first or DEFAULT_SARIF_DIR,
        output=second or DEFAULT_OUTPUT,
    )
