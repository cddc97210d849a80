from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class ReportConfig:
    sarif_dir: str
    output: str


@dataclass(frozen=True)
class FindingRow:
    rule_id: str
    level: str
    message: str
    # file[:line[:column]] with the file part already HTML-escaped, or "-"
    location: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
