from __future__ import annotations

from pathlib import Path

SARIF_SUFFIX = ".sarif"


def find_sarif_files(root: str | Path) -> list[Path]:
    base = Path(root)
    if not base.exists() or not base.is_dir():
        return []

    files: list[Path] = []
    for child in base.iterdir():
        if child.is_dir():
            files.extend(find_sarif_files(child))
        elif child.name.endswith(SARIF_SUFFIX):
            files.append(child)
    return files
