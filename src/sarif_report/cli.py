from __future__ import annotations

import argparse
import logging
import os

from sarif_report.config import resolve_config
from sarif_report.reporting import write_report
from sarif_report.sarif import collect_results

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    level = (os.getenv("SARIF_REPORT_LOG_LEVEL") or "WARNING").strip().upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s:%(name)s:%(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sarif-report",
        description="Render SARIF result files from a directory into one HTML report",
    )
    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Directory containing .sarif files, or a .yml config with an html-report section",
    )
    parser.add_argument("output", nargs="?", default=None, help="HTML file to write")
    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    config = resolve_config([args.source, args.output])
    logger.info("Reading SARIF files from %s", config.sarif_dir)

    rows = collect_results(config.sarif_dir)
    write_report(rows, config.output)

    print(f"Wrote {len(rows)} result(s) to {config.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
