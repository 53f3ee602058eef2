from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from report_parser.controllers.extract_controller import ReportExtractor
from report_parser.errors import ReportParseError
from review_shell.core.managers.config_manager import config_manager
from review_shell.core.services.json_service import to_json
from review_shell.core.services.metrics_service import MetricsService
from review_shell.core.utils.configure_logging import configure_logger
from review_shell.core.utils.path_utils import PathUtils

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-report",
        description="Compare player decisions against the reference agent in an HTML review report.",
    )
    parser.add_argument("path", help="Path to the HTML review report.")
    parser.add_argument("--json", dest="json_out", help="Write the extracted rounds and turns as JSON.")
    parser.add_argument("--csv", dest="csv_out", help="Write one row per turn as CSV.")
    parser.add_argument("--progress", action="store_true", help="Show a progress bar over rounds.")
    parser.add_argument("--log-level", default=None,
                        help="Root log level (default: debug.level from settings.json).")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the review-report command."""
    parser = _build_parser()
    try:
        pargs = parser.parse_args(argv)
    except SystemExit as e:
        return int(e.code or 0)

    configure_logger(
        pargs.log_level or config_manager.get_nested("debug.level", "WARNING"),
        module_specific_levels=config_manager.get_nested("debug.modules", {}),
        silenced_loggers=config_manager.get_nested("debug.silenced", {}),
    )
    if pargs.progress:
        config_manager.set_nested("parser.show_progress", True)

    extractor = ReportExtractor()
    try:
        record = extractor.extract_file(pargs.path)
    except (OSError, UnicodeDecodeError) as e:
        logger.error("Could not read %s: %s", pargs.path, e)
        print(f"❌ Could not read report: {e}")
        return 1
    except ReportParseError as e:
        logger.error("Failed to parse %s: %s", pargs.path, e, exc_info=True)
        print(f"❌ Parse error: {e}")
        return 1

    service = MetricsService()
    metrics = service.summarize(record)
    print(metrics.format(int(config_manager.get_nested("report.precision", 3))))

    if pargs.json_out:
        out = PathUtils.resolve_output_path(pargs.json_out)
        out.write_text(to_json(record), encoding="utf-8")
        logger.info("Wrote %d rounds to %s", len(record.rounds), out)
    if pargs.csv_out:
        out = PathUtils.resolve_output_path(pargs.csv_out)
        service.turn_frame(record).to_csv(out, index=False)
        logger.info("Wrote %d turns to %s", record.turn_count, out)

    return 0


if __name__ == "__main__":
    sys.exit(main())
