"""Command line interface for holdfix."""
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .. import __version__
from ..application.services.hold_fix_orchestrator import HoldFixOrchestrator
from ..infrastructure.persistence.event_bus import EventBus
from ..infrastructure.routing.maze_router import MazeRouter
from ..infrastructure.serialization import load_design, save_design
from ..shared.configuration import initialize_config
from ..shared.exceptions import ConfigurationError, HoldFixException
from ..shared.utils.logging_utils import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="holdfix",
        description="Measure routed wirelength and repair hold-risk connections",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s design.json fixed.json                  # Report, repair, report
  %(prog)s design.json fixed.json --threshold 120  # Custom minimum wirelength
  %(prog)s design.json.gz - --report-only          # Statistics only
        """
    )
    parser.add_argument('input', help='Routed design snapshot (.json or .json.gz)')
    parser.add_argument('output', help="Repaired design snapshot, '-' to skip writing")
    parser.add_argument('-c', '--config', help='Configuration file path')
    parser.add_argument('-t', '--threshold', type=int,
                        help='Minimum wirelength for cross clock region connections')
    parser.add_argument('--report-only', action='store_true',
                        help='Print the statistics report without repairing')
    parser.add_argument('--summary-json', help='Write the repair result as JSON to this path')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Override the configured log level')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point; returns the process exit status."""
    args = build_parser().parse_args(argv)

    try:
        if args.config and not Path(args.config).expanduser().exists():
            raise ConfigurationError(f"Configuration file not found: {args.config}",
                                     error_code="CONFIG_MISSING")
        config = initialize_config(args.config)
        settings = config.get_settings()
        if args.log_level:
            settings.logging.level = args.log_level
        if args.threshold is not None:
            settings.repair.min_wire_length = args.threshold
        config.validate_or_raise()
        setup_logging(settings.logging)

        snapshot = load_design(args.input)
        event_bus = EventBus()
        router = MazeRouter(snapshot.topology, snapshot.routes, settings.repair.max_expansions)
        orchestrator = HoldFixOrchestrator(snapshot.topology, snapshot.routes, router,
                                           settings, event_bus)

        run = orchestrator.run(report_only=args.report_only)

        if run.repair is not None:
            logger.info(f"Fixed {run.repair.repaired_count} connections, "
                        f"{run.repair.abandoned_count} left unfixed")
            if args.summary_json:
                _write_summary(args.summary_json, run.repair.to_dict())
        if args.output != '-' and not args.report_only:
            save_design(snapshot, args.output)

    except HoldFixException as e:
        logger.error(f"holdfix failed: {e}")
        if args.summary_json:
            _write_summary(args.summary_json, e.to_dict())
        return 1
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return 130

    return 0


def _write_summary(path: str, summary: dict) -> None:
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(summary, f, indent=2, default=str)


if __name__ == '__main__':
    sys.exit(main())
