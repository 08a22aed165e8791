"""backup-log-analyzer: summarize the n8n backup and export logs of the last hours."""

import logging
import os
import sys
from argparse import ArgumentParser
from dataclasses import replace

from log_analyzer.analyzer import AnalysisResult, LogAnalyzer
from log_analyzer.config import Config, ConfigError, load_config, load_yaml_config
from log_analyzer.filters import filter_problems
from log_analyzer.formatter import (
    format_health,
    format_inventory,
    format_records,
    format_sessions,
    format_stats_text,
    get_formatter,
)
from log_analyzer.parser import parse_line
from log_analyzer.reader import ALL_SOURCES, NoLogDataError, follow_file
from log_analyzer.report import ReportWriteError, write_report
from log_analyzer.stats import format_stats_json

logger = logging.getLogger(__name__)


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="log-analyzer",
        description="Analyze backup and workflow-export logs.",
    )
    parser.add_argument(
        "--hours",
        type=int,
        help="Lookback window in hours (default: 24)",
    )
    parser.add_argument(
        "--source",
        default=ALL_SOURCES,
        help="Log source to analyze: 'all' or one configured source name (default: all)",
    )
    parser.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only ERROR and WARN entries",
    )
    parser.add_argument(
        "--stats",
        action="store_true",
        help="Show statistics",
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Show reconstructed backup sessions",
    )
    parser.add_argument(
        "--html",
        action="store_true",
        help="Export an HTML report to the reports directory",
    )
    parser.add_argument(
        "--lines",
        type=int,
        default=20,
        help="Number of recent entries shown when no view is selected (default: 20)",
    )
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Statistics output format, used with --stats (default: text)",
    )
    parser.add_argument(
        "--color",
        action="store_true",
        help="Colorize output by log level (ANSI)",
    )
    parser.add_argument(
        "--follow",
        action="store_true",
        help="Follow a single source for new entries (like tail -f)",
    )
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve a live report dashboard instead of printing",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Dashboard host (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8050, help="Dashboard port (default: 8050)")
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--logs-dir", default=None, help="Override the logs directory")
    parser.add_argument("--reports-dir", default=None, help="Override the reports directory")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [ANALYZER] %(levelname)s %(message)s",
        stream=sys.stderr,
    )


def resolve_config(args) -> Config:
    """Apply CLI overrides on top of env vars, YAML and defaults."""
    config = load_config(load_yaml_config(args.config))
    overrides = {}
    if args.logs_dir:
        overrides["logs_dir"] = args.logs_dir
    if args.reports_dir:
        overrides["reports_dir"] = args.reports_dir
    if overrides:
        config = replace(config, **overrides)
    return config


def validate_args(args, config: Config):
    """Exit with status 1 on incompatible or invalid arguments."""
    if args.hours is not None and args.hours <= 0:
        _fail("--hours must be a positive integer")
    if args.lines <= 0:
        _fail("--lines must be a positive integer")
    if args.source != ALL_SOURCES and args.source not in config.sources:
        choices = ", ".join([ALL_SOURCES, *config.sources])
        _fail(f"Unknown source '{args.source}' (choose from: {choices})")
    if args.follow:
        if args.stats or args.html or args.serve:
            _fail("--follow cannot be combined with --stats, --html or --serve")
        if args.source == ALL_SOURCES:
            _fail("--follow requires a single --source")
    if args.output == "json" and not args.stats:
        _fail("--output json requires --stats")


def _fail(message: str, code: int = 1):
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(code)


def run_follow(args, config: Config):
    """Stream new entries of one source until interrupted."""
    path = os.path.join(config.logs_dir, config.sources[args.source])
    if not os.path.isfile(path):
        _fail(f"No log file found for {args.source} ({path})")
    formatter = get_formatter(args.color)
    logger.info("Following %s", path)
    for line in follow_file(path):
        print(formatter(parse_line(line, source=args.source)), flush=True)


def run_serve(args, analyzer: LogAnalyzer):
    from log_analyzer.dashboard import create_dashboard_app, run_dashboard

    app = create_dashboard_app(analyzer)
    logger.info("Dashboard running on http://%s:%d", args.host, args.port)
    run_dashboard(app, args.host, args.port)


def render_console(args, result: AnalysisResult) -> str:
    """Assemble the text views selected by the flags."""
    hours = int(result.window.total_seconds() // 3600)
    blocks = [
        f"Log analysis for the last {hours} hours "
        f"(since {result.window_start.strftime('%Y-%m-%d %H:%M:%S')})",
        format_inventory(result.files, result.missing),
    ]
    if not result.records:
        blocks.append(f"No log entries in the last {hours} hours.")

    if args.errors_only:
        blocks.append(format_records("Errors and warnings", filter_problems(result.records), args.color))
    if args.stats:
        blocks.append(format_stats_text(result.stats))
    if args.history:
        blocks.append(format_sessions(result.sessions, args.color))
    if not (args.errors_only or args.stats or args.history):
        blocks.append(format_records("Recent entries", result.records[-args.lines:], args.color))

    blocks.append(format_health(result.health, args.color))
    return "\n\n".join(blocks)


def run_analysis(args, analyzer: LogAnalyzer) -> int:
    """One analysis pass; returns the process exit status."""
    try:
        result = analyzer.analyze(args.source, args.hours)
    except NoLogDataError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not result.files:
        print("Error: No log files found for the selected source(s)", file=sys.stderr)
        return 1

    if args.stats and args.output == "json":
        print(format_stats_json(result.stats, result.health))
    else:
        print(render_console(args, result))

    if args.html:
        try:
            path = write_report(result, analyzer.config.reports_dir, analyzer.config.report_limit)
        except ReportWriteError as e:
            logger.error("%s", e)
        else:
            print(f"\nHTML report written to {path}")
    return 0


def main():
    try:
        _run()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)


def _run():
    parser = build_parser()
    args = parser.parse_args()
    setup_logging(args.verbose)

    try:
        config = resolve_config(args)
    except ConfigError as e:
        _fail(str(e), code=2)
    validate_args(args, config)

    if args.follow:
        run_follow(args, config)
        return

    analyzer = LogAnalyzer(config)
    if args.serve:
        run_serve(args, analyzer)
        return

    sys.exit(run_analysis(args, analyzer))


if __name__ == "__main__":
    main()
