"""Command-line entry point for the accessibility crawler."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Sequence

from .config import DEFAULT_OUTPUT_ROOT, DEFAULT_TAGS, CrawlConfig, RuleConfig
from .crawler import StartupError, run_scan
from .reports import latest_run_dir, load_summary

logger = logging.getLogger("a11y_crawler.cli")


def _ensure_command_prefix(argv: Sequence[str], commands: Iterable[str]) -> Sequence[str]:
    if not argv:
        return argv
    first = argv[0]
    if first in commands or first.startswith("-"):
        return argv
    return ("scan", *argv)


def _comma_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )


def _add_scan_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("base", help="Base URL to crawl")
    parser.add_argument(
        "--max-pages",
        type=int,
        default=50,
        help="Maximum number of pages to visit",
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=2,
        help="Number of pages audited in parallel (each one is a browser tab)",
    )
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_ROOT,
        type=Path,
        help="Directory where scan runs are written",
    )
    parser.add_argument(
        "--tags",
        type=_comma_list,
        default=list(DEFAULT_TAGS),
        help="Comma-separated axe rule tags to run (default: wcag2a,wcag2aa)",
    )
    parser.add_argument(
        "--rules",
        type=_comma_list,
        default=[],
        help="Comma-separated axe rule ids to run instead of the tag selection",
    )
    parser.add_argument(
        "--exclude-rules",
        type=_comma_list,
        default=[],
        help="Comma-separated axe rule ids to disable",
    )
    parser.add_argument(
        "--best-practices",
        action="store_true",
        help="Also run axe best-practice rules",
    )
    parser.add_argument(
        "--include-incomplete",
        action="store_true",
        help="List needs-review (incomplete) findings alongside violations",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window instead of running headless",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=45.0,
        help="Navigation timeout in seconds",
    )
    parser.add_argument(
        "--wait",
        type=float,
        default=0.0,
        help="Seconds to wait after network idle before auditing",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def _add_summary_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--output",
        default=DEFAULT_OUTPUT_ROOT,
        type=Path,
        help="Directory where scan runs are stored",
    )
    parser.add_argument(
        "--run",
        default=None,
        help="Run id to show (default: most recent run)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a website with Playwright and audit every page with axe-core.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan_parser = subparsers.add_parser("scan", help="Crawl a site and audit its pages")
    _add_scan_arguments(scan_parser)

    summary_parser = subparsers.add_parser("summary", help="Print the overview of a stored run")
    _add_summary_arguments(summary_parser)

    argv = list(sys.argv[1:] if argv is None else argv)
    argv = list(_ensure_command_prefix(argv, subparsers.choices.keys()))
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> CrawlConfig:
    return CrawlConfig(
        base_url=args.base,
        output_root=Path(args.output),
        max_pages=args.max_pages,
        concurrency=args.concurrency,
        navigation_timeout=args.timeout,
        wait_after_load=args.wait,
        include_incomplete=args.include_incomplete,
        headless=not args.headful,
        rules=RuleConfig(
            tags=args.tags,
            include_rules=args.rules,
            exclude_rules=args.exclude_rules,
            best_practices=args.best_practices,
        ),
    )


def _run_scan(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    config = build_config(args)
    try:
        result = asyncio.run(run_scan(config))
    except StartupError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # pylint: disable=broad-except
        logger.exception("Scan aborted")
        return 1
    print(f"Wrote scan to {result.run_dir}")
    return 0


def _run_summary(args: argparse.Namespace) -> int:
    _configure_logging(args.verbose)
    run_dir = Path(args.output) / args.run if args.run else latest_run_dir(args.output)
    summary = load_summary(run_dir) if run_dir is not None else None
    if summary is None:
        logger.error("No scan data found under %s", args.output)
        return 1

    totals = summary.totals
    print(f"Scan {summary.scan_id} of {summary.base_url}")
    print(f"Started {summary.started_at}, finished {summary.finished_at}")
    print(
        f"Pages: {totals.pages}  Violations: {totals.violations}  "
        f"Incomplete: {totals.incomplete}"
    )
    for page in summary.pages:
        print(f"{page.status:>4}  {page.violation_count:>5}  {page.slug:<40}  {page.url}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    if args.command == "scan":
        return _run_scan(args)
    return _run_summary(args)


if __name__ == "__main__":
    sys.exit(main())
