"""High-level orchestration of a crawl-and-audit run."""

from __future__ import annotations

import logging
import time
from contextlib import AsyncExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .aggregator import RunAggregator
from .auditor import PageAuditor
from .browser import PlaywrightRenderer
from .config import CrawlConfig
from .evaluator import AxeEvaluator, Evaluator
from .frontier import Frontier
from .models import RunSummary
from .scheduler import CrawlScheduler
from .utils import isoformat_z, normalize_url, origin_of, run_id_from, utc_now

logger = logging.getLogger("a11y_crawler")


class StartupError(RuntimeError):
    """Raised when a run cannot start; nothing has been written yet."""


@dataclass
class ScanResult:
    """Where a run was written and what it found."""

    run_dir: Path
    summary: RunSummary
    total_seconds: float


def validate_config(config: CrawlConfig) -> str:
    """Check the settings a run cannot start without and return the base URL."""
    base_url = normalize_url(config.base_url)
    if not base_url:
        raise StartupError(f"Invalid base URL: {config.base_url!r}")
    if config.max_pages < 1:
        raise StartupError(f"--max-pages must be at least 1 (got {config.max_pages})")
    if config.concurrency < 1:
        raise StartupError(f"--concurrency must be at least 1 (got {config.concurrency})")
    if config.navigation_timeout <= 0:
        raise StartupError(f"--timeout must be positive (got {config.navigation_timeout})")
    return base_url


async def run_scan(
    config: CrawlConfig,
    renderer=None,
    evaluator: Optional[Evaluator] = None,
) -> ScanResult:
    """Crawl ``config.base_url`` and persist one self-contained run.

    ``renderer`` must be an async context manager exposing ``load``; it
    defaults to a Playwright browser. The run directory is only created once
    the browser is up, so startup failures leave no output behind.
    """
    overall_start = time.perf_counter()
    base_url = validate_config(config)
    started = utc_now()
    scan_id = run_id_from(started)

    if renderer is None:
        renderer = PlaywrightRenderer(config)

    async with AsyncExitStack() as stack:
        try:
            await stack.enter_async_context(renderer)
            if evaluator is None:
                evaluator = AxeEvaluator()
        except Exception as exc:
            raise StartupError(f"Could not start the browser: {exc}") from exc

        run_dir = Path(config.output_root) / scan_id
        aggregator = RunAggregator(run_dir, scan_id, base_url, isoformat_z(started))
        aggregator.open()
        logger.info(
            "Scanning %s (max pages %d, concurrency %d) into %s",
            base_url,
            config.max_pages,
            config.concurrency,
            run_dir,
        )

        frontier = Frontier(config.max_pages)
        frontier.offer(base_url)
        auditor = PageAuditor(
            renderer,
            evaluator,
            origin=origin_of(base_url),
            rules=config.rules,
            navigation_timeout=config.navigation_timeout,
            include_incomplete=config.include_incomplete,
        )
        scheduler = CrawlScheduler(frontier, auditor, aggregator, config.concurrency)
        await scheduler.run()

        summary = aggregator.finalize(isoformat_z(utc_now()))

    total_elapsed = time.perf_counter() - overall_start
    logger.info(
        "Finished in %.2fs: %d pages, %d violations, %d incomplete (%d visited)",
        total_elapsed,
        summary.totals.pages,
        summary.totals.violations,
        summary.totals.incomplete,
        frontier.visited_count,
    )
    return ScanResult(run_dir=run_dir, summary=summary, total_seconds=total_elapsed)
