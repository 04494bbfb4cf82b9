"""Bounded-concurrency, batch-at-a-time draining of the frontier."""

from __future__ import annotations

import asyncio
import logging

from .aggregator import RunAggregator
from .auditor import PageAuditor
from .frontier import Frontier

logger = logging.getLogger("a11y_crawler.scheduler")


class CrawlScheduler:
    """Drains the frontier in batches of at most ``concurrency`` audits.

    Links found by an audit are offered back as soon as it completes, and the
    whole batch is awaited before the next one is drawn, so offers from the
    last batch can still extend the run by another round within the budget.
    """

    def __init__(
        self,
        frontier: Frontier,
        auditor: PageAuditor,
        aggregator: RunAggregator,
        concurrency: int = 2,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")
        self.frontier = frontier
        self.auditor = auditor
        self.aggregator = aggregator
        self.concurrency = concurrency
        self._slots = asyncio.Semaphore(concurrency)

    async def _process(self, url: str) -> None:
        async with self._slots:
            outcome = await self.auditor.audit(url)
        if outcome is None:
            return
        self.aggregator.collect(outcome.record)
        admitted = sum(1 for link in outcome.links if self.frontier.offer(link))
        logger.debug("%s: %d links, %d queued", url, len(outcome.links), admitted)

    async def run(self) -> None:
        batch_number = 0
        while self.frontier.pending and not self.frontier.budget_exhausted:
            batch = self.frontier.take_batch(self.concurrency)
            if not batch:
                break
            for url in batch:
                self.frontier.mark_visited(url)
            batch_number += 1
            logger.debug("Batch %d: %s", batch_number, ", ".join(batch))
            await asyncio.gather(*(self._process(url) for url in batch))
            logger.info(
                "Progress: visited=%d/%d queued=%d",
                self.frontier.visited_count,
                self.frontier.page_budget,
                self.frontier.pending,
            )
