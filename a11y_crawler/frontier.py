"""Crawl frontier: FIFO queue of pending URLs plus the visited set."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Set


class Frontier:
    """Pending-work queue and dedup record for a single run.

    All methods are synchronous, so under asyncio the event loop is the only
    writer and no lock is needed. ``mark_visited`` must be called at dispatch
    time, before the audit for that URL awaits anything.
    """

    def __init__(self, page_budget: int) -> None:
        if page_budget < 1:
            raise ValueError(f"page budget must be at least 1, got {page_budget}")
        self.page_budget = page_budget
        self._queue: Deque[str] = deque()
        self._queued: Set[str] = set()
        self._visited: Set[str] = set()

    @property
    def pending(self) -> int:
        return len(self._queue)

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    @property
    def budget_exhausted(self) -> bool:
        return len(self._visited) >= self.page_budget

    def is_visited(self, url: str) -> bool:
        return url in self._visited

    def offer(self, url: str) -> bool:
        """Queue ``url`` unless it is known or the budget is fully admitted."""
        if url in self._visited or url in self._queued:
            return False
        if len(self._visited) + len(self._queue) >= self.page_budget:
            return False
        self._queue.append(url)
        self._queued.add(url)
        return True

    def take_batch(self, size: int) -> List[str]:
        """Remove up to ``size`` URLs from the head, capped by remaining budget."""
        limit = min(size, self.page_budget - len(self._visited), len(self._queue))
        batch: List[str] = []
        for _ in range(max(limit, 0)):
            url = self._queue.popleft()
            self._queued.discard(url)
            batch.append(url)
        return batch

    def mark_visited(self, url: str) -> None:
        self._visited.add(url)
