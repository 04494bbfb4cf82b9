from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

from a11y_crawler.browser import LoadedPage
from a11y_crawler.config import RuleConfig
from a11y_crawler.evaluator import EvaluationResult


def axe_result(rule_id: str, impact: Optional[str] = "serious", nodes: int = 1) -> Dict[str, Any]:
    return {
        "id": rule_id,
        "impact": impact,
        "help": f"Help for {rule_id}",
        "helpUrl": f"https://dequeuniversity.com/rules/axe/4.8/{rule_id}",
        "tags": ["wcag2a"],
        "nodes": [
            {
                "html": f"<div id=\"n{i}\"></div>",
                "target": [f"#n{i}"],
                "failureSummary": f"Fix node {i}",
            }
            for i in range(nodes)
        ],
    }


@dataclass
class FakePage:
    links: List[str] = field(default_factory=list)
    status: int = 200
    title: str = "Page"
    violations: List[Dict[str, Any]] = field(default_factory=list)
    incomplete: List[Dict[str, Any]] = field(default_factory=list)
    passes: int = 0
    timeout: bool = False
    evaluation_error: bool = False
    delay: float = 0.0


class FakeRenderer:
    """Serves pages from a dict keyed by URL and records how it was used."""

    def __init__(self, pages: Dict[str, FakePage]) -> None:
        self.pages = pages
        self.loads: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.started = False
        self.stopped = False

    async def __aenter__(self) -> "FakeRenderer":
        self.started = True
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.stopped = True

    @asynccontextmanager
    async def load(self, url: str, timeout: float):
        self.loads.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            page = self.pages.get(url)
            if page is not None and page.delay:
                await asyncio.sleep(page.delay)
            if page is None:
                page = FakePage(status=404, title="Not found")
            if page.timeout:
                raise asyncio.TimeoutError(f"Timeout {timeout}s exceeded")
            yield LoadedPage(
                url=url,
                final_url=url,
                status=page.status,
                title=page.title,
                links=list(page.links),
                handle=page,
            )
        finally:
            self.in_flight -= 1


class FakeEvaluator:
    def __init__(self) -> None:
        self.calls: List[str] = []
        self.rules: List[RuleConfig] = []

    async def evaluate(self, page: LoadedPage, rules: RuleConfig, include_incomplete: bool = False):
        self.calls.append(page.url)
        self.rules.append(rules)
        await asyncio.sleep(0)
        fake: FakePage = page.handle
        if fake.evaluation_error:
            raise RuntimeError("axe exploded")
        return EvaluationResult(
            violations=list(fake.violations),
            incomplete=list(fake.incomplete),
            passes=[{"id": f"pass-{i}", "nodes": []} for i in range(fake.passes)],
        )


class FailingRenderer(FakeRenderer):
    async def __aenter__(self) -> "FailingRenderer":
        raise RuntimeError("Executable doesn't exist")


@pytest.fixture
def evaluator() -> FakeEvaluator:
    return FakeEvaluator()
