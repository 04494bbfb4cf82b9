"""Accessibility evaluation of loaded pages with axe-core."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

from axe_playwright_python.async_playwright import Axe

from .browser import LoadedPage
from .config import RuleConfig

logger = logging.getLogger("a11y_crawler.evaluator")


@dataclass
class EvaluationResult:
    """Raw axe result lists, in the order the engine reported them."""

    violations: List[Dict[str, Any]] = field(default_factory=list)
    incomplete: List[Dict[str, Any]] = field(default_factory=list)
    passes: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def from_axe_response(cls, response: Dict[str, Any]) -> "EvaluationResult":
        return cls(
            violations=list(response.get("violations") or []),
            incomplete=list(response.get("incomplete") or []),
            passes=list(response.get("passes") or []),
        )


class Evaluator(Protocol):
    async def evaluate(
        self,
        page: LoadedPage,
        rules: RuleConfig,
        include_incomplete: bool = False,
    ) -> EvaluationResult:
        """Run the rule engine against an already loaded page."""


class AxeEvaluator:
    """Injects axe-core into the Playwright page and runs it."""

    def __init__(self) -> None:
        self._axe = Axe()

    async def evaluate(
        self,
        page: LoadedPage,
        rules: RuleConfig,
        include_incomplete: bool = False,
    ) -> EvaluationResult:
        options = rules.to_axe_options(include_incomplete=include_incomplete)
        logger.debug("Running axe on %s with %s", page.final_url, options)
        results = await self._axe.run(page.handle, options=options)
        return EvaluationResult.from_axe_response(results.response)
