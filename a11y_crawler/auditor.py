"""Audit a single page: load it, evaluate it and harvest its links."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .browser import LoadedPage, Renderer
from .config import RuleConfig
from .evaluator import EvaluationResult, Evaluator
from .models import INCOMPLETE, VIOLATION, Issue, IssueNode, PageMetrics, PageRecord
from .utils import Origin, is_same_origin, isoformat_z, normalize_url, slug_from_url, utc_now

logger = logging.getLogger("a11y_crawler.auditor")


@dataclass
class PageOutcome:
    """A finished page record plus the same-origin links found on it."""

    record: PageRecord
    links: List[str] = field(default_factory=list)


def issue_from_axe(result: Dict[str, Any], kind: str) -> Issue:
    """Convert one axe rule result into an ``Issue`` keeping node order."""
    return Issue(
        kind=kind,
        id=result.get("id", ""),
        impact=result.get("impact"),
        help=result.get("help", ""),
        help_url=result.get("helpUrl", ""),
        tags=list(result.get("tags") or []),
        nodes=[
            IssueNode(
                html=node.get("html", ""),
                target=list(node.get("target") or []),
                failure_summary=node.get("failureSummary"),
            )
            for node in result.get("nodes") or []
        ],
    )


def build_page_record(
    url: str,
    loaded: LoadedPage,
    evaluation: EvaluationResult,
    include_incomplete: bool,
) -> PageRecord:
    issues = [issue_from_axe(result, VIOLATION) for result in evaluation.violations]
    if include_incomplete:
        issues.extend(issue_from_axe(result, INCOMPLETE) for result in evaluation.incomplete)
    return PageRecord(
        url=url,
        slug=slug_from_url(url),
        status=loaded.status,
        title=loaded.title or None,
        timestamp=isoformat_z(utc_now()),
        metrics=PageMetrics(
            violations=len(evaluation.violations),
            incomplete=len(evaluation.incomplete),
            passes=len(evaluation.passes),
        ),
        issues=issues,
    )


def same_origin_links(hrefs: Iterable[str], page_url: str, origin: Origin) -> List[str]:
    """Normalize ``hrefs`` and keep unique same-origin ones in encounter order."""
    seen = set()
    links: List[str] = []
    for href in hrefs:
        link = normalize_url(href, page_url)
        if not link or link in seen or not is_same_origin(link, origin):
            continue
        seen.add(link)
        links.append(link)
    return links


class PageAuditor:
    """Runs the load/evaluate/link-harvest lifecycle for one URL at a time.

    Failures never escape ``audit``: they are logged and reported as ``None``
    so the run carries on with the rest of the frontier.
    """

    def __init__(
        self,
        renderer: Renderer,
        evaluator: Evaluator,
        origin: Origin,
        rules: Optional[RuleConfig] = None,
        navigation_timeout: float = 45.0,
        include_incomplete: bool = False,
    ) -> None:
        self.renderer = renderer
        self.evaluator = evaluator
        self.origin = origin
        self.rules = rules or RuleConfig()
        self.navigation_timeout = navigation_timeout
        self.include_incomplete = include_incomplete

    async def audit(self, url: str) -> Optional[PageOutcome]:
        try:
            async with self.renderer.load(url, self.navigation_timeout) as loaded:
                evaluation = await self.evaluator.evaluate(
                    loaded, self.rules, include_incomplete=self.include_incomplete
                )
                record = build_page_record(url, loaded, evaluation, self.include_incomplete)
                links = same_origin_links(loaded.links, loaded.final_url or url, self.origin)
        except (PlaywrightTimeoutError, asyncio.TimeoutError) as exc:
            logger.error("Timeout while loading %s: %s", url, exc)
            return None
        except Exception:  # pylint: disable=broad-except
            logger.exception("Error processing %s", url)
            return None

        logger.info(
            "Audited %s -> status %d, %d violations, %d incomplete, %d links",
            url,
            record.status,
            record.metrics.violations,
            record.metrics.incomplete,
            len(links),
        )
        return PageOutcome(record=record, links=links)
