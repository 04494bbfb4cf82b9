"""Data models persisted by a scan run.

Every model serializes to the camelCase JSON shape read by the reporting
frontend via ``to_dict`` and can be rebuilt with ``from_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

VIOLATION = "violation"
INCOMPLETE = "incomplete"


def _drop_none(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass
class IssueNode:
    """A single offending DOM node reported for a rule."""

    html: str
    target: List[Any]
    failure_summary: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "html": self.html,
                "target": list(self.target),
                "failureSummary": self.failure_summary,
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IssueNode":
        return cls(
            html=data.get("html", ""),
            target=list(data.get("target") or []),
            failure_summary=data.get("failureSummary"),
        )


@dataclass
class Issue:
    """One rule-level finding, either a violation or a needs-review result."""

    kind: str
    id: str
    help: str
    help_url: str
    tags: List[str] = field(default_factory=list)
    nodes: List[IssueNode] = field(default_factory=list)
    impact: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "kind": self.kind,
                "id": self.id,
                "impact": self.impact,
                "help": self.help,
                "helpUrl": self.help_url,
                "tags": list(self.tags),
                "nodes": [node.to_dict() for node in self.nodes],
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        return cls(
            kind=data.get("kind", VIOLATION),
            id=data["id"],
            help=data.get("help", ""),
            help_url=data.get("helpUrl", ""),
            tags=list(data.get("tags") or []),
            nodes=[IssueNode.from_dict(node) for node in data.get("nodes") or []],
            impact=data.get("impact"),
        )


@dataclass
class PageMetrics:
    violations: int = 0
    incomplete: int = 0
    passes: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "violations": self.violations,
            "incomplete": self.incomplete,
            "passes": self.passes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PageMetrics":
        return cls(
            violations=int(data.get("violations", 0)),
            incomplete=int(data.get("incomplete", 0)),
            passes=int(data.get("passes", 0)),
        )


@dataclass
class PageRecord:
    """Audit outcome for a single page, stored as ``pages/<slug>.json``."""

    url: str
    slug: str
    status: int
    timestamp: str
    metrics: PageMetrics
    issues: List[Issue] = field(default_factory=list)
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return _drop_none(
            {
                "url": self.url,
                "status": self.status,
                "title": self.title,
                "timestamp": self.timestamp,
                "metrics": self.metrics.to_dict(),
                "issues": [issue.to_dict() for issue in self.issues],
            }
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], slug: str) -> "PageRecord":
        return cls(
            url=data["url"],
            slug=slug,
            status=int(data.get("status", 0)),
            timestamp=data.get("timestamp", ""),
            metrics=PageMetrics.from_dict(data.get("metrics") or {}),
            issues=[Issue.from_dict(issue) for issue in data.get("issues") or []],
            title=data.get("title"),
        )


@dataclass
class SummaryPage:
    """Lightweight index entry for a page within a run summary."""

    url: str
    status: int
    slug: str
    violation_count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.url,
            "status": self.status,
            "slug": self.slug,
            "violationCount": self.violation_count,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SummaryPage":
        return cls(
            url=data["url"],
            status=int(data.get("status", 0)),
            slug=data["slug"],
            violation_count=int(data.get("violationCount", 0)),
        )


@dataclass
class RunTotals:
    pages: int = 0
    violations: int = 0
    incomplete: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "pages": self.pages,
            "violations": self.violations,
            "incomplete": self.incomplete,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunTotals":
        return cls(
            pages=int(data.get("pages", 0)),
            violations=int(data.get("violations", 0)),
            incomplete=int(data.get("incomplete", 0)),
        )


@dataclass
class RunSummary:
    """Run-level summary stored as ``summary.json``."""

    scan_id: str
    base_url: str
    started_at: str
    finished_at: str
    totals: RunTotals
    pages: List[SummaryPage] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scanId": self.scan_id,
            "baseUrl": self.base_url,
            "startedAt": self.started_at,
            "finishedAt": self.finished_at,
            "totals": self.totals.to_dict(),
            "pages": [page.to_dict() for page in self.pages],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RunSummary":
        return cls(
            scan_id=data["scanId"],
            base_url=data["baseUrl"],
            started_at=data.get("startedAt", ""),
            finished_at=data.get("finishedAt", ""),
            totals=RunTotals.from_dict(data.get("totals") or {}),
            pages=[SummaryPage.from_dict(page) for page in data.get("pages") or []],
        )
