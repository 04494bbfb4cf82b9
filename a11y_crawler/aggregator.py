"""Collect page records into a run directory and write the run summary."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .models import PageRecord, RunSummary, RunTotals, SummaryPage

logger = logging.getLogger("a11y_crawler.aggregator")

SUMMARY_FILENAME = "summary.json"
PAGES_DIRNAME = "pages"
RULES_DIRNAME = "rules"
RULE_INDEX_FILENAME = "index.json"


def write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


class RunAggregator:
    """Write-through store for one run.

    Each record is persisted as soon as it is collected so a crash mid-run
    still leaves every finished page on disk. Totals are kept in memory and
    are never reconciled against the page files.
    """

    def __init__(self, run_dir: Path, scan_id: str, base_url: str, started_at: str) -> None:
        self.run_dir = run_dir
        self.pages_dir = run_dir / PAGES_DIRNAME
        self.scan_id = scan_id
        self.base_url = base_url
        self.started_at = started_at
        self.entries: List[SummaryPage] = []
        self.totals = RunTotals()
        self._rules: Dict[str, Dict[str, Any]] = {}
        self._slugs: Dict[str, str] = {}

    def open(self) -> None:
        self.pages_dir.mkdir(parents=True, exist_ok=True)

    def collect(self, record: PageRecord) -> None:
        previous = self._slugs.get(record.slug)
        if previous is not None and previous != record.url:
            logger.warning(
                "Slug %r for %s overwrites the page stored for %s",
                record.slug,
                record.url,
                previous,
            )
        self._slugs[record.slug] = record.url

        page_path = self.pages_dir / f"{record.slug}.json"
        write_json(page_path, record.to_dict())
        logger.debug("Saved page record to %s", page_path)

        self.entries.append(
            SummaryPage(
                url=record.url,
                status=record.status,
                slug=record.slug,
                violation_count=record.metrics.violations,
            )
        )
        self.totals.pages += 1
        self.totals.violations += record.metrics.violations
        self.totals.incomplete += record.metrics.incomplete
        self._index_rules(record)

    def _index_rules(self, record: PageRecord) -> None:
        for issue in record.issues:
            rule = self._rules.setdefault(
                issue.id,
                {
                    "help": issue.help,
                    "helpUrl": issue.help_url,
                    "impact": issue.impact,
                    "tags": list(issue.tags),
                    "pages": [],
                },
            )
            rule["pages"].append(
                {
                    "slug": record.slug,
                    "url": record.url,
                    "kind": issue.kind,
                    "nodeCount": len(issue.nodes),
                }
            )

    def rule_index(self) -> Dict[str, Dict[str, Any]]:
        index: Dict[str, Dict[str, Any]] = {}
        for rule_id in sorted(self._rules):
            rule = dict(self._rules[rule_id])
            rule["pages"] = sorted(rule["pages"], key=lambda page: (page["slug"], page["kind"]))
            index[rule_id] = rule
        return index

    def finalize(self, finished_at: str) -> RunSummary:
        summary = RunSummary(
            scan_id=self.scan_id,
            base_url=self.base_url,
            started_at=self.started_at,
            finished_at=finished_at,
            totals=RunTotals(
                pages=self.totals.pages,
                violations=self.totals.violations,
                incomplete=self.totals.incomplete,
            ),
            pages=sorted(self.entries, key=lambda entry: entry.slug),
        )
        write_json(self.run_dir / RULES_DIRNAME / RULE_INDEX_FILENAME, self.rule_index())
        write_json(self.run_dir / SUMMARY_FILENAME, summary.to_dict())
        logger.info("Wrote scan to %s", self.run_dir)
        return summary
