"""Configuration objects and constants for the crawler."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

DEFAULT_OUTPUT_ROOT = Path("data") / "scans"
DEFAULT_TAGS = ("wcag2a", "wcag2aa")
BEST_PRACTICE_TAG = "best-practice"
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
)


@dataclass
class RuleConfig:
    """Which axe rules to run and which result categories to keep."""

    tags: List[str] = field(default_factory=lambda: list(DEFAULT_TAGS))
    include_rules: List[str] = field(default_factory=list)
    exclude_rules: List[str] = field(default_factory=list)
    best_practices: bool = False

    @property
    def effective_tags(self) -> List[str]:
        tags = list(self.tags)
        if self.best_practices and BEST_PRACTICE_TAG not in tags:
            tags.append(BEST_PRACTICE_TAG)
        return tags

    def to_axe_options(self, include_incomplete: bool = False) -> Dict[str, Any]:
        """Translate the rule selection into an ``axe.run`` options object.

        axe accepts a single ``runOnly`` type, so an explicit rule list wins
        over tags. Passes are still counted by axe even though only
        violations (and optionally incomplete) get full node detail.
        """
        options: Dict[str, Any] = {}
        if self.include_rules:
            options["runOnly"] = {"type": "rule", "values": list(self.include_rules)}
        elif self.effective_tags:
            options["runOnly"] = {"type": "tag", "values": self.effective_tags}
        if self.exclude_rules:
            options["rules"] = {rule_id: {"enabled": False} for rule_id in self.exclude_rules}
        result_types = ["violations"]
        if include_incomplete:
            result_types.append("incomplete")
        options["resultTypes"] = result_types
        return options


@dataclass
class CrawlConfig:
    """Top-level settings that control crawling and auditing behaviour."""

    base_url: str
    output_root: Path = DEFAULT_OUTPUT_ROOT
    max_pages: int = 50
    concurrency: int = 2
    navigation_timeout: float = 45.0
    wait_after_load: float = 0.0
    include_incomplete: bool = False
    headless: bool = True
    rules: RuleConfig = field(default_factory=RuleConfig)
    viewport_width: int = 1366
    viewport_height: int = 920
    user_agent: str = DEFAULT_USER_AGENT
    locale: str = "en-US"
