"""MCP server exposing scan and report lookup tools."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from mcp.server.fastmcp import FastMCP

from .config import DEFAULT_OUTPUT_ROOT, DEFAULT_TAGS, CrawlConfig, RuleConfig
from .crawler import run_scan
from .reports import load_page, load_summary, pages_for_rule

logger = logging.getLogger("a11y_crawler.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="a11y-crawler")


@mcp.tool()
async def scan(
    url: str,
    max_pages: int = 10,
    concurrency: int = 2,
    output: str = str(DEFAULT_OUTPUT_ROOT),
    tags: Optional[List[str]] = None,
    rules: Optional[List[str]] = None,
    exclude_rules: Optional[List[str]] = None,
    best_practices: bool = False,
    include_incomplete: bool = False,
) -> Dict[str, Any]:
    """Crawl a site, audit each page with axe-core and return the run summary.

    Without ``tags`` or ``rules`` the WCAG 2 A and AA rule sets are run.
    """
    config = CrawlConfig(
        base_url=url,
        output_root=Path(output),
        max_pages=max_pages,
        concurrency=concurrency,
        include_incomplete=include_incomplete,
        rules=RuleConfig(
            tags=list(tags) if tags else list(DEFAULT_TAGS),
            include_rules=list(rules or []),
            exclude_rules=list(exclude_rules or []),
            best_practices=best_practices,
        ),
    )
    result = await run_scan(config)
    return result.summary.to_dict()


@mcp.tool()
def latest_summary(output: str = str(DEFAULT_OUTPUT_ROOT)) -> Optional[Dict[str, Any]]:
    """Return the summary of the most recent run, or nothing if none exists."""
    summary = load_summary(base=output)
    return summary.to_dict() if summary else None


@mcp.tool()
def page_detail(slug: str, output: str = str(DEFAULT_OUTPUT_ROOT)) -> Optional[Dict[str, Any]]:
    """Return the stored audit record of one page of the most recent run."""
    page = load_page(slug, base=output)
    return page.to_dict() if page else None


@mcp.tool()
def rule_pages(rule_id: str, output: str = str(DEFAULT_OUTPUT_ROOT)) -> List[Dict[str, Any]]:
    """List pages of the most recent run affected by an axe rule."""
    return pages_for_rule(rule_id, base=output)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
