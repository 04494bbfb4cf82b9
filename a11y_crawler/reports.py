"""Read-only lookups over persisted scan runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .aggregator import PAGES_DIRNAME, RULE_INDEX_FILENAME, RULES_DIRNAME, SUMMARY_FILENAME
from .config import DEFAULT_OUTPUT_ROOT
from .models import PageRecord, RunSummary

PathLike = Union[str, Path]


def _read_json(path: Path) -> Optional[Any]:
    if not path.is_file():
        return None
    return json.loads(path.read_text(encoding="utf-8"))


def latest_run_dir(base: PathLike = DEFAULT_OUTPUT_ROOT) -> Optional[Path]:
    """Return the most recent run directory; run ids sort chronologically."""
    base = Path(base)
    if not base.is_dir():
        return None
    runs = sorted(child.name for child in base.iterdir() if child.is_dir())
    return base / runs[-1] if runs else None


def _resolve(run_dir: Optional[PathLike], base: PathLike) -> Optional[Path]:
    if run_dir is not None:
        return Path(run_dir)
    return latest_run_dir(base)


def load_summary(
    run_dir: Optional[PathLike] = None, base: PathLike = DEFAULT_OUTPUT_ROOT
) -> Optional[RunSummary]:
    directory = _resolve(run_dir, base)
    if directory is None:
        return None
    data = _read_json(directory / SUMMARY_FILENAME)
    return RunSummary.from_dict(data) if data is not None else None


def load_page(
    slug: str, run_dir: Optional[PathLike] = None, base: PathLike = DEFAULT_OUTPUT_ROOT
) -> Optional[PageRecord]:
    directory = _resolve(run_dir, base)
    if directory is None or Path(slug).name != slug:
        return None
    data = _read_json(directory / PAGES_DIRNAME / f"{slug}.json")
    return PageRecord.from_dict(data, slug=slug) if data is not None else None


def load_rule_index(
    run_dir: Optional[PathLike] = None, base: PathLike = DEFAULT_OUTPUT_ROOT
) -> Dict[str, Dict[str, Any]]:
    directory = _resolve(run_dir, base)
    if directory is None:
        return {}
    return _read_json(directory / RULES_DIRNAME / RULE_INDEX_FILENAME) or {}


def list_rule_ids(
    run_dir: Optional[PathLike] = None, base: PathLike = DEFAULT_OUTPUT_ROOT
) -> List[str]:
    return list(load_rule_index(run_dir, base).keys())


def pages_for_rule(
    rule_id: str, run_dir: Optional[PathLike] = None, base: PathLike = DEFAULT_OUTPUT_ROOT
) -> List[Dict[str, Any]]:
    """Pages affected by ``rule_id`` with their node counts, ordered by slug.

    A page listing the rule both as a violation and as needs-review gets a
    single entry with the node counts added up.
    """
    rule = load_rule_index(run_dir, base).get(rule_id)
    if not rule:
        return []
    affected: Dict[str, Dict[str, Any]] = {}
    for page in rule.get("pages") or []:
        entry = affected.setdefault(
            page["slug"], {"url": page["url"], "slug": page["slug"], "nodeCount": 0}
        )
        entry["nodeCount"] += int(page.get("nodeCount", 0))
    return list(affected.values())
