"""Utility helpers for URL normalization, slugs and timestamps."""

from __future__ import annotations

import datetime as dt
import re
from typing import Optional, Tuple
from urllib.parse import urldefrag, urljoin, urlsplit, urlunsplit

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
PATH_UNSAFE_PATTERN = re.compile(r"[^a-zA-Z0-9/_-]")
INDEX_SLUG = "index"
ALLOWED_SCHEMES = {"http", "https"}
DEFAULT_PORTS = {"http": 80, "https": 443}

Origin = Tuple[str, str, Optional[int]]


def slugify(value: str, fallback: str = "page") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def normalize_url(href: str, base: Optional[str] = None) -> Optional[str]:
    """Resolve ``href`` against ``base`` and return a canonical absolute URL.

    The fragment is dropped, scheme and host are lower-cased, default ports
    are removed and an empty path becomes ``/``. Returns ``None`` for
    anything that is not a parseable http(s) URL.
    """
    if not href:
        return None
    try:
        joined = urljoin(base, href.strip()) if base else href.strip()
        joined, _fragment = urldefrag(joined)
        parts = urlsplit(joined)
        port = parts.port
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    hostname = (parts.hostname or "").lower()
    if scheme not in ALLOWED_SCHEMES or not hostname:
        return None

    netloc = hostname
    if ":" in hostname:
        netloc = f"[{hostname}]"
    if port is not None and port != DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    return urlunsplit((scheme, netloc, parts.path or "/", parts.query, ""))


def origin_of(url: str) -> Origin:
    """Return the ``(scheme, host, port)`` origin of an already-normalized URL."""
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    return scheme, (parts.hostname or "").lower(), parts.port or DEFAULT_PORTS.get(scheme)


def is_same_origin(url: str, origin: Origin) -> bool:
    try:
        return origin_of(url) == origin
    except ValueError:
        return False


def slug_from_url(url: str) -> str:
    """Derive the storage key for a page from its URL path.

    The root path maps to ``index``. Query strings are ignored, so URLs that
    differ only in their query share a slug.
    """
    path = urlsplit(url).path or "/"
    if path == "/":
        return INDEX_SLUG
    if path.endswith("/"):
        path = path[:-1]
    raw = PATH_UNSAFE_PATTERN.sub("-", path).lstrip("/")
    return slugify(raw, fallback=INDEX_SLUG)


def utc_now() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def isoformat_z(moment: dt.datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds and a ``Z`` suffix."""
    moment = moment.astimezone(dt.timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def run_id_from(moment: dt.datetime) -> str:
    """Build a directory-safe run identifier that sorts chronologically."""
    return isoformat_z(moment).replace(":", "-").replace(".", "-")
