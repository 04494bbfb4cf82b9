"""HTML parsing helpers for the rendered DOM."""

from __future__ import annotations

from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup


def extract_links(html: str, page_url: str) -> List[str]:
    """Return the absolute ``href`` of every anchor in document order.

    Relative links are resolved the way the browser resolves them, honouring
    a ``<base href>`` element when the document declares one.
    """
    soup = BeautifulSoup(html, "html.parser")
    base_url = page_url
    base_tag = soup.find("base", href=True)
    if base_tag and base_tag["href"].strip():
        base_url = urljoin(page_url, base_tag["href"].strip())

    links: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href:
            continue
        try:
            links.append(urljoin(base_url, href))
        except ValueError:
            continue
    return links
