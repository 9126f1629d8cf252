from __future__ import annotations

import re
from urllib.parse import urlparse

from bs4 import BeautifulSoup


def is_valid_url(url: str) -> bool:
    """Basic http(s) URL validation."""
    try:
        result = urlparse(url)
        return all([result.scheme in ("http", "https"), result.netloc])
    except Exception:
        return False


def extract_domain(url: str) -> str:
    """Extract domain from URL for display."""
    try:
        return urlparse(url).netloc
    except Exception:
        return url


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text.replace("\xa0", " ")).strip()


def extract_paragraphs(markup: str, *, min_length: int = 50) -> str:
    """Text of every ``<p>`` element, short paragraphs dropped, blank-line joined."""
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    paragraphs: list[str] = []
    for node in soup.find_all("p"):
        text = collapse_whitespace(node.get_text(" "))
        if len(text) >= min_length:
            paragraphs.append(text)
    return "\n\n".join(paragraphs)


def truncate_chars(text: str, max_chars: int) -> str:
    if max_chars <= 0 or len(text) <= max_chars:
        return text
    return text[:max_chars]
