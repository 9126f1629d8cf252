from __future__ import annotations

import re

BULLET_RE = re.compile(r"^\s*(?:[-*•+]|(?:[0-9]{1,3}|[A-Za-z]{1,3})[.)])\s+(.*)$")

_LOOSE_START_RE = re.compile(r"^\s*(?:[0-9]|[-*•+]|[A-Za-z]\))")
_LOOSE_MARKER_RE = re.compile(r"^\s*(?:[-*•+]+|[0-9]{1,3}[.)]|[A-Za-z]\))\s*")


def extract_bullets(text: str, *, min_length: int = 0) -> list[str]:
    """Split free text into items led by bullet or enumerator markers.

    Unmarked non-blank lines are soft-wrap continuations of the current item;
    a blank line closes it. Items shorter than ``min_length`` are dropped.
    """
    if not text:
        return []

    items: list[str] = []
    parts: list[str] = []
    open_item = False

    def flush() -> None:
        nonlocal open_item
        item = " ".join(parts)
        if item and len(item) >= min_length:
            items.append(item)
        parts.clear()
        open_item = False

    for line in text.splitlines():
        match = BULLET_RE.match(line)
        if match:
            flush()
            open_item = True
            if match.group(1).strip():
                parts.append(match.group(1).strip())
        elif not line.strip():
            flush()
        elif open_item:
            # a bare marker still opens an item for the lines that follow
            parts.append(line.strip())
        # unmarked text before any marker is preamble, not an item

    flush()
    return items


def extract_marked_lines(text: str, *, min_length: int = 20) -> list[str]:
    """Looser single-line scan used when ``extract_bullets`` finds nothing.

    Accepts lines starting with a digit, a dash/bullet glyph or a ``a)``
    style marker, even without whitespace after the marker.
    """
    if not text:
        return []
    items: list[str] = []
    for line in text.splitlines():
        if not _LOOSE_START_RE.match(line):
            continue
        item = _LOOSE_MARKER_RE.sub("", line, count=1).strip()
        if len(item) >= min_length:
            items.append(item)
    return items
