"""JSON prompt catalog rendered with ``string.Template`` placeholders."""
from __future__ import annotations

import json
from pathlib import Path
from string import Template
from typing import Any

from deep_research.config import settings

DEFAULT_PROMPTS_PATH = Path(__file__).resolve().parents[1] / "prompts" / "prompts.json"


class PromptCatalog:
    """Dotted-key lookup over a JSON document, reloaded when the file changes."""

    def __init__(self, path: Path):
        self.path = path
        self._payload: dict[str, Any] | None = None
        self._mtime_ns: int | None = None

    def load(self) -> dict[str, Any]:
        mtime_ns = self.path.stat().st_mtime_ns
        if self._payload is not None and self._mtime_ns == mtime_ns:
            return self._payload
        payload = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(payload, dict):
            raise ValueError(f"Prompt catalog must be a JSON object: {self.path}")
        self._payload = payload
        self._mtime_ns = mtime_ns
        return payload

    def get(self, key: str) -> str:
        node: Any = self.load()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(f"Prompt key not found: {key}")
            node = node[part]
        if isinstance(node, list) and all(isinstance(line, str) for line in node):
            # multi-line prompts are stored as a list of lines
            return "\n".join(node)
        if not isinstance(node, str):
            raise TypeError(f"Prompt key must map to a string: {key}")
        return node

    def render(self, key: str, **values: Any) -> str:
        template = Template(self.get(key))
        try:
            return template.substitute(**values)
        except KeyError as exc:
            missing = str(exc.args[0])
            raise KeyError(f"Missing template value '{missing}' for prompt '{key}'") from exc

    def clear(self) -> None:
        self._payload = None
        self._mtime_ns = None


_catalog: PromptCatalog | None = None


def catalog() -> PromptCatalog:
    global _catalog
    path = Path(settings.prompts_path) if settings.prompts_path.strip() else DEFAULT_PROMPTS_PATH
    if _catalog is None or _catalog.path != path:
        _catalog = PromptCatalog(path)
    return _catalog


def render_prompt(key: str, **values: Any) -> str:
    return catalog().render(key, **values)
