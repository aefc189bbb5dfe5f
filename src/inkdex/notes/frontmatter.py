"""YAML front-matter parser for note files."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

import yaml

# Opening fence, YAML block, closing fence; the closing fence may end the file.
_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)


@dataclass
class ParsedMarkdown:
    """Front-matter metadata plus the remaining body."""

    content: str
    title: str | None = None
    tags: list[str] = field(default_factory=list)
    url: str | None = None


def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, (dict, list)):
        return None
    text = str(value).strip()
    return text or None


def _as_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [t.strip() for t in value.split(",") if t.strip()]
    if isinstance(value, (list, tuple, set)):
        return [str(t) for t in value if t is not None]
    return [str(value)]


def parse_frontmatter(raw: str) -> ParsedMarkdown:
    """Split YAML front matter from body text.

    Malformed or absent front matter yields empty metadata with the raw input
    as the content.
    """
    match = _FRONTMATTER_RE.match(raw)
    if not match:
        return ParsedMarkdown(content=raw)
    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return ParsedMarkdown(content=raw)
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        return ParsedMarkdown(content=raw)

    return ParsedMarkdown(
        content=raw[match.end() :],
        title=_as_text(meta.get("title")),
        tags=_as_tags(meta.get("tags")),
        url=_as_text(meta.get("url")),
    )
