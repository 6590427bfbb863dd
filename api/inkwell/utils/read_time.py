"""Estimated reading time for editor documents."""

from __future__ import annotations

import math
import re
from typing import Any, Iterator

WORDS_PER_MINUTE = 225

_TAG_RE = re.compile(r"<[^>]+>")
_TEXT_BLOCKS = ("paragraph", "header", "quote")


def _list_item_texts(items: list[Any]) -> Iterator[str]:
    # Items are plain strings, or {"content": ..., "items": [...]} for nested lists
    for item in items:
        if isinstance(item, str):
            yield item
        elif isinstance(item, dict):
            if isinstance(item.get("content"), str):
                yield item["content"]
            if isinstance(item.get("items"), list):
                yield from _list_item_texts(item["items"])


def extract_text(content: dict[str, Any] | None) -> str:
    """Readable text of a document: paragraphs, headers, quotes and list items."""
    if not content:
        return ""
    parts: list[str] = []
    for block in content.get("blocks") or []:
        block_type = block.get("type")
        data = block.get("data") or {}
        if block_type in _TEXT_BLOCKS and isinstance(data.get("text"), str):
            parts.append(data["text"])
        elif block_type == "list" and isinstance(data.get("items"), list):
            parts.extend(_list_item_texts(data["items"]))
    return _TAG_RE.sub(" ", " ".join(parts))


def calculate_read_time(content: dict[str, Any] | None) -> int:
    """Minutes to read at 225 words per minute, rounded up, never less than 1."""
    words = len(extract_text(content).split())
    return max(1, math.ceil(words / WORDS_PER_MINUTE))
