"""Message formatting utilities."""

from __future__ import annotations

from typing import Any


def stringify_content(content: Any) -> str:
    """Convert model reply content to string.

    Handles:
    - Message objects (uses ``.content``)
    - List content (multimodal messages)
    - Dict content with "text" field
    - Simple string content
    """
    if hasattr(content, "content"):
        content = content.content
    if isinstance(content, list):
        pieces: list[str] = []
        for item in content:
            if isinstance(item, dict) and "text" in item:
                pieces.append(str(item["text"]))
            else:
                pieces.append(str(item))
        return "\n".join(pieces)
    if isinstance(content, dict) and "text" in content:
        return str(content["text"])
    return str(content)


__all__ = ["stringify_content"]
