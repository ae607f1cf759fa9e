"""
Observation 压缩器

负责：
1. 判断工具输出是否超出单条 Observation 的 token 上限
2. 可选：调用 LLM 摘要（summarizer）
3. 降级策略：摘要失败或未配置时使用首尾截断
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Optional

from .token_tracker import DEFAULT_CHARS_PER_TOKEN, estimate_tokens

logger = logging.getLogger(__name__)

Summarizer = Callable[[str, int], Awaitable[str]]

TRUNCATION_MARKER = "\n... [{omitted} chars omitted] ...\n"


@dataclass
class CompressionResult:
    """压缩结果"""
    text: str
    before_tokens: int
    after_tokens: int
    strategy: Literal["none", "summarize", "truncate"]

    @property
    def compressed(self) -> bool:
        return self.strategy != "none"


class ObservationCompressor:
    """Keeps single tool observations inside a token cap.

    Args:
        max_tokens: cap for one observation
        chars_per_token: estimate used for the cap
        summarizer: optional ``async (text, max_tokens) -> summary``; falls back
            to head/tail truncation when it fails or its summary is still too long
    """

    def __init__(
        self,
        max_tokens: int,
        chars_per_token: int = DEFAULT_CHARS_PER_TOKEN,
        summarizer: Optional[Summarizer] = None,
    ) -> None:
        if max_tokens < 1:
            raise ValueError("max_tokens must be positive")
        self.max_tokens = max_tokens
        self.chars_per_token = chars_per_token
        self.summarizer = summarizer

    @property
    def max_chars(self) -> int:
        return self.max_tokens * self.chars_per_token

    def with_limit(self, max_tokens: int) -> "ObservationCompressor":
        """Same compressor with a different cap (per-task budgets)."""
        return ObservationCompressor(max(1, max_tokens), self.chars_per_token, self.summarizer)

    async def compress(self, text: str) -> CompressionResult:
        before = estimate_tokens(text, self.chars_per_token)
        if before <= self.max_tokens:
            return CompressionResult(text=text, before_tokens=before, after_tokens=before, strategy="none")

        if self.summarizer is not None:
            try:
                summary = (await self.summarizer(text, self.max_tokens)).strip()
            except Exception as e:
                logger.warning(f"Observation summarization failed, falling back to truncation: {e}")
            else:
                after = estimate_tokens(summary, self.chars_per_token)
                if summary and after <= self.max_tokens:
                    logger.info(f"Observation summarized: ~{before} → ~{after} tokens")
                    return CompressionResult(text=summary, before_tokens=before, after_tokens=after, strategy="summarize")
                logger.warning("Observation summary still over the cap, truncating instead")

        truncated = self.truncate(text, self.max_chars)
        after = estimate_tokens(truncated, self.chars_per_token)
        logger.info(f"Observation truncated: ~{before} → ~{after} tokens")
        return CompressionResult(text=truncated, before_tokens=before, after_tokens=after, strategy="truncate")

    @staticmethod
    def truncate(text: str, max_chars: int) -> str:
        """Keep the head and the tail of ``text`` within ``max_chars``."""
        if len(text) <= max_chars:
            return text
        omitted = len(text) - max_chars
        marker = TRUNCATION_MARKER.format(omitted=omitted)
        room = max_chars - len(marker)
        if room <= 0:
            return text[:max_chars]
        head = room * 2 // 3
        tail = room - head
        return text[:head] + marker + (text[-tail:] if tail else "")
