"""
Transcript 截断器

When the prompt would exceed the task's token budget, drop the oldest
Observation entries first. The system prompt, the plan and the task itself are
never part of the droppable transcript.
"""

from __future__ import annotations

import logging
from typing import List, Tuple

from reactAgent.schema import TranscriptEntry

from .token_tracker import DEFAULT_CHARS_PER_TOKEN, estimate_tokens

logger = logging.getLogger(__name__)

DROPPED_NOTICE = "[earlier observations dropped to stay within the token budget]"


class TranscriptTruncator:
    """Budget-driven trimming of the step transcript."""

    def __init__(self, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> None:
        self.chars_per_token = chars_per_token

    def entry_tokens(self, entry: TranscriptEntry) -> int:
        return estimate_tokens(entry.content, self.chars_per_token)

    def total_tokens(self, entries: List[TranscriptEntry]) -> int:
        return sum(self.entry_tokens(e) for e in entries)

    def trim(
        self,
        entries: List[TranscriptEntry],
        budget: int,
        fixed_tokens: int = 0,
    ) -> Tuple[List[TranscriptEntry], int]:
        """Drop oldest observations until the prompt fits the budget.

        Args:
            entries: transcript, oldest first
            budget: token budget for the whole prompt
            fixed_tokens: tokens of the parts that are never dropped

        Returns:
            (kept entries, number of dropped observations). When nothing but
            model replies is left the result may still exceed the budget.
        """
        kept = list(entries)
        total = fixed_tokens + self.total_tokens(kept)
        dropped = 0
        while total > budget:
            index = next((i for i, e in enumerate(kept) if e.is_observation), None)
            if index is None:
                break
            total -= self.entry_tokens(kept.pop(index))
            dropped += 1

        if dropped:
            logger.warning(
                f"Transcript trimmed: dropped {dropped} observation(s), ~{total} tokens (budget {budget})"
            )
        return kept, dropped
