"""
Token 估算

Rough, provider-independent token accounting used for the transcript budget
and the observation cap. Exact counts are not needed: the budget only decides
when to start dropping old observations.
"""

from typing import Iterable

DEFAULT_CHARS_PER_TOKEN = 4


def estimate_tokens(text: str, chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Estimate tokens of a text (ceil of chars / chars_per_token)."""
    if not text:
        return 0
    return -(-len(text) // max(1, chars_per_token))


def estimate_total_tokens(texts: Iterable[str], chars_per_token: int = DEFAULT_CHARS_PER_TOKEN) -> int:
    """Estimate tokens of several texts."""
    return sum(estimate_tokens(t, chars_per_token) for t in texts)
