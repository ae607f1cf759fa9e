"""
上下文管理模块

- ObservationCompressor: 单条工具输出的 token 上限（摘要 / 截断）
- TranscriptTruncator: 超出 token 预算时优先丢弃最早的 Observation
- token 估算工具
"""

from .token_tracker import estimate_tokens, estimate_total_tokens
from .compressor import CompressionResult, ObservationCompressor
from .truncator import DROPPED_NOTICE, TranscriptTruncator

__all__ = [
    "estimate_tokens",
    "estimate_total_tokens",
    "CompressionResult",
    "ObservationCompressor",
    "TranscriptTruncator",
    "DROPPED_NOTICE",
]
