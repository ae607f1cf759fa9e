"""Working memory exports."""

from .working_memory import MERGE_KEY_PREFIX, MemoryEntry, MemoryScope, WorkingMemory, merge_key

__all__ = ["WorkingMemory", "MemoryEntry", "MemoryScope", "merge_key", "MERGE_KEY_PREFIX"]
