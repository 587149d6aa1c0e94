"""Exception types shared by the outfit engines.

Only contract violations are exceptions. Recoverable conditions (missing
tracked objects, empty captures, sibling name collisions, malformed slot
arrays) travel as `Finding` records instead.
"""
from __future__ import annotations


class OutfitEngineError(Exception):
    """Base class for outfit engine errors."""


class PathUnreachable(OutfitEngineError, ValueError):
    """Target node is not a descendant of the chosen root."""

    def __init__(self, root_name: str, target_name: str) -> None:
        super().__init__(f"Node '{target_name}' is not under root '{root_name}'")
        self.root_name = root_name
        self.target_name = target_name


class SlotIndexError(OutfitEngineError, IndexError):
    def __init__(self, slot_index: int, slot_count: int) -> None:
        super().__init__(f"Slot index {slot_index} out of range (0-{slot_count - 1})")
        self.slot_index = slot_index


class StoreNotFound(OutfitEngineError, KeyError):
    def __init__(self, avatar_identity: str) -> None:
        super().__init__(f"No slot store for avatar {avatar_identity}")
        self.avatar_identity = avatar_identity


class GenerationRefused(OutfitEngineError):
    """Raised before any output is produced when the store cannot be compiled."""
