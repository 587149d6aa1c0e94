"""Outfit slot store models and repositories."""

from outfit_engines.slot_store.models import ObjectState, Slot, SlotStore  # noqa: F401
from outfit_engines.slot_store.repository import (  # noqa: F401
    InMemorySlotStoreRepository,
    SlotStoreRepository,
)
