"""Vocabulary tables driving the outfit node heuristics.

All matching is done on lower-cased names.
"""
from __future__ import annotations

from typing import Tuple

# Host integrations that live under the avatar but must never be toggled.
SYSTEM_KEYWORDS: Tuple[str, ...] = (
    "sps",
    "gogoloco",
    "gesturemanager",
    "vrcfury",
)

# Body infrastructure. Substring match, except "hair" which only excludes
# exactly (hair accessories are still outfit parts).
EXCLUDED_SUBSTRINGS: Tuple[str, ...] = (
    "armature",
    "body",
    "head",
    "eye",
    "teeth",
    "tongue",
)
EXCLUDED_EXACT: Tuple[str, ...] = ("hair",)

CLOTHING_VOCABULARY: Tuple[str, ...] = (
    "clothing",
    "clothes",
    "outfit",
    "accessory",
    "wearable",
    "hair",
    "shoes",
    "shirt",
    "pants",
    "skirt",
    "glasses",
    "hat",
    "jewelry",
    "necklace",
    "bracelet",
    "ring",
    "garter",
    "piercing",
    "collar",
    "choker",
)

# A node holding children named like this is treated as an outfit folder.
CHILD_FOLDER_VOCABULARY: Tuple[str, ...] = ("clothing", "clothes", "accessory")

# Children of a node named like this are treated as outfit parts.
PARENT_FOLDER_VOCABULARY: Tuple[str, ...] = ("clothing", "clothes", "outfit", "accessory")

# Creator naming convention for wearables ("A-Shirt", "H-Bow").
PART_MARKER = "-"

# Direct children of the avatar checked, in priority order, when guessing the
# outfit root. Exact match, case-insensitive.
OUTFIT_FOLDER_NAMES: Tuple[str, ...] = (
    "Outfit Manager",
    "Clothing",
    "Clothes",
    "Outfits",
    "Outfit",
    "Accessories",
    "Toggles",
    "Toggle",
    "Wearables",
    "Apparel",
    "Garments",
)

# Direct children never picked as the outfit root. Substring, case-insensitive.
EXCLUDED_ROOT_NAMES: Tuple[str, ...] = (
    "Armature",
    "Body",
    "Head",
    "Hair",
    "Eyes",
    "Teeth",
    "Tongue",
)
