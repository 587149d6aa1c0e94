"""Runtime configuration helpers for outfit engines."""
from __future__ import annotations

import os
from typing import Dict, List, Optional

DEFAULT_SELECTOR_PARAMETER = "OutfitIndex"
DEFAULT_LAYER_NAME = "OutfitManager"
DEFAULT_SUBMENU_NAME = "Outfits"


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def get_env() -> Optional[str]:
    return _get_env("ENV") or _get_env("APP_ENV")


def get_selector_parameter_name() -> str:
    return _get_env("OUTFIT_SELECTOR_PARAMETER") or DEFAULT_SELECTOR_PARAMETER


def get_layer_name() -> str:
    return _get_env("OUTFIT_LAYER_NAME") or DEFAULT_LAYER_NAME


def get_submenu_name() -> str:
    return _get_env("OUTFIT_SUBMENU_NAME") or DEFAULT_SUBMENU_NAME


def get_menu_icon_ref() -> Optional[str]:
    return _get_env("OUTFIT_MENU_ICON")


def get_extra_excluded_keywords() -> List[str]:
    raw = _get_env("OUTFIT_EXTRA_EXCLUDED_KEYWORDS") or ""
    return [kw.strip().lower() for kw in raw.split(",") if kw.strip()]


def get_slot_store_backend() -> str:
    return (_get_env("SLOT_STORE_BACKEND") or "memory").lower()


def get_firestore_project() -> Optional[str]:
    return _get_env("GCP_PROJECT") or _get_env("PROJECT_ID")


def config_snapshot() -> Dict[str, object]:
    return {
        "env": get_env(),
        "selector_parameter": get_selector_parameter_name(),
        "layer_name": get_layer_name(),
        "submenu_name": get_submenu_name(),
        "menu_icon_ref": get_menu_icon_ref(),
        "extra_excluded_keywords": get_extra_excluded_keywords(),
        "slot_store_backend": get_slot_store_backend(),
        "firestore_project": get_firestore_project(),
    }
