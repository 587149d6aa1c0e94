"""Selector parameter and menu declarations.

Merges return copies; host documents passed in are never modified.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from outfit_engines.config import runtime_config
from outfit_engines.host_assets.models import (
    ControlType,
    ExpressionParameters,
    ExpressionsMenu,
    MenuControl,
    ParameterDecl,
)
from outfit_engines.slot_store.models import SlotStore
from outfit_engines.state_machine.models import NEUTRAL_SELECTOR_VALUE, ParameterType

logger = logging.getLogger(__name__)

RADIAL_CONTROL_NAME = "Select Outfit"
PARAMETER_BIT_BUDGET = 256
_BIT_COST = {ParameterType.INT: 8, ParameterType.FLOAT: 8, ParameterType.BOOL: 1}


def build_selector_parameter(name: Optional[str] = None) -> ParameterDecl:
    return ParameterDecl(
        name=name or runtime_config.get_selector_parameter_name(),
        value_type=ParameterType.INT,
        default_value=NEUTRAL_SELECTOR_VALUE,
        saved=True,
        networked=True,
    )


def merge_selector_parameter(
    params: Optional[ExpressionParameters],
    selector: Optional[ParameterDecl] = None,
) -> ExpressionParameters:
    """Update the selector entry in place, or append it."""
    selector = selector or build_selector_parameter()
    merged = params.model_copy(deep=True) if params is not None else ExpressionParameters()
    existing = merged.get(selector.name)
    if existing is None:
        merged.parameters.append(selector)
        return merged
    existing.value_type = selector.value_type
    existing.default_value = selector.default_value
    existing.saved = selector.saved
    logger.debug("Updated existing parameter '%s'", selector.name)
    return merged


def synced_bit_cost(params: Iterable[ParameterDecl]) -> int:
    return sum(_BIT_COST.get(p.value_type, 0) for p in params if p.networked)


def build_outfit_menu(
    store: SlotStore,
    parameter: Optional[str] = None,
    menu_icon_ref: Optional[str] = None,
) -> ExpressionsMenu:
    """Radial selector plus one toggle per configured slot."""
    parameter = parameter or runtime_config.get_selector_parameter_name()
    if menu_icon_ref is None:
        menu_icon_ref = runtime_config.get_menu_icon_ref()

    menu = ExpressionsMenu(name=runtime_config.get_submenu_name())
    menu.controls.append(
        MenuControl(
            name=RADIAL_CONTROL_NAME,
            type=ControlType.RADIAL_PUPPET,
            icon_ref=menu_icon_ref,
            sub_parameters=[parameter],
        )
    )
    for i in store.configured_indices():
        slot = store.slots[i]
        menu.controls.append(
            MenuControl(
                name=slot.display_name(i),
                type=ControlType.TOGGLE,
                parameter=parameter,
                value=i,
                icon_ref=slot.icon_ref or menu_icon_ref,
            )
        )
    return menu


def merge_main_menu(
    main: Optional[ExpressionsMenu],
    submenu: ExpressionsMenu,
    submenu_name: Optional[str] = None,
    icon_ref: Optional[str] = None,
) -> ExpressionsMenu:
    """Replace any same-named submenu entry in the main menu with `submenu`."""
    submenu_name = submenu_name or runtime_config.get_submenu_name()
    if icon_ref is None:
        icon_ref = runtime_config.get_menu_icon_ref()
    merged = main.model_copy(deep=True) if main is not None else ExpressionsMenu()
    before = len(merged.controls)
    merged.controls = [c for c in merged.controls if c.name != submenu_name]
    if len(merged.controls) != before:
        logger.debug("Replaced existing '%s' submenu entry", submenu_name)
    merged.controls.append(
        MenuControl(
            name=submenu_name,
            type=ControlType.SUB_MENU,
            icon_ref=icon_ref,
            sub_menu=submenu.model_copy(deep=True),
        )
    )
    return merged
