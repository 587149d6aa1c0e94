"""Expression parameter and menu declarations handed to the host."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from outfit_engines.state_machine.models import ParameterType


class ParameterDecl(BaseModel):
    name: str
    value_type: ParameterType = ParameterType.INT
    default_value: float = 0
    saved: bool = True
    networked: bool = True


class ExpressionParameters(BaseModel):
    parameters: List[ParameterDecl] = Field(default_factory=list)

    def get(self, name: str) -> Optional[ParameterDecl]:
        return next((p for p in self.parameters if p.name == name), None)


class ControlType(str, Enum):
    BUTTON = "Button"
    TOGGLE = "Toggle"
    SUB_MENU = "SubMenu"
    RADIAL_PUPPET = "RadialPuppet"


class MenuControl(BaseModel):
    name: str
    type: ControlType = ControlType.TOGGLE
    parameter: Optional[str] = None
    value: float = 0
    icon_ref: Optional[str] = None
    sub_parameters: List[str] = Field(default_factory=list)
    sub_menu: Optional[ExpressionsMenu] = None


class ExpressionsMenu(BaseModel):
    name: str = ""
    controls: List[MenuControl] = Field(default_factory=list)

    def control(self, name: str) -> Optional[MenuControl]:
        return next((c for c in self.controls if c.name == name), None)


MenuControl.model_rebuild()
