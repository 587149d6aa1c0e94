"""Finding records shared by every outfit engine."""
from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class Severity(str, Enum):
    INFO = "Info"
    WARNING = "Warning"
    ERROR = "Error"


class FindingCode(str, Enum):
    MISSING_TRACKED_OBJECT = "MissingTrackedObject"
    NO_RESOLVABLE_PATHS = "NoResolvablePaths"
    AMBIGUOUS_NAME = "AmbiguousName"
    INVALID_STORE_SHAPE = "InvalidStoreShape"
    NO_CONFIGURED_SLOTS = "NoConfiguredSlots"
    SELECTOR_MISSING = "SelectorMissing"
    SELECTOR_WRONG_TYPE = "SelectorWrongType"
    MENU_MISSING = "MenuMissing"
    MENU_ENTRY_MISSING = "MenuEntryMissing"
    MENU_WRONG_PARAMETER = "MenuWrongParameter"
    MENU_WRONG_VALUE = "MenuWrongValue"
    MENU_WRONG_CONTROL_TYPE = "MenuWrongControlType"
    LAYER_MISSING = "LayerMissing"
    LAYER_EMPTY = "LayerEmpty"
    LAYER_OUT_OF_DATE = "LayerOutOfDate"
    OUTFIT_ROOT_MISSING = "OutfitRootMissing"
    PARAMETER_BUDGET_EXCEEDED = "ParameterBudgetExceeded"
    EXCLUDED_SYSTEM_ROOT = "ExcludedSystemRoot"
    ALL_CLEAR = "AllClear"


class Finding(BaseModel):
    severity: Severity
    code: FindingCode
    message: str
    slot_index: Optional[int] = None
    paths: List[str] = Field(default_factory=list)


class DiagnosticsReport(BaseModel):
    findings: List[Finding] = Field(default_factory=list)

    def add(
        self,
        severity: Severity,
        code: FindingCode,
        message: str,
        slot_index: Optional[int] = None,
        paths: Optional[List[str]] = None,
    ) -> Finding:
        finding = Finding(severity=severity, code=code, message=message, slot_index=slot_index, paths=paths or [])
        self.findings.append(finding)
        return finding

    def _count(self, severity: Severity) -> int:
        return sum(1 for f in self.findings if f.severity == severity)

    @property
    def error_count(self) -> int:
        return self._count(Severity.ERROR)

    @property
    def warning_count(self) -> int:
        return self._count(Severity.WARNING)

    @property
    def info_count(self) -> int:
        return self._count(Severity.INFO)

    @property
    def is_valid(self) -> bool:
        return self.error_count == 0
