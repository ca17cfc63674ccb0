"""Canvas color tags: six numbered presets or explicit ``#RRGGBB`` values."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Tuple

from .geometry import GeometryError

PRESET_COLORS: Tuple[str, ...] = ("1", "2", "3", "4", "5", "6")

PRESET_COLOR_NAMES: Dict[str, str] = {
    "1": "Red",
    "2": "Orange",
    "3": "Yellow",
    "4": "Green",
    "5": "Cyan",
    "6": "Purple",
}

PRESET_COLOR_HEX: Dict[str, str] = {
    "1": "#fb464c",
    "2": "#e9973f",
    "3": "#e0de71",
    "4": "#44cf6e",
    "5": "#53dfdd",
    "6": "#a882ff",
}

_PRESET_RE = re.compile(r"^[1-6]$")
_HEX_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")


@dataclass(frozen=True)
class NodeColor:
    value: str

    def __post_init__(self) -> None:
        if not isinstance(self.value, str) or not (
            _PRESET_RE.match(self.value) or _HEX_RE.match(self.value)
        ):
            raise GeometryError(f"invalid color {self.value!r}")

    @classmethod
    def preset(cls, value: str) -> "NodeColor":
        if not _PRESET_RE.match(str(value)):
            raise GeometryError(f"invalid preset color {value!r}")
        return cls(str(value))

    @classmethod
    def hex(cls, value: str) -> "NodeColor":
        if not _HEX_RE.match(str(value)):
            raise GeometryError(f"invalid hex color {value!r}")
        return cls(str(value))

    @classmethod
    def parse(cls, value: object) -> "NodeColor":
        """Accept a preset number (``"3"`` or ``3``) or a hex string."""

        return cls(str(value))

    @classmethod
    def by_index(cls, index: int) -> "NodeColor":
        """Cycle through the presets so cluster ``i`` always gets the same tag."""

        return cls(PRESET_COLORS[index % len(PRESET_COLORS)])

    @property
    def is_preset(self) -> bool:
        return bool(_PRESET_RE.match(self.value))

    @property
    def hex_value(self) -> str:
        if self.is_preset:
            return PRESET_COLOR_HEX[self.value]
        return self.value

    @property
    def name(self) -> str:
        if self.is_preset:
            return PRESET_COLOR_NAMES[self.value]
        return self.value

    def __str__(self) -> str:
        return self.value


__all__ = [
    "NodeColor",
    "PRESET_COLORS",
    "PRESET_COLOR_HEX",
    "PRESET_COLOR_NAMES",
]
