"""
Layering Contracts - Bands, stacking assignments and presentation overrides.

These structures carry information from the plan to the document:
1. LayerBand: a named, ordered layer with a pointer policy
2. StackingAssignment: the band and explicit z-index chosen for one element
3. PresentationOverride: the style write the document handle performs
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .elements import ElementRef


class PointerPolicy(Enum):
    """Pointer-interaction policy of a band."""

    BLOCKING = "blocking"
    """Matched elements intercept pointer events normally."""

    TRANSPARENT = "transparent"
    """Matched elements never intercept pointer events."""

    @classmethod
    def from_string(cls, value: str) -> "PointerPolicy":
        return cls(value.lower())


@dataclass(frozen=True)
class LayerBand:
    """A named band of the stacking order. Higher order paints above lower."""

    name: str
    order: int
    pointer_policy: PointerPolicy = PointerPolicy.BLOCKING

    def __repr__(self) -> str:
        return f"LayerBand({self.name}, order={self.order}, {self.pointer_policy.value})"

    @property
    def is_transparent(self) -> bool:
        return self.pointer_policy == PointerPolicy.TRANSPARENT

    def base_z_index(self, stride: int) -> int:
        """Lowest z-index value available to this band."""
        return self.order * stride

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "order": self.order,
            "pointer_policy": self.pointer_policy.value,
        }


@dataclass(frozen=True)
class StackingAssignment:
    """
    Band and explicit z-index assigned to one element.

    Within a band, z-index values are unique and increase in document order.
    """

    element: ElementRef
    band: LayerBand
    z_index: int

    pointer_events: Optional[str] = None
    """Pointer policy written for the element ("auto", "none", or None to keep the authored value)."""

    positioned: bool = False
    """Whether position: relative is forced when the element is static."""

    def to_override(self) -> "PresentationOverride":
        return PresentationOverride(
            key=self.element.key,
            z_index=self.z_index,
            pointer_events=self.pointer_events,
            ensure_positioned=self.positioned,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": self.element.label,
            "band": self.band.name,
            "z_index": self.z_index,
            "pointer_events": self.pointer_events,
            "positioned": self.positioned,
        }


@dataclass(frozen=True)
class PresentationOverride:
    """A presentation-only write against one element."""

    key: int
    z_index: Optional[int] = None
    pointer_events: Optional[str] = None
    ensure_positioned: bool = False

    def to_js(self) -> Dict[str, Any]:
        """Convert to the argument shape used by the browser helpers."""
        return {
            "key": self.key,
            "zIndex": self.z_index,
            "pointerEvents": self.pointer_events,
            "ensurePositioned": self.ensure_positioned,
        }


@dataclass(frozen=True)
class OverlayPanelSpec:
    """Screen-anchored top-level container used by remediation."""

    panel_id: str
    z_index: int
    top_px: int = 16
    right_px: int = 16
