"""
Element Contracts - References to nodes of a rendered document.

The document owns every node. These structures only point at nodes for the
duration of a verification pass and carry a snapshot of the role tags used
for band matching.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class ElementRef:
    """
    Opaque handle to a node in the rendered document.

    Identity is the ``key`` alone; the remaining fields are a snapshot taken
    when the reference was produced and do not take part in equality.
    """

    key: int
    """Stable identity assigned by the document handle."""

    tag: str = field(default="div", compare=False)
    """Lower-case tag name."""

    element_id: Optional[str] = field(default=None, compare=False)
    """Value of the ``id`` attribute, if any."""

    classes: Tuple[str, ...] = field(default=(), compare=False)
    """Class list at snapshot time."""

    role: Optional[str] = field(default=None, compare=False)
    """ARIA role attribute, lower-cased."""

    interactive: bool = field(default=False, compare=False)
    """Whether the element is an interactive control."""

    parent_key: Optional[int] = field(default=None, compare=False)
    """Key of the parent element (None for children of the document body)."""

    synthetic: bool = field(default=False, compare=False)
    """Whether the node was created by remediation (panel or clone)."""

    selector: str = field(default="", compare=False)
    """Human-readable selector for reports."""

    def __repr__(self) -> str:
        return f"ElementRef({self.key}, {self.selector or self.tag})"

    @property
    def label(self) -> str:
        """Selector if known, tag otherwise."""
        return self.selector or self.tag

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "key": self.key,
            "selector": self.label,
            "tag": self.tag,
            "id": self.element_id,
            "classes": list(self.classes),
            "role": self.role,
            "interactive": self.interactive,
            "synthetic": self.synthetic,
        }


@dataclass
class BoundingRect:
    """Element bounding rectangle from getBoundingClientRect()."""

    x: float
    y: float
    width: float
    height: float

    @property
    def center_x(self) -> float:
        """Get horizontal center point."""
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        """Get vertical center point."""
        return self.y + self.height / 2

    @property
    def center(self) -> Tuple[float, float]:
        return (self.center_x, self.center_y)

    @property
    def has_area(self) -> bool:
        """Check if the element is laid out with a non-zero area."""
        return self.width > 0 and self.height > 0

    def contains_point(self, x: float, y: float) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height

    def to_dict(self) -> Dict[str, float]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class ElementGeometry:
    """Computed presentation of an element at probe time."""

    rect: BoundingRect
    z_index: Optional[int] = None
    """Computed z-index (None if "auto")."""

    position: str = "static"
    pointer_events: str = "auto"


@dataclass(frozen=True)
class ViewportState:
    """Viewport size and scroll offset a probe pass was taken under."""

    width: int
    height: int
    scroll_x: float = 0.0
    scroll_y: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        return {
            "width": self.width,
            "height": self.height,
            "scroll_x": self.scroll_x,
            "scroll_y": self.scroll_y,
        }
