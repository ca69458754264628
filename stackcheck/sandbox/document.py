"""
Rendered Document - Capability the verification core consumes.

A RenderedDocument wraps a live DOM with computed-style access, point-based
hit-testing and node cloning. The core never owns nodes; it refers to them
through ElementRef for the duration of a pass.

Every query is a suspending operation: callers must ``ensure_ready`` before
probing and again after any mutation that can change layout.

Implementations:
- PlaywrightDocument: headless Chromium via Playwright
"""

import asyncio
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Sequence

from ..contracts.elements import ElementGeometry, ElementRef, ViewportState
from ..contracts.layering import OverlayPanelSpec, PresentationOverride


class RenderedDocument(ABC):
    """
    Abstract handle to a rendered document.

    The handle is a serialized resource: only one layering/probe/remediation
    sequence may run against it at a time. Use ``exclusive()`` to hold it.
    """

    def __init__(self):
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def exclusive(self) -> AsyncIterator["RenderedDocument"]:
        """Hold the document for one verification sequence."""
        async with self._lock:
            yield self

    @property
    def is_busy(self) -> bool:
        return self._lock.locked()

    # =========================================================================
    # READINESS
    # =========================================================================

    @abstractmethod
    async def ensure_ready(self) -> None:
        """
        Wait (bounded) for the render to be stable.

        Raises:
            DocumentUnavailableError: if detached or the wait times out
        """

    @abstractmethod
    async def viewport_state(self) -> ViewportState:
        """Current viewport size and scroll offset."""

    # =========================================================================
    # READS
    # =========================================================================

    @abstractmethod
    async def elements(self) -> List[ElementRef]:
        """All rendered, non-synthetic elements under <body> in document order."""

    @abstractmethod
    async def geometry(self, element: ElementRef) -> ElementGeometry:
        """Bounding box and computed stacking properties of an element."""

    @abstractmethod
    async def elements_at_point(self, x: float, y: float) -> List[ElementRef]:
        """Elements stacked at a viewport point, topmost first."""

    @abstractmethod
    async def contains(self, ancestor: ElementRef, node: ElementRef) -> bool:
        """Whether ``node`` is a strict descendant of ``ancestor``."""

    # =========================================================================
    # PRESENTATION OVERRIDES
    # =========================================================================

    @abstractmethod
    async def snapshot_overrides(self) -> Any:
        """Opaque snapshot of the current override layer, for rollback."""

    @abstractmethod
    async def clear_overrides(self) -> None:
        """Remove every override, restoring original inline presentation."""

    @abstractmethod
    async def write_overrides(self, overrides: Sequence[PresentationOverride]) -> None:
        """Apply presentation-only overrides, remembering original values."""

    @abstractmethod
    async def restore_overrides(self, snapshot: Any) -> None:
        """Restore the override layer captured by ``snapshot_overrides``."""

    # =========================================================================
    # STRUCTURE (remediation only)
    # =========================================================================

    @abstractmethod
    async def create_overlay_panel(self, spec: OverlayPanelSpec) -> ElementRef:
        """Create (or replace) the screen-anchored remediation container."""

    @abstractmethod
    async def clone_into(self, element: ElementRef, panel: ElementRef) -> ElementRef:
        """
        Duplicate ``element`` into ``panel``.

        The duplicate shows the same content and forwards activation to the
        original element, so both share one click outcome.
        """

    @abstractmethod
    async def remove_overlay_panel(self, panel_id: str) -> bool:
        """Remove a synthetic panel and its duplicates. False if none exists."""
