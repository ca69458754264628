"""
Reachability Probe - Hit-tests interactive elements at their visual center.

An element is clickable when the topmost element at its center point is
the element itself or one of its descendants. An element that cannot be
hit-tested at its center (no laid-out area, center outside the viewport,
empty hit stack) is left out of the results: that is a visibility or
scroll condition, not a stacking defect.

The probe never mutates the document. Results are only meaningful for the
viewport size and scroll position in effect when it runs, so callers should
record ``document.viewport_state()`` alongside them.

Usage:
    probe = ReachabilityProbe()
    results = await probe.verify(document, interactive_elements)
    blocked = [r for r in results if not r.clickable]
"""

import logging
from typing import List, Optional, Sequence

from ..config import settings
from ..contracts.elements import ElementRef, ViewportState
from ..contracts.reachability import ReachabilityResult
from ..sandbox.document import RenderedDocument

logger = logging.getLogger("stackcheck.validators.probe")


class ReachabilityProbe:
    """
    Point-based reachability check.

    Args:
        strict_descendants: When True, a topmost descendant that is itself
            an interactive control is reported as blocking its ancestor
            instead of counting as a hit on it.
    """

    def __init__(self, strict_descendants: Optional[bool] = None):
        if strict_descendants is None:
            strict_descendants = settings.STRICT_DESCENDANT_HITS
        self.strict_descendants = strict_descendants

    async def verify(
        self,
        document: RenderedDocument,
        elements: Sequence[ElementRef],
    ) -> List[ReachabilityResult]:
        """
        Probe each element in order.

        Returns:
            One ReachabilityResult per element that can be hit-tested
        """
        viewport = await document.viewport_state()
        results = []
        for element in elements:
            result = await self.probe(document, element, viewport)
            if result is not None:
                results.append(result)

        blocked = sum(1 for r in results if not r.clickable)
        logger.info(
            f"Probed {len(results)}/{len(elements)} elements: "
            f"{len(results) - blocked} clickable, {blocked} blocked"
        )
        return results

    async def probe(
        self,
        document: RenderedDocument,
        element: ElementRef,
        viewport: Optional[ViewportState] = None,
    ) -> Optional[ReachabilityResult]:
        """Probe a single element. None if it cannot be hit-tested at its center."""
        if viewport is None:
            viewport = await document.viewport_state()

        geometry = await document.geometry(element)
        if not geometry.rect.has_area:
            logger.debug(f"Skipping {element.label}: zero-area bounding box")
            return None

        x, y = geometry.rect.center
        if not (0 <= x < viewport.width and 0 <= y < viewport.height):
            logger.debug(
                f"Skipping {element.label}: center ({x:.0f}, {y:.0f}) outside "
                f"{viewport.width}x{viewport.height} viewport"
            )
            return None

        stack = await document.elements_at_point(x, y)
        if not stack:
            logger.debug(f"Skipping {element.label}: nothing hit-testable at ({x:.0f}, {y:.0f})")
            return None

        clickable = False
        blocking = None
        top = stack[0]
        if top == element:
            clickable = True
        elif await document.contains(element, top):
            if self.strict_descendants and top.interactive:
                blocking = top
            else:
                clickable = True
        else:
            blocking = top

        if blocking is not None:
            logger.debug(f"{element.label} blocked by {blocking.label} at ({x:.0f}, {y:.0f})")

        return ReachabilityResult(
            element=element,
            clickable=clickable,
            blocking_element=blocking,
            effective_z_index=geometry.z_index,
            point=(x, y),
        )
