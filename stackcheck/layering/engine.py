"""
Layering Engine - Applies a LayeringPlan to a rendered document.

Assignments are a pure function of the elements' role tags: every pass
re-reads the document in document order, resolves bands through the plan
and derives explicit z-index values from a per-band counter. The previous
override layer is cleared before the new one is written, so re-applying
yields the same assignments and the same presentation.

Z-index layout (stride S):
    band.order * S + 0  ... band.order * S + S - 2   elements, document order
    band.order * S + S - 1                          reserved (remediation panel)

Pointer policy:
    "none"   Transparent bands; decorative descendants of blocking matches
    "auto"   controls under a written "none"
    unset    everything else (authored pointer-events is kept)

Usage:
    engine = LayeringEngine()
    assignments = await engine.apply(document, LayeringPlan.default())

    # Offline, from static HTML
    assignments = engine.preview(html, LayeringPlan.default())
"""

import logging
from collections import Counter
from typing import Dict, List, Optional, Sequence

from ..analyzers.dom_snapshot import snapshot_html
from ..config import settings
from ..contracts.elements import ElementRef
from ..contracts.errors import ConfigurationError, DocumentUnavailableError
from ..contracts.layering import StackingAssignment
from ..sandbox.document import RenderedDocument
from .plan import LayeringPlan

logger = logging.getLogger("stackcheck.layering.engine")


def compute_assignments(
    elements: Sequence[ElementRef],
    plan: LayeringPlan,
    stride: int,
) -> List[StackingAssignment]:
    """
    Compute stacking assignments for elements given in document order.

    Parents must precede their descendants in ``elements``.

    Raises:
        ConfigurationError: if a band needs more slots than the stride allows
        AmbiguousBandError: if an element matches rules for different bands
    """
    if stride < 2:
        raise ConfigurationError(f"Z-index stride must be at least 2, got {stride}")

    resolved = [(element, *plan.resolve(element)) for element in elements]

    capacity = stride - 1
    sizes = Counter(band.name for _, band, _ in resolved)
    overfull = {name: count for name, count in sizes.items() if count > capacity}
    if overfull:
        raise ConfigurationError(
            f"Bands {overfull} exceed the {capacity} slots available per band "
            f"with stride {stride}; raise ZINDEX_STRIDE"
        )

    counters: Dict[str, int] = {}
    # element key -> whether some ancestor is an explicit non-default blocking match
    inside_blocking: Dict[int, bool] = {}
    # element key -> whether the element inherits a "none" written by this pass
    suppressed: Dict[int, bool] = {}
    assignments: List[StackingAssignment] = []

    for element, band, rule in resolved:
        explicit = rule is not None
        parent_inside = inside_blocking.get(element.parent_key, False)

        blocking_container = (
            explicit
            and not band.is_transparent
            and band.name != plan.default_band.name
        )
        inside_blocking[element.key] = parent_inside or blocking_container

        parent_suppressed = suppressed.get(element.parent_key, False)
        if band.is_transparent:
            pointer_events = "none"
        elif not element.interactive and parent_inside:
            pointer_events = "none"
        elif element.interactive and parent_suppressed:
            pointer_events = "auto"
        else:
            # Authored value stays in effect
            pointer_events = None
        suppressed[element.key] = pointer_events == "none" or (
            pointer_events is None and parent_suppressed
        )

        counter = counters.get(band.name, 0)
        counters[band.name] = counter + 1

        assignments.append(StackingAssignment(
            element=element,
            band=band,
            z_index=band.base_z_index(stride) + counter,
            pointer_events=pointer_events,
            positioned=explicit,
        ))

    return assignments


class LayeringEngine:
    """
    Applies a LayeringPlan as an all-or-nothing override layer.

    Presentation only: z-index, pointer-events and (for explicitly matched
    static elements) position. Content and structure are never touched.
    """

    def __init__(
        self,
        stride: Optional[int] = None,
        write_batch_size: Optional[int] = None,
    ):
        self.stride = stride if stride is not None else settings.ZINDEX_STRIDE
        self.write_batch_size = write_batch_size or settings.WRITE_BATCH_SIZE

    def assign(self, elements: Sequence[ElementRef], plan: LayeringPlan) -> List[StackingAssignment]:
        return compute_assignments(elements, plan, self.stride)

    def preview(self, html: str, plan: LayeringPlan) -> List[StackingAssignment]:
        """Compute assignments from static HTML without rendering it."""
        return self.assign(snapshot_html(html), plan)

    async def apply(
        self,
        document: RenderedDocument,
        plan: LayeringPlan,
    ) -> List[StackingAssignment]:
        """
        Apply the plan to the document.

        Configuration errors are raised before anything is written. If the
        document becomes unavailable mid-write, the override layer that
        existed before this call is restored and the error re-raised.

        Returns:
            StackingAssignment per element, in document order

        Raises:
            ConfigurationError: invalid plan/stride for this document
            DocumentUnavailableError: document detached or timed out
        """
        await document.ensure_ready()
        elements = await document.elements()
        assignments = self.assign(elements, plan)
        overrides = [a.to_override() for a in assignments]

        snapshot = await document.snapshot_overrides()
        written = 0
        try:
            await document.clear_overrides()
            for start in range(0, len(overrides), self.write_batch_size):
                batch = overrides[start:start + self.write_batch_size]
                await document.write_overrides(batch)
                written += len(batch)
        except DocumentUnavailableError as e:
            logger.warning(
                f"Layering aborted after {written}/{len(overrides)} overrides: {e}; rolling back"
            )
            try:
                await document.restore_overrides(snapshot)
            except DocumentUnavailableError as restore_error:
                logger.warning(f"Rollback could not be applied: {restore_error}")
            raise

        by_band = Counter(a.band.name for a in assignments)
        logger.info(
            f"Applied layering to {len(assignments)} elements: "
            + ", ".join(f"{band.name}={by_band[band.name]}" for band in plan.bands if by_band[band.name])
        )
        for assignment in assignments:
            logger.debug(
                f"  {assignment.element.label} -> {assignment.band.name} "
                f"z={assignment.z_index} pe={assignment.pointer_events}"
            )

        return assignments
