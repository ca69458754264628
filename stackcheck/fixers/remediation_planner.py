"""
Remediation Planner - Relocates unreachable controls into a topmost panel.

For every negative ReachabilityResult the planner duplicates the control
into one synthetic, screen-anchored panel placed in the reserved top slot of
the highest band. The duplicate forwards activation to the original, so both
share one click outcome; the original stays in place for layout but stops
intercepting the pointer.

Duplicates are re-probed once. A duplicate that is still unreachable is a
hard failure recorded on its RemediationRecord; the planner never
remediates its own output.

Usage:
    planner = RemediationPlanner(LayeringPlan.default())
    records = await planner.remediate(document, negative_results)
    failed = [r for r in records if not r.resolved]
"""

import logging
from typing import Dict, List, Optional, Sequence

from ..config import settings
from ..contracts.elements import ElementRef
from ..contracts.errors import DocumentUnavailableError, RemediationError
from ..contracts.layering import OverlayPanelSpec, PresentationOverride
from ..contracts.reachability import ReachabilityResult, RemediationRecord
from ..layering.plan import LayeringPlan
from ..sandbox.document import RenderedDocument
from ..validators.reachability_probe import ReachabilityProbe

logger = logging.getLogger("stackcheck.fixers.remediation")


class RemediationPlanner:
    """
    Bounded, non-recursive remediation of unreachable controls.
    """

    def __init__(
        self,
        plan: LayeringPlan,
        probe: Optional[ReachabilityProbe] = None,
        stride: Optional[int] = None,
        panel_id: Optional[str] = None,
        top_px: Optional[int] = None,
        right_px: Optional[int] = None,
    ):
        self.plan = plan
        self.probe = probe or ReachabilityProbe()
        self.stride = stride if stride is not None else settings.ZINDEX_STRIDE
        self.panel_id = panel_id or settings.REMEDIATION_PANEL_ID
        self.top_px = top_px if top_px is not None else settings.REMEDIATION_PANEL_TOP_PX
        self.right_px = right_px if right_px is not None else settings.REMEDIATION_PANEL_RIGHT_PX

    def panel_spec(self) -> OverlayPanelSpec:
        """Panel in the reserved top slot of the topmost band."""
        top = self.plan.top_band
        return OverlayPanelSpec(
            panel_id=self.panel_id,
            z_index=top.base_z_index(self.stride) + self.stride - 1,
            top_px=self.top_px,
            right_px=self.right_px,
        )

    async def remediate(
        self,
        document: RenderedDocument,
        negative_results: Sequence[ReachabilityResult],
    ) -> List[RemediationRecord]:
        """
        Duplicate unreachable controls into the overlay panel and re-verify.

        Args:
            document: Document the results were probed against
            negative_results: Probe results; clickable ones are ignored

        Returns:
            One RemediationRecord per distinct unreachable element, in input order

        Raises:
            RemediationError: if asked to remediate a panel or duplicate
            DocumentUnavailableError: document lost; partial work rolled back
        """
        unreachable: Dict[ElementRef, ReachabilityResult] = {}
        for result in negative_results:
            if not result.clickable:
                unreachable.setdefault(result.element, result)

        if not unreachable:
            return []

        synthetic = [e.label for e in unreachable if e.synthetic]
        if synthetic:
            raise RemediationError(
                f"Refusing to remediate remediation output: {', '.join(synthetic)}"
            )

        spec = self.panel_spec()
        snapshot = await document.snapshot_overrides()
        try:
            clones = await self._relocate(document, list(unreachable), spec)
            await document.ensure_ready()
            verified = {r.element: r for r in await self.probe.verify(document, clones)}
        except DocumentUnavailableError as e:
            logger.warning(f"Remediation aborted: {e}; rolling back")
            await self._rollback(document, snapshot, spec.panel_id)
            raise

        records = []
        for original, clone in zip(unreachable, clones):
            verification = verified.get(clone)
            if verification is None:
                # Duplicate has no laid-out area, so it cannot be a pointer target
                verification = ReachabilityResult(element=clone, clickable=False)

            record = RemediationRecord(
                original_element=original,
                clone_element=clone,
                panel_id=spec.panel_id,
                verification=verification,
            )
            if not record.resolved:
                blocker = verification.blocking_element
                logger.error(
                    f"Remediation failed for {original.label}: duplicate {clone.label} "
                    f"still unreachable (blocked by {blocker.label if blocker else 'nothing'})"
                )
            records.append(record)

        resolved = sum(1 for r in records if r.resolved)
        logger.info(f"Remediated {resolved}/{len(records)} elements into #{spec.panel_id}")
        return records

    async def _relocate(
        self,
        document: RenderedDocument,
        originals: List[ElementRef],
        spec: OverlayPanelSpec,
    ) -> List[ElementRef]:
        panel = await document.create_overlay_panel(spec)
        clones = []
        for original in originals:
            clone = await document.clone_into(original, panel)
            logger.debug(f"Duplicated {original.label} as {clone.label}")
            clones.append(clone)

        await document.write_overrides([
            PresentationOverride(key=original.key, pointer_events="none")
            for original in originals
        ])
        return clones

    async def _rollback(self, document: RenderedDocument, snapshot, panel_id: str) -> None:
        # Each step is attempted even if the other fails
        try:
            await document.restore_overrides(snapshot)
        except DocumentUnavailableError as e:
            logger.warning(f"Remediation rollback could not restore overrides: {e}")
        try:
            await document.remove_overlay_panel(panel_id)
        except DocumentUnavailableError as e:
            logger.warning(f"Remediation rollback could not remove #{panel_id}: {e}")
