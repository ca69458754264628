"""
Verification Session - Runs layering, probing and remediation as one pass.

Pipeline (one document, strictly sequential):
1. Wait for a stable render and record the viewport
2. LayeringEngine.apply
3. ReachabilityProbe.verify on every interactive element
4. RemediationPlanner.remediate on the negatives (optional)
5. Final results: fresh probe for untouched elements, duplicate results
   for remediated ones

The document is held through ``document.exclusive()`` for the whole pass.
Abandoning the pass at any await leaves the (idempotent) layering in place
and produces no report.

Usage:
    async with render_html(html) as document:
        report = await VerificationSession().run(document)
        print(report.describe())
        report.raise_for_failures()
"""

import logging
from typing import List, Optional

from ..contracts.reachability import ReachabilityResult, RemediationRecord, VerificationReport
from ..fixers.remediation_planner import RemediationPlanner
from ..layering.engine import LayeringEngine
from ..layering.plan import LayeringPlan
from ..sandbox.document import RenderedDocument
from ..validators.reachability_probe import ReachabilityProbe

logger = logging.getLogger("stackcheck.orchestrator.session")


class VerificationSession:
    """
    Composes the layering and reachability pipeline over one document.

    Args:
        plan: LayeringPlan to apply (canonical plan by default)
        engine: LayeringEngine to use
        probe: ReachabilityProbe shared by the initial and final passes
        planner: RemediationPlanner (built from ``plan`` and ``probe`` by default)
        remediate: Whether to remediate unreachable controls
    """

    def __init__(
        self,
        plan: Optional[LayeringPlan] = None,
        engine: Optional[LayeringEngine] = None,
        probe: Optional[ReachabilityProbe] = None,
        planner: Optional[RemediationPlanner] = None,
        remediate: bool = True,
    ):
        self.plan = plan or LayeringPlan.default()
        self.engine = engine or LayeringEngine()
        self.probe = probe or ReachabilityProbe()
        self.planner = planner or RemediationPlanner(self.plan, probe=self.probe)
        self.remediate = remediate

    async def run(self, document: RenderedDocument) -> VerificationReport:
        """
        Run the full pipeline.

        Raises:
            ConfigurationError: plan cannot be applied (before any mutation)
            DocumentUnavailableError: document detached or timed out
            RemediationError: remediation asked to process its own output
        """
        async with document.exclusive():
            await document.ensure_ready()
            viewport = await document.viewport_state()
            logger.info(f"Verifying document at {viewport.width}x{viewport.height}")

            assignments = await self.engine.apply(document, self.plan)
            await document.ensure_ready()

            interactive = [e for e in await document.elements() if e.interactive]
            initial = await self.probe.verify(document, interactive)

            remediations: List[RemediationRecord] = []
            negatives = [r for r in initial if not r.clickable]
            if negatives and self.remediate:
                remediations = await self.planner.remediate(document, negatives)
                await document.ensure_ready()
            elif negatives:
                logger.info(f"Remediation disabled; {len(negatives)} element(s) left unreachable")

            final = await self._final_results(document, initial, remediations)

        report = VerificationReport(
            initial_results=initial,
            remediations=remediations,
            final_results=final,
            assignments=assignments,
            viewport=viewport,
        )
        logger.info(report.describe())
        return report

    async def _final_results(
        self,
        document: RenderedDocument,
        initial: List[ReachabilityResult],
        remediations: List[RemediationRecord],
    ) -> List[ReachabilityResult]:
        """Final pass in initial order; remediated elements report their duplicate."""
        remediated = {r.original_element: r for r in remediations}
        untouched = [r.element for r in initial if r.element not in remediated]
        fresh = {r.element: r for r in await self.probe.verify(document, untouched)}

        final = []
        for result in initial:
            record = remediated.get(result.element)
            if record is not None:
                final.append(record.verification or ReachabilityResult(
                    element=record.clone_element, clickable=False,
                ))
            elif result.element in fresh:
                final.append(fresh[result.element])
        return final
