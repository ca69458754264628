"""
Reachability Contracts - Probe results, remediation records and the report.

Sequence of a verification session:
1. ReachabilityResult: one per interactive element per probe pass
2. RemediationRecord: one per element that failed the probe
3. VerificationReport: initial results + remediations + final results
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .elements import ElementRef, ViewportState
from .errors import RemediationError
from .layering import StackingAssignment


@dataclass(frozen=True)
class ReachabilityResult:
    """
    Outcome of hit-testing one element at its visual center.

    Never persisted across passes; each pass recomputes from the
    current document state.
    """

    element: ElementRef
    clickable: bool
    blocking_element: Optional[ElementRef] = None
    """Topmost element at the center point when not clickable."""

    effective_z_index: Optional[int] = None
    """Computed z-index of the element (None if "auto")."""

    point: Optional[Tuple[float, float]] = None
    """Center point that was hit-tested."""

    def __repr__(self) -> str:
        state = "clickable" if self.clickable else f"blocked by {self.blocking_element}"
        return f"ReachabilityResult({self.element.label}, {state})"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "element": self.element.to_dict(),
            "clickable": self.clickable,
            "blocking_element": self.blocking_element.to_dict() if self.blocking_element else None,
            "effective_z_index": self.effective_z_index,
            "point": list(self.point) if self.point else None,
        }


@dataclass(frozen=True)
class RemediationRecord:
    """Mapping from an unreachable control to its duplicate in the overlay panel."""

    original_element: ElementRef
    clone_element: ElementRef
    panel_id: str

    verification: Optional[ReachabilityResult] = None
    """Probe result for the clone after remediation."""

    @property
    def resolved(self) -> bool:
        """Whether the clone was confirmed reachable."""
        return self.verification is not None and self.verification.clickable

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_element": self.original_element.to_dict(),
            "clone_element": self.clone_element.to_dict(),
            "panel_id": self.panel_id,
            "resolved": self.resolved,
            "verification": self.verification.to_dict() if self.verification else None,
        }


@dataclass
class VerificationReport:
    """
    Complete result of one verification session.

    Final results must have no negative entry for any element that received
    a RemediationRecord; otherwise remediation has failed.
    """

    initial_results: List[ReachabilityResult] = field(default_factory=list)
    """Probe results after layering, before remediation."""

    remediations: List[RemediationRecord] = field(default_factory=list)
    """One record per element that failed the initial probe."""

    final_results: List[ReachabilityResult] = field(default_factory=list)
    """Probe results after remediation (clone results for remediated controls)."""

    assignments: List[StackingAssignment] = field(default_factory=list)
    """Stacking assignments committed by the layering engine."""

    viewport: Optional[ViewportState] = None
    """Viewport the probe passes were taken under."""

    @property
    def unreachable(self) -> List[ReachabilityResult]:
        """Initial results that were not clickable."""
        return [r for r in self.initial_results if not r.clickable]

    @property
    def failures(self) -> List[RemediationRecord]:
        """Remediation records whose clone is still unreachable."""
        clones = {r.element: r for r in self.final_results}
        failed = []
        for record in self.remediations:
            final = clones.get(record.clone_element)
            if not record.resolved or final is None or not final.clickable:
                failed.append(record)
        return failed

    @property
    def regressions(self) -> List[ReachabilityResult]:
        """Non-remediated elements that became unreachable after remediation."""
        before = {r.element: r.clickable for r in self.initial_results}
        return [
            r for r in self.final_results
            if not r.clickable and before.get(r.element, False)
        ]

    @property
    def remediation_failed(self) -> bool:
        return bool(self.failures)

    @property
    def passed(self) -> bool:
        """Every probed control ends up reachable."""
        return all(r.clickable for r in self.final_results) and not self.remediation_failed

    def raise_for_failures(self) -> None:
        """Raise RemediationError if any remediated control is still unreachable."""
        failures = self.failures
        if failures:
            labels = ", ".join(r.original_element.label for r in failures)
            raise RemediationError(
                f"Remediation failed for {len(failures)} element(s): {labels}",
                records=failures,
            )

    def describe(self) -> str:
        """Generate human-readable summary."""
        reachable = sum(1 for r in self.initial_results if r.clickable)
        lines = [
            f"VerificationReport: {'PASSED' if self.passed else 'FAILED'}",
            f"  Reachable after layering: {reachable}/{len(self.initial_results)}",
        ]
        if self.remediations:
            resolved = len(self.remediations) - len(self.failures)
            lines.append(f"  Remediated: {resolved}/{len(self.remediations)}")
        if self.regressions:
            lines.append(f"  Regressions: {len(self.regressions)}")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to dictionary for JSON output."""
        return {
            "passed": self.passed,
            "viewport": self.viewport.to_dict() if self.viewport else None,
            "assignments": [a.to_dict() for a in self.assignments],
            "initial_results": [r.to_dict() for r in self.initial_results],
            "remediations": [r.to_dict() for r in self.remediations],
            "final_results": [r.to_dict() for r in self.final_results],
            "failures": [r.original_element.label for r in self.failures],
            "regressions": [r.element.label for r in self.regressions],
        }
