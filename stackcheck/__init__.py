"""
stackcheck - Stacking-order normalization and pointer-reachability checks
for rendered HTML documents.

Pipeline:
    LayeringPlan -> LayeringEngine -> ReachabilityProbe
        -> RemediationPlanner (on failures) -> VerificationReport
"""

from .contracts import (
    AmbiguousBandError,
    ConfigurationError,
    DocumentUnavailableError,
    ElementRef,
    LayerBand,
    PointerPolicy,
    ReachabilityResult,
    RemediationError,
    RemediationRecord,
    StackcheckError,
    StackingAssignment,
    VerificationReport,
)
from .fixers import RemediationPlanner
from .layering import LayeringEngine, LayeringPlan
from .orchestrator import VerificationSession
from .sandbox import PlaywrightDocument, RenderedDocument, render_html
from .validators import ReachabilityProbe

__version__ = "0.1.0"

__all__ = [
    "LayeringPlan",
    "LayeringEngine",
    "ReachabilityProbe",
    "RemediationPlanner",
    "VerificationSession",
    "RenderedDocument",
    "PlaywrightDocument",
    "render_html",
    "ElementRef",
    "LayerBand",
    "PointerPolicy",
    "StackingAssignment",
    "ReachabilityResult",
    "RemediationRecord",
    "VerificationReport",
    "StackcheckError",
    "ConfigurationError",
    "AmbiguousBandError",
    "DocumentUnavailableError",
    "RemediationError",
]
