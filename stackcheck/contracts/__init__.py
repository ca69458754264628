"""
Contracts - Data structures shared by the layering and reachability pipeline.

Provides:
- ElementRef, BoundingRect, ElementGeometry, ViewportState
- LayerBand, PointerPolicy, StackingAssignment, PresentationOverride
- ReachabilityResult, RemediationRecord, VerificationReport
- The error taxonomy
"""

from .elements import BoundingRect, ElementGeometry, ElementRef, ViewportState
from .errors import (
    AmbiguousBandError,
    ConfigurationError,
    DocumentUnavailableError,
    RemediationError,
    StackcheckError,
)
from .layering import (
    LayerBand,
    OverlayPanelSpec,
    PointerPolicy,
    PresentationOverride,
    StackingAssignment,
)
from .reachability import ReachabilityResult, RemediationRecord, VerificationReport

__all__ = [
    "ElementRef",
    "BoundingRect",
    "ElementGeometry",
    "ViewportState",
    "StackcheckError",
    "ConfigurationError",
    "AmbiguousBandError",
    "DocumentUnavailableError",
    "RemediationError",
    "LayerBand",
    "PointerPolicy",
    "StackingAssignment",
    "PresentationOverride",
    "OverlayPanelSpec",
    "ReachabilityResult",
    "RemediationRecord",
    "VerificationReport",
]
