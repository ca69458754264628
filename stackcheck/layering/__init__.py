"""
Layering - Role-based stacking normalization.

- LayeringPlan: ordered role rules -> LayerBand
- LayeringEngine: applies a plan as an idempotent override layer
"""

from .engine import LayeringEngine, compute_assignments
from .plan import (
    BACKGROUND,
    CONTROL,
    CONTROL_GROUP,
    DEFAULT_BANDS,
    DEFAULT_RULES,
    PANEL,
    TOOLTIP,
    TRANSIENT_OVERLAY,
    LayeringPlan,
    RoleRule,
)

__all__ = [
    "LayeringPlan",
    "RoleRule",
    "LayeringEngine",
    "compute_assignments",
    "DEFAULT_BANDS",
    "DEFAULT_RULES",
    "BACKGROUND",
    "PANEL",
    "CONTROL_GROUP",
    "CONTROL",
    "TRANSIENT_OVERLAY",
    "TOOLTIP",
]
