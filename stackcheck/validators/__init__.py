"""
Validators - Post-layering verification.

- ReachabilityProbe: center-point hit-testing of interactive elements
"""

from .reachability_probe import ReachabilityProbe

__all__ = ["ReachabilityProbe"]
