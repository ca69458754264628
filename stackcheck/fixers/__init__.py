"""
Fixers - Corrective actions for controls the probe found unreachable.

- RemediationPlanner: duplicate into a topmost overlay panel and re-verify
"""

from .remediation_planner import RemediationPlanner

__all__ = ["RemediationPlanner"]
