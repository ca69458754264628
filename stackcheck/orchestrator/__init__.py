"""
Orchestrator - End-to-end verification pass over one document.
"""

from .session import VerificationSession

__all__ = ["VerificationSession"]
