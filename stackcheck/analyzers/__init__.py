"""
Analyzers - Role-tag analysis of document elements.

- RoleSelector: selector-style matching against class/role tags
- InteractiveDetector: decide which elements are interactive controls
- snapshot_html: static ElementRef snapshot of an HTML string
"""

from .dom_snapshot import generate_selector, snapshot_html
from .interactive_detector import InteractiveDetector
from .role_selector import RoleSelector

__all__ = [
    "RoleSelector",
    "InteractiveDetector",
    "snapshot_html",
    "generate_selector",
]
