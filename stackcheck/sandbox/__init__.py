"""
Sandbox - Rendered-document handles.

- RenderedDocument: abstract capability consumed by the core
- PlaywrightDocument / render_html: headless Chromium implementation
"""

from .document import RenderedDocument
from .js_evaluators import JSEvaluators
from .playwright_document import PlaywrightDocument, render_html

__all__ = [
    "RenderedDocument",
    "PlaywrightDocument",
    "JSEvaluators",
    "render_html",
]
