"""
Playwright Document - RenderedDocument backed by a Playwright async Page.

Renders HTML in headless Chromium and exposes the reads, override writes,
hit-testing and cloning the verification core needs. Playwright timeouts
and evaluation errors surface as DocumentUnavailableError.

Usage:
    async with render_html(html) as document:
        report = await VerificationSession().run(document)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, List, Optional, Sequence, TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ..analyzers.interactive_detector import InteractiveDetector
from ..config import Settings, settings as default_settings
from ..contracts.elements import BoundingRect, ElementGeometry, ElementRef, ViewportState
from ..contracts.errors import ConfigurationError, DocumentUnavailableError
from ..contracts.layering import OverlayPanelSpec, PresentationOverride
from .document import RenderedDocument
from .js_evaluators import JSEvaluators

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger("stackcheck.sandbox.playwright")


def element_from_js(data: dict) -> ElementRef:
    """Build an ElementRef from a ``describe()`` payload."""
    return ElementRef(
        key=data["key"],
        tag=data["tag"],
        element_id=data.get("id"),
        classes=tuple(data.get("classes") or ()),
        role=data.get("role"),
        interactive=bool(data.get("interactive")),
        parent_key=data.get("parentKey"),
        synthetic=bool(data.get("synthetic")),
        selector=data.get("selector") or "",
    )


class PlaywrightDocument(RenderedDocument):
    """
    Rendered document over a live Playwright page.

    The page must already have content; see ``render_html`` for a helper
    that launches Chromium and loads an HTML string.
    """

    def __init__(
        self,
        page: "Page",
        settings: Optional[Settings] = None,
        detector: Optional[InteractiveDetector] = None,
    ):
        super().__init__()
        self._page = page
        self._settings = settings or default_settings
        self._js = JSEvaluators(detector)

    @property
    def page(self) -> "Page":
        return self._page

    async def _evaluate(self, script: str, arg: Any = None) -> Any:
        if self._page.is_closed():
            raise DocumentUnavailableError("Page is closed")
        try:
            return await self._page.evaluate(script, arg)
        except PlaywrightError as e:
            raise DocumentUnavailableError(f"Document evaluation failed: {e}", cause=e) from e

    # =========================================================================
    # READINESS
    # =========================================================================

    async def ensure_ready(self) -> None:
        if self._page.is_closed():
            raise DocumentUnavailableError("Page is closed")

        timeout_ms = self._settings.RENDER_TIMEOUT_MS
        try:
            await self._page.wait_for_load_state("networkidle", timeout=timeout_ms)
            await asyncio.wait_for(
                self._page.evaluate(JSEvaluators.NEXT_FRAME),
                timeout=timeout_ms / 1000,
            )
        except (PlaywrightTimeoutError, asyncio.TimeoutError) as e:
            raise DocumentUnavailableError(
                f"Render did not settle within {timeout_ms}ms", cause=e
            ) from e
        except PlaywrightError as e:
            raise DocumentUnavailableError(f"Document unavailable: {e}", cause=e) from e

        if self._settings.SETTLE_MS:
            await self._page.wait_for_timeout(self._settings.SETTLE_MS)

    async def viewport_state(self) -> ViewportState:
        data = await self._evaluate(JSEvaluators.VIEWPORT)
        return ViewportState(
            width=int(data["width"]),
            height=int(data["height"]),
            scroll_x=float(data["scrollX"]),
            scroll_y=float(data["scrollY"]),
        )

    # =========================================================================
    # READS
    # =========================================================================

    async def elements(self) -> List[ElementRef]:
        data = await self._evaluate(self._js.ELEMENTS)
        if data is None:
            raise DocumentUnavailableError("Document has no body")
        return [element_from_js(item) for item in data]

    async def geometry(self, element: ElementRef) -> ElementGeometry:
        data = await self._evaluate(self._js.GEOMETRY, element.key)
        rect = data["rect"]
        return ElementGeometry(
            rect=BoundingRect(
                x=rect["x"],
                y=rect["y"],
                width=rect["width"],
                height=rect["height"],
            ),
            z_index=data.get("zIndex"),
            position=data["position"],
            pointer_events=data["pointerEvents"],
        )

    async def elements_at_point(self, x: float, y: float) -> List[ElementRef]:
        data = await self._evaluate(self._js.ELEMENTS_AT_POINT, {"x": x, "y": y})
        return [element_from_js(item) for item in data]

    async def contains(self, ancestor: ElementRef, node: ElementRef) -> bool:
        return bool(await self._evaluate(
            self._js.CONTAINS, {"ancestor": ancestor.key, "node": node.key}
        ))

    # =========================================================================
    # PRESENTATION OVERRIDES
    # =========================================================================

    async def snapshot_overrides(self) -> Any:
        return await self._evaluate(self._js.SNAPSHOT_OVERRIDES)

    async def clear_overrides(self) -> None:
        await self._evaluate(self._js.CLEAR_OVERRIDES)

    async def write_overrides(self, overrides: Sequence[PresentationOverride]) -> None:
        if not overrides:
            return
        await self._evaluate(self._js.WRITE_OVERRIDES, [o.to_js() for o in overrides])

    async def restore_overrides(self, snapshot: Any) -> None:
        await self._evaluate(self._js.RESTORE_OVERRIDES, snapshot or [])

    # =========================================================================
    # STRUCTURE
    # =========================================================================

    async def create_overlay_panel(self, spec: OverlayPanelSpec) -> ElementRef:
        data = await self._evaluate(self._js.CREATE_PANEL, {
            "panelId": spec.panel_id,
            "zIndex": spec.z_index,
            "top": spec.top_px,
            "right": spec.right_px,
        })
        if data.get("conflict"):
            raise ConfigurationError(
                f"Element #{spec.panel_id} already exists in the document; "
                f"choose another REMEDIATION_PANEL_ID"
            )
        return element_from_js(data["element"])

    async def remove_overlay_panel(self, panel_id: str) -> bool:
        return bool(await self._evaluate(self._js.REMOVE_PANEL, panel_id))

    async def clone_into(self, element: ElementRef, panel: ElementRef) -> ElementRef:
        data = await self._evaluate(self._js.CLONE_INTO, {"key": element.key, "panelKey": panel.key})
        return element_from_js(data)


@asynccontextmanager
async def render_html(
    html: str,
    settings: Optional[Settings] = None,
) -> AsyncIterator[PlaywrightDocument]:
    """
    Launch headless Chromium, load ``html`` and yield a PlaywrightDocument.

    The viewport is fixed from settings so probe passes are reproducible.

    Raises:
        DocumentUnavailableError: if the content does not load in time
    """
    cfg = settings or default_settings
    viewport = {"width": cfg.VIEWPORT_WIDTH, "height": cfg.VIEWPORT_HEIGHT}

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=True)
        try:
            context = await browser.new_context(viewport=viewport)
            page = await context.new_page()
            page.on("pageerror", lambda e: logger.warning(f"Page error: {e}"))

            try:
                await page.set_content(html, wait_until="networkidle", timeout=cfg.RENDER_TIMEOUT_MS)
            except PlaywrightError as e:
                raise DocumentUnavailableError(f"Content failed to load: {e}", cause=e) from e

            logger.debug(f"Rendered document at {viewport['width']}x{viewport['height']}")
            yield PlaywrightDocument(page, settings=cfg)
        finally:
            await browser.close()
