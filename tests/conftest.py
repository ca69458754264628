"""
Test configuration and fixtures for pytest.

This module provides shared fixtures used across all tests:
- The canonical LayeringPlan and element factories
- In-memory documents (see tests/fakes.py) for pipeline scenarios
- A headless Chromium browser for ``playwright``-marked tests
"""

from typing import Callable

import pytest
import pytest_asyncio

from stackcheck.config import Settings
from stackcheck.contracts import ElementRef
from stackcheck.layering import LayeringPlan

from tests.fakes import FakeDocument


# ---------------------------------------------------------------------------
# PLAN / ELEMENT FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def plan() -> LayeringPlan:
    """Canonical layering plan."""
    return LayeringPlan.default()


@pytest.fixture
def make_ref() -> Callable[..., ElementRef]:
    """
    Factory for ElementRefs with sequential keys.

    Usage:
        button = make_ref("button", interactive=True)
        icon = make_ref("span", parent=button)
    """
    counter = {"key": 0}

    def _make(tag: str = "div", parent: ElementRef = None, **kwargs) -> ElementRef:
        key = counter["key"]
        counter["key"] += 1
        kwargs.setdefault("classes", ())
        kwargs["classes"] = tuple(kwargs["classes"])
        return ElementRef(
            key=key,
            tag=tag,
            parent_key=parent.key if parent is not None else None,
            selector=kwargs.pop("selector", f"{tag}[{key}]"),
            **kwargs,
        )

    return _make


# ---------------------------------------------------------------------------
# DOCUMENT FIXTURES
# ---------------------------------------------------------------------------

@pytest.fixture
def three_band_document() -> FakeDocument:
    """
    Background canvas, a Control, and a Panel positioned over the Control.

    Before layering the Panel intercepts the Control's center point.
    """
    document = FakeDocument(width=1280, height=720)
    document.canvas = document.add("canvas", rect=(0, 0, 1280, 720))
    document.button = document.add(
        "button", element_id="save", rect=(40, 40, 120, 40),
    )
    document.panel = document.add(
        "aside", classes=["left-panel"], rect=(0, 0, 400, 720), position="absolute",
    )
    return document


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with no settle delay for browser tests."""
    return Settings(SETTLE_MS=0, VIEWPORT_WIDTH=1280, VIEWPORT_HEIGHT=720)


# ---------------------------------------------------------------------------
# BROWSER FIXTURES
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def browser():
    """
    Headless Chromium, skipped when Playwright browsers are not installed.
    """
    from playwright.async_api import Error as PlaywrightError
    from playwright.async_api import async_playwright

    async with async_playwright() as p:
        try:
            instance = await p.chromium.launch(headless=True)
        except PlaywrightError as e:
            pytest.skip(f"Chromium not available: {e}")
        try:
            yield instance
        finally:
            await instance.close()


@pytest_asyncio.fixture
async def page(browser, fast_settings):
    """Fresh page with the fixed test viewport."""
    context = await browser.new_context(viewport={
        "width": fast_settings.VIEWPORT_WIDTH,
        "height": fast_settings.VIEWPORT_HEIGHT,
    })
    instance = await context.new_page()
    try:
        yield instance
    finally:
        await context.close()
