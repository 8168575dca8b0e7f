"""
Playwright browser harness for rendering and querying markup
"""

import os
from typing import TYPE_CHECKING

from playwright.sync_api import Browser, BrowserContext, Page, Playwright, sync_playwright

from .models import RenderOptions
from .render import Renderer

if TYPE_CHECKING:
    from .protocols import QueryLogger
    from .tracing import Tracer

BROWSER_TYPES = ("chromium", "firefox", "webkit")
DEFAULT_VIEWPORT = {"width": 1280, "height": 800}
BLANK_DOCUMENT = '<!DOCTYPE html><html><head><meta charset="utf-8"></head><body></body></html>'


def default_headless() -> bool:
    """Headless in CI, headed otherwise"""
    return os.environ.get("CI", "").lower() in ("true", "1", "yes")


def default_browser_type() -> str:
    return os.environ.get("ARIAFIND_BROWSER", "chromium").lower()


class QueryBrowser:
    """Browser session with a blank document ready for rendering"""

    def __init__(
        self,
        headless: bool | None = None,
        browser_type: str | None = None,
        viewport: dict[str, int] | None = None,
        logger: "QueryLogger | None" = None,
    ):
        """
        Initialize browser

        Args:
            headless: Whether to run in headless mode. If None, defaults to True in CI, False otherwise
            browser_type: "chromium", "firefox" or "webkit".
                          Falls back to ARIAFIND_BROWSER environment variable, then "chromium"
            viewport: Optional viewport size as dict with 'width' and 'height' keys.
                     Defaults to {"width": 1280, "height": 800}
            logger: Optional logger for launch/close messages

        Raises:
            ValueError: If browser_type is not supported
        """
        self.headless = default_headless() if headless is None else headless
        self.browser_type = (browser_type or default_browser_type()).lower()
        if self.browser_type not in BROWSER_TYPES:
            raise ValueError(
                f"Unsupported browser type: {self.browser_type}. "
                f"Supported: {', '.join(BROWSER_TYPES)}"
            )
        self.viewport = viewport or dict(DEFAULT_VIEWPORT)
        self.logger = logger

        self.playwright: Playwright | None = None
        self.browser: Browser | None = None
        self.context: BrowserContext | None = None
        self.page: Page | None = None

    def start(self) -> None:
        """Launch browser and open a blank page"""
        self.playwright = sync_playwright().start()
        try:
            launcher = getattr(self.playwright, self.browser_type)
            self.browser = launcher.launch(headless=self.headless)
            self.context = self.browser.new_context(viewport=self.viewport)
            self.page = self.context.new_page()
            self.page.set_content(BLANK_DOCUMENT)
        except Exception:
            # __exit__ never runs when __enter__ fails, so stop the driver here
            self.close()
            raise

        if self.logger:
            mode = "headless" if self.headless else "headed"
            self.logger.info(f"Launched {self.browser_type} ({mode})")

    def goto(self, url: str) -> None:
        """Navigate to a URL (renderers then mount into that page)"""
        if not self.page:
            raise RuntimeError("Browser not started. Call start() first.")
        self.page.goto(url)
        self.page.wait_for_load_state("domcontentloaded")

    def renderer(
        self,
        options: RenderOptions | None = None,
        tracer: "Tracer | None" = None,
    ) -> Renderer:
        """Create a Renderer bound to this browser's page"""
        if not self.page:
            raise RuntimeError("Browser not started. Call start() first.")
        return Renderer(self.page, options=options, logger=self.logger, tracer=tracer)

    def close(self) -> None:
        """Close browser and cleanup"""
        if self.context:
            self.context.close()
            self.context = None
        if self.browser:
            self.browser.close()
            self.browser = None
        if self.playwright:
            self.playwright.stop()
            self.playwright = None
        self.page = None

        if self.logger:
            self.logger.info(f"Closed {self.browser_type}")

    def __enter__(self):
        """Context manager entry"""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit"""
        self.close()
