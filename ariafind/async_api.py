"""
Async API for ariafind - Use this in asyncio contexts

Async versions of the browser harness, render bridge and live snapshot.
Querying itself is synchronous (snapshots are plain data), so `find` and
`find_all` are shared with the sync API.
"""

from typing import TYPE_CHECKING

from playwright.async_api import Browser, BrowserContext, ElementHandle, Page, Playwright, async_playwright

from .browser import BLANK_DOCUMENT, BROWSER_TYPES, DEFAULT_VIEWPORT, default_browser_type, default_headless
from .exceptions import StaleElementError
from .models import CONTAINER_ATTRIBUTE, DomSnapshot, ElementNode, RenderOptions
from .query import Selector, find, find_all
from .render import (
    CLEANUP_SCRIPT,
    MOUNT_SCRIPT,
    TICK_SCRIPT,
    UNMOUNT_SCRIPT,
    container_id_of,
    locate_container,
)
from .snapshot import HANDLE_SCRIPT, SNAPSHOT_SCRIPT, new_snapshot_id, parse_snapshot_result

if TYPE_CHECKING:
    from .protocols import QueryLogger
    from .tracing import Tracer

__all__ = ["AsyncQueryBrowser", "AsyncRenderer", "find", "find_all", "snapshot"]


async def snapshot(page: Page) -> DomSnapshot:
    """
    Take a snapshot of the current page (async)

    Args:
        page: Playwright Page (async API)

    Returns:
        DomSnapshot of the whole document
    """
    if page is None:
        raise RuntimeError("Browser not started. Call start() first.")

    result = await page.evaluate(SNAPSHOT_SCRIPT, new_snapshot_id())
    return parse_snapshot_result(result, url=page.url)


class AsyncRenderer:
    """Async version of Renderer for use in asyncio contexts."""

    def __init__(
        self,
        page: Page,
        options: RenderOptions | None = None,
        logger: "QueryLogger | None" = None,
        tracer: "Tracer | None" = None,
    ):
        self.page = page
        self.options = options or RenderOptions()
        self.logger = logger
        self.tracer = tracer
        self.last_snapshot: DomSnapshot | None = None

    async def render(self, markup: str) -> ElementNode:
        """Mount markup into a fresh container and return it once the page settled."""
        await self.page.wait_for_load_state("domcontentloaded", timeout=self.options.timeout_ms)
        container_id = await self.page.evaluate(
            MOUNT_SCRIPT,
            {
                "markup": markup,
                "tag": self.options.container_tag,
                "attribute": CONTAINER_ATTRIBUTE,
            },
        )
        await self.tick()
        container = locate_container(await self.snapshot(), container_id)

        if self.logger:
            self.logger.info(f"Mounted container {container_id} ({len(markup)} chars of markup)")
        if self.tracer:
            self.tracer.emit_render(container.ref, url=self.page.url)
        return container

    async def tick(self) -> None:
        await self.page.evaluate(TICK_SCRIPT, self.options.settle_frames)

    async def snapshot(self) -> DomSnapshot:
        self.last_snapshot = await snapshot(self.page)
        return self.last_snapshot

    async def refresh(self, container: ElementNode) -> ElementNode:
        container_id = container_id_of(container)
        await self.tick()
        return locate_container(await self.snapshot(), container_id)

    async def handle(self, element: ElementNode) -> ElementHandle:
        document = element.owner_document
        if document is None:
            raise StaleElementError(f"{element!r} does not belong to a page snapshot")
        result = await self.page.evaluate_handle(
            HANDLE_SCRIPT, {"snapshotId": document.snapshot_id, "ref": element.ref}
        )
        handle = result.as_element()
        if handle is None:
            await result.dispose()
            raise StaleElementError(
                f"{element!r} belongs to an outdated snapshot. Call refresh() and query again."
            )
        return handle

    async def unmount(self, container: ElementNode) -> bool:
        container_id = container_id_of(container)
        removed = await self.page.evaluate(
            UNMOUNT_SCRIPT, {"attribute": CONTAINER_ATTRIBUTE, "containerId": container_id}
        )
        if self.logger:
            if removed:
                self.logger.info(f"Unmounted container {container_id}")
            else:
                self.logger.warning(f"Container {container_id} was already removed")
        return bool(removed)

    async def cleanup(self) -> int:
        count = await self.page.evaluate(CLEANUP_SCRIPT, CONTAINER_ATTRIBUTE)
        if self.logger and count:
            self.logger.info(f"Removed {count} mounted container(s)")
        return count

    def find(self, root: ElementNode, selector: Selector) -> ElementNode | None:
        return find(root, selector, tracer=self.tracer)

    def find_all(self, root: ElementNode, selector: Selector) -> list[ElementNode]:
        return find_all(root, selector, tracer=self.tracer)


class AsyncQueryBrowser:
    """Async version of QueryBrowser for use in asyncio contexts."""

    def __init__(
        self,
        headless: bool | None = None,
        browser_type: str | None = None,
        viewport: dict[str, int] | None = None,
        logger: "QueryLogger | None" = None,
    ):
        """
        Initialize async browser

        Args:
            headless: Whether to run in headless mode. If None, defaults to True in CI, False otherwise
            browser_type: "chromium", "firefox" or "webkit" (default: ARIAFIND_BROWSER or "chromium")
            viewport: Optional viewport size, defaults to {"width": 1280, "height": 800}
            logger: Optional logger for launch/close messages
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

    async def start(self) -> None:
        """Launch browser and open a blank page (async)"""
        self.playwright = await async_playwright().start()
        try:
            launcher = getattr(self.playwright, self.browser_type)
            self.browser = await launcher.launch(headless=self.headless)
            self.context = await self.browser.new_context(viewport=self.viewport)
            self.page = await self.context.new_page()
            await self.page.set_content(BLANK_DOCUMENT)
        except Exception:
            await self.close()
            raise

        if self.logger:
            mode = "headless" if self.headless else "headed"
            self.logger.info(f"Launched {self.browser_type} ({mode})")

    async def goto(self, url: str) -> None:
        if not self.page:
            raise RuntimeError("Browser not started. Call start() first.")
        await self.page.goto(url)
        await self.page.wait_for_load_state("domcontentloaded")

    def renderer(
        self,
        options: RenderOptions | None = None,
        tracer: "Tracer | None" = None,
    ) -> AsyncRenderer:
        if not self.page:
            raise RuntimeError("Browser not started. Call start() first.")
        return AsyncRenderer(self.page, options=options, logger=self.logger, tracer=tracer)

    async def close(self) -> None:
        """Close browser and cleanup (async)"""
        if self.context:
            await self.context.close()
            self.context = None
        if self.browser:
            await self.browser.close()
            self.browser = None
        if self.playwright:
            await self.playwright.stop()
            self.playwright = None
        self.page = None

        if self.logger:
            self.logger.info(f"Closed {self.browser_type}")

    async def __aenter__(self):
        """Async context manager entry"""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
