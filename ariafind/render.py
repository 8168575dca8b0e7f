"""
Render bridge - mounts markup into a live page and snapshots it once settled.

Typical test flow:

    with QueryBrowser(headless=True) as browser:
        renderer = browser.renderer()
        container = renderer.render('<button>Increment</button><output>0</output>')

        button = container.find(HasRole("button") & HasText("Increment"))
        renderer.handle(button).click()

        container = renderer.refresh(container)   # re-capture after the page updated
        assert container.find("text~'1'") is not None
"""

from typing import TYPE_CHECKING

from playwright.sync_api import ElementHandle, Page

from .exceptions import StaleElementError
from .models import CONTAINER_ATTRIBUTE, DomSnapshot, ElementNode, RenderOptions
from .query import Selector, find, find_all
from .snapshot import HANDLE_SCRIPT, snapshot

if TYPE_CHECKING:
    from .protocols import QueryLogger
    from .tracing import Tracer


MOUNT_SCRIPT = """
({ markup, tag, attribute }) => {
  window.__ariafindMounts = (window.__ariafindMounts || 0) + 1;
  const containerId = String(window.__ariafindMounts);
  const container = document.createElement(tag);
  container.setAttribute(attribute, containerId);
  container.innerHTML = markup;
  (document.body || document.documentElement).appendChild(container);
  return containerId;
}
"""

UNMOUNT_SCRIPT = """
({ attribute, containerId }) => {
  const container = document.querySelector(`[${attribute}="${containerId}"]`);
  if (container) {
    container.remove();
  }
  return Boolean(container);
}
"""

CLEANUP_SCRIPT = """
(attribute) => {
  const containers = document.querySelectorAll(`[${attribute}]`);
  containers.forEach((container) => container.remove());
  return containers.length;
}
"""

# Waits the given number of animation frames, then one macrotask, so that
# layout and any work queued by the last frame have run.
TICK_SCRIPT = """
(frames) => new Promise((resolve) => {
  let remaining = frames;
  const step = () => {
    remaining -= 1;
    if (remaining <= 0) {
      setTimeout(resolve, 0);
    } else {
      requestAnimationFrame(step);
    }
  };
  requestAnimationFrame(step);
})
"""


def container_id_of(element: ElementNode) -> str:
    container_id = element.get_attribute(CONTAINER_ATTRIBUTE)
    if container_id is None:
        raise ValueError(f"{element!r} is not a container returned by render()")
    return container_id


def locate_container(snap: DomSnapshot, container_id: str) -> ElementNode:
    container = next(
        (
            el
            for el in snap.root.iter_descendants()
            if el.get_attribute(CONTAINER_ATTRIBUTE) == container_id
        ),
        None,
    )
    if container is None:
        raise StaleElementError(f"Container {container_id} is no longer mounted in the page")
    return container


class Renderer:
    """Mounts markup into fresh containers of a Playwright page (sync API)."""

    def __init__(
        self,
        page: Page,
        options: RenderOptions | None = None,
        logger: "QueryLogger | None" = None,
        tracer: "Tracer | None" = None,
    ):
        """
        Initialize renderer

        Args:
            page: Playwright Page to mount into
            options: Render options (settle frames, container tag, timeout)
            logger: Optional logger for mount/unmount messages
            tracer: Optional tracer; records renders and queries made through this renderer
        """
        self.page = page
        self.options = options or RenderOptions()
        self.logger = logger
        self.tracer = tracer
        self.last_snapshot: DomSnapshot | None = None

    def render(self, markup: str) -> ElementNode:
        """
        Mount markup into a fresh container and wait for the page to settle.

        Args:
            markup: HTML to set as the container's content

        Returns:
            The container element of a fresh snapshot (the query root)
        """
        self.page.wait_for_load_state("domcontentloaded", timeout=self.options.timeout_ms)
        container_id = self.page.evaluate(
            MOUNT_SCRIPT,
            {
                "markup": markup,
                "tag": self.options.container_tag,
                "attribute": CONTAINER_ATTRIBUTE,
            },
        )
        self.tick()
        container = locate_container(self.snapshot(), container_id)

        if self.logger:
            self.logger.info(f"Mounted container {container_id} ({len(markup)} chars of markup)")
        if self.tracer:
            self.tracer.emit_render(container.ref, url=self.page.url)
        return container

    def tick(self) -> None:
        """Wait for `settle_frames` animation frames (and one macrotask) to pass."""
        self.page.evaluate(TICK_SCRIPT, self.options.settle_frames)

    def snapshot(self) -> DomSnapshot:
        """Capture the whole document; becomes the snapshot handles resolve against."""
        self.last_snapshot = snapshot(self.page)
        return self.last_snapshot

    def refresh(self, container: ElementNode) -> ElementNode:
        """
        Re-capture a container after the page changed (e.g. after a click).

        Args:
            container: Container returned by render() or an earlier refresh()

        Returns:
            The same container in a fresh snapshot
        """
        container_id = container_id_of(container)
        self.tick()
        return locate_container(self.snapshot(), container_id)

    def handle(self, element: ElementNode) -> ElementHandle:
        """
        Resolve a snapshot element to a live Playwright ElementHandle.

        Raises:
            StaleElementError: If the element belongs to an older snapshot
        """
        document = element.owner_document
        if document is None:
            raise StaleElementError(f"{element!r} does not belong to a page snapshot")
        result = self.page.evaluate_handle(
            HANDLE_SCRIPT, {"snapshotId": document.snapshot_id, "ref": element.ref}
        )
        handle = result.as_element()
        if handle is None:
            result.dispose()
            raise StaleElementError(
                f"{element!r} belongs to an outdated snapshot. Call refresh() and query again."
            )
        return handle

    def unmount(self, container: ElementNode) -> bool:
        """Remove a mounted container from the page. Returns False if it was already gone."""
        container_id = container_id_of(container)
        removed = self.page.evaluate(
            UNMOUNT_SCRIPT, {"attribute": CONTAINER_ATTRIBUTE, "containerId": container_id}
        )
        if self.logger:
            if removed:
                self.logger.info(f"Unmounted container {container_id}")
            else:
                self.logger.warning(f"Container {container_id} was already removed")
        return bool(removed)

    def cleanup(self) -> int:
        """Remove every container mounted in the page. Returns how many were removed."""
        count = self.page.evaluate(CLEANUP_SCRIPT, CONTAINER_ATTRIBUTE)
        if self.logger and count:
            self.logger.info(f"Removed {count} mounted container(s)")
        return count

    def find(self, root: ElementNode, selector: Selector) -> ElementNode | None:
        """`ariafind.query.find` with this renderer's tracer."""
        return find(root, selector, tracer=self.tracer)

    def find_all(self, root: ElementNode, selector: Selector) -> list[ElementNode]:
        """`ariafind.query.find_all` with this renderer's tracer."""
        return find_all(root, selector, tracer=self.tracer)
