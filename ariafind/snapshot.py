"""
Snapshot functionality - captures the live DOM of a Playwright page
"""

import uuid

from playwright.sync_api import Page

from .exceptions import SnapshotError
from .models import DomSnapshot

# Walks the whole document in pre-order. Rendered text comes from the
# browser's own innerText (CSS-aware); elements that generate no boxes
# (display:none on self or an ancestor) report empty text. Element objects
# are kept on window.__ariafindSnapshot so refs can be turned back into
# handles until the next capture.
SNAPSHOT_SCRIPT = """
(snapshotId) => {
  const NAMESPACES = {
    "http://www.w3.org/1999/xhtml": "html",
    "http://www.w3.org/2000/svg": "svg",
    "http://www.w3.org/1998/Math/MathML": "math",
  };
  const refs = [];
  const records = [];
  const index = new Map();

  const walk = (el) => {
    const ref = refs.length;
    refs.push(el);
    index.set(el, ref);

    const attributes = {};
    for (const attr of el.attributes) {
      attributes[attr.name] = attr.value;
    }
    const rendered = typeof el.checkVisibility === "function"
      ? el.checkVisibility()
      : el.getClientRects().length > 0;

    const record = {
      type: "element",
      ref,
      tag: el.localName,
      namespace: NAMESPACES[el.namespaceURI] || "other",
      attributes,
      inner_text: rendered && typeof el.innerText === "string" ? el.innerText : "",
      label_refs: [],
      child_nodes: [],
    };
    records.push(record);

    for (const child of el.childNodes) {
      if (child.nodeType === Node.ELEMENT_NODE) {
        record.child_nodes.push(walk(child));
      } else if (child.nodeType === Node.TEXT_NODE || child.nodeType === Node.CDATA_SECTION_NODE) {
        record.child_nodes.push({ type: "text", data: child.data });
      }
    }
    return record;
  };

  if (!document.documentElement) {
    return null;
  }
  const root = walk(document.documentElement);

  refs.forEach((el, ref) => {
    if (el.labels) {
      records[ref].label_refs = Array.from(el.labels, (label) => index.get(label))
        .filter((labelRef) => labelRef !== undefined);
    }
  });

  window.__ariafindSnapshot = { id: snapshotId, refs };
  return { snapshot_id: snapshotId, url: window.location.href, root };
}
"""

# Resolves a ref of the current capture; null when the capture was replaced.
HANDLE_SCRIPT = """
({ snapshotId, ref }) => {
  const current = window.__ariafindSnapshot;
  if (!current || current.id !== snapshotId) {
    return null;
  }
  return current.refs[ref] || null;
}
"""


def new_snapshot_id() -> str:
    return uuid.uuid4().hex


def parse_snapshot_result(result: dict | None, url: str | None = None) -> DomSnapshot:
    """Validate the capture script's result into a DomSnapshot."""
    if not result or not result.get("root"):
        raise SnapshotError("Page returned no document to snapshot", url=url)
    return DomSnapshot(**result)


def snapshot(page: Page) -> DomSnapshot:
    """
    Take a snapshot of the current page

    Args:
        page: Playwright Page (sync API)

    Returns:
        DomSnapshot of the whole document

    Raises:
        SnapshotError: If the page has no document
    """
    if page is None:
        raise RuntimeError("Browser not started. Call start() first.")

    result = page.evaluate(SNAPSHOT_SCRIPT, new_snapshot_id())

    # Validate and parse with Pydantic
    return parse_snapshot_result(result, url=page.url)
