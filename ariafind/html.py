"""
Static HTML host - builds a DomSnapshot from markup without a browser.

Markup is parsed with justhtml (a standards-compliant HTML5 parser). Since there
is no layout engine, rendered text is derived from the markup itself:

- `<head>`, `<script>`, `<style>`, `<template>` and similar never render;
- `display: none` (inline style) and the `hidden` attribute remove an
  element and its subtree;
- `visibility: hidden|collapse` hides an element's own text, while a
  descendant with `visibility: visible` shows again;
- block-level elements and `<br>` break lines, other whitespace collapses.

Stylesheets are not evaluated. Use the browser host (`ariafind.snapshot`)
when rendering must follow real CSS.
"""

import re
from typing import Any

from justhtml import JustHTML

from .exceptions import SnapshotError
from .models import (
    CONTAINER_ATTRIBUTE,
    LABELABLE_KINDS,
    DomSnapshot,
    ElementKind,
    ElementNode,
    TextNode,
)

_NAMESPACES = {"html": "html", "svg": "svg", "math": "math"}

_NOT_RENDERED_TAGS = frozenset(
    {"base", "head", "link", "meta", "noscript", "script", "style", "template", "title"}
)

_BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "dd",
        "details",
        "dialog",
        "div",
        "dl",
        "dt",
        "fieldset",
        "figcaption",
        "figure",
        "footer",
        "form",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "hr",
        "html",
        "legend",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "summary",
        "table",
        "tbody",
        "tfoot",
        "thead",
        "tr",
        "ul",
    }
)

_WHITESPACE = re.compile(r"[ \t\n\r\f]+")
_LINE_WHITESPACE = re.compile(r"[ \t\r\f]+")


def parse_html(markup: str, url: str | None = None) -> DomSnapshot:
    """
    Parse a full HTML document into a snapshot.

    Args:
        markup: HTML source (fragments are placed into <body> as a browser would)
        url: Optional URL recorded on the snapshot

    Returns:
        DomSnapshot rooted at the <html> element
    """
    return _build(markup, url=url, container_tag=None)


def mount(markup: str, container_tag: str = "div") -> ElementNode:
    """
    Mount markup into a fresh container and return the container.

    The static counterpart of `Renderer.render()`: the markup becomes the
    content of a new `<div>` inside `<body>`, and the container element is
    the query root.

    Example:
        container = mount('<button>Save</button><button>Cancel</button>')
        save = container.find(HasRole("button") & HasText("Save"))
    """
    snapshot = _build(markup, url=None, container_tag=container_tag)
    container = next(
        (el for el in snapshot.root.iter_descendants() if el.has_attribute(CONTAINER_ATTRIBUTE)),
        None,
    )
    if container is None:
        raise SnapshotError("Container element missing from parsed document")
    return container


def _build(markup: str, url: str | None, container_tag: str | None) -> DomSnapshot:
    # Sanitizing would strip the form controls, labels and styles being queried.
    document = JustHTML(markup, sanitize=False)
    html_node = next((node for node in document.root.children if node.name == "html"), None)
    if html_node is None:
        raise SnapshotError("Parsed document has no <html> element", url=url)

    builder = _TreeBuilder(container_tag)
    snapshot = DomSnapshot(url=url, root=builder.convert(html_node))

    elements = [snapshot.root, *snapshot.root.iter_descendants()]
    for element in elements:
        # SVG and MathML elements have no innerText in the DOM.
        element.inner_text = _inner_text(element) if element.is_html else ""
    _associate_labels(snapshot, elements)
    return snapshot


class _TreeBuilder:
    """Converts justhtml nodes into ElementNode/TextNode, assigning refs in document order."""

    def __init__(self, container_tag: str | None):
        self._container_tag = container_tag
        self._next_ref = 0

    def _new_element(self, tag: str, namespace: str, attributes: dict[str, str]) -> ElementNode:
        element = ElementNode(ref=self._next_ref, tag=tag, namespace=namespace, attributes=attributes)
        self._next_ref += 1
        return element

    def convert(self, node: Any) -> ElementNode:
        namespace = _NAMESPACES.get(node.namespace or "html", "other")
        if namespace == "html":
            tag = node.name.lower()
            attributes = {name.lower(): value or "" for name, value in (node.attrs or {}).items()}
        else:
            tag = node.name
            attributes = {name: value or "" for name, value in (node.attrs or {}).items()}
        element = self._new_element(tag, namespace, attributes)

        target = element
        if self._container_tag is not None and tag == "body":
            target = self._new_element(self._container_tag, "html", {CONTAINER_ATTRIBUTE: "0"})
            element.child_nodes.append(target)

        for child in node.children or []:
            if child.name == "#text":
                target.child_nodes.append(TextNode(data=child.data or ""))
            elif child.name.startswith("#") or child.name == "!doctype":
                continue  # comments
            else:
                target.child_nodes.append(self.convert(child))
        return element


def _inline_style(element: ElementNode) -> dict[str, str]:
    style: dict[str, str] = {}
    for declaration in (element.get_attribute("style") or "").split(";"):
        name, sep, value = declaration.partition(":")
        if not sep:
            continue
        value = value.replace("!important", "").strip().lower()
        style[name.strip().lower()] = value
    return style


def _is_displayed(element: ElementNode) -> bool:
    """Whether the element itself generates boxes (ancestors not considered)."""
    if element.is_html and element.tag in _NOT_RENDERED_TAGS:
        return False
    display = _inline_style(element).get("display")
    if display is not None:
        return display != "none"
    if element.has_attribute("hidden"):
        return False
    return element.input_type != "hidden"


def _is_rendered(element: ElementNode) -> bool:
    node: ElementNode | None = element
    while node is not None:
        if not _is_displayed(node):
            return False
        node = node.parent
    return True


def _own_visibility(element: ElementNode, inherited: bool) -> bool:
    visibility = _inline_style(element).get("visibility")
    if visibility == "visible":
        return True
    if visibility in ("hidden", "collapse"):
        return False
    return inherited


def _inherited_visibility(element: ElementNode) -> bool:
    chain: list[ElementNode] = []
    node: ElementNode | None = element
    while node is not None:
        chain.append(node)
        node = node.parent
    visible = True
    for ancestor in reversed(chain):
        visible = _own_visibility(ancestor, visible)
    return visible


def _inner_text(element: ElementNode) -> str:
    if not _is_rendered(element):
        return ""
    parts: list[str] = []
    _collect_text(element, _inherited_visibility(element), parts)
    lines = (_LINE_WHITESPACE.sub(" ", line).strip(" ") for line in "".join(parts).split("\n"))
    return "\n".join(line for line in lines if line)


def _collect_text(element: ElementNode, visible: bool, parts: list[str]) -> None:
    for child in element.child_nodes:
        if isinstance(child, TextNode):
            if visible:
                parts.append(_WHITESPACE.sub(" ", child.data))
            continue
        if not _is_displayed(child):
            continue
        child_visible = _own_visibility(child, visible)
        if child.tag == "br":
            if child_visible:
                parts.append("\n")
            continue
        block = child.tag in _BLOCK_TAGS
        if block:
            parts.append("\n")
        _collect_text(child, child_visible, parts)
        if block:
            parts.append("\n")


def _is_labelable(element: ElementNode) -> bool:
    if element.kind not in LABELABLE_KINDS:
        return False
    return element.input_type != "hidden"


def _associate_labels(snapshot: DomSnapshot, elements: list[ElementNode]) -> None:
    """Fill `label_refs` the way the DOM computes `element.labels`."""
    for label in elements:
        if label.kind is not ElementKind.LABEL:
            continue
        target: ElementNode | None
        for_id = label.get_attribute("for")
        if for_id is not None:
            target = snapshot.get_element_by_id(for_id)
            if target is not None and not _is_labelable(target):
                target = None
        else:
            target = next((el for el in label.iter_descendants() if _is_labelable(el)), None)
        if target is not None:
            target.label_refs.append(label.ref)
