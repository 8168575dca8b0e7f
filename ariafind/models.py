"""
Pydantic models for DOM snapshots and render options.

Both hosts (the static HTML parser in `ariafind.html` and the live browser
capture in `ariafind.snapshot`) produce a `DomSnapshot`. Its nodes are plain
data: the host has already decided each element's rendered text and native
label associations, so querying never needs the original page.
"""

import uuid
from collections.abc import Iterator
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, PrivateAttr

if TYPE_CHECKING:
    from .matchers import Matcher


class ElementKind(str, Enum):
    """Closed set of element kinds that carry label or placeholder support."""

    INPUT = "input"
    BUTTON = "button"
    METER = "meter"
    OUTPUT = "output"
    PROGRESS = "progress"
    SELECT = "select"
    TEXTAREA = "textarea"
    LABEL = "label"
    OTHER = "other"

    @classmethod
    def from_tag(cls, tag: str) -> "ElementKind":
        try:
            kind = cls(tag.lower())
        except ValueError:
            return cls.OTHER
        return kind


LABELABLE_KINDS = frozenset(
    {
        ElementKind.INPUT,
        ElementKind.BUTTON,
        ElementKind.METER,
        ElementKind.OUTPUT,
        ElementKind.PROGRESS,
        ElementKind.SELECT,
        ElementKind.TEXTAREA,
    }
)

PLACEHOLDER_KINDS = frozenset({ElementKind.INPUT, ElementKind.TEXTAREA})

# Marks containers created by the render bridge (static and live).
CONTAINER_ATTRIBUTE = "data-ariafind-container"

# Values the DOM accepts for input.type; anything else reads back as "text".
_INPUT_TYPES = frozenset(
    {
        "button",
        "checkbox",
        "color",
        "date",
        "datetime-local",
        "email",
        "file",
        "hidden",
        "image",
        "month",
        "number",
        "password",
        "radio",
        "range",
        "reset",
        "search",
        "submit",
        "tel",
        "text",
        "time",
        "url",
        "week",
    }
)


class RenderOptions(BaseModel):
    """Configuration for the render bridge"""

    settle_frames: int = Field(default=2, ge=1)  # animation frames awaited by tick()
    container_tag: str = "div"
    timeout_ms: int = Field(default=5000, gt=0)


class TextNode(BaseModel):
    """Text child of an element"""

    type: Literal["text"] = "text"
    data: str = ""

    _parent: Optional["ElementNode"] = PrivateAttr(default=None)

    @property
    def parent(self) -> Optional["ElementNode"]:
        return self._parent

    @property
    def text_content(self) -> str:
        return self.data

    def __repr__(self) -> str:
        return f"TextNode({self.data!r})"


class ElementNode(BaseModel):
    """
    Element of a DOM snapshot.

    Elements compare by identity: two results are equal only if they are the
    same node of the same snapshot.
    """

    type: Literal["element"] = "element"
    ref: int  # document-order index assigned by the host
    tag: str  # lower-case local name
    namespace: Literal["html", "svg", "math", "other"] = "html"
    attributes: dict[str, str] = Field(default_factory=dict)
    inner_text: str = ""  # rendered text; empty when the element is not rendered
    label_refs: list[int] = Field(default_factory=list)
    child_nodes: list[
        Annotated[Union["ElementNode", TextNode], Field(discriminator="type")]
    ] = Field(default_factory=list)

    _parent: Optional["ElementNode"] = PrivateAttr(default=None)
    _document: Optional["DomSnapshot"] = PrivateAttr(default=None)

    def __eq__(self, other: object) -> bool:
        return self is other

    def __hash__(self) -> int:
        return id(self)

    def __repr__(self) -> str:
        element_id = self.attributes.get("id")
        suffix = f" id={element_id!r}" if element_id is not None else ""
        return f"<{self.tag} ref={self.ref}{suffix}>"

    __str__ = __repr__

    @property
    def tag_name(self) -> str:
        """Tag name as the DOM reports it (upper-case for HTML elements)."""
        return self.tag.upper() if self.is_html else self.tag

    @property
    def is_html(self) -> bool:
        return self.namespace == "html"

    @property
    def kind(self) -> ElementKind:
        if not self.is_html:
            return ElementKind.OTHER
        return ElementKind.from_tag(self.tag)

    @property
    def id(self) -> str | None:
        return self.attributes.get("id")

    def get_attribute(self, name: str) -> str | None:
        return self.attributes.get(self._attribute_name(name))

    def has_attribute(self, name: str) -> bool:
        return self._attribute_name(name) in self.attributes

    def _attribute_name(self, name: str) -> str:
        # HTML attribute names are case-insensitive; foreign ones are not.
        return name.lower() if self.is_html else name

    @property
    def input_type(self) -> str | None:
        """Normalised `type` of an `<input>` (defaults to "text"), None for other kinds."""
        if self.kind is not ElementKind.INPUT:
            return None
        value = (self.get_attribute("type") or "").lower()
        return value if value in _INPUT_TYPES else "text"

    @property
    def placeholder(self) -> str:
        return self.get_attribute("placeholder") or ""

    @property
    def parent(self) -> Optional["ElementNode"]:
        return self._parent

    @property
    def owner_document(self) -> Optional["DomSnapshot"]:
        return self._document

    @property
    def children(self) -> list["ElementNode"]:
        return [node for node in self.child_nodes if isinstance(node, ElementNode)]

    @property
    def text_content(self) -> str:
        parts: list[str] = []
        stack: list[Any] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, TextNode):
                parts.append(node.data)
            else:
                stack.extend(reversed(node.child_nodes))
        return "".join(parts)

    @property
    def labels(self) -> list["ElementNode"]:
        if self._document is None:
            return []
        resolved = (self._document.get_element_by_ref(ref) for ref in self.label_refs)
        return [label for label in resolved if label is not None]

    def iter_descendants(self) -> Iterator["ElementNode"]:
        """Yield descendant elements in document pre-order (self excluded)."""
        stack = list(reversed(self.children))
        while stack:
            element = stack.pop()
            yield element
            stack.extend(reversed(element.children))

    def find(self, selector: Union["Matcher", str]) -> Optional["ElementNode"]:
        """Find the unique descendant matching `selector`. See `ariafind.query.find`."""
        from .query import find

        return find(self, selector)

    def find_all(self, selector: Union["Matcher", str]) -> list["ElementNode"]:
        """Find all descendants matching `selector`. See `ariafind.query.find_all`."""
        from .query import find_all

        return find_all(self, selector)


ElementNode.model_rebuild()


class DomSnapshot(BaseModel):
    """
    Snapshot of a document tree.

    Parent links and the ref/id indexes are rebuilt after validation, so a
    snapshot loaded from JSON behaves exactly like a freshly captured one.
    """

    snapshot_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    url: str | None = None
    root: ElementNode

    _by_ref: dict[int, ElementNode] = PrivateAttr(default_factory=dict)
    _by_id: dict[str, ElementNode] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        self._link()

    def _link(self) -> None:
        self._by_ref = {}
        self._by_id = {}
        self.root._parent = None
        stack = [self.root]
        while stack:
            element = stack.pop()
            if element.ref in self._by_ref:
                raise ValueError(f"Duplicate element ref {element.ref} in snapshot")
            element._document = self
            self._by_ref[element.ref] = element
            element_id = element.attributes.get("id")
            if element_id is not None:
                # Refs follow document order, so keep the lowest one.
                current = self._by_id.get(element_id)
                if current is None or element.ref < current.ref:
                    self._by_id[element_id] = element
            for child in element.child_nodes:
                child._parent = element
                if isinstance(child, ElementNode):
                    stack.append(child)

    @property
    def body(self) -> ElementNode | None:
        return next((el for el in self.root.iter_descendants() if el.tag == "body"), None)

    def get_element_by_id(self, element_id: str) -> ElementNode | None:
        return self._by_id.get(element_id)

    def get_element_by_ref(self, ref: int) -> ElementNode | None:
        return self._by_ref.get(ref)

    def __len__(self) -> int:
        return len(self._by_ref)

    def save(self, path: str | Path) -> None:
        """Save snapshot as JSON"""
        Path(path).write_text(self.model_dump_json(), encoding="utf-8")

    @classmethod
    def load(cls, path: str | Path) -> "DomSnapshot":
        """Load a snapshot saved with `save()`"""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
