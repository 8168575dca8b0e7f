"""
Structural interfaces shared by the query core and its hosts.

The matchers and the query engine only rely on these protocols, so any tree
that exposes the same read-only surface can be queried. `ElementNode` from
`ariafind.models` is the implementation shipped with the package.
"""

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .models import ElementKind


class QueryLogger(Protocol):
    """Protocol for optional logger interface."""

    def info(self, message: str) -> None:
        """Log info message."""
        ...

    def warning(self, message: str) -> None:
        """Log warning message."""
        ...

    def error(self, message: str) -> None:
        """Log error message."""
        ...


@runtime_checkable
class DocumentLookup(Protocol):
    """Document-wide id lookup, used to resolve `aria-labelledby` references."""

    def get_element_by_id(self, element_id: str) -> Any | None:
        """Return the first element in document order with the given id, or None."""
        ...


class ElementLike(Protocol):
    """Read-only element surface the matchers evaluate against."""

    @property
    def tag(self) -> str:
        """Lower-case local name."""
        ...

    @property
    def kind(self) -> "ElementKind":
        """Closed element kind used for labelable/placeholder checks."""
        ...

    @property
    def is_html(self) -> bool:
        """True for elements in the HTML namespace."""
        ...

    @property
    def parent(self) -> "ElementLike | None": ...

    @property
    def children(self) -> Sequence["ElementLike"]:
        """Element children only."""
        ...

    @property
    def child_nodes(self) -> Sequence[Any]:
        """All child nodes (elements and text); each exposes `text_content`."""
        ...

    @property
    def inner_text(self) -> str:
        """Rendered text, as decided by the host (empty when not rendered)."""
        ...

    @property
    def text_content(self) -> str: ...

    @property
    def labels(self) -> Sequence["ElementLike"]:
        """Native label elements associated with this element."""
        ...

    @property
    def input_type(self) -> str | None:
        """Normalised `type` of an input element, None for other kinds."""
        ...

    @property
    def owner_document(self) -> DocumentLookup | None: ...

    def get_attribute(self, name: str) -> str | None: ...

    def iter_descendants(self) -> Iterator["ElementLike"]:
        """Descendant elements in document pre-order, excluding self."""
        ...
