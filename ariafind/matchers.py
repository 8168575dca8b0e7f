"""
Matchers - composable predicates over DOM elements.

Matchers are immutable values. Leaf matchers test one accessibility signal
(role, label, placeholder, rendered text); `Not`, `And` and `Or` compose them
into arbitrary boolean expressions:

    HasRole("button").and_(Not(HasLabel("Cancel")))
    HasRole("button") & ~HasLabel("Cancel")          # same thing

Prefer them in this order, the way a user perceives the page:
HasRole > HasLabel > HasPlaceholder > HasText.

Custom matchers subclass `Matcher` and implement `matches`:

    @dataclass(frozen=True)
    class IsHidden(Matcher):
        def matches(self, element):
            return element.has_attribute("hidden")
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .models import LABELABLE_KINDS, PLACEHOLDER_KINDS, ElementKind
from .protocols import DocumentLookup, ElementLike
from .roles import element_roles


class Matcher(ABC):
    """Base class for all matchers."""

    @abstractmethod
    def matches(self, element: ElementLike) -> bool:
        """Return True if the element is matched."""

    def describe(self) -> str:
        """Human-readable form used in errors and traces."""
        return repr(self)

    def and_(self, other: "Matcher") -> "And":
        """Join with `other` using a logical and."""
        return And(self, other)

    def or_(self, other: "Matcher") -> "Or":
        """Join with `other` using a logical or."""
        return Or(self, other)

    def __and__(self, other: "Matcher") -> "And":
        return self.and_(other)

    def __or__(self, other: "Matcher") -> "Or":
        return self.or_(other)

    def __invert__(self) -> "Not":
        return Not(self)

    def __str__(self) -> str:
        return self.describe()


@dataclass(frozen=True)
class HasRole(Matcher):
    """
    Matches elements with the given ARIA role.

    The role is either implied by the tag (see `ariafind.roles.roles_of`) or
    set explicitly with the `role` attribute; either one is enough. Ancestor
    context and `aria-*` attributes are not taken into account.
    """

    role: str

    def matches(self, element: ElementLike) -> bool:
        if self.role in element_roles(element):
            return True
        return element.get_attribute("role") == self.role

    def describe(self) -> str:
        return f"role={self.role}"


@dataclass(frozen=True)
class HasLabel(Matcher):
    """
    Matches form controls labelled with exactly `text`.

    Only input (except type="hidden"), button, meter, output, progress,
    select and textarea elements can be labelled. A control is labelled by:

    1. a `<label for=...>` pointing at its id (or any other native label),
       compared on the label's full text content;
    2. a wrapping `<label>`: any other child node of it whose trimmed text
       content equals `text`;
    3. `aria-labelledby`, if an element with that id exists in the document.

    `aria-label` is ignored on purpose: it is not visible to sighted users.

    Args:
        text: Label text, compared exactly
        document: Lookup used for `aria-labelledby`; defaults to the
                  element's own document
    """

    text: str
    document: DocumentLookup | None = field(default=None, compare=False, repr=False)

    def matches(self, element: ElementLike) -> bool:
        kind = element.kind
        if kind not in LABELABLE_KINDS:
            return False
        if kind is ElementKind.INPUT and element.input_type == "hidden":
            return False

        if any(label.text_content == self.text for label in element.labels):
            return True

        parent = element.parent
        if parent is not None and parent.kind is ElementKind.LABEL:
            for child in parent.child_nodes:
                if child is element:
                    continue
                if child.text_content.strip() == self.text:
                    return True

        # Existence only: the referenced element's text is not compared.
        labelledby = element.get_attribute("aria-labelledby")
        if labelledby is not None:
            document = self.document if self.document is not None else element.owner_document
            if document is not None and document.get_element_by_id(labelledby) is not None:
                return True

        return False

    def describe(self) -> str:
        return f"label={self.text!r}"


@dataclass(frozen=True)
class HasPlaceholder(Matcher):
    """
    Matches inputs and textareas whose placeholder contains `text`.

    Placeholders are no substitute for labels, but still a better fallback
    than `HasText` for form controls. Case-sensitive.
    """

    text: str

    def matches(self, element: ElementLike) -> bool:
        if element.kind not in PLACEHOLDER_KINDS:
            return False
        return self.text in (element.get_attribute("placeholder") or "")

    def describe(self) -> str:
        return f"placeholder~{self.text!r}"


@dataclass(frozen=True)
class HasText(Matcher):
    """
    Matches the most specific element whose rendered text contains `text`.

    An element matches when its rendered text contains `text` and none of its
    element children's rendered text does, so a container and the child that
    actually shows the text never both match. Only HTML children are
    compared; text drawn inside an `<svg>` counts towards its HTML parent.
    Rendered text follows CSS: hidden elements contribute nothing.
    Case-sensitive.
    """

    text: str

    def matches(self, element: ElementLike) -> bool:
        if self.text not in element.inner_text:
            return False
        return not any(
            self.text in child.inner_text for child in element.children if child.is_html
        )

    def describe(self) -> str:
        return f"text~{self.text!r}"


@dataclass(frozen=True)
class Not(Matcher):
    """Negation of a matcher."""

    matcher: Matcher

    def matches(self, element: ElementLike) -> bool:
        return not self.matcher.matches(element)

    def describe(self) -> str:
        return f"not {_describe_operand(self.matcher)}"


@dataclass(frozen=True)
class And(Matcher):
    """Both matchers must match."""

    left: Matcher
    right: Matcher

    def matches(self, element: ElementLike) -> bool:
        return self.left.matches(element) and self.right.matches(element)

    def describe(self) -> str:
        return f"{_describe_operand(self.left, And)} and {_describe_operand(self.right, And)}"


@dataclass(frozen=True)
class Or(Matcher):
    """At least one of the matchers must match."""

    left: Matcher
    right: Matcher

    def matches(self, element: ElementLike) -> bool:
        return self.left.matches(element) or self.right.matches(element)

    def describe(self) -> str:
        return f"{_describe_operand(self.left, Or)} or {_describe_operand(self.right, Or)}"


def _describe_operand(matcher: Matcher, parent: type | None = None) -> str:
    text = matcher.describe()
    if isinstance(matcher, (And, Or)) and type(matcher) is not parent:
        return f"({text})"
    return text
