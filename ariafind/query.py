"""
Query engine - find elements by accessibility matchers
"""

import re
from collections.abc import Callable
from typing import TYPE_CHECKING, Union

from .exceptions import AmbiguousMatchError, SelectorError
from .matchers import And, HasLabel, HasPlaceholder, HasRole, HasText, Matcher, Not

if TYPE_CHECKING:
    from .protocols import ElementLike
    from .tracing import Tracer

Selector = Union[Matcher, str]

# key=value, key~value, key!=value, key!~value; value bare or quoted
_TERM = re.compile(
    r"""(?P<key>[A-Za-z_]+)(?P<op>!=|!~|=|~)"""
    r"""(?P<value>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*"|[^\s'"]+)"""
)
_ESCAPE = re.compile(r"\\(.)")

_TERMS: dict[str, tuple[str, Callable[[str], Matcher]]] = {
    "role": ("=", HasRole),
    "label": ("=", HasLabel),
    "text": ("~", HasText),
    "placeholder": ("~", HasPlaceholder),
}


def parse_selector(selector: str) -> Matcher:
    """
    Parse string DSL selector into a matcher tree

    Terms are separated by whitespace and joined with a logical and.

    Examples:
        "role=button"
        "role=button text~'Sign in'"
        "label='Email address'"
        "placeholder~search role!=searchbox"

    Raises:
        SelectorError: If the selector is empty, has an unknown key or an
                       operator that the key does not support
    """
    matcher: Matcher | None = None
    pos = 0
    length = len(selector)

    while True:
        while pos < length and selector[pos].isspace():
            pos += 1
        if pos >= length:
            break

        match = _TERM.match(selector, pos)
        if match is None or (match.end() < length and not selector[match.end()].isspace()):
            raise SelectorError(f"Invalid selector term at position {pos}: {selector!r}")
        pos = match.end()

        key = match.group("key").lower()
        op = match.group("op")
        value = match.group("value")
        if value[0] in "'\"":
            value = _ESCAPE.sub(r"\1", value[1:-1])

        if key not in _TERMS:
            raise SelectorError(f"Unknown selector key {key!r} in {selector!r}")
        expected_op, factory = _TERMS[key]
        negated = op.startswith("!")
        if op.lstrip("!") != expected_op:
            raise SelectorError(
                f"Operator {op!r} is not supported for {key!r}, use {expected_op!r} "
                f"or '!{expected_op}'"
            )

        term = factory(value)
        if negated:
            term = Not(term)
        matcher = term if matcher is None else And(matcher, term)

    if matcher is None:
        raise SelectorError("Empty selector")
    return matcher


def _as_matcher(selector: Selector) -> Matcher:
    if isinstance(selector, str):
        return parse_selector(selector)
    return selector


def _collect(root: "ElementLike", matcher: Matcher) -> list["ElementLike"]:
    return [el for el in root.iter_descendants() if el.is_html and matcher.matches(el)]


def find_all(
    root: "ElementLike",
    selector: Selector,
    *,
    tracer: "Tracer | None" = None,
) -> list["ElementLike"]:
    """
    Find all descendants of `root` matching the selector

    Args:
        root: Element whose subtree is searched (never a candidate itself)
        selector: Matcher or string DSL (e.g., "role=button text~'Sign in'")
        tracer: Optional tracer that records the query

    Returns:
        Matching elements in document order (may be empty)
    """
    matcher = _as_matcher(selector)
    matches = _collect(root, matcher)
    if tracer is not None:
        tracer.emit_query("find_all", matcher.describe(), len(matches))
    return matches


def find(
    root: "ElementLike",
    selector: Selector,
    *,
    tracer: "Tracer | None" = None,
) -> "ElementLike | None":
    """
    Find the unique descendant of `root` matching the selector

    Args:
        root: Element whose subtree is searched (never a candidate itself)
        selector: Matcher or string DSL
        tracer: Optional tracer that records the query

    Returns:
        The matching element, or None if nothing matches

    Raises:
        AmbiguousMatchError: If more than one element matches
    """
    matcher = _as_matcher(selector)
    matches = _collect(root, matcher)
    description = matcher.describe()
    if tracer is not None:
        tracer.emit_query("find", description, len(matches))

    if len(matches) > 1:
        error = AmbiguousMatchError(description, matches)
        if tracer is not None:
            tracer.emit_error(str(error), selector=description)
        raise error
    return matches[0] if matches else None
