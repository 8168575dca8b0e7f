"""
ariafind - find DOM elements the way users perceive them
"""

from .browser import QueryBrowser
from .exceptions import (
    AmbiguousMatchError,
    AriaFindError,
    SelectorError,
    SnapshotError,
    StaleElementError,
)
from .html import mount, parse_html
from .matchers import And, HasLabel, HasPlaceholder, HasRole, HasText, Matcher, Not, Or
from .models import (
    CONTAINER_ATTRIBUTE,
    LABELABLE_KINDS,
    PLACEHOLDER_KINDS,
    DomSnapshot,
    ElementKind,
    ElementNode,
    RenderOptions,
    TextNode,
)
from .protocols import DocumentLookup, ElementLike, QueryLogger
from .query import find, find_all, parse_selector
from .render import Renderer
from .roles import element_roles, roles_of
from .snapshot import snapshot
from .tracing import JsonlTraceSink, TraceEvent, Tracer, TraceSink

__version__ = "0.1.0"

__all__ = [
    # Query core
    "find",
    "find_all",
    "parse_selector",
    "roles_of",
    "element_roles",
    # Matchers
    "Matcher",
    "HasRole",
    "HasLabel",
    "HasPlaceholder",
    "HasText",
    "Not",
    "And",
    "Or",
    # Models
    "DomSnapshot",
    "ElementNode",
    "TextNode",
    "ElementKind",
    "LABELABLE_KINDS",
    "PLACEHOLDER_KINDS",
    "CONTAINER_ATTRIBUTE",
    "RenderOptions",
    # Protocols
    "ElementLike",
    "DocumentLookup",
    "QueryLogger",
    # Hosts
    "parse_html",
    "mount",
    "snapshot",
    "Renderer",
    "QueryBrowser",
    # Errors
    "AriaFindError",
    "AmbiguousMatchError",
    "SelectorError",
    "SnapshotError",
    "StaleElementError",
    # Tracing
    "Tracer",
    "TraceSink",
    "JsonlTraceSink",
    "TraceEvent",
]
