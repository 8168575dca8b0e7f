"""
ARIA role table - maps tag + attribute combinations to implicit roles
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .protocols import ElementLike


_TAG_ROLES: dict[str, tuple[str, ...]] = {
    "article": ("article",),
    "button": ("button",),
    "td": ("cell", "gridcell"),
    "select": ("combobox", "listbox"),
    "menuitem": ("command", "menuitem"),
    "dd": ("definition",),
    "figure": ("figure",),
    "form": ("form",),
    "table": ("grid", "table"),
    "fieldset": ("group",),
    "h1": ("heading",),
    "h2": ("heading",),
    "h3": ("heading",),
    "h4": ("heading",),
    "h5": ("heading",),
    "h6": ("heading",),
    "img": ("img",),
    "a": ("link",),
    "link": ("link",),
    "ol": ("list",),
    "ul": ("list",),
    "li": ("listitem",),
    "nav": ("navigation",),
    "option": ("option",),
    "frame": ("region",),
    "rel": ("roletype",),
    "tr": ("row",),
    "tbody": ("rowgroup",),
    "tfoot": ("rowgroup",),
    "thead": ("rowgroup",),
    "hr": ("separator",),
    "dt": ("term",),
    "dfn": ("term",),
    "textarea": ("textbox",),
}

# Keyed by the raw `type` attribute value; comparison is exact.
_INPUT_TYPE_ROLES: dict[str, tuple[str, ...]] = {
    "button": ("button",),
    "checkbox": ("checkbox",),
    "radio": ("radio",),
    "search": ("searchbox",),
    "text": ("textbox",),
}


def roles_of(tag: str, type: str | None = None, scope: str | None = None) -> tuple[str, ...]:  # noqa: A002
    """
    Return the implicit ARIA roles for a tag.

    The list of assigned roles follows aria-query. Only `type` (for `<input>`)
    and `scope` (for `<th>`) take part in the lookup; nothing about the
    element's position in the tree is consulted.

    Args:
        tag: Tag name, compared case-insensitively
        type: Raw value of the `type` attribute, if any
        scope: Raw value of the `scope` attribute, if any

    Returns:
        Tuple of role names in table order (empty if the tag has no implicit role)

    Examples:
        roles_of("td")                      # ("cell", "gridcell")
        roles_of("input", type="checkbox")  # ("checkbox",)
        roles_of("th", scope="row")         # ("rowheader",)
    """
    name = tag.lower()
    if name == "input":
        return _INPUT_TYPE_ROLES.get(type or "", ())
    if name == "th":
        return ("rowheader",) if scope == "row" else ("columnheader",)
    return _TAG_ROLES.get(name, ())


def element_roles(element: "ElementLike") -> tuple[str, ...]:
    """Implicit ARIA roles of an element, derived from its tag and type/scope attributes."""
    return roles_of(
        element.tag,
        type=element.get_attribute("type"),
        scope=element.get_attribute("scope"),
    )
