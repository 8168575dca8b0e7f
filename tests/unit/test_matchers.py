"""
Tests for leaf matchers and combinators
"""

from dataclasses import dataclass

import pytest

from ariafind import (
    And,
    HasLabel,
    HasPlaceholder,
    HasRole,
    HasText,
    Matcher,
    Not,
    Or,
    find,
    mount,
    parse_html,
)


def by_id(root, element_id):
    return root.owner_document.get_element_by_id(element_id)


class TestHasRole:
    def test_implicit_role(self):
        container = mount("<button>Go</button><span>Go</span>")
        button, span = container.children
        assert HasRole("button").matches(button)
        assert not HasRole("button").matches(span)

    def test_explicit_role_attribute(self):
        container = mount('<div role="button">Fun</div><div role="Button">Nope</div>')
        exact, wrong_case = container.children
        assert HasRole("button").matches(exact)
        assert not HasRole("button").matches(wrong_case)

    def test_ancestors_do_not_matter(self):
        """Roles are never inherited from an ancestor"""
        container = mount('<div role="grid"><span id="inner">x</span></div>')
        assert not HasRole("grid").matches(by_id(container, "inner"))


class TestHasLabel:
    def test_explicit_label(self):
        container = mount('<label for="name">Name</label><input id="name"/>')
        assert HasLabel("Name").matches(by_id(container, "name"))

    def test_explicit_label_compares_full_text(self):
        container = mount('<label for="name">Your name</label><input id="name"/>')
        assert not HasLabel("name").matches(by_id(container, "name"))

    def test_wrapping_label(self):
        container = mount('<label> Age <input id="age" type="number"/></label>')
        assert HasLabel("Age").matches(by_id(container, "age"))

    def test_aria_labelledby_checks_existence_only(self):
        """The referenced element's text is not compared"""
        container = mount(
            '<span id="caption">Something else</span><input id="field" aria-labelledby="caption"/>'
        )
        assert HasLabel("Anything").matches(by_id(container, "field"))

    def test_aria_labelledby_missing_target(self):
        container = mount('<input id="field" aria-labelledby="nowhere"/>')
        assert not HasLabel("Anything").matches(by_id(container, "field"))

    def test_aria_label_is_ignored(self):
        container = mount('<input id="field" aria-label="Type rust"/>')
        assert not HasLabel("Type rust").matches(by_id(container, "field"))

    def test_hidden_input_never_labelled(self):
        container = mount('<label for="token">Token</label><input id="token" type="hidden"/>')
        assert not HasLabel("Token").matches(by_id(container, "token"))

    def test_non_labelable_kind(self):
        container = mount('<label for="para">Intro</label><p id="para">Text</p>')
        assert not HasLabel("Intro").matches(by_id(container, "para"))

    def test_explicit_document_lookup(self):
        """aria-labelledby is resolved through the given document, not the query root"""
        container = mount('<input id="field" aria-labelledby="caption"/>')
        other = parse_html('<p id="caption">Caption</p>')
        field = by_id(container, "field")

        assert not HasLabel("Caption").matches(field)
        assert HasLabel("Caption", document=other).matches(field)

    def test_document_not_part_of_equality(self):
        other = parse_html("<p></p>")
        assert HasLabel("Name", document=other) == HasLabel("Name")


class TestHasPlaceholder:
    def test_substring(self):
        container = mount('<input id="q" placeholder="Search docs"/>')
        field = by_id(container, "q")
        assert HasPlaceholder("Search").matches(field)
        assert HasPlaceholder("docs").matches(field)
        assert not HasPlaceholder("search").matches(field)

    def test_textarea(self):
        container = mount('<textarea id="notes" placeholder="Notes"></textarea>')
        assert HasPlaceholder("Notes").matches(by_id(container, "notes"))

    def test_other_kinds_never_match(self):
        container = mount('<div id="d" placeholder="Search"></div>')
        assert not HasPlaceholder("Search").matches(by_id(container, "d"))

    def test_missing_attribute_is_empty(self):
        container = mount('<input id="q"/>')
        assert HasPlaceholder("").matches(by_id(container, "q"))
        assert not HasPlaceholder("a").matches(by_id(container, "q"))


class TestHasText:
    def test_most_specific_element(self):
        container = mount('<div id="outer"><span id="inner">Hello world</span></div>')
        assert HasText("Hello").matches(by_id(container, "inner"))
        assert not HasText("Hello").matches(by_id(container, "outer"))

    def test_text_split_across_children(self):
        """The parent matches when no single child holds the whole text"""
        container = mount('<p id="p"><b>Hello</b> <i>world</i></p>')
        assert HasText("Hello world").matches(by_id(container, "p"))

    def test_case_sensitive(self):
        container = mount('<button id="b">I am</button>')
        assert not HasText("i am").matches(by_id(container, "b"))

    def test_svg_children_are_not_compared(self):
        """Text inside an <svg> belongs to the enclosing HTML element"""
        container = mount('<button id="b">Save<svg><text>Save</text></svg></button>')
        button = by_id(container, "b")
        svg = button.children[0]

        assert svg.inner_text == ""
        assert HasText("Save").matches(button)
        assert find(container, HasText("Save")) is button

    def test_hidden_text(self):
        container = mount('<button id="b" style="visibility:hidden">Blue</button>')
        assert not HasText("Blue").matches(by_id(container, "b"))


@dataclass(frozen=True)
class IsHidden(Matcher):
    def matches(self, element):
        return element.has_attribute("hidden")


@pytest.fixture
def elements():
    container = mount(
        '<button id="save">Save</button>'
        '<button id="cancel" hidden>Cancel</button>'
        '<a id="home" href="/">Save</a>'
        '<input id="query" placeholder="Save as"/>'
        "<span>plain</span>"
    )
    return [container, *container.iter_descendants()]


MATCHERS = [
    HasRole("button"),
    HasRole("link"),
    HasText("Save"),
    HasPlaceholder("Save"),
    IsHidden(),
]


class TestCombinators:
    @pytest.mark.parametrize("p", MATCHERS)
    def test_not(self, elements, p):
        for element in elements:
            assert Not(p).matches(element) == (not p.matches(element))

    @pytest.mark.parametrize("p", MATCHERS)
    @pytest.mark.parametrize("q", MATCHERS)
    def test_and_or(self, elements, p, q):
        for element in elements:
            assert And(p, q).matches(element) == (p.matches(element) and q.matches(element))
            assert Or(p, q).matches(element) == (p.matches(element) or q.matches(element))

    @pytest.mark.parametrize("p", MATCHERS)
    @pytest.mark.parametrize("q", MATCHERS)
    def test_de_morgan(self, elements, p, q):
        for element in elements:
            assert Not(And(p, q)).matches(element) == Or(Not(p), Not(q)).matches(element)
            assert Not(Or(p, q)).matches(element) == And(Not(p), Not(q)).matches(element)

    def test_fluent_and_operators_build_same_tree(self):
        p, q = HasRole("button"), HasText("Save")
        assert p.and_(q) == p & q == And(p, q)
        assert p.or_(q) == p | q == Or(p, q)
        assert ~p == Not(p)

    def test_binary_nodes(self):
        tree = HasRole("a") & HasRole("b") & HasRole("c")
        assert tree == And(And(HasRole("a"), HasRole("b")), HasRole("c"))

    def test_custom_matcher_composes(self, elements):
        visible_buttons = [el for el in elements if (HasRole("button") & ~IsHidden()).matches(el)]
        assert [el.id for el in visible_buttons] == ["save"]

    def test_matchers_are_immutable(self):
        matcher = HasRole("button")
        with pytest.raises(AttributeError):
            matcher.role = "link"

    def test_matchers_are_hashable(self):
        assert len({HasRole("button"), HasRole("button"), HasText("x")}) == 2


class TestDescribe:
    def test_leaves(self):
        assert HasRole("button").describe() == "role=button"
        assert HasLabel("Email").describe() == "label='Email'"
        assert HasPlaceholder("Search").describe() == "placeholder~'Search'"
        assert HasText("Sign in").describe() == "text~'Sign in'"

    def test_composite(self):
        matcher = HasRole("button") & ~HasText("this")
        assert matcher.describe() == "role=button and not text~'this'"
        assert str(matcher) == matcher.describe()

    def test_mixed_operators_are_parenthesised(self):
        matcher = (HasRole("button") | HasRole("link")) & ~(HasText("a") & HasText("b"))
        assert matcher.describe() == (
            "(role=button or role=link) and not (text~'a' and text~'b')"
        )

    def test_custom_matcher_falls_back_to_repr(self):
        assert IsHidden().describe() == "IsHidden()"
