"""
Pytest configuration and fixtures for ariafind tests
"""

import os

import pytest
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ariafind import mount


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line(
        "markers", "requires_browser: mark test as requiring a Playwright browser"
    )


@pytest.fixture
def headless():
    """Fixture that returns headless mode (set ARIAFIND_HEADED=1 to watch the browser)"""
    return os.getenv("ARIAFIND_HEADED", "").lower() not in ("true", "1", "yes")


@pytest.fixture(scope="session")
def browser_available():
    """Check if a Playwright Chromium build can be launched"""
    try:
        with sync_playwright() as p:
            browser = p.chromium.launch(headless=True)
            browser.close()
    except PlaywrightError:
        return False
    return True


@pytest.fixture(autouse=True)
def skip_if_no_browser(request):
    """Automatically skip tests that require a browser if none can be launched"""
    marker = request.node.get_closest_marker("requires_browser")
    if marker is None:
        return

    if not request.getfixturevalue("browser_available"):
        if os.getenv("CI"):
            pytest.skip("Playwright browser not available in CI environment")
        else:
            pytest.skip("Playwright browser not found. Install it first: playwright install chromium")


@pytest.fixture
def scenario_markup():
    """Markup fragments shared by the static and browser scenario tests"""
    return {
        "hidden_text": (
            '<div><button>I am</button><button style="visibility:hidden">Blue</button></div>'
        ),
        "labels": (
            '<label for="x">Type rust</label><input id="x"/>'
            "<label>Type rust <meter></meter></label>"
            '<label id="x2">Type rust</label><input aria-labelledby="x2"/>'
            '<input aria-label="Type rust"/>'
        ),
        "roles": '<button>Rust</button><input type="button">Is</input><div role="button">Fun</div>',
        "text_and_not_role": (
            '<div><p>what</p><a href="/foo">is</a><button>this</button></div>'
        ),
        "siblings": "<ul><li>Item</li><li>Item</li></ul>",
    }


@pytest.fixture
def form_container():
    """A small static form, mounted without a browser"""
    return mount(
        """
        <form>
          <h1>Sign in</h1>
          <label for="email">Email address</label>
          <input id="email" type="email" placeholder="you@example.com"/>
          <label>Password <input id="password" type="password"/></label>
          <input type="hidden" name="csrf" id="csrf"/>
          <textarea placeholder="Tell us more"></textarea>
          <input type="search" placeholder="Search docs"/>
          <button type="submit">Sign in</button>
          <a href="/forgot">Forgot password?</a>
        </form>
        """
    )
