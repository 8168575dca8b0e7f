"""
Tests for async API functionality
"""

import pytest

from ariafind import AmbiguousMatchError, HasLabel, HasRole, HasText, Not, StaleElementError
from ariafind.async_api import AsyncQueryBrowser, AsyncRenderer, find, find_all, snapshot


@pytest.mark.asyncio
@pytest.mark.requires_browser
async def test_async_browser_basic(headless):
    """Test basic async browser initialization"""
    async with AsyncQueryBrowser(headless=headless) as browser:
        assert browser.page is not None
        assert browser.page.url == "about:blank"
        assert isinstance(browser.renderer(), AsyncRenderer)
    assert browser.page is None


@pytest.mark.asyncio
@pytest.mark.requires_browser
async def test_async_viewport_custom(headless):
    """Test custom viewport size"""
    custom_viewport = {"width": 1920, "height": 1080}
    async with AsyncQueryBrowser(headless=headless, viewport=custom_viewport) as browser:
        viewport_size = await browser.page.evaluate(
            "() => ({ width: window.innerWidth, height: window.innerHeight })"
        )

        assert viewport_size["width"] == 1920
        assert viewport_size["height"] == 1080


@pytest.mark.asyncio
@pytest.mark.requires_browser
async def test_async_snapshot(headless):
    """Test async snapshot function"""
    async with AsyncQueryBrowser(headless=headless) as browser:
        await browser.page.set_content('<p id="p">Hello <b>async</b></p>')

        snap = await snapshot(browser.page)

        assert snap.get_element_by_id("p").inner_text == "Hello async"
        assert snap.url == "about:blank"


@pytest.mark.asyncio
@pytest.mark.requires_browser
async def test_async_scenarios(headless, scenario_markup):
    """Test the query scenarios through the async render bridge"""
    async with AsyncQueryBrowser(headless=headless) as browser:
        renderer = browser.renderer()

        container = await renderer.render(scenario_markup["hidden_text"])
        assert find(container, HasText("I am")).tag == "button"
        assert find(container, HasText("Blue")) is None

        container = await renderer.render(scenario_markup["labels"])
        assert len(find_all(container, HasLabel("Type rust"))) == 3

        container = await renderer.render(scenario_markup["roles"])
        assert len(renderer.find_all(container, HasRole("button"))) == 3

        container = await renderer.render(scenario_markup["text_and_not_role"])
        assert renderer.find(container, HasText("is") & ~HasRole("button")).tag == "a"

        container = await renderer.render(scenario_markup["siblings"])
        with pytest.raises(AmbiguousMatchError):
            renderer.find(container, Not(HasRole("list")))

        assert await renderer.cleanup() == 5


@pytest.mark.asyncio
@pytest.mark.requires_browser
async def test_async_handle_and_refresh(headless):
    """Test clicking through an async handle"""
    markup = (
        "<label>Name <input/></label>"
        "<button onclick=\"document.querySelector('output').textContent = 'saved'\">Save</button>"
        "<output></output>"
    )
    async with AsyncQueryBrowser(headless=headless) as browser:
        renderer = browser.renderer()
        container = await renderer.render(markup)

        field = container.find(HasLabel("Name"))
        await (await renderer.handle(field)).fill("Ada")
        await (await renderer.handle(container.find("role=button"))).click()

        refreshed = await renderer.refresh(container)
        assert refreshed.find("text~saved").tag == "output"

        with pytest.raises(StaleElementError):
            await renderer.handle(field)

        assert await renderer.unmount(refreshed) is True


class FailingAsyncLauncher:
    async def launch(self, headless):
        raise RuntimeError("Executable doesn't exist")


class FakeAsyncDriver:
    def __init__(self):
        self.chromium = FailingAsyncLauncher()
        self.stopped = False

    async def stop(self):
        self.stopped = True


class FakeAsyncPlaywright:
    def __init__(self, driver):
        self.driver = driver

    async def start(self):
        return self.driver


@pytest.mark.asyncio
async def test_async_failed_launch_stops_driver(monkeypatch):
    """Test the async driver is stopped when the browser cannot launch"""
    driver = FakeAsyncDriver()
    monkeypatch.setattr("ariafind.async_api.async_playwright", lambda: FakeAsyncPlaywright(driver))

    browser = AsyncQueryBrowser(headless=True, browser_type="chromium")
    with pytest.raises(RuntimeError, match="Executable doesn't exist"):
        async with browser:
            pass

    assert driver.stopped
    assert browser.playwright is None
