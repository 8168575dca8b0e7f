"""
Example: Render bridge demonstration (Async version)
"""

import asyncio

from ariafind import HasLabel, HasRole, HasText
from ariafind.async_api import AsyncQueryBrowser

MARKUP = """
<label>Name <input/></label>
<button onclick="document.querySelector('output').textContent = 'Hello, ' +
  document.querySelector('input').value">Greet</button>
<output></output>
"""


class PrintLogger:
    def info(self, message: str) -> None:
        print(f"[info] {message}")

    def warning(self, message: str) -> None:
        print(f"[warning] {message}")

    def error(self, message: str) -> None:
        print(f"[error] {message}")


async def main():
    async with AsyncQueryBrowser(headless=False, logger=PrintLogger()) as browser:
        renderer = browser.renderer()
        container = await renderer.render(MARKUP)

        name = renderer.find(container, HasLabel("Name"))
        await (await renderer.handle(name)).fill("Ada")

        greet = renderer.find(container, HasRole("button") & HasText("Greet"))
        await (await renderer.handle(greet)).click()

        # The page changed: take a fresh snapshot of the same container
        container = await renderer.refresh(container)
        greeting = renderer.find(container, HasText("Hello, Ada"))
        print(f"\nGreeting: {greeting.inner_text if greeting else None}")

        await renderer.cleanup()


if __name__ == "__main__":
    asyncio.run(main())
