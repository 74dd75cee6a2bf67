# src/renderer/services/page_render_service.py
import logging
from typing import Dict, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from ampify.core.exceptions import RenderError
from renderer.model import RenderedPage

logger = logging.getLogger(__name__)


class PageRenderService:
    """
    Renders a page in headless Chromium and returns the serialized DOM,
    i.e. the HTML after the page's own scripts have run.
    """

    def __init__(self, config: Dict, user_agent: Optional[str] = None):
        self.config = config
        self.user_agent = user_agent

        self.headless = bool(config.get('headless', True))
        self.wait_until = config.get('wait_until', 'networkidle')
        self.timeout_ms = int(config.get('timeout_ms', 30000))
        self.viewport = config.get('viewport') or {"width": 1280, "height": 800}

    async def render(self, url: str) -> RenderedPage:
        logger.debug("Rendering %s (wait_until=%s, timeout=%dms)", url, self.wait_until, self.timeout_ms)
        try:
            async with async_playwright() as p:
                browser = await p.chromium.launch(headless=self.headless)
                try:
                    context = await browser.new_context(
                        viewport=self.viewport,
                        user_agent=self.user_agent,
                    )
                    page = await context.new_page()
                    response = await page.goto(url, wait_until=self.wait_until, timeout=self.timeout_ms)
                    html = await page.content()
                    final_url = page.url
                finally:
                    await browser.close()
        except PlaywrightTimeoutError as e:
            raise RenderError(url, f"timed out after {self.timeout_ms}ms") from e
        except PlaywrightError as e:
            raise RenderError(url, str(e).splitlines()[0] if str(e) else type(e).__name__) from e

        status = response.status if response is not None else None
        if status is not None and status >= 400:
            logger.warning("Rendered %s with HTTP status %d", url, status)

        if not html or not html.strip():
            raise RenderError(url, "browser returned an empty document")

        return RenderedPage(
            url=url,
            final_url=final_url,
            status_code=status,
            content=html,
            rendered=True,
        )
