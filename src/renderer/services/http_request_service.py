# src/renderer/services/http_request_service.py
import asyncio
import logging
from typing import Dict, Optional

import aiohttp

from ampify.core.exceptions import RenderError
from renderer.model import RenderedPage

logger = logging.getLogger(__name__)


class HttpRequestService:
    """
    Fetches raw page HTML with a plain GET, without running any JavaScript.
    Manages the aiohttp session lifecycle and maps transport errors to RenderError.
    """

    def __init__(self, config: Dict, user_agent: str):
        self.config = config
        self.user_agent = user_agent

        session_config = config.get('session', {})
        self.timeout = int(session_config.get('time_out', 30))
        self.max_redirects = int(session_config.get('max_redirects', 10))

        self.session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def initialize(self):
        if not self.session or self.session.closed:
            timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
            default_headers = {
                'Accept': 'text/html,application/xhtml+xml',
                'Accept-Encoding': 'gzip, deflate',
                'User-Agent': self.user_agent
            }
            self.session = aiohttp.ClientSession(
                timeout=timeout_obj, headers=default_headers
            )
            logger.debug("HttpRequestService: Session initialized.")

    async def close(self):
        if self.session and not self.session.closed:
            await self.session.close()
            logger.debug("HttpRequestService: Session closed.")

    async def fetch(self, url: str) -> RenderedPage:
        if not self.session or self.session.closed:
            await self.initialize()

        try:
            async with self.session.get(
                    url,
                    allow_redirects=True,
                    max_redirects=self.max_redirects,
            ) as response:
                status = response.status
                if status >= 400:
                    raise RenderError(url, f"HTTP status {status}")

                content_type = response.headers.get("Content-Type", "").lower()
                if "html" not in content_type:
                    raise RenderError(url, f"non-HTML content type '{content_type or 'unknown'}'")

                content = await self._read_content(response)
                final_url = str(response.url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise RenderError(url, str(e) or type(e).__name__) from e

        if not content or not content.strip():
            raise RenderError(url, "empty response body")

        return RenderedPage(
            url=url,
            final_url=final_url,
            status_code=status,
            content=content,
            rendered=False,
        )

    @staticmethod
    async def _read_content(response) -> str:
        """Helper to read response body text, falling back to lenient UTF-8."""
        try:
            return await response.text()
        except UnicodeDecodeError:
            content_bytes = await response.read()
            return content_bytes.decode('utf-8', errors='replace')
