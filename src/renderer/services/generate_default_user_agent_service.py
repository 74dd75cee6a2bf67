# src/renderer/services/generate_default_user_agent_service.py
import platform
from typing import Optional

from ampify.core.managers.config_manager import config_manager

DEFAULT_CHROME_VERSION = "131.0.0.0"

OS_TOKENS = {
    "Windows": "Windows NT 10.0; Win64; x64",
    "Darwin": "Macintosh; Intel Mac OS X 10_15_7",
    "Linux": "X11; Linux x86_64",
}


def generate_default_user_agent(chrome_version: Optional[str] = None, system: Optional[str] = None) -> str:
    """
    Builds the User-Agent sent when loading the page.

    A non-empty 'user_agent.override' in settings.json wins. Otherwise a
    desktop Chrome string is built for `system` (defaults to the running OS)
    and `chrome_version` (defaults to 'user_agent.chrome_version'), so the
    page serves the same markup a regular browser would get.
    """
    override = config_manager.get_nested("user_agent.override")
    if override:
        return str(override)

    os_part = OS_TOKENS.get(system or platform.system(), OS_TOKENS["Linux"])
    version = chrome_version or config_manager.get_nested("user_agent.chrome_version", DEFAULT_CHROME_VERSION)

    return (
        f"Mozilla/5.0 ({os_part}) AppleWebKit/537.36 (KHTML, like Gecko) "
        f"Chrome/{version} Safari/537.36"
    )
