# src/ampify/core/utils/path_utils.py
from typing import Optional

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class PathUtils:
    """
    A central utility for reliably retrieving important package and output paths.
    """

    # --- Package specific paths

    @staticmethod
    def get_shell_package_root() -> Path:
        """Returns the directory of the installed 'ampify' package."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    # --- Working directory paths ---

    @staticmethod
    def get_output_dir(output_dir: Optional[str] = None) -> Path:
        """
        Returns the directory the HTML files are written to.
        Defaults to the current working directory; creates it if needed.
        """
        path = Path(output_dir) if output_dir else Path.cwd()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def get_inline_css_path(css_file: Optional[str] = None, default_name: str = "inline.css") -> Path:
        """
        Resolves the stylesheet to inline. Relative paths are taken from the
        current working directory.
        """
        path = Path(css_file) if css_file else Path(default_name)
        if not path.is_absolute():
            path = Path.cwd() / path
        return path
