from __future__ import annotations

from typing import Optional
from bs4 import BeautifulSoup
from urllib.parse import urljoin


class PageParseService:
    """
    Reads the metadata of the original page that the AMP head needs:
    title, canonical URL and document language.
    """

    def __init__(self, page_content: str, base_url: str):
        if not page_content:
            raise ValueError("HTML content cannot be empty.")
        self.soup = BeautifulSoup(page_content, "html.parser")
        self.base_url = base_url

    def extract_page_title(self) -> str:
        """Retrieves the content of the <title> tag."""
        el = self.soup.find("title")
        return el.get_text(strip=True) if el else ""

    def extract_canonical_tag(self) -> str:
        """Retrieves the absolute href of the <link rel='canonical'> tag."""
        for link in self.soup.find_all("link", href=True):
            rel = link.get("rel") or []
            if isinstance(rel, str):
                rel = rel.split()
            if "canonical" in (r.lower() for r in rel):
                href = (link.get("href") or "").strip()
                return urljoin(self.base_url, href) if href else ""
        return ""

    def extract_html_lang(self) -> Optional[str]:
        """Retrieves the lang attribute of the <html> element, if any."""
        root = self.soup.find("html")
        if not root:
            return None
        lang = (root.get("lang") or "").strip()
        return lang or None
