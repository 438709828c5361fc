"""
Rendered Document

A narrow, queryable view of a fully rendered product page. Renderers build
one per extraction; the field cascades only talk to this interface, so they
can be exercised against static HTML fixtures without a browser.
"""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from ..common.text_utils import clean_text

logger = logging.getLogger(__name__)

# Elements whose text never shows on the rendered page
_INVISIBLE_TAGS = ['script', 'style', 'noscript', 'template', 'svg']


class RenderedDocument:
    """
    Queryable representation of a rendered page.

    Usage:
        document = RenderedDocument(html, url="https://www.zara.com/...")
        title = document.get_text('h1')
        image = document.get_attribute('meta[property="og:image"]', 'content')
    """

    def __init__(self, html: str, url: str = "", visible_text: Optional[str] = None):
        """
        Initialize the document.

        Args:
            html: Page HTML after scripts have run
            url: Final page URL (after redirects), used to resolve relative links
            visible_text: Rendered text as the browser lays it out; derived
                from the HTML when not supplied
        """
        self.html = html or ""
        self.url = url
        self.soup = BeautifulSoup(self.html, "lxml")
        self._visible_text = visible_text

    def select_one(self, selector: str) -> Optional[Tag]:
        """Return the first element matching a CSS selector, or None."""
        try:
            return self.soup.select_one(selector)
        except SelectorSyntaxError as e:
            logger.debug("Unsupported selector %r: %s", selector, e)
            return None

    def select(self, selector: str) -> List[Tag]:
        """Return all elements matching a CSS selector."""
        try:
            return self.soup.select(selector)
        except SelectorSyntaxError as e:
            logger.debug("Unsupported selector %r: %s", selector, e)
            return []

    def get_text(self, selector: str) -> Optional[str]:
        """Return whitespace-normalized text of the first match, or None."""
        element = self.select_one(selector)
        if element is None:
            return None
        return clean_text(element.get_text(" "))

    def get_attribute(self, selector: str, attribute: str) -> Optional[str]:
        """Return an attribute of the first match, or None."""
        element = self.select_one(selector)
        if element is None:
            return None
        value = element.get(attribute)
        if isinstance(value, list):
            value = ' '.join(value)
        return value

    @property
    def title(self) -> str:
        """Document <title> text."""
        if self.soup.title and self.soup.title.string:
            return clean_text(self.soup.title.string)
        return ""

    @property
    def visible_text(self) -> str:
        """Text a user would see on the page, one block per line."""
        if self._visible_text is None:
            soup = BeautifulSoup(self.html, "lxml")
            for tag in soup(_INVISIBLE_TAGS):
                tag.decompose()
            body = soup.body or soup
            self._visible_text = body.get_text("\n")
        return self._visible_text

    def json_ld_blocks(self) -> List[str]:
        """Raw contents of every JSON-LD script block."""
        blocks = []
        for script in self.soup.find_all("script", type="application/ld+json"):
            text = script.string or script.get_text()
            if text and text.strip():
                blocks.append(text)
        return blocks
