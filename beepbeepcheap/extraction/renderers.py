"""
Page Renderers

Produce a RenderedDocument for a URL. Each render runs inside its own
session (an HTTP session or a headless browser) that is released on every
exit path, including errors.

Renderers:
- HttpRenderer: plain HTTP fetch with browser-like headers (requests)
- BrowserRenderer: headless Chromium via Playwright, for pages that build
  their content client-side
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

import requests
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import sync_playwright

from ..common.config_loader import load_extraction_rules, load_settings
from ..common.constants import DEFAULT_USER_AGENT
from ..models import ScrapeTarget
from .document import RenderedDocument
from .store_registry import StoreProfile, StoreRegistry, get_store_registry

logger = logging.getLogger(__name__)


class RenderError(Exception):
    """Page could not be loaded (network error, timeout, navigation failure)."""


class Renderer:
    """
    Base class for renderers.

    Subclasses implement _open_session, _close_session and _render;
    render() takes care of acquiring and releasing the session.

    Usage:
        renderer = HttpRenderer()
        document = renderer.render(ScrapeTarget("https://www.amazon.co.uk/dp/B0ABC"))
    """

    name = "base"

    def __init__(
        self,
        registry: Optional[StoreRegistry] = None,
        settings: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize the renderer.

        Args:
            registry: Store registry for per-site cookies and wait hints
            settings: 'render' settings section. If None, loads from config.
        """
        self.registry = registry or get_store_registry()
        self.settings = settings if settings is not None else load_settings().get('render', {})
        self.timeout = float(self.settings.get('timeout_seconds', 45))

    @contextmanager
    def session(self) -> Iterator[Any]:
        """Acquire an isolated render session, released on exit."""
        handle = self._open_session()
        try:
            yield handle
        finally:
            self._close_session(handle)
            logger.debug("%s session released", self.name)

    def render(self, target: ScrapeTarget) -> RenderedDocument:
        """
        Render a page.

        Args:
            target: Page to render

        Returns:
            RenderedDocument for the final page

        Raises:
            RenderError: If the page could not be loaded
        """
        profile = self.registry.resolve(target.url)
        with self.session() as handle:
            return self._render(handle, target, profile)

    def _open_session(self) -> Any:
        raise NotImplementedError

    def _close_session(self, handle: Any) -> None:
        raise NotImplementedError

    def _render(self, handle: Any, target: ScrapeTarget, profile: Optional[StoreProfile]) -> RenderedDocument:
        raise NotImplementedError

    def _headers(self) -> Dict[str, str]:
        return {
            "User-Agent": self.settings.get('user_agent') or DEFAULT_USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": self.settings.get('accept_language', 'en-GB,en;q=0.9'),
        }


class HttpRenderer(Renderer):
    """Fetches raw HTML over HTTP. No JavaScript runs."""

    name = "http"

    def _open_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update(self._headers())
        return session

    def _close_session(self, handle: requests.Session) -> None:
        handle.close()

    def _render(
        self,
        handle: requests.Session,
        target: ScrapeTarget,
        profile: Optional[StoreProfile],
    ) -> RenderedDocument:
        if profile:
            for cookie in profile.cookies:
                handle.cookies.set(
                    cookie['name'], cookie['value'],
                    domain=cookie.get('domain', ''), path=cookie.get('path', '/'),
                )

        try:
            response = handle.get(target.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise RenderError(f"Failed to fetch {target.url}: {e}") from e

        return RenderedDocument(response.text, url=response.url or target.url)


@dataclass
class _BrowserHandle:
    playwright: Any
    browser: Any


class BrowserRenderer(Renderer):
    """
    Renders pages in headless Chromium.

    Waits for client-side rendering to settle (longer for stores flagged
    slow_page), dismisses cookie banners when it can, and waits for the
    store's wait_for selector if one is configured.
    """

    name = "browser"

    VIEWPORT = {"width": 1920, "height": 1080}

    def __init__(
        self,
        registry: Optional[StoreRegistry] = None,
        settings: Optional[Dict[str, Any]] = None,
        consent_selectors: Optional[List[str]] = None,
    ):
        super().__init__(registry=registry, settings=settings)
        if consent_selectors is None:
            consent_selectors = load_extraction_rules().get('consent_selectors', [])
        self.consent_selectors = list(consent_selectors)

    def _open_session(self) -> _BrowserHandle:
        try:
            playwright = sync_playwright().start()
        except PlaywrightError as e:
            raise RenderError(f"Failed to start Playwright: {e}") from e

        try:
            browser = playwright.chromium.launch(headless=True)
        except PlaywrightError as e:
            playwright.stop()
            raise RenderError(f"Failed to launch browser: {e}") from e
        return _BrowserHandle(playwright=playwright, browser=browser)

    def _close_session(self, handle: _BrowserHandle) -> None:
        # Runs in session()'s finally: must not replace the render outcome
        try:
            handle.browser.close()
        except PlaywrightError as e:
            logger.warning("Browser close failed: %s", e)
        finally:
            try:
                handle.playwright.stop()
            except PlaywrightError as e:
                logger.warning("Playwright stop failed: %s", e)

    def _render(
        self,
        handle: _BrowserHandle,
        target: ScrapeTarget,
        profile: Optional[StoreProfile],
    ) -> RenderedDocument:
        headers = self._headers()
        context = None

        try:
            context = handle.browser.new_context(
                user_agent=headers.pop("User-Agent"),
                viewport=self.VIEWPORT,
                extra_http_headers=headers,
            )

            if profile and profile.cookies:
                context.add_cookies([
                    {
                        'name': c['name'],
                        'value': c['value'],
                        'domain': c.get('domain', ''),
                        'path': c.get('path', '/'),
                    }
                    for c in profile.cookies
                ])

            page = context.new_page()
            page.goto(target.url, wait_until="domcontentloaded", timeout=self.timeout * 1000)

            slow = bool(profile and profile.slow_page)
            settle = self.settings.get('slow_page_settle_seconds' if slow else 'settle_seconds', 3)
            time.sleep(float(settle))

            self._dismiss_consent(page)

            if profile and profile.wait_for:
                wait_timeout = float(self.settings.get('wait_for_timeout_seconds', 10))
                try:
                    page.wait_for_selector(profile.wait_for, timeout=wait_timeout * 1000)
                except PlaywrightError:
                    logger.debug("Selector %s did not appear on %s", profile.wait_for, target.url)

            html = page.content()
            visible_text = page.evaluate("() => document.body ? document.body.innerText : ''")
            return RenderedDocument(html, url=page.url or target.url, visible_text=visible_text)

        except PlaywrightError as e:
            raise RenderError(f"Failed to render {target.url}: {e}") from e

        finally:
            if context is not None:
                try:
                    context.close()
                except PlaywrightError as e:
                    logger.debug("Context close failed for %s: %s", target.url, e)

    def _dismiss_consent(self, page) -> None:
        for selector in self.consent_selectors:
            try:
                button = page.query_selector(selector)
                if button and button.is_visible():
                    button.click(timeout=2000)
                    logger.debug("Clicked cookie consent %s", selector)
                    time.sleep(1)
                    return
            except PlaywrightError as e:
                logger.debug("Consent click %s failed: %s", selector, e)


def create_renderer(kind: Optional[str] = None, **kwargs) -> Renderer:
    """
    Create a renderer by name.

    Args:
        kind: "http" or "browser". If None, uses the configured default.

    Raises:
        ValueError: If the renderer name is unknown
    """
    if kind is None:
        kind = load_settings().get('render', {}).get('renderer', 'browser')

    renderers = {'http': HttpRenderer, 'browser': BrowserRenderer}
    if kind not in renderers:
        raise ValueError(f"Unknown renderer: {kind}. Supported: {', '.join(renderers)}")
    return renderers[kind](**kwargs)
