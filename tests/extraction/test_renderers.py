"""Tests for beepbeepcheap/extraction/renderers.py"""

from unittest.mock import MagicMock, patch

import pytest
import requests
from playwright.sync_api import Error as PlaywrightError

from beepbeepcheap.extraction.product_extractor import ProductExtractor
from beepbeepcheap.extraction.renderers import (
    BrowserRenderer,
    HttpRenderer,
    RenderError,
    create_renderer,
)
from beepbeepcheap.extraction.store_registry import StoreProfile, StoreRegistry
from beepbeepcheap.models import ScrapeTarget

COS = StoreProfile(
    label="COS",
    hosts=("cos.com",),
    slow_page=True,
    wait_for=".product-detail",
    cookies=({"name": "HMCORP_locale", "value": "en_US", "domain": ".cos.com"},),
)

SETTINGS = {
    "timeout_seconds": 5,
    "settle_seconds": 0,
    "slow_page_settle_seconds": 0,
    "wait_for_timeout_seconds": 1,
}


@pytest.fixture
def registry():
    return StoreRegistry([COS])


@pytest.fixture
def no_sleep(monkeypatch):
    monkeypatch.setattr("beepbeepcheap.extraction.renderers.time.sleep", lambda seconds: None)


class TestSessionLifecycle:
    def test_session_released_after_render(self, make_renderer):
        renderer = make_renderer({"https://shop.example/a": "<h1>A</h1>"})
        document = renderer.render(ScrapeTarget("https://shop.example/a"))
        assert document.get_text("h1") == "A"
        assert (renderer.opened, renderer.closed) == (1, 1)

    def test_session_released_after_error(self, make_renderer):
        renderer = make_renderer({})
        with pytest.raises(RenderError):
            renderer.render(ScrapeTarget("https://shop.example/missing"))
        assert (renderer.opened, renderer.closed) == (1, 1)

    def test_each_render_gets_its_own_session(self, make_renderer):
        renderer = make_renderer({"https://shop.example/a": "<p>a</p>", "https://shop.example/b": "<p>b</p>"})
        renderer.render(ScrapeTarget("https://shop.example/a"))
        renderer.render(ScrapeTarget("https://shop.example/b"))
        assert (renderer.opened, renderer.closed) == (2, 2)


class TestHttpRenderer:
    def test_returns_document(self, registry):
        renderer = HttpRenderer(registry=registry, settings=SETTINGS)
        response = MagicMock()
        response.text = "<h1>Wool Coat</h1>"
        response.url = "https://www.cos.com/en_gbp/wool-coat.html"

        with patch.object(requests.Session, "get", return_value=response) as mock_get:
            document = renderer.render(ScrapeTarget("https://www.cos.com/en_gbp/wool-coat.html"))

        assert document.get_text("h1") == "Wool Coat"
        assert document.url == "https://www.cos.com/en_gbp/wool-coat.html"
        assert mock_get.call_args.kwargs["timeout"] == 5.0

    def test_sets_browser_headers(self, registry):
        renderer = HttpRenderer(registry=registry, settings={**SETTINGS, "user_agent": "TestAgent/1.0"})
        session = renderer._open_session()
        try:
            assert session.headers["User-Agent"] == "TestAgent/1.0"
            assert session.headers["Accept-Language"] == "en-GB,en;q=0.9"
        finally:
            session.close()

    def test_sets_store_cookies(self, registry):
        renderer = HttpRenderer(registry=registry, settings=SETTINGS)
        session = requests.Session()
        response = MagicMock(text="", url="https://www.cos.com/x")
        with patch.object(session, "get", return_value=response):
            renderer._render(session, ScrapeTarget("https://www.cos.com/x"), COS)
        assert session.cookies.get("HMCORP_locale", domain=".cos.com") == "en_US"

    def test_request_error_becomes_render_error(self, registry):
        renderer = HttpRenderer(registry=registry, settings=SETTINGS)
        with patch.object(requests.Session, "get", side_effect=requests.ConnectionError("refused")), \
                patch.object(requests.Session, "close") as mock_close:
            with pytest.raises(RenderError, match="refused"):
                renderer.render(ScrapeTarget("https://www.cos.com/x"))
        mock_close.assert_called_once()

    def test_http_error_status(self, registry):
        renderer = HttpRenderer(registry=registry, settings=SETTINGS)
        response = MagicMock()
        response.raise_for_status.side_effect = requests.HTTPError("403 Forbidden")
        with patch.object(requests.Session, "get", return_value=response):
            with pytest.raises(RenderError, match="403"):
                renderer.render(ScrapeTarget("https://www.cos.com/x"))


def make_browser_handle(html="<h1>Coat</h1>", page_url="https://www.cos.com/en_gbp/coat.html"):
    page = MagicMock()
    page.content.return_value = html
    page.evaluate.return_value = "Coat"
    page.url = page_url
    page.query_selector.return_value = None

    context = MagicMock()
    context.new_page.return_value = page

    handle = MagicMock()
    handle.browser.new_context.return_value = context
    return handle, context, page


class TestBrowserRenderer:
    def test_renders_page(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()

        document = renderer._render(handle, ScrapeTarget("https://www.cos.com/en_gbp/coat.html"), None)

        assert document.get_text("h1") == "Coat"
        assert document.visible_text == "Coat"
        page.goto.assert_called_once_with(
            "https://www.cos.com/en_gbp/coat.html", wait_until="domcontentloaded", timeout=5000.0
        )
        context.close.assert_called_once()

    def test_store_cookies_and_wait_for(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()

        renderer._render(handle, ScrapeTarget("https://www.cos.com/en_gbp/coat.html"), COS)

        cookies = context.add_cookies.call_args.args[0]
        assert cookies == [{"name": "HMCORP_locale", "value": "en_US", "domain": ".cos.com", "path": "/"}]
        page.wait_for_selector.assert_called_once_with(".product-detail", timeout=1000.0)

    def test_wait_for_timeout_is_not_fatal(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()
        page.wait_for_selector.side_effect = PlaywrightError("Timeout 1000ms exceeded")

        document = renderer._render(handle, ScrapeTarget("https://www.cos.com/en_gbp/coat.html"), COS)
        assert document.get_text("h1") == "Coat"

    def test_navigation_error(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()
        page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")

        with pytest.raises(RenderError, match="ERR_NAME_NOT_RESOLVED"):
            renderer._render(handle, ScrapeTarget("https://www.cos.com/en_gbp/coat.html"), None)
        context.close.assert_called_once()

    def test_clicks_visible_consent_button(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=["#accept"])
        handle, context, page = make_browser_handle()
        button = MagicMock()
        button.is_visible.return_value = True
        page.query_selector.return_value = button

        renderer._render(handle, ScrapeTarget("https://www.cos.com/en_gbp/coat.html"), None)
        button.click.assert_called_once()

    def test_launch_failure_stops_playwright(self, registry):
        playwright = MagicMock()
        playwright.chromium.launch.side_effect = PlaywrightError("Executable doesn't exist")
        starter = MagicMock()
        starter.start.return_value = playwright

        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        with patch("beepbeepcheap.extraction.renderers.sync_playwright", return_value=starter):
            with pytest.raises(RenderError):
                renderer._open_session()
        playwright.stop.assert_called_once()

    def test_start_failure_becomes_render_error(self, registry):
        starter = MagicMock()
        starter.start.side_effect = PlaywrightError("Playwright driver missing")

        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        with patch("beepbeepcheap.extraction.renderers.sync_playwright", return_value=starter):
            with pytest.raises(RenderError, match="driver missing"):
                renderer._open_session()

    def test_new_context_failure_becomes_render_error(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()
        handle.browser.new_context.side_effect = PlaywrightError("Browser has been closed")

        with pytest.raises(RenderError, match="Browser has been closed"):
            renderer._render(handle, ScrapeTarget("https://www.cos.com/en_gbp/coat.html"), None)
        page.goto.assert_not_called()

    def test_close_failure_is_logged_and_playwright_stopped(self, registry):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle = MagicMock()
        handle.browser.close.side_effect = PlaywrightError("Target closed")

        renderer._close_session(handle)
        handle.playwright.stop.assert_called_once()

    def test_close_failure_keeps_rendered_document(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()
        handle.browser.close.side_effect = PlaywrightError("Target closed")

        with patch.object(BrowserRenderer, "_open_session", return_value=handle):
            document = renderer.render(ScrapeTarget("https://www.cos.com/en_gbp/coat.html"))

        assert document.get_text("h1") == "Coat"
        handle.playwright.stop.assert_called_once()

    def test_close_failure_keeps_original_render_error(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()
        page.goto.side_effect = PlaywrightError("net::ERR_TIMED_OUT")
        handle.browser.close.side_effect = PlaywrightError("Target closed")

        with patch.object(BrowserRenderer, "_open_session", return_value=handle):
            with pytest.raises(RenderError, match="ERR_TIMED_OUT"):
                renderer.render(ScrapeTarget("https://www.cos.com/en_gbp/coat.html"))


class TestBrowserFailuresThroughExtractor:
    """Browser failures reach callers as ScrapeFailure, never as raw exceptions."""

    def test_closed_browser_returns_failure(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle()
        handle.browser.new_context.side_effect = PlaywrightError("Browser has been closed")
        extractor = ProductExtractor(renderer=renderer, registry=registry)

        with patch.object(BrowserRenderer, "_open_session", return_value=handle):
            result = extractor.extract("https://www.cos.com/en_gbp/coat.html")

        assert result.success is False
        assert "Browser has been closed" in result.error
        assert result.store_name == "COS"
        handle.playwright.stop.assert_called_once()

    def test_start_failure_returns_failure(self, registry):
        starter = MagicMock()
        starter.start.side_effect = PlaywrightError("Playwright driver missing")
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        extractor = ProductExtractor(renderer=renderer, registry=registry)

        with patch("beepbeepcheap.extraction.renderers.sync_playwright", return_value=starter):
            result = extractor.extract("https://www.cos.com/en_gbp/coat.html")

        assert result.success is False

    def test_close_failure_keeps_extracted_product(self, registry, no_sleep):
        renderer = BrowserRenderer(registry=registry, settings=SETTINGS, consent_selectors=[])
        handle, context, page = make_browser_handle(
            html="<html><body><h1>Wool Blend Coat</h1><span class='price'>£89.00</span></body></html>"
        )
        handle.browser.close.side_effect = PlaywrightError("Target closed")
        extractor = ProductExtractor(renderer=renderer, registry=registry)

        with patch.object(BrowserRenderer, "_open_session", return_value=handle):
            result = extractor.extract("https://www.cos.com/en_gbp/coat.html")

        assert result.success is True
        assert result.name == "Wool Blend Coat"


class TestCreateRenderer:
    def test_http(self, registry):
        assert isinstance(create_renderer("http", registry=registry, settings=SETTINGS), HttpRenderer)

    def test_browser(self, registry):
        assert isinstance(create_renderer("browser", registry=registry, settings=SETTINGS), BrowserRenderer)

    def test_default_from_settings(self, registry, monkeypatch):
        monkeypatch.setenv("BEEPBEEPCHEAP_RENDERER", "http")
        assert isinstance(create_renderer(registry=registry, settings=SETTINGS), HttpRenderer)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown renderer"):
            create_renderer("carrier-pigeon")
