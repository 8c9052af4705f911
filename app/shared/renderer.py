"""
Headless render fallback (Playwright / Chromium).

Renders a page in a real browser and runs an extractor on the resulting
HTML. Only used when plain HTML left price, oldPrice and installment empty.
"""
import logging
from typing import Any, Callable, Dict, Optional

from app.core.config import settings
from app.models.schemas import ProductRecord

logger = logging.getLogger(__name__)

RENDERED_FIELDS = ("title", "price", "old_price", "installment", "image")


def render_html(url: str, timeout_ms: Optional[int] = None) -> str:
    """
    Load a URL in headless Chromium and return the rendered HTML.

    Navigation is bounded by timeout_ms; context and browser are closed on every path.
    """
    from playwright.sync_api import sync_playwright

    timeout_ms = timeout_ms or settings.RENDER_TIMEOUT_MS
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(headless=True)
        try:
            context = browser.new_context(
                user_agent=settings.USER_AGENT,
                locale="pt-BR",
            )
            try:
                page = context.new_page()
                page.set_default_timeout(timeout_ms)
                page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
                try:
                    page.wait_for_load_state("networkidle", timeout=timeout_ms)
                except Exception as e:
                    logger.debug(f"⚠️  networkidle not reached: {e}")
                return page.content()
            finally:
                context.close()
        finally:
            browser.close()


def render(url: str, extractor: Callable[[str], ProductRecord]) -> Dict[str, Any]:
    """
    Partial ProductRecord from the rendered page: only truthy fields.
    Any failure yields an empty dict.
    """
    logger.info(f"🖥️  Rendering with headless browser: {url}")
    try:
        html = render_html(url)
    except Exception as e:
        logger.error(f"❌ Headless render failed for {url}: {e}")
        return {}

    record = extractor(html)
    partial = {name: getattr(record, name) for name in RENDERED_FIELDS if getattr(record, name)}
    logger.info(f"✅ Render produced fields: {sorted(partial)}")
    return partial
