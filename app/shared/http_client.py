"""
Redirect resolver for shortened affiliate links.

Follows HTTP redirects (amzn.to, mercadolivre.com/sec/, ...) with a
browser-like signature and returns the landing page HTML and URL.
"""
import logging
import re
from typing import Dict, Optional
from urllib.parse import urljoin, urldefrag

import requests

from app.core.config import settings
from app.core.errors import BlockedError, FetchError, ScraperError
from app.models.schemas import ResolvedPage
from app.shared.html import HtmlDocument, canonical_href

logger = logging.getLogger(__name__)

BOT_CHECK_PATTERN = re.compile(
    r'Robot Check|captcha|Are you a human\??|To discuss automated access',
    re.IGNORECASE
)
SOCIAL_LANDING_PATTERN = re.compile(r'/social/', re.IGNORECASE)


def browser_headers() -> Dict[str, str]:
    """Request headers that imitate a desktop Chrome."""
    return {
        'User-Agent': settings.USER_AGENT,
        'Accept': settings.ACCEPT,
        'Accept-Language': settings.ACCEPT_LANGUAGE,
        'Upgrade-Insecure-Requests': '1',
        'Cache-Control': 'no-cache',
    }


def fetch_page_follow(url: str, session: Optional[requests.Session] = None) -> ResolvedPage:
    """
    Fetch a URL following every redirect.

    Args:
        url: Short link or product URL
        session: Optional requests session (a new one is used per call otherwise)

    Returns:
        ResolvedPage with the final HTML and the URL of the last hop

    Raises:
        FetchError: final status is not 2xx, or the request itself failed
        BlockedError: the body is a bot-check / captcha page
    """
    logger.info(f"📥 Downloading HTML from: {url}")
    client = session or requests.Session()

    try:
        response = client.get(
            url,
            headers=browser_headers(),
            timeout=settings.REQUEST_TIMEOUT,
            allow_redirects=True
        )
    except requests.exceptions.RequestException as e:
        logger.error(f"❌ Error downloading HTML: {e}")
        raise FetchError(f"Falha de rede ao buscar a página: {e}") from e
    finally:
        if session is None:
            client.close()

    html = response.text or ""

    if not response.ok:
        logger.warning(f"⚠️  HTTP {response.status_code} for {url}")
        raise FetchError(f"HTTP {response.status_code} ao buscar a página", status_code=response.status_code)

    if BOT_CHECK_PATTERN.search(html):
        logger.warning(f"🤖 Bot-check page served for {url}")
        raise BlockedError()

    final_url = response.url or url
    if response.history:
        logger.info(f"↪️  {len(response.history)} redirect(s): {url} -> {final_url}")
    logger.info(f"✅ HTML downloaded! Size: {len(html):,} characters")

    return ResolvedPage(html=html, final_url=final_url)


def find_canonical_url(html: str, base_url: str) -> str:
    """Absolute canonical URL declared by the page, or ''."""
    href = canonical_href(HtmlDocument(html))
    if not href:
        return ""
    return urljoin(base_url, href)


def is_social_landing(url: str) -> bool:
    """True for Mercado Livre /social/ share pages, which only wrap the product."""
    return "mercadolivre" in url.lower() and bool(SOCIAL_LANDING_PATTERN.search(url))


def _same_page(a: str, b: str) -> bool:
    return urldefrag(a)[0].rstrip('/') == urldefrag(b)[0].rstrip('/')


def follow_canonical(page: ResolvedPage, session: Optional[requests.Session] = None) -> ResolvedPage:
    """
    Re-fetch the page's canonical URL once, when it points elsewhere or the
    current page is a known landing page. A failed re-fetch keeps the first page.
    """
    canonical = find_canonical_url(page.html, page.final_url)
    if not canonical:
        return page

    if _same_page(canonical, page.final_url) and not is_social_landing(page.final_url):
        return page

    logger.info(f"🔗 Following canonical: {canonical}")
    try:
        return fetch_page_follow(canonical, session=session)
    except ScraperError as e:
        logger.warning(f"⚠️  Canonical fetch failed, keeping first page: {e}")
        return page
