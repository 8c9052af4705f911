"""
HTML helpers shared by the store extractors.

HtmlDocument parses the page at most once with BeautifulSoup; the regex
helpers work on the raw string, where embedded JSON tokens live.
"""
import re
from typing import Optional

from bs4 import BeautifulSoup

from app.shared.text import normalize_whitespace


class HtmlDocument:
    """Raw HTML plus a lazily-built BeautifulSoup tree."""

    def __init__(self, html: Optional[str]):
        self.html = html or ""
        self._soup = None

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html, 'html.parser')
        return self._soup


def regex_group(pattern: str, html: str, flags: int = re.IGNORECASE, group: int = 1) -> Optional[str]:
    """Return one capture group of the first match, or None."""
    match = re.search(pattern, html, flags)
    if not match:
        return None
    return match.group(group)


def meta_content(doc: HtmlDocument, prop: str, attr: str = "property") -> str:
    """content="" of <meta {attr}="{prop}">, or ''."""
    tag = doc.soup.find('meta', attrs={attr: re.compile(rf'^{re.escape(prop)}$', re.IGNORECASE)})
    if not tag:
        return ""
    return (tag.get('content') or "").strip()


def og_title(doc: HtmlDocument) -> str:
    return normalize_whitespace(meta_content(doc, "og:title"))


def og_image(doc: HtmlDocument) -> str:
    return meta_content(doc, "og:image")


def page_title(doc: HtmlDocument) -> str:
    """Text of the document <title>."""
    tag = doc.soup.find('title')
    return normalize_whitespace(tag.get_text()) if tag else ""


def canonical_href(doc: HtmlDocument) -> str:
    """href of <link rel="canonical">, or ''."""
    for link in doc.soup.find_all('link', href=True):
        rel = link.get('rel') or []
        if isinstance(rel, str):
            rel = rel.split()
        if any(r.lower() == "canonical" for r in rel):
            return link['href'].strip()
    return ""
