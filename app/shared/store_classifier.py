"""
Store classifier: maps a resolved URL to a store label and extractor key.
"""
from typing import List, Tuple
from urllib.parse import urlparse

FALLBACK_LABEL = "Loja"
GENERIC_KEY = "generic"

# (substrings, label, extractor key) - first match wins
STORE_RULES: List[Tuple[Tuple[str, ...], str, str]] = [
    (("mercadolivre", "mercadolibre", "mlstatic"), "Mercado Livre", "mercado_livre"),
    (("amazon",), "Amazon", "amazon"),
    (("shopee",), "Shopee", "shopee"),
    (("magalu", "magazineluiza"), "Magalu", GENERIC_KEY),
    (("kabum",), "KaBuM!", GENERIC_KEY),
]


def _hostname(url: str) -> str:
    try:
        return (urlparse(url).hostname or "").lower()
    except (ValueError, TypeError, AttributeError):
        return ""


def _match(host: str):
    for needles, label, key in STORE_RULES:
        if any(needle in host for needle in needles):
            return label, key
    return None


def guess_store(url: str) -> str:
    """Human-readable store label for a URL. Never raises."""
    host = _hostname(url)
    if not host:
        return FALLBACK_LABEL
    matched = _match(host)
    if matched:
        return matched[0]
    return host[4:] if host.startswith("www.") else host


def store_key(url: str) -> str:
    """Key of the extraction strategy for a URL ('generic' when unknown)."""
    matched = _match(_hostname(url))
    return matched[1] if matched else GENERIC_KEY
