"""
Amazon extractor.

The price is read first from the core price display (a bounded slice of
HTML after corePriceDisplay_* / apex_desktop), then from legacy element
ids and JSON fields.
"""
import json
import logging
import re
from typing import Optional

from app.models.schemas import ProductRecord
from app.shared.html import HtmlDocument, og_image, regex_group
from app.shared.pricing import reconcile_prices
from app.shared.rules import Rule, all_values, first_match, first_value
from app.shared.text import normalize_whitespace, positive_amount

logger = logging.getLogger(__name__)

PARSE_HINT = "amazon_html_v3"

PRICE_BLOCK_PATTERNS = [
    re.compile(r'id=["\']corePriceDisplay_[^"\']+["\'][\s\S]{0,4000}?</div>', re.IGNORECASE),
    re.compile(r'id=["\']apex_desktop["\'][\s\S]{0,4000}?</div>', re.IGNORECASE),
]
BRL = r'(R\$\s?[\d.,]+)'
INSTALLMENT_PATTERN = re.compile(
    r'(?:em\s+até\s+)?(\d{1,2})x[^<]{0,80}R\$\s?([\d.,]+)(?:\s+sem\s+juros)?',
    re.IGNORECASE
)
INTEREST_FREE = re.compile(r'sem\s+juros', re.IGNORECASE)


def price_block(html: str) -> str:
    """HTML slice of the core price display, or ''."""
    for pattern in PRICE_BLOCK_PATTERNS:
        match = pattern.search(html)
        if match:
            return match.group(0)
    return ""


# ---------------------------------------------------------------------------
# Title
# ---------------------------------------------------------------------------

def og_title_raw(doc: HtmlDocument) -> str:
    return normalize_whitespace(regex_group(r'<meta[^>]+property=["\']og:title["\'][^>]+content=["\']([^"\']+)["\']', doc.html))


def product_title(doc: HtmlDocument) -> str:
    span = doc.soup.find(id='productTitle')
    return normalize_whitespace(span.get_text(" ")) if span else ""


TITLE_RULES = [
    Rule("og_title", og_title_raw),
    Rule("product_title", product_title),
]


# ---------------------------------------------------------------------------
# Price (inside the core price display)
# ---------------------------------------------------------------------------

def block_whole_fraction(doc: HtmlDocument):
    block = price_block(doc.html)
    whole = regex_group(r'class=["\']a-price-whole["\'][^>]*>([\d.,]+)', block)
    fraction = regex_group(r'class=["\']a-price-fraction["\'][^>]*>(\d{1,2})', block)
    if whole and fraction:
        return positive_amount(f"{whole.rstrip(',.')},{fraction}")
    return None


def block_offscreen(doc: HtmlDocument):
    return positive_amount(regex_group(r'a-offscreen[^>]*>' + BRL + '<', price_block(doc.html)))


def block_text_price(doc: HtmlDocument):
    block = price_block(doc.html)
    return positive_amount(regex_group(r'class=["\'][^"\']*a-text-price[^"\']*["\'][\s\S]*?a-offscreen[^>]*>' + BRL + '<', block))


def block_strike_price(doc: HtmlDocument):
    return positive_amount(regex_group(r'id=["\']priceblock_strikeprice["\'][^>]*>' + BRL + '<', price_block(doc.html)))


# ---------------------------------------------------------------------------
# Price (legacy ids and JSON fields, whole page)
# ---------------------------------------------------------------------------

def _page_token(pattern: str):
    def rule(doc: HtmlDocument):
        return positive_amount(regex_group(pattern, doc.html))
    return rule


PRICE_RULES = [
    Rule("core_whole_fraction", block_whole_fraction),
    Rule("core_offscreen", block_offscreen),
    Rule("priceblock_dealprice", _page_token(r'id=["\']priceblock_dealprice["\'][^>]*>' + BRL + '<')),
    Rule("priceblock_ourprice", _page_token(r'id=["\']priceblock_ourprice["\'][^>]*>' + BRL + '<')),
    Rule("offscreen_span", _page_token(r'<span[^>]+class=["\'][^"\']*a-offscreen[^"\']*["\'][^>]*>' + BRL + '</span>')),
    Rule("json_price_amount", _page_token(r'"priceAmount"\s*:\s*"([\d.,]+)"')),
    Rule("json_amount", _page_token(r'"amount"\s*:\s*"([\d.,]+)"')),
    Rule("json_price", _page_token(r'"price"\s*:\s*"([\d.,]+)"')),
]

OLD_PRICE_RULES = [
    Rule("core_text_price", block_text_price),
    Rule("core_strike_price", block_strike_price),
    Rule("text_price", _page_token(r'class=["\'][^"\']*a-text-price[^"\']*["\'][\s\S]*?a-offscreen[^>]*>' + BRL + '<')),
    Rule("list_price_label", _page_token(r'(?:De:|Preço\s+de\s+tabela)[^<]*?' + BRL)),
    Rule("json_was_price", _page_token(r'"wasPrice".*?"amount"\s*:\s*"([\d.,]+)"')),
    Rule("json_strike_price", _page_token(r'"strikePrice"\s*:\s*"([\d.,]+)"')),
]


# ---------------------------------------------------------------------------
# Installment
# ---------------------------------------------------------------------------

def best_installment(html: str) -> str:
    """
    The "Nx de R$ amount" offer with the largest N anywhere in the page,
    annotated "sem juros" when the page mentions it at all.
    """
    best_n, best_value = 0, None
    for match in INSTALLMENT_PATTERN.finditer(html):
        n = int(match.group(1))
        if n > best_n:
            best_n, best_value = n, match.group(2)
    if best_value is None:
        return ""
    suffix = " sem juros" if INTEREST_FREE.search(html) else ""
    return f"{best_n}x de R$ {best_value}{suffix}"


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------

def old_hires(doc: HtmlDocument) -> str:
    return regex_group(r'data-old-hires=["\']([^"\']+)["\']', doc.html) or ""


def dynamic_image(doc: HtmlDocument) -> Optional[str]:
    """First URL key of the data-a-dynamic-image JSON map."""
    raw = regex_group(r'data-a-dynamic-image=[\'"](\{[^\'"]+\})[\'"]', doc.html)
    if not raw:
        return None
    try:
        images = json.loads(raw.replace('&quot;', '"'))
    except (json.JSONDecodeError, ValueError) as e:
        logger.debug(f"⚠️  Error parsing dynamic image map: {e}")
        return None
    if isinstance(images, dict) and images:
        return next(iter(images))
    return None


def landing_image(doc: HtmlDocument) -> str:
    return regex_group(r'id=["\']landingImage["\'][^>]+src=["\']([^"\']+)["\']', doc.html) or ""


IMAGE_RULES = [
    Rule("og_image", og_image),
    Rule("old_hires", old_hires),
    Rule("dynamic_image", dynamic_image),
    Rule("landing_image", landing_image),
]


def extract(html: str) -> ProductRecord:
    """Extract an Amazon product page (amazon.com.br layout)."""
    doc = HtmlDocument(html)

    price, price_rule = first_match(PRICE_RULES, doc, "price")
    old_price = first_value(OLD_PRICE_RULES, doc, "oldPrice")
    price, old_price = reconcile_prices(price, old_price, all_values(PRICE_RULES, doc, "price"))

    record = ProductRecord(
        title=first_value(TITLE_RULES, doc, "title") or "",
        price=price,
        old_price=old_price,
        installment=best_installment(doc.html),
        image=first_value(IMAGE_RULES, doc, "image") or "",
        parse_hint=PARSE_HINT
    )
    logger.info(
        f"✅ Amazon extraction: price={record.price} (rule {price_rule or '-'}) oldPrice={record.old_price} "
        f"installment='{record.installment}'"
    )
    return record
