"""
Mercado Livre extractor.

Prices come from the SSR "prices" JSON block (smallest amount = promotional
price, largest regular_amount = "De:" price), with microdata/JSON-token
fallbacks and, when the page is still incomplete, a deep walk over the
embedded hydration state (__PRELOADED_STATE__).
"""
import logging
import re
from typing import List, Optional

from app.models.schemas import ProductRecord
from app.shared.html import HtmlDocument, meta_content, og_image, og_title, regex_group
from app.shared.json_miner import InstallmentOption, MinedValues, decode_object_at, mine_html, mine_json
from app.shared.pricing import discard_installment_artifacts, reconcile_prices
from app.shared.rules import Rule, first_value
from app.shared.text import normalize_whitespace, positive_amount, to_amount

logger = logging.getLogger(__name__)

PARSE_HINT = "ml_html_v9"

PRICES_KEY = re.compile(r'"prices"\s*:\s*\{', re.IGNORECASE)
PRICES_SLICE = re.compile(r'"prices"\s*:\s*\{[\s\S]{0,60000}?\}', re.IGNORECASE)
INSTALLMENTS_SLICE = re.compile(r'"installments"\s*:\s*\{[\s\S]{0,2000}?\}', re.IGNORECASE)
INSTALLMENT_PHRASE = re.compile(
    r'em\s+até\s+\d{1,2}x[^<]{0,120}R\$\s?[\d.,]+(?:\s+sem\s+juros)?',
    re.IGNORECASE
)
ITEM_ID = re.compile(r'\b(MLB)-?(\d{6,})', re.IGNORECASE)


# ---------------------------------------------------------------------------
# Title
# ---------------------------------------------------------------------------

def title_heading(doc: HtmlDocument) -> str:
    heading = doc.soup.find('h1', class_=re.compile(r'ui-pdp-title'))
    return normalize_whitespace(heading.get_text(" ")) if heading else ""


TITLE_RULES = [
    Rule("ui_pdp_title", title_heading),
    Rule("og_title", og_title),
]


# ---------------------------------------------------------------------------
# "prices" block
# ---------------------------------------------------------------------------

def _slice_numbers(block: str, key: str) -> List[float]:
    values = [positive_amount(v) for v in re.findall(rf'"{key}"\s*:\s*([\d.,]+)', block)]
    return [v for v in values if v]


def prices_block(html: str) -> MinedValues:
    """
    Amounts, regular amounts and installment options of the "prices" block.

    The block is decoded as JSON when possible; otherwise the bounded
    regex slice is scanned for "amount"/"regular_amount" tokens.
    """
    match = PRICES_KEY.search(html)
    if not match:
        return MinedValues()

    data = decode_object_at(html, match.end() - 1)
    if isinstance(data, dict):
        return mine_json(data)

    block = PRICES_SLICE.search(html)
    if not block:
        return MinedValues()
    return MinedValues(
        amounts=_slice_numbers(block.group(0), "amount"),
        regulars=_slice_numbers(block.group(0), "regular_amount"),
    )


def installments_slice(html: str) -> Optional[InstallmentOption]:
    """First loose "installments": {...} object of the page."""
    match = INSTALLMENTS_SLICE.search(html)
    if not match:
        return None
    block = match.group(0)
    quantity = regex_group(r'"quantity"\s*:\s*(\d{1,2})', block)
    amount = positive_amount(regex_group(r'"amount"\s*:\s*([\d.,]+)', block))
    if not quantity or not amount:
        return None
    rate = to_amount(regex_group(r'"rate"\s*:\s*([\d.,]+)', block))
    return InstallmentOption(int(quantity), amount, rate)


# ---------------------------------------------------------------------------
# Fallback tier
# ---------------------------------------------------------------------------

def microdata_price(doc: HtmlDocument):
    return positive_amount(regex_group(r'itemprop=["\']price["\'][^>]*content=["\']([^"\']+)["\']', doc.html))


def json_price_token(doc: HtmlDocument):
    return positive_amount(regex_group(r'"price"\s*:\s*"?([\d.,]+)"?', doc.html))


def json_list_price_token(doc: HtmlDocument):
    return positive_amount(regex_group(r'"list_price"\s*:\s*"?([\d.,]+)"?', doc.html))


def json_original_price_token(doc: HtmlDocument):
    return positive_amount(regex_group(r'"original_price"\s*:\s*"?([\d.,]+)"?', doc.html))


def previous_price_block(doc: HtmlDocument):
    """Struck-through "De:" price rendered by the andes-money-amount component."""
    previous = doc.soup.find(class_=re.compile(r'andes-money-amount--previous'))
    if not previous:
        return None
    fraction = previous.find(class_=re.compile(r'andes-money-amount__fraction'))
    if not fraction:
        return None
    cents = previous.find(class_=re.compile(r'andes-money-amount__cents'))
    cents_text = cents.get_text(strip=True) if cents else "00"
    return positive_amount(f"{fraction.get_text(strip=True)},{cents_text}")


PRICE_FALLBACK_RULES = [
    Rule("microdata_price", microdata_price),
    Rule("json_price", json_price_token),
]

OLD_PRICE_FALLBACK_RULES = [
    Rule("json_list_price", json_list_price_token),
    Rule("json_original_price", json_original_price_token),
    Rule("andes_previous_price", previous_price_block),
]


def installment_phrase(doc: HtmlDocument) -> str:
    match = INSTALLMENT_PHRASE.search(doc.html)
    return normalize_whitespace(match.group(0)) if match else ""


# ---------------------------------------------------------------------------
# Image
# ---------------------------------------------------------------------------

def secure_url_token(doc: HtmlDocument) -> str:
    raw = regex_group(r'"secure_url"\s*:\s*"([^"]+)"', doc.html, flags=0)
    if not raw:
        return ""
    return raw.replace('\\u002F', '/').replace('\\u002f', '/').replace('\\/', '/')


def og_image_by_name(doc: HtmlDocument) -> str:
    return meta_content(doc, "og:image", attr="name")


IMAGE_RULES = [
    Rule("og_image", og_image),
    Rule("secure_url", secure_url_token),
    Rule("og_image_name", og_image_by_name),
]


def _per_installment_amounts(options: List[InstallmentOption]) -> List[float]:
    # a 1x plan costs the full price, so it says nothing about artifacts
    return [opt.amount for opt in options if opt.quantity > 1]


def extract_item_id(text: str) -> Optional[str]:
    """Stable item id (e.g. 'MLB1234567890') from a URL or page, if any."""
    match = ITEM_ID.search(text or "")
    if not match:
        return None
    return f"{match.group(1).upper()}{match.group(2)}"


def extract(html: str) -> ProductRecord:
    """
    Extract a Mercado Livre product page.

    Args:
        html: HTML of the product page

    Returns:
        ProductRecord with parse_hint 'ml_html_v9'; missing fields stay empty
    """
    doc = HtmlDocument(html)
    title = first_value(TITLE_RULES, doc, "title") or ""

    # 1) bloco "prices" do HTML SSR
    block = prices_block(doc.html)
    loose_installment = installments_slice(doc.html)
    options = block.installments + ([loose_installment] if loose_installment else [])
    installment_amounts = _per_installment_amounts(options)

    old_price = block.best_regular()
    candidates = list(block.amounts)
    amounts = discard_installment_artifacts(block.amounts, installment_amounts, old_price)
    price = min(amounts) if amounts else None
    if block.amounts:
        logger.info(f"💰 prices block: amounts={block.amounts} regulars={block.regulars}")

    # 2) parcelas: texto solto, senão JSON "installments"
    installment = installment_phrase(doc)
    if not installment:
        structured = block.best_installment() or loose_installment
        if structured:
            installment = structured.describe()

    # 3) fallbacks leves
    if price is None:
        price = first_value(PRICE_FALLBACK_RULES, doc, "price")
    if old_price is None:
        old_price = first_value(OLD_PRICE_FALLBACK_RULES, doc, "oldPrice")

    # 4) varredura profunda do estado embutido
    if (price is None and old_price is None) or not installment:
        mined = mine_html(doc.html)
        if old_price is None:
            old_price = mined.best_regular()
        mined_amounts = discard_installment_artifacts(
            mined.amounts, _per_installment_amounts(mined.installments), old_price
        )
        candidates.extend(mined.amounts)
        if price is None and mined_amounts:
            price = min(mined_amounts)
        if not installment:
            best = mined.best_installment()
            if best:
                installment = best.describe()

    price, old_price = reconcile_prices(price, old_price, candidates)

    record = ProductRecord(
        title=title,
        price=price,
        old_price=old_price,
        installment=installment,
        image=first_value(IMAGE_RULES, doc, "image") or "",
        parse_hint=PARSE_HINT
    )
    logger.info(
        f"✅ Mercado Livre extraction: price={record.price} oldPrice={record.old_price} "
        f"installment='{record.installment}'"
    )
    return record
