"""
Generic / Open-Graph extractor.

Used for every store without a dedicated strategy (Magalu, KaBuM!, ...).
"""
import logging

from app.models.schemas import ProductRecord
from app.shared.html import HtmlDocument, og_image, og_title, page_title, regex_group
from app.shared.pricing import reconcile_prices
from app.shared.rules import Rule, all_values, first_match, first_value
from app.shared.text import positive_amount

logger = logging.getLogger(__name__)

PARSE_HINT = "generic_og"


def microdata_price(doc: HtmlDocument):
    return positive_amount(regex_group(r'itemprop=["\']price["\'][^>]*content=["\']([^"\']+)["\']', doc.html))


def json_price_token(doc: HtmlDocument):
    return positive_amount(regex_group(r'"price"\s*:\s*"?([\d.,]+)"?', doc.html, flags=0))


def json_list_price_token(doc: HtmlDocument):
    return positive_amount(regex_group(r'"list_price"\s*:\s*"?([\d.,]+)"?', doc.html, flags=0))


TITLE_RULES = [
    Rule("og_title", og_title),
    Rule("html_title", page_title),
]

PRICE_RULES = [
    Rule("microdata_price", microdata_price),
    Rule("json_price", json_price_token),
]

OLD_PRICE_RULES = [
    Rule("json_list_price", json_list_price_token),
]

IMAGE_RULES = [
    Rule("og_image", og_image),
]


def extract(html: str) -> ProductRecord:
    """Extract title, price, list price and image from Open Graph / microdata."""
    doc = HtmlDocument(html)

    price, price_rule = first_match(PRICE_RULES, doc, "price")
    old_price = first_value(OLD_PRICE_RULES, doc, "oldPrice")
    price, old_price = reconcile_prices(price, old_price, all_values(PRICE_RULES, doc, "price"))

    record = ProductRecord(
        title=first_value(TITLE_RULES, doc, "title") or "",
        price=price,
        old_price=old_price,
        installment="",
        image=first_value(IMAGE_RULES, doc, "image") or "",
        parse_hint=PARSE_HINT
    )
    logger.info(f"✅ Generic extraction: price={record.price} (rule {price_rule or '-'}) oldPrice={record.old_price}")
    return record
