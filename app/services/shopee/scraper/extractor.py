"""
Shopee extractor (JSON-like price tokens + Open Graph).
"""
import logging

from app.models.schemas import ProductRecord
from app.shared.html import HtmlDocument, og_image, og_title, page_title, regex_group
from app.shared.pricing import reconcile_prices
from app.shared.rules import Rule, all_values, first_match, first_value
from app.shared.text import positive_amount

logger = logging.getLogger(__name__)

PARSE_HINT = "shopee_html"


def _json_token(key: str):
    def rule(doc: HtmlDocument):
        return positive_amount(regex_group(rf'"{key}"\s*:\s*"?([\d.,]+)"?', doc.html))
    return rule


TITLE_RULES = [
    Rule("og_title", og_title),
    Rule("html_title", page_title),
]

PRICE_RULES = [
    Rule("json_price", _json_token("price")),
    Rule("json_price_min", _json_token("price_min")),
]

OLD_PRICE_RULES = [
    Rule("json_price_before_discount", _json_token("price_before_discount")),
]

IMAGE_RULES = [
    Rule("og_image", og_image),
]


def extract(html: str) -> ProductRecord:
    """Extract a Shopee product page. Shopee pages carry no installment text."""
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
    logger.info(f"✅ Shopee extraction: price={record.price} (rule {price_rule or '-'}) oldPrice={record.old_price}")
    return record
