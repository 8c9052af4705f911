"""
Request pipeline: resolve -> canonical follow -> classify -> extract ->
optional item API / headless render -> assemble the response envelope.
"""
import logging
from typing import Any, Mapping, Optional, Union

import requests

from app.core.config import settings
from app.core.errors import MissingInputError, ScraperError
from app.models.schemas import ErrorEnvelope, FetchEnvelope, ProductRecord, ResolvedPage
from app.services.mercado_livre.scraper.extractor import extract_item_id
from app.services.mercado_livre.utils import lookup_item_by_id
from app.services.registry import Extractor, get_extractor
from app.shared import renderer
from app.shared.http_client import fetch_page_follow, follow_canonical
from app.shared.pricing import reconcile_prices
from app.shared.store_classifier import FALLBACK_LABEL, guess_store, store_key
from app.shared.text import normalize_whitespace, to_amount

logger = logging.getLogger(__name__)

ERROR_HINT = "error"
RECORD_FIELDS = ("title", "price", "old_price", "installment", "image")


def _get(record: Union[ProductRecord, Mapping[str, Any]], name: str, alias: Optional[str] = None) -> Any:
    if isinstance(record, ProductRecord):
        return getattr(record, name)
    if record is None:
        return None
    value = record.get(name)
    if value is None and alias:
        value = record.get(alias)
    return value


def assemble_envelope(
    record: Union[ProductRecord, Mapping[str, Any], None],
    share_url: str,
    final_url: str
) -> FetchEnvelope:
    """
    Build the response envelope from an extractor record.

    Numbers given as strings go through the currency parser, text fields
    are whitespace-normalized and every field gets its documented default.
    """
    record = record or {}
    price = to_amount(_get(record, "price"))
    old_price = to_amount(_get(record, "old_price", "oldPrice"))
    price, old_price = reconcile_prices(price, old_price)

    return FetchEnvelope(
        store=guess_store(final_url),
        title=normalize_whitespace(_get(record, "title")),
        price=price,
        old_price=old_price,
        installment=normalize_whitespace(_get(record, "installment")),
        image=_get(record, "image") or "",
        share_url=share_url,
        final_url=final_url,
        parse_hint=_get(record, "parse_hint", "parseHint") or "n/a"
    )


def build_error_envelope(share_url: str, note: str) -> ErrorEnvelope:
    """Well-formed envelope for a failed scrape."""
    return ErrorEnvelope(
        store=FALLBACK_LABEL,
        share_url=share_url or "",
        final_url="",
        parse_hint=ERROR_HINT,
        note=note
    )


def apply_item_api(record: ProductRecord, page: ResolvedPage, session: Optional[requests.Session] = None) -> ProductRecord:
    """Fill fields missing from the HTML with the official Mercado Livre item API."""
    if not settings.ML_API_ENABLED or record.price is not None:
        return record

    item_id = extract_item_id(page.final_url) or extract_item_id(page.html)
    if not item_id:
        logger.info("ℹ️  No Mercado Livre item id found; skipping item API")
        return record

    api_record = lookup_item_by_id(item_id, session=session)
    if api_record is None:
        return record

    updates = {
        name: getattr(api_record, name)
        for name in RECORD_FIELDS
        if not getattr(record, name) and getattr(api_record, name)
    }
    if not updates:
        return record
    updates["parse_hint"] = f"{record.parse_hint}+{api_record.parse_hint}"
    return record.model_copy(update=updates)


def apply_render(record: ProductRecord, url: str, extractor: Extractor) -> ProductRecord:
    """
    Headless-render fallback, only when price, oldPrice and installment are
    all still empty. Truthy rendered fields overwrite the record.
    """
    if not settings.RENDER_ENABLED:
        return record
    if record.price is not None or record.old_price is not None or record.installment:
        return record

    partial = renderer.render(url, extractor)
    if not partial:
        return record

    updates = dict(partial)
    updates["parse_hint"] = f"{record.parse_hint}+render"
    return record.model_copy(update=updates)


def scrape_product(share_url: str, session: Optional[requests.Session] = None) -> FetchEnvelope:
    """
    Resolve a (shortened) product link and extract its product data.

    Args:
        share_url: Link as shared by the affiliate, kept verbatim in the output
        session: Optional requests session reused for every fetch of this request

    Returns:
        FetchEnvelope, or ErrorEnvelope (parseHint 'error' plus a note) when
        the page could not be fetched or was blocked

    Raises:
        MissingInputError: share_url is empty
    """
    if not share_url or not share_url.strip():
        raise MissingInputError()

    logger.info(f"🚀 Parsing link: {share_url}")
    try:
        page = fetch_page_follow(share_url, session=session)
        page = follow_canonical(page, session=session)

        key = store_key(page.final_url)
        extractor = get_extractor(key)
        logger.info(f"🏷️  Store '{guess_store(page.final_url)}' -> extractor '{key}'")

        record = extractor(page.html)
        if key == "mercado_livre":
            record = apply_item_api(record, page, session=session)
            record = apply_render(record, page.final_url, extractor)

        envelope = assemble_envelope(record, share_url, page.final_url)
    except ScraperError as e:
        logger.error(f"❌ Scraping failed for {share_url}: {e}")
        return build_error_envelope(share_url, str(e))
    except Exception as e:
        logger.exception(f"💥 Unexpected error parsing {share_url}: {e}")
        return build_error_envelope(share_url, str(e))

    logger.info(f"✅ Parsed {share_url}: {envelope.parse_hint} price={envelope.price}")
    return envelope
