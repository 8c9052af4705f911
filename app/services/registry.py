"""
Strategy registry: store key -> extractor.
"""
from typing import Callable, Dict

from app.models.schemas import ProductRecord
from app.services.amazon.scraper import extractor as amazon
from app.services.generic.scraper import extractor as generic
from app.services.mercado_livre.scraper import extractor as mercado_livre
from app.services.shopee.scraper import extractor as shopee
from app.shared.store_classifier import GENERIC_KEY

Extractor = Callable[[str], ProductRecord]

EXTRACTORS: Dict[str, Extractor] = {
    "mercado_livre": mercado_livre.extract,
    "amazon": amazon.extract,
    "shopee": shopee.extract,
    GENERIC_KEY: generic.extract,
}


def get_extractor(key: str) -> Extractor:
    """Extractor registered for a store key; the generic one by default."""
    return EXTRACTORS.get(key, EXTRACTORS[GENERIC_KEY])
