import logging
import requests
from typing import Optional

from app.core.config import settings
from app.models.schemas import ProductRecord
from app.shared.text import normalize_whitespace, positive_amount

logger = logging.getLogger(__name__)

PARSE_HINT = "ml_api"


def lookup_item_by_id(item_id: str, session: Optional[requests.Session] = None) -> Optional[ProductRecord]:
    """
    Busca o item na API pública do Mercado Livre (/items/{id}).
    Usado apenas como caminho alternativo quando o HTML não trouxe o preço.
    Retorna None em qualquer falha.
    """
    url = f"{settings.ML_API_BASE}/items/{item_id}"
    client = session or requests

    try:
        logger.info(f"🔗 [ML API] Consultando item {item_id}")
        response = client.get(url, headers={"Accept": "application/json"}, timeout=settings.ML_API_TIMEOUT)
    except requests.exceptions.RequestException as e:
        logger.error(f"💥 [ML API] Erro de conexão: {e}")
        return None

    if response.status_code != 200:
        logger.warning(f"⚠️ [ML API] Item {item_id} indisponível ({response.status_code})")
        return None

    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"❌ [ML API] Resposta inválida: {e}")
        return None

    if not isinstance(data, dict):
        logger.error(f"❌ [ML API] Resposta inesperada para {item_id}: {type(data).__name__}")
        return None

    pictures = data.get("pictures") or []
    image = ""
    if pictures and isinstance(pictures[0], dict):
        image = pictures[0].get("secure_url") or pictures[0].get("url") or ""
    image = image or data.get("secure_thumbnail") or data.get("thumbnail") or ""

    record = ProductRecord(
        title=normalize_whitespace(data.get("title")),
        price=positive_amount(data.get("price")),
        old_price=positive_amount(data.get("original_price")),
        installment="",
        image=image,
        parse_hint=PARSE_HINT
    )
    logger.info(f"✅ [ML API] Item {item_id}: price={record.price} oldPrice={record.old_price}")
    return record
