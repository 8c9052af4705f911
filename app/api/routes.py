"""
API routes: health check and the link parser endpoint.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.errors import MissingInputError
from app.models.schemas import ErrorEnvelope, ErrorResponse, FetchEnvelope
from app.services.pipeline import scrape_product

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["API"])


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


@router.get("/")
async def api_root():
    """API root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME} API",
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/api/health",
        "parse": "/api/parse?url=<link>"
    }


@router.get(
    "/parse",
    response_model=FetchEnvelope,
    responses={200: {"model": ErrorEnvelope}, 400: {"model": ErrorResponse}}
)
async def parse_link(url: Optional[str] = Query(None, description="Link (encurtado) de afiliado")):
    """
    Expande o link, identifica a loja e extrai título, preços, parcelamento
    e imagem. Falhas de scraping voltam como 200 com parseHint 'error'.
    """
    if not url or not url.strip():
        raise MissingInputError()

    envelope = await run_in_threadpool(scrape_product, url)
    payload = envelope.model_dump(by_alias=True)

    headers = {}
    if not isinstance(envelope, ErrorEnvelope):
        headers["Cache-Control"] = settings.CACHE_CONTROL
    return JSONResponse(content=payload, headers=headers)
