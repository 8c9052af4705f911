"""
Affiliate Link Parser - Main Application Entry Point
Expande links encurtados de afiliados e extrai dados do produto para
mensagens promocionais de WhatsApp.

Run with: uvicorn main:app --reload
"""
import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.errors import MissingInputError
from app.api import main_router

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()
    ]
)
logger = logging.getLogger(__name__)

# Initialize FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Parser de links de afiliados (Mercado Livre, Amazon, Shopee e outras lojas)",
    version=settings.APP_VERSION
)

# CORS Configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


@app.exception_handler(MissingInputError)
async def missing_input_handler(request: Request, exc: MissingInputError):
    """Único erro que sai como falha HTTP: falta o parâmetro obrigatório."""
    logger.warning(f"⚠️ Requisição sem URL: {request.url}")
    return JSONResponse(status_code=400, content={"error": str(exc)})


# Include routers
app.include_router(main_router, tags=["API"])

if __name__ == "__main__":
    import uvicorn
    port = int(os.environ.get("PORT", settings.PORT))
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=port,
        reload=False,
        log_level="info"
    )
