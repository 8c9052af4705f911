"""
Core configuration for the Affiliate Link Parser
"""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Affiliate Link Parser"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # CORS
    CORS_ORIGINS: list = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = False
    CORS_ALLOW_METHODS: list = ["GET"]
    CORS_ALLOW_HEADERS: list = ["*"]

    # Fetch (assinatura de navegador)
    USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/123 Safari/537.36"
    )
    ACCEPT: str = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
    ACCEPT_LANGUAGE: str = "pt-BR,pt;q=0.9,en-US;q=0.8"
    REQUEST_TIMEOUT: int = 15

    # Headless render (Playwright)
    RENDER_ENABLED: bool = False
    RENDER_TIMEOUT_MS: int = 25000

    # Mercado Livre
    ML_API_ENABLED: bool = False
    ML_API_BASE: str = "https://api.mercadolibre.com"
    ML_API_TIMEOUT: int = 10

    # HTTP response caching
    CACHE_CONTROL: str = "public, max-age=30, s-maxage=120"

    class Config:
        case_sensitive = True
        env_file = ".env"
        extra = "ignore"  # Ignora variáveis extras no .env


settings = Settings()
