"""
Pydantic schemas for the parser pipeline and its JSON response.
"""
from pydantic import BaseModel, Field
from typing import Optional


class ProductRecord(BaseModel):
    """Candidate record produced by a store extractor."""
    title: str = Field(default="", description="Título do produto ('' se desconhecido)")
    price: Optional[float] = Field(None, description="Preço atual/promocional")
    old_price: Optional[float] = Field(None, alias="oldPrice", description="Preço original ('De:')")
    installment: str = Field(default="", description="Texto de parcelamento, ex.: '10x de R$ 23,74 sem juros'")
    image: str = Field(default="", description="URL absoluta da imagem principal")
    parse_hint: str = Field(default="n/a", alias="parseHint", description="Estratégia que produziu o registro")

    class Config:
        populate_by_name = True


class ResolvedPage(BaseModel):
    """Fully-redirected page body and its landing URL."""
    html: str = Field(default="", description="HTML final")
    final_url: str = Field(..., description="URL após todos os redirecionamentos")


class FetchEnvelope(BaseModel):
    """Response envelope returned by /api/parse."""
    store: str = Field(..., description="Loja derivada do host final")
    title: str = Field(default="")
    price: Optional[float] = Field(None, ge=0)
    old_price: Optional[float] = Field(None, alias="oldPrice", ge=0)
    installment: str = Field(default="")
    image: str = Field(default="")
    share_url: str = Field(..., alias="shareUrl", description="Link original, preservado literalmente")
    final_url: str = Field(default="", alias="finalUrl", description="URL final após redirects/canonical")
    parse_hint: str = Field(default="n/a", alias="parseHint", description="Tag diagnóstica da estratégia")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "store": "Mercado Livre",
                "title": "Fone de Ouvido Bluetooth",
                "price": 599.4,
                "oldPrice": 899.0,
                "installment": "10x de R$ 59,94 sem juros",
                "image": "https://http2.mlstatic.com/D_NQ_NP_123-O.jpg",
                "shareUrl": "https://mercadolivre.com/sec/abc123",
                "finalUrl": "https://produto.mercadolivre.com.br/MLB-123-fone-_JM",
                "parseHint": "ml_html_v9"
            }
        }


class ErrorEnvelope(FetchEnvelope):
    """Envelope returned when scraping failed; always well-formed."""
    note: str = Field(..., description="Descrição legível da falha")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "store": "Loja",
                "title": "",
                "price": None,
                "oldPrice": None,
                "installment": "",
                "image": "",
                "shareUrl": "https://amzn.to/xyz",
                "finalUrl": "",
                "parseHint": "error",
                "note": "Bloqueio/captcha detectado (robot check)."
            }
        }


class ErrorResponse(BaseModel):
    """Request-validation error model."""
    error: str = Field(..., description="Mensagem de erro")
