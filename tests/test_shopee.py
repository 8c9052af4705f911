import pytest

from app.services.shopee.scraper.extractor import extract


def test_price_min_and_price_before_discount():
    html = (
        '<html><head><meta property="og:title" content="Capinha iPhone 13 Transparente">'
        '<meta property="og:image" content="https://down-br.img.susercontent.com/file/abc"></head>'
        '<body><script>var item = {"price_min": 39.9, "price_before_discount": "59,90"};</script></body></html>'
    )

    record = extract(html)

    assert record.title == "Capinha iPhone 13 Transparente"
    assert record.price == pytest.approx(39.9)
    assert record.old_price == pytest.approx(59.9)
    assert record.installment == ""
    assert record.image == "https://down-br.img.susercontent.com/file/abc"
    assert record.parse_hint == "shopee_html"


def test_price_token_preferred_over_price_min():
    html = '<script>{"price_min": 10, "price": 12.5}</script>'
    assert extract(html).price == pytest.approx(12.5)


def test_title_from_document_title():
    html = "<html><head><title> Shopee Brasil |  Ofertas </title></head></html>"
    assert extract(html).title == "Shopee Brasil | Ofertas"


def test_empty_page():
    record = extract("")

    assert record.title == ""
    assert record.price is None
    assert record.old_price is None
