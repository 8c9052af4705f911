import pytest

from app.services.generic.scraper.extractor import extract


def test_open_graph_and_microdata():
    html = (
        '<html><head>'
        '<meta property="og:title" content="  Smartphone  Galaxy A15 ">'
        '<meta property="og:image" content="https://a-static.mlcdn.com.br/galaxy.jpg">'
        '<title>Magalu</title></head>'
        '<body><meta itemprop="price" content="1.499,90">'
        '<script>{"list_price": "1.799,00"}</script></body></html>'
    )

    record = extract(html)

    assert record.title == "Smartphone Galaxy A15"
    assert record.price == pytest.approx(1499.90)
    assert record.old_price == pytest.approx(1799.00)
    assert record.image == "https://a-static.mlcdn.com.br/galaxy.jpg"
    assert record.parse_hint == "generic_og"


def test_title_falls_back_to_document_title():
    html = "<html><head><title>Placa de Vídeo RTX 4060 | KaBuM!</title></head></html>"
    assert extract(html).title == "Placa de Vídeo RTX 4060 | KaBuM!"


def test_json_price_token_when_no_microdata():
    assert extract('<script>{"price": "249.90"}</script>').price == pytest.approx(249.90)


def test_list_price_not_above_price_is_dropped():
    record = extract('<script>{"price": 300, "list_price": 250}</script>')

    assert record.price == pytest.approx(300.0)
    assert record.old_price is None


@pytest.mark.parametrize("html", ["", "<html><body>nada</body></html>", "<meta itemprop=\"price\" content=\"grátis\">"])
def test_page_without_product_data(html):
    record = extract(html)

    assert record.title == ""
    assert record.price is None
    assert record.old_price is None
    assert record.installment == ""
    assert record.image == ""
    assert record.parse_hint == "generic_og"
