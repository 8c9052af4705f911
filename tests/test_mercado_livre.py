import pytest

from app.services.mercado_livre.scraper.extractor import extract, extract_item_id, prices_block

HEAD = (
    '<head>'
    '<meta property="og:title" content="Fone Bluetooth JBL (og)">'
    '<meta property="og:image" content="https://http2.mlstatic.com/D_NQ_NP_og.jpg">'
    '</head>'
)


def _page(body, head=HEAD):
    return f"<html>{head}<body>{body}</body></html>"


def test_smallest_amount_and_largest_regular_amount():
    html = _page(
        '<h1 class="ui-pdp-title">Fone Bluetooth JBL Tune 520BT</h1>'
        '<script>window.__DATA__ = {"prices":{"prices":['
        '{"type":"promotion","amount":599.40,"regular_amount":899.00},'
        '{"type":"installment_artifact","amount":60.55}]}};</script>'
    )

    record = extract(html)

    assert record.price == pytest.approx(599.40)
    assert record.old_price == pytest.approx(899.00)
    assert record.title == "Fone Bluetooth JBL Tune 520BT"
    assert record.parse_hint == "ml_html_v9"


def test_installment_amount_inside_prices_block_is_not_a_price():
    html = _page(
        '<script>var s = {"prices":{"amount":599.40,"regular_amount":899.00,'
        '"installments":{"quantity":10,"amount":60.55,"rate":0}}};</script>'
    )

    record = extract(html)

    assert record.price == pytest.approx(599.40)
    assert record.old_price == pytest.approx(899.00)
    assert record.installment == "10x de R$ 60,55 sem juros"


def test_regex_slice_used_when_prices_block_is_not_json():
    block = prices_block('<div data-x=\'"prices": {"amount": 129,90, "regular_amount": 159.90}\'></div>')

    assert block.amounts == [pytest.approx(129.90)]
    assert block.regulars == [pytest.approx(159.90)]


def test_installment_phrase_wins_over_structured_block():
    html = _page(
        '<p>em até 12x de R$ 49,95 sem juros</p>'
        '<script>var s = {"prices":{"amount":599.40,"regular_amount":899.00}};'
        'var i = {"installments":{"quantity":10,"amount":59.94,"rate":0}};</script>'
    )

    assert extract(html).installment == "em até 12x de R$ 49,95 sem juros"


def test_loose_installments_block_with_interest():
    html = _page(
        '<script>var s = {"prices":{"amount":599.40,"regular_amount":899.00}};'
        'var i = {"installments":{"quantity":10,"amount":65.10,"rate":8.6}};</script>'
    )

    assert extract(html).installment == "10x de R$ 65,10"


def test_title_falls_back_to_og_title():
    assert extract(_page("<p>sem título</p>")).title == "Fone Bluetooth JBL (og)"


def test_fallback_tier_microdata_and_original_price():
    html = _page(
        '<meta itemprop="price" content="249.90">'
        '<script>var p = {"original_price": 299.9};</script>'
    )

    record = extract(html)

    assert record.price == pytest.approx(249.90)
    assert record.old_price == pytest.approx(299.90)
    assert record.installment == ""


def test_previous_price_component_as_old_price():
    html = _page(
        '<meta itemprop="price" content="1899">'
        '<s class="andes-money-amount andes-money-amount--previous">'
        '<span class="andes-money-amount__fraction">2.199</span>'
        '<span class="andes-money-amount__cents">90</span></s>'
    )

    record = extract(html)

    assert record.price == pytest.approx(1899.0)
    assert record.old_price == pytest.approx(2199.90)


def test_deep_mining_of_preloaded_state():
    html = _page(
        '<script>window.__PRELOADED_STATE__ = {"initialState":{"components":{'
        '"track":{"item":{"amount":149.9,"regular_amount":199.9}},'
        '"payment":{"installments":{"quantity":12,"amount":12.49,"rate":0}}}}};</script>'
        '<script type="application/json">{broken json</script>'
    )

    record = extract(html)

    assert record.price == pytest.approx(149.9)
    assert record.old_price == pytest.approx(199.9)
    assert record.installment == "12x de R$ 12,49 sem juros"


def test_deep_mining_picks_largest_installment_quantity():
    html = _page(
        '<script type="application/json">{"amount": 300, "installments": ['
        '{"quantity": 3, "amount": 100},'
        '{"quantity": 6, "amount": 52.5, "rate": 5}]}</script>'
    )

    record = extract(html)

    assert record.price == pytest.approx(300.0)
    assert record.installment == "6x de R$ 52,50"


def test_price_not_below_list_price_drops_list_price():
    html = _page('<script>var s = {"prices":{"amount":900,"regular_amount":899}};</script>')

    record = extract(html)

    assert record.price == pytest.approx(900.0)
    assert record.old_price is None


def test_coherence_sees_amounts_dropped_as_installment_artifacts():
    html = _page(
        '<script>var s = {"prices":{"prices":['
        '{"amount":150,"regular_amount":899},{"amount":899}]}};</script>'
    )

    record = extract(html)

    assert record.price == pytest.approx(150.0)
    assert record.old_price == pytest.approx(899.0)


def test_image_from_secure_url_when_no_og_image():
    html = _page(
        r'<script>var pic = {"secure_url":"https:\/\/http2.mlstatic.com\/D_NQ_NP_1.jpg"};</script>',
        head='<head><title>x</title></head>'
    )

    assert extract(html).image == "https://http2.mlstatic.com/D_NQ_NP_1.jpg"


def test_image_from_og_image_name_attribute():
    html = _page("", head='<head><meta name="og:image" content="https://img/named.jpg"></head>')
    assert extract(html).image == "https://img/named.jpg"


@pytest.mark.parametrize("html", ["", "<html", "<<<>>>", '{"prices": {', '"prices": {"amount": "x"}'])
def test_malformed_input_degrades_to_empty_record(html):
    record = extract(html)

    assert record.price is None
    assert record.old_price is None
    assert record.installment == ""
    assert record.title == ""


@pytest.mark.parametrize("text,expected", [
    ("https://produto.mercadolivre.com.br/MLB-1234567890-fone-_JM", "MLB1234567890"),
    ("https://www.mercadolivre.com.br/p/MLB19876543", "MLB19876543"),
    ('{"item_id":"mlb-3344556677"}', "MLB3344556677"),
    ("https://www.mercadolivre.com.br/social/abc", None),
])
def test_extract_item_id(text, expected):
    assert extract_item_id(text) == expected
