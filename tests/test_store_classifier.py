import pytest

from app.shared.store_classifier import guess_store, store_key


@pytest.mark.parametrize("url,label,key", [
    ("https://produto.mercadolivre.com.br/MLB-123-fone-_JM", "Mercado Livre", "mercado_livre"),
    ("https://articulo.mercadolibre.com.ar/MLA-1", "Mercado Livre", "mercado_livre"),
    ("https://http2.mlstatic.com/x.jpg", "Mercado Livre", "mercado_livre"),
    ("https://www.amazon.com.br/dp/B0ABC", "Amazon", "amazon"),
    ("https://shopee.com.br/produto-i.1.2", "Shopee", "shopee"),
    ("https://www.magazineluiza.com.br/p/123", "Magalu", "generic"),
    ("https://www.kabum.com.br/produto/1", "KaBuM!", "generic"),
])
def test_known_stores(url, label, key):
    assert guess_store(url) == label
    assert store_key(url) == key


def test_unknown_host_strips_www():
    assert guess_store("https://WWW.Netshoes.com.br/tenis") == "netshoes.com.br"
    assert store_key("https://www.netshoes.com.br/tenis") == "generic"


@pytest.mark.parametrize("url", ["", "not a url", None, "http://[::1"])
def test_invalid_urls_never_raise(url):
    assert guess_store(url) == "Loja"
    assert store_key(url) == "generic"
