from app.shared.html import HtmlDocument
from app.shared.rules import Rule, all_values, first_match, first_value


def _raise(doc):
    raise AttributeError("'NoneType' object has no attribute 'get_text'")


RULES = [
    Rule("broken", _raise),
    Rule("blank", lambda doc: "   "),
    Rule("missing", lambda doc: None),
    Rule("zero", lambda doc: 0),
    Rule("hit", lambda doc: "Fone"),
]


def test_first_match_skips_failing_and_blank_rules():
    assert first_match(RULES, HtmlDocument("")) == (0, "zero")
    assert first_match(RULES[:2] + RULES[-1:], HtmlDocument("")) == ("Fone", "hit")


def test_first_value_without_hit():
    assert first_value(RULES[:3], HtmlDocument(None)) is None


def test_all_values_in_rule_order():
    assert all_values(RULES, HtmlDocument("")) == [0, "Fone"]


def test_document_soup_built_once():
    doc = HtmlDocument("<title>x</title>")
    assert doc.soup is doc.soup
