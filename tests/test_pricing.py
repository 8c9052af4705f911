from app.shared.pricing import discard_installment_artifacts, reconcile_prices


def test_known_installment_amount_is_discarded():
    assert discard_installment_artifacts([599.40, 60.55], installment_amounts=[60.55]) == [599.40]


def test_tiny_amount_next_to_list_price_is_discarded():
    assert discard_installment_artifacts([599.40, 60.55], old_price=899.00) == [599.40]


def test_discard_never_empties_the_list():
    assert discard_installment_artifacts([60.55], installment_amounts=[60.55]) == [60.55]
    assert discard_installment_artifacts([], old_price=100) == []


def test_reconcile_keeps_coherent_pair():
    assert reconcile_prices(599.40, 899.00) == (599.40, 899.00)
    assert reconcile_prices(None, 899.00) == (None, 899.00)
    assert reconcile_prices(10.0, None) == (10.0, None)


def test_reconcile_uses_largest_candidate_below_old_price():
    assert reconcile_prices(600.0, 500.0, [600.0, 450.0, 300.0, 0.0, None]) == (450.0, 500.0)


def test_reconcile_drops_old_price_without_alternative():
    assert reconcile_prices(500.0, 500.0) == (500.0, None)
    assert reconcile_prices(900.0, 899.0, [900.0, 950.0]) == (900.0, None)
