"""
Tie-break rules for ambiguous price candidates.
"""
import logging
from typing import Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Abaixo de 20% do preço "De:" o valor é tratado como parcela, não preço
INSTALLMENT_ARTIFACT_RATIO = 0.2


def discard_installment_artifacts(
    amounts: List[float],
    installment_amounts: Iterable[float] = (),
    old_price: Optional[float] = None
) -> List[float]:
    """
    Drop amounts that look like a per-installment value: equal to a known
    installment amount, or implausibly small next to the list price.
    Never empties the list.
    """
    per_installment = set(installment_amounts)
    kept = [a for a in amounts if a not in per_installment]
    if old_price:
        kept = [a for a in kept if a >= old_price * INSTALLMENT_ARTIFACT_RATIO]
    if kept and len(kept) != len(amounts):
        logger.debug(f"🧹 Discarded installment artifacts: {sorted(set(amounts) - set(kept))}")
    return kept or list(amounts)


def reconcile_prices(
    price: Optional[float],
    old_price: Optional[float],
    candidates: Iterable[float] = ()
) -> Tuple[Optional[float], Optional[float]]:
    """
    Enforce price < oldPrice.

    When the promotional price is not below the list price, the largest
    candidate still below it replaces the price; without one, the list
    price is dropped.
    """
    if price is None or old_price is None or price < old_price:
        return price, old_price

    below = [c for c in candidates if c is not None and 0 < c < old_price]
    if below:
        alternative = max(below)
        logger.info(f"🔁 Price {price} >= oldPrice {old_price}; using {alternative}")
        return alternative, old_price

    logger.info(f"🔁 Price {price} >= oldPrice {old_price}; dropping oldPrice")
    return price, None
