"""
Ordered extraction rules.

Each field of a store extractor is resolved by a list of named rules,
evaluated in priority order until one produces a usable value.
"""
import logging
from typing import Any, Callable, List, NamedTuple, Optional, Tuple

from app.shared.html import HtmlDocument

logger = logging.getLogger(__name__)


class Rule(NamedTuple):
    name: str
    func: Callable[[HtmlDocument], Any]


def _usable(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def first_match(rules: List[Rule], doc: HtmlDocument, field: str = "") -> Tuple[Optional[Any], Optional[str]]:
    """
    Evaluate rules in order and return (value, rule_name) of the first hit.

    A rule that raises counts as a miss; extractors never propagate
    errors from malformed markup.
    """
    for rule in rules:
        try:
            value = rule.func(doc)
        except Exception as e:
            logger.debug(f"⚠️  Rule {rule.name} failed for {field}: {e}")
            continue
        if _usable(value):
            logger.debug(f"✅ {field} from rule {rule.name}")
            return value, rule.name
    return None, None


def all_values(rules: List[Rule], doc: HtmlDocument, field: str = "") -> List[Any]:
    """Every usable value the rules produce, in rule order."""
    values = []
    for rule in rules:
        try:
            value = rule.func(doc)
        except Exception as e:
            logger.debug(f"⚠️  Rule {rule.name} failed for {field}: {e}")
            continue
        if _usable(value):
            values.append(value)
    return values


def first_value(rules: List[Rule], doc: HtmlDocument, field: str = "") -> Optional[Any]:
    """Like first_match, without the rule name."""
    return first_match(rules, doc, field)[0]
