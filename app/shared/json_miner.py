"""
Deep JSON miner.

Finds structured-data blobs embedded in a page (hydration state, JSON
script tags), parses them permissively and walks every node collecting
price-like values by key name.
"""
import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, List, Optional, Tuple

from app.shared.text import format_brl, positive_amount, to_amount

logger = logging.getLogger(__name__)

BLOB_PATTERNS = [
    re.compile(r'__PRELOADED_STATE__\s*=\s*(\{[\s\S]*?\});?\s*</script>', re.IGNORECASE),
    re.compile(r'<script[^>]*type=["\']application/json["\'][^>]*>([\s\S]*?)</script>', re.IGNORECASE),
    re.compile(r'<script[^>]*>\s*(\{[\s\S]*?\})\s*</script>', re.IGNORECASE),
]
MAX_BLOBS = 5

AMOUNT_KEYS = {"amount"}
REGULAR_KEYS = {"regular_amount", "list_price", "original_price"}
INSTALLMENT_KEYS = {"installments"}


@dataclass
class InstallmentOption:
    quantity: int
    amount: float
    rate: Optional[float] = None

    @property
    def interest_free(self) -> bool:
        return not self.rate

    def describe(self) -> str:
        """e.g. '10x de R$ 59,94 sem juros'"""
        text = f"{self.quantity}x de {format_brl(self.amount)}"
        return f"{text} sem juros" if self.interest_free else text


@dataclass
class MinedValues:
    amounts: List[float] = field(default_factory=list)
    regulars: List[float] = field(default_factory=list)
    installments: List[InstallmentOption] = field(default_factory=list)

    def merge(self, other: "MinedValues") -> None:
        self.amounts.extend(other.amounts)
        self.regulars.extend(other.regulars)
        self.installments.extend(other.installments)

    def best_price(self) -> Optional[float]:
        return min(self.amounts) if self.amounts else None

    def best_regular(self) -> Optional[float]:
        return max(self.regulars) if self.regulars else None

    def best_installment(self) -> Optional[InstallmentOption]:
        if not self.installments:
            return None
        return max(self.installments, key=lambda opt: opt.quantity)


class PairsDict(dict):
    """JSON object that remembers every (key, value) pair, duplicates included."""

    def __init__(self, pairs):
        super().__init__(pairs)
        self.pairs = list(pairs)

    def items(self):
        return list(self.pairs)


def _decoder() -> json.JSONDecoder:
    return json.JSONDecoder(object_pairs_hook=PairsDict)


def find_json_blobs(html: str, limit: int = MAX_BLOBS) -> List[str]:
    """Raw text of embedded JSON payloads, hydration state first."""
    blobs: List[str] = []
    for pattern in BLOB_PATTERNS:
        for match in pattern.finditer(html or ""):
            raw = match.group(1).strip()
            if raw and raw not in blobs:
                blobs.append(raw)
    return blobs[:limit]


def parse_permissive(raw: str) -> Optional[Any]:
    """json.loads tolerant of &quot; entities and escaped slashes; None on failure."""
    text = raw.replace('&quot;', '"').replace('\\u002F', '/').replace('\\u002f', '/')
    try:
        return _decoder().decode(text)
    except (json.JSONDecodeError, ValueError) as e:
        logger.debug(f"⚠️  Error parsing JSON block: {e}")
        return None


def decode_object_at(text: str, start: int) -> Optional[Any]:
    """Decode the JSON value starting at text[start] (balanced braces), or None."""
    try:
        value, _ = _decoder().raw_decode(text, start)
    except (json.JSONDecodeError, ValueError):
        return None
    return value


def walk_json(node: Any, visit: Callable[[str, Any, Tuple[str, ...]], None]) -> None:
    """
    Visit every (key, value) pair of every object in a parsed JSON tree.

    `visit` also receives the lowercase keys of the enclosing objects. The
    walk uses an explicit stack, so arbitrarily deep trees are fine;
    scalars are leaves.
    """
    stack: List[Tuple[Any, Tuple[str, ...]]] = [(node, ())]
    while stack:
        current, path = stack.pop()
        if isinstance(current, dict):
            items = list(current.items())
            for key, value in items:
                visit(str(key), value, path)
            for key, value in reversed(items):
                if isinstance(value, (dict, list)):
                    stack.append((value, path + (str(key).lower(),)))
        elif isinstance(current, list):
            for value in reversed(current):
                if isinstance(value, (dict, list)):
                    stack.append((value, path))


def _installment_options(value: Any) -> Iterator[InstallmentOption]:
    candidates = value if isinstance(value, list) else [value]
    for item in candidates:
        if not isinstance(item, dict):
            continue
        quantity = positive_amount(item.get("quantity"))
        amount = positive_amount(item.get("amount"))
        if quantity and amount:
            yield InstallmentOption(int(quantity), amount, to_amount(item.get("rate")))


def mine_json(node: Any) -> MinedValues:
    """
    Harvest amounts, list prices and installment options from a JSON tree.

    Amounts nested under an "installments" object are per-installment
    values and are not collected as price candidates.
    """
    mined = MinedValues()

    def visit(key: str, value: Any, path: Tuple[str, ...]) -> None:
        lk = key.lower()
        inside_installments = any(p in INSTALLMENT_KEYS for p in path)
        if lk in AMOUNT_KEYS and not inside_installments:
            amount = positive_amount(value)
            if amount:
                mined.amounts.append(amount)
        elif lk in REGULAR_KEYS:
            regular = positive_amount(value)
            if regular:
                mined.regulars.append(regular)
        elif lk in INSTALLMENT_KEYS and isinstance(value, (dict, list)):
            mined.installments.extend(_installment_options(value))

    walk_json(node, visit)
    return mined


def mine_html(html: str, limit: int = MAX_BLOBS) -> MinedValues:
    """Mine every embedded JSON blob of a page; malformed blobs contribute nothing."""
    mined = MinedValues()
    blobs = find_json_blobs(html, limit)
    for raw in blobs:
        data = parse_permissive(raw)
        if data is None:
            continue
        mined.merge(mine_json(data))
    logger.info(
        f"⛏️  Deep mining: {len(blobs)} blob(s), {len(mined.amounts)} amount(s), "
        f"{len(mined.regulars)} regular(s), {len(mined.installments)} installment option(s)"
    )
    return mined
