"""Supermarket Checkout

Prices a sequence of single-character product codes against a set of
pricing rules. Codes no rule is registered for are free and never an error.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Iterable, Union
import logging

from . import DEFAULT_PRICE_LIST
from .core.counter import count_items
from .core.models import InvalidArgument, LineItem, CheckoutReceipt
from .rules.pricing_rules import PricingRule
from .rules.rule_set import RuleSet

logger = logging.getLogger(__name__)


class Market(ABC):
    """Anything that can total up a sequence of items"""

    @abstractmethod
    def checkout(self, items: str) -> int:
        """Total price of the items, in whole currency units"""


class Supermarket(Market):
    """Checkout priced by an ordered set of pricing rules"""

    def __init__(self,
                 price_rules: Optional[Iterable[PricingRule]] = None,
                 config: Optional[Dict] = None):
        """Initialize with pricing rules, or the configured price list when none are given"""
        self.config = config or {}

        if price_rules is None:
            price_list = DEFAULT_PRICE_LIST.copy()
            if 'price_list' in self.config:
                price_list = self.config['price_list']
            self.price_rules = RuleSet.from_price_list(price_list)
        elif isinstance(price_rules, RuleSet):
            self.price_rules = price_rules
        else:
            self.price_rules = RuleSet(price_rules)

        logger.info(f"Supermarket initialized with {len(self.price_rules)} pricing rules")

    @classmethod
    def from_rules_file(cls, rules_file: Union[str, Path],
                        config: Optional[Dict] = None) -> 'Supermarket':
        """Create a supermarket priced by the rules in a JSON rule file"""
        return cls(RuleSet.load(rules_file), config=config)

    def checkout(self, items: str) -> int:
        """Total price of the items.

        ``items`` is a string of product codes; the empty string costs 0.
        Raises InvalidArgument when ``items`` is None or not a string.
        """
        counts = self._count(items)

        cost = 0
        for rule in self.price_rules:
            subtotal = rule.price(counts)
            logger.debug(f"{rule.rule_type} rule for {rule.product!r}: {subtotal}")
            cost += subtotal

        return cost

    def itemize(self, items: str) -> CheckoutReceipt:
        """Itemized receipt for the items: one line per rule that priced something"""
        counts = self._count(items)
        receipt = CheckoutReceipt()

        for rule in self.price_rules:
            quantity = rule.quantity(counts)
            subtotal = rule.price(counts)
            if quantity == 0 and subtotal == 0:
                continue
            receipt.line_items.append(LineItem(
                product=rule.product,
                quantity=quantity,
                rule_type=rule.rule_type,
                subtotal=subtotal
            ))

        registered = set(self.price_rules.products)
        receipt.unpriced = {
            code: count for code, count in counts.items()
            if code not in registered
        }
        if receipt.unpriced:
            logger.warning(f"No pricing rule for {sorted(receipt.unpriced)}, charged 0")

        return receipt

    def _count(self, items: str) -> Dict[str, int]:
        """Validate the items argument and count it"""
        if items is None:
            raise InvalidArgument("items argument to checkout must not be None.")
        if not isinstance(items, str):
            raise InvalidArgument(f"items argument to checkout must be a string, got {type(items).__name__}.")
        return count_items(items)
