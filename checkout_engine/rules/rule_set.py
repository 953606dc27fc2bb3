"""Ordered, immutable collection of pricing rules."""

from typing import Dict, List, Optional, Any, Iterable, Iterator, Union
import logging
import json
from pathlib import Path

from .pricing_rules import PricingRule, rule_from_dict, RULE_TYPES
from ..core.models import InvalidRuleError
from ..utils.validation import RuleValidator

logger = logging.getLogger(__name__)


class RuleSet:
    """Pricing rules applied together at checkout.

    At most one rule may price a given product code; two rules for the same
    code would charge its units twice, so a duplicate is rejected here.
    """

    def __init__(self, rules: Iterable[PricingRule] = ()):
        rules = tuple(rules)
        seen: Dict[str, PricingRule] = {}

        for rule in rules:
            if not isinstance(rule, PricingRule):
                raise InvalidRuleError(f"{rule!r} is not a PricingRule")

            product = getattr(rule, 'product', None)
            if product is None:
                raise InvalidRuleError(f"{rule!r} has no product code; every rule prices exactly one product")
            if product in seen:
                raise InvalidRuleError(
                    f"Duplicate rule for product {product!r}: {seen[product]!r} and {rule!r}"
                )
            seen[product] = rule

        self._rules = rules
        self._by_product = seen

        logger.debug(f"Rule set created with {len(self._rules)} rules")

    def __iter__(self) -> Iterator[PricingRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __getitem__(self, index: int) -> PricingRule:
        return self._rules[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, RuleSet):
            return NotImplemented
        return self._rules == other._rules

    def __hash__(self) -> int:
        return hash(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({list(self._rules)!r})"

    @property
    def products(self) -> List[str]:
        """Product codes covered by the rules, in rule order"""
        return list(self._by_product.keys())

    def get(self, product: str) -> Optional[PricingRule]:
        """Rule responsible for a product code, or None if unregistered"""
        return self._by_product.get(product)

    def to_dicts(self) -> List[Dict[str, Any]]:
        """JSON-friendly form of every rule, in order"""
        return [rule.to_dict() for rule in self._rules]

    @classmethod
    def from_dicts(cls, rules_data: List[Dict[str, Any]]) -> 'RuleSet':
        """Build a rule set from JSON-friendly rule definitions."""
        if not isinstance(rules_data, list):
            raise InvalidRuleError(f"Rule definitions must be a list, got {type(rules_data).__name__}")

        validator = RuleValidator()
        rules = []
        for rule_dict in rules_data:
            valid, errors = validator.validate_rule_definition(rule_dict, list(RULE_TYPES.keys()))
            if not valid:
                raise InvalidRuleError("; ".join(errors))
            rules.append(rule_from_dict(rule_dict))

        return cls(rules)

    @classmethod
    def from_price_list(cls, price_list: Dict[str, Dict[str, Any]]) -> 'RuleSet':
        """Build a rule set from a price list keyed by product code.

        Entries have the shape of ``DEFAULT_PRICE_LIST``; the product code
        comes from the key.
        """
        if not isinstance(price_list, dict):
            raise InvalidRuleError(f"Price list must be an object, got {type(price_list).__name__}")

        rules_data = []
        for product, entry in price_list.items():
            if not isinstance(entry, dict):
                raise InvalidRuleError(
                    f"Price list entry for {product!r} must be an object, got {type(entry).__name__}"
                )
            rules_data.append({**entry, 'product': product})

        return cls.from_dicts(rules_data)

    def save(self, rules_file: Union[str, Path]):
        """Save rules to a JSON file."""
        rules_file = Path(rules_file)
        with open(rules_file, 'w') as f:
            json.dump(self.to_dicts(), f, indent=2)

        logger.info(f"Saved {len(self._rules)} pricing rules to {rules_file}")

    @classmethod
    def load(cls, rules_file: Union[str, Path]) -> 'RuleSet':
        """Load rules from a JSON file."""
        rules_file = Path(rules_file)
        with open(rules_file, 'r') as f:
            try:
                rules_data = json.load(f)
            except json.JSONDecodeError as e:
                raise InvalidRuleError(f"Rule file {rules_file} is not valid JSON: {e}") from e

        rule_set = cls.from_dicts(rules_data)
        logger.info(f"Loaded {len(rule_set)} pricing rules from {rules_file}")
        return rule_set
