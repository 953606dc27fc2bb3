"""Builder pattern for creating pricing rules dynamically."""

from typing import Dict, Optional, Any
import logging

from .. import DEFAULT_PRICE_LIST
from .pricing_rules import PricingRule, FlatPrice, BundlePrice
from .rule_set import RuleSet
from ..core.models import InvalidRuleError, RuleType

logger = logging.getLogger(__name__)


class RuleBuilder:
    """Fluent builder for creating pricing rules."""

    def __init__(self):
        self._reset()

    def _reset(self):
        """Reset builder state."""
        self._product: Optional[str] = None
        self._rule_type: Optional[RuleType] = None
        self._parameters: Dict[str, Any] = {}

    def for_product(self, product: str) -> 'RuleBuilder':
        """Set the product code the rule prices."""
        self._product = product
        return self

    def flat(self, cost: int) -> 'RuleBuilder':
        """Price every unit at ``cost``."""
        self._rule_type = RuleType.FLAT
        self._parameters = {'cost': cost}
        return self

    def bundle(self, lone_cost: int, bundle_size: int, bundle_cost: int) -> 'RuleBuilder':
        """Price ``bundle_size`` units at ``bundle_cost``, leftovers at ``lone_cost``."""
        self._rule_type = RuleType.BUNDLE
        self._parameters = {
            'lone_cost': lone_cost,
            'bundle_size': bundle_size,
            'bundle_cost': bundle_cost
        }
        return self

    def build(self) -> PricingRule:
        """Build the pricing rule."""
        # Validate required fields
        if self._product is None:
            raise InvalidRuleError("Product code is required")
        if self._rule_type is None:
            raise InvalidRuleError("Pricing (flat or bundle) is required")

        try:
            if self._rule_type == RuleType.FLAT:
                rule = FlatPrice(product=self._product, **self._parameters)
            else:
                rule = BundlePrice(product=self._product, **self._parameters)
        finally:
            # Reset builder
            self._reset()

        logger.debug(f"Built rule: {rule!r}")
        return rule


class RuleTemplates:
    """Pre-built rule templates for common pricing schemes."""

    @staticmethod
    def flat_price(product: str, cost: int) -> PricingRule:
        """Create flat per-unit price rule."""
        return (RuleBuilder()
                .for_product(product)
                .flat(cost)
                .build())

    @staticmethod
    def bundle_price(product: str, lone_cost: int, bundle_size: int,
                     bundle_cost: int) -> PricingRule:
        """Create bundle discount rule."""
        return (RuleBuilder()
                .for_product(product)
                .bundle(lone_cost, bundle_size, bundle_cost)
                .build())

    @staticmethod
    def n_for_price_of_m(product: str, unit_cost: int, n: int, m: int) -> PricingRule:
        """Create "n for the price of m" rule, e.g. 5 for the price of 3."""
        if m > n:
            raise InvalidRuleError(f"Cannot sell {n} for the price of {m}")
        return RuleTemplates.bundle_price(product, unit_cost, n, unit_cost * m)

    @staticmethod
    def default_rules() -> RuleSet:
        """Create the rule set for the default price list."""
        return RuleSet.from_price_list(DEFAULT_PRICE_LIST)
