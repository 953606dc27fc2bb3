"""Pricing rules for checkout.

Each rule prices exactly one product code from the count mapping built for
a checkout. Rules are immutable and hold no state between calls, so one
instance can serve any number of checkouts.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict, is_dataclass
from typing import Dict, Any
import logging

from ..core.models import InvalidRuleError, RuleType
from ..utils.validation import RuleValidator

logger = logging.getLogger(__name__)

_validator = RuleValidator()


def _check(result):
    """Raise InvalidRuleError for a failed (valid, error) validation result."""
    valid, error = result
    if not valid:
        raise InvalidRuleError(error)


class PricingRule(ABC):
    """Attaches a price to the units of a single product code.

    Subclasses set a ``product`` attribute (the code they price) and
    implement ``price``. Because the counts carry no ordering, rules cannot
    depend on the sequence the items were scanned in.
    """

    rule_type = None

    @abstractmethod
    def price(self, counts: Dict[str, int]) -> int:
        """Price of the units this rule accounts for"""

    def quantity(self, counts: Dict[str, int]) -> int:
        """Number of units of this rule's product in the count mapping"""
        return counts.get(self.product, 0)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly form of the rule, tagged with its rule type.

        Dataclass rules serialize their fields; other rules their public
        instance attributes, which must match their constructor arguments.
        """
        if is_dataclass(self):
            fields = asdict(self)
        else:
            fields = {k: v for k, v in vars(self).items() if not k.startswith('_')}
        return {'rule_type': self.rule_type, **fields}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PricingRule':
        """Build a rule from its JSON-friendly form"""
        fields = {k: v for k, v in data.items() if k != 'rule_type'}
        try:
            return cls(**fields)
        except TypeError as e:
            raise InvalidRuleError(f"Invalid fields for {cls.__name__}: {e}") from e


@dataclass(frozen=True)
class FlatPrice(PricingRule):
    """Flat price: every unit of the product costs the same"""
    product: str
    cost: int

    rule_type = RuleType.FLAT.value

    def __post_init__(self):
        _check(_validator.validate_product_code(self.product))
        _check(_validator.validate_cost(self.cost, "cost"))

    def price(self, counts: Dict[str, int]) -> int:
        if self.product not in counts:
            return 0
        return counts[self.product] * self.cost


@dataclass(frozen=True)
class BundlePrice(PricingRule):
    """Bundle price: ``bundle_size`` units cost ``bundle_cost``.

    Units left over after the full bundles are charged ``lone_cost`` each,
    however close the leftovers come to another bundle. Equivalent to
    "X apiece, or Y when you buy N of them".
    """
    product: str
    lone_cost: int
    bundle_size: int
    bundle_cost: int

    rule_type = RuleType.BUNDLE.value

    def __post_init__(self):
        _check(_validator.validate_product_code(self.product))
        _check(_validator.validate_cost(self.lone_cost, "lone_cost"))
        _check(_validator.validate_bundle_size(self.bundle_size))
        _check(_validator.validate_cost(self.bundle_cost, "bundle_cost"))

    def price(self, counts: Dict[str, int]) -> int:
        count = counts.get(self.product, 0)
        if count == 0:
            return 0

        bundles, leftovers = divmod(count, self.bundle_size)
        return bundles * self.bundle_cost + leftovers * self.lone_cost

    def savings(self, counts: Dict[str, int]) -> int:
        """Discount against buying every unit at the lone cost"""
        return self.quantity(counts) * self.lone_cost - self.price(counts)


# Rule classes by their JSON rule type
RULE_TYPES = {
    RuleType.FLAT.value: FlatPrice,
    RuleType.BUNDLE.value: BundlePrice
}


def register_rule_type(name: str, rule_class: type):
    """Register a custom rule class so rule files can refer to it by name."""
    if not (isinstance(rule_class, type) and issubclass(rule_class, PricingRule)):
        raise InvalidRuleError(f"{rule_class!r} is not a PricingRule subclass")
    if name in RULE_TYPES and RULE_TYPES[name] is not rule_class:
        raise InvalidRuleError(f"Rule type {name!r} is already registered to {RULE_TYPES[name].__name__}")

    RULE_TYPES[name] = rule_class
    logger.info(f"Registered rule type: {name} ({rule_class.__name__})")


def rule_from_dict(data: Dict[str, Any]) -> PricingRule:
    """Build a rule of any registered type from its JSON-friendly form."""
    if not isinstance(data, dict):
        raise InvalidRuleError(f"Rule definition must be an object, got {type(data).__name__}")

    rule_type = data.get('rule_type')
    if rule_type not in RULE_TYPES:
        raise InvalidRuleError(f"Unknown rule type: {rule_type!r}")

    return RULE_TYPES[rule_type].from_dict(data)
