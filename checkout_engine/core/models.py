from dataclasses import dataclass, field
from typing import Dict, List
from enum import Enum


class InvalidArgument(ValueError):
    """Raised when checkout receives a missing or malformed items argument"""


class InvalidRuleError(InvalidArgument):
    """Raised when a pricing rule or rule set fails validation"""


class RuleType(Enum):
    FLAT = "flat"
    BUNDLE = "bundle"


@dataclass(frozen=True)
class LineItem:
    """Price contribution of one rule for one product code"""
    product: str
    quantity: int
    rule_type: str
    subtotal: int

    def __post_init__(self):
        if self.quantity < 0:
            raise ValueError(f"Quantity must be non-negative, got {self.quantity}")


@dataclass
class CheckoutReceipt:
    """Itemized result of a checkout"""
    line_items: List[LineItem] = field(default_factory=list)
    unpriced: Dict[str, int] = field(default_factory=dict)

    @property
    def total(self) -> int:
        """Sum of all line item subtotals"""
        return sum(item.subtotal for item in self.line_items)

    @property
    def priced_units(self) -> int:
        return sum(item.quantity for item in self.line_items)

    @property
    def unpriced_units(self) -> int:
        return sum(self.unpriced.values())

    def get_line(self, product: str):
        """Return the line item for a product code, if any rule priced it"""
        for item in self.line_items:
            if item.product == product:
                return item
        return None
