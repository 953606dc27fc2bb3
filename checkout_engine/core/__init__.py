"""Core data models and counting."""

from .models import InvalidArgument, InvalidRuleError, RuleType, LineItem, CheckoutReceipt
from .counter import count_items

__all__ = [
    'InvalidArgument',
    'InvalidRuleError',
    'RuleType',
    'LineItem',
    'CheckoutReceipt',
    'count_items'
]
