"""Pricing rules engine for checkout."""

from .pricing_rules import PricingRule, FlatPrice, BundlePrice, register_rule_type, rule_from_dict
from .rule_set import RuleSet
from .rule_builder import RuleBuilder, RuleTemplates

__all__ = [
    'PricingRule',
    'FlatPrice',
    'BundlePrice',
    'register_rule_type',
    'rule_from_dict',
    'RuleSet',
    'RuleBuilder',
    'RuleTemplates'
]
