"""Tests for pricing rules, the rule builder and rule templates"""

from dataclasses import dataclass

import pytest

from checkout_engine.core.models import InvalidRuleError
from checkout_engine.rules.pricing_rules import (
    PricingRule, FlatPrice, BundlePrice, RULE_TYPES, register_rule_type, rule_from_dict
)
from checkout_engine.rules.rule_builder import RuleBuilder, RuleTemplates
from checkout_engine.rules.rule_set import RuleSet
from checkout_engine.supermarket import Supermarket


@dataclass(frozen=True)
class EveryNthFree(PricingRule):
    """Every ``nth`` unit of the product is free"""
    product: str
    cost: int
    nth: int

    rule_type = "every_nth_free"

    def price(self, counts):
        count = counts.get(self.product, 0)
        return (count - count // self.nth) * self.cost


class PerUnitFee(PricingRule):
    """Plain (non-dataclass) rule charging a fee per unit"""

    rule_type = "per_unit_fee"

    def __init__(self, product, fee):
        self.product = product
        self.fee = fee

    def price(self, counts):
        return counts.get(self.product, 0) * self.fee


class ProductlessRule(PricingRule):
    """Rule that never says which product it prices"""

    rule_type = "productless"

    def price(self, counts):
        return sum(counts.values())


@pytest.fixture
def rule_types():
    """Restore the rule type registry after the test registers into it"""
    registered = dict(RULE_TYPES)
    yield RULE_TYPES
    RULE_TYPES.clear()
    RULE_TYPES.update(registered)


def create_test_counts():
    return {'A': 3, 'B': 12, ' ': 2}


def test_flat_price():
    rule = FlatPrice('A', 20)
    assert rule.price(create_test_counts()) == 60
    assert rule.price({}) == 0
    assert rule.price({'A': 0}) == 0


def test_bundle_price():
    rule = BundlePrice('B', 50, 5, 150)
    # two bundles of 5 plus two leftovers
    assert rule.price(create_test_counts()) == 400
    assert rule.price({'B': 4}) == 200
    assert rule.price({'B': 0}) == 0
    assert rule.price({}) == 0


def test_bundle_leftovers_are_never_prorated():
    rule = BundlePrice('B', 50, 5, 150)
    assert rule.price({'B': 9}) == 150 + 4 * 50


def test_bundle_savings():
    rule = BundlePrice('B', 50, 5, 150)
    assert rule.savings({'B': 12}) == 12 * 50 - 400
    assert rule.savings({'B': 3}) == 0


@pytest.mark.parametrize("build", [
    lambda: FlatPrice('AB', 20),
    lambda: FlatPrice('', 20),
    lambda: FlatPrice(None, 20),
    lambda: FlatPrice('A', -1),
    lambda: FlatPrice('A', 2.5),
    lambda: FlatPrice('A', True),
    lambda: BundlePrice('B', 50, 0, 150),
    lambda: BundlePrice('B', 50, -5, 150),
    lambda: BundlePrice('B', -50, 5, 150),
    lambda: BundlePrice('B', 50, 5, -150),
])
def test_invalid_rules_fail_at_construction(build):
    with pytest.raises(InvalidRuleError):
        build()


def test_rules_are_immutable():
    rule = FlatPrice('A', 20)
    with pytest.raises(AttributeError):
        rule.cost = 0


def test_rule_to_dict():
    assert FlatPrice('A', 20).to_dict() == {'rule_type': 'flat', 'product': 'A', 'cost': 20}
    assert BundlePrice('B', 50, 5, 150).to_dict() == {
        'rule_type': 'bundle',
        'product': 'B',
        'lone_cost': 50,
        'bundle_size': 5,
        'bundle_cost': 150
    }


def test_rule_from_dict():
    rule = rule_from_dict({'rule_type': 'bundle', 'product': 'B', 'lone_cost': 50,
                           'bundle_size': 5, 'bundle_cost': 150})
    assert rule == BundlePrice('B', 50, 5, 150)


@pytest.mark.parametrize("data", [
    {'rule_type': 'percent_off', 'product': 'A'},
    {'product': 'A', 'cost': 20},
    {'rule_type': 'flat', 'product': 'A', 'cost': 20, 'colour': 'red'},
    ['flat', 'A', 20],
])
def test_rule_from_dict_rejects_bad_definitions(data):
    with pytest.raises(InvalidRuleError):
        rule_from_dict(data)


def test_rule_builder():
    flat = RuleBuilder().for_product('A').flat(20).build()
    bundle = RuleBuilder().for_product('B').bundle(50, 5, 150).build()
    assert flat == FlatPrice('A', 20)
    assert bundle == BundlePrice('B', 50, 5, 150)


def test_rule_builder_requires_product_and_pricing():
    with pytest.raises(InvalidRuleError):
        RuleBuilder().flat(20).build()
    with pytest.raises(InvalidRuleError):
        RuleBuilder().for_product('A').build()


def test_rule_builder_resets_after_build():
    builder = RuleBuilder()
    builder.for_product('A').flat(20).build()
    with pytest.raises(InvalidRuleError):
        builder.build()


def test_rule_builder_resets_after_failed_build():
    builder = RuleBuilder()
    with pytest.raises(InvalidRuleError):
        builder.for_product('A').bundle(50, 0, 150).build()
    assert builder.for_product('C').flat(30).build() == FlatPrice('C', 30)


def test_n_for_price_of_m_template():
    rule = RuleTemplates.n_for_price_of_m('B', 50, 5, 3)
    assert rule == BundlePrice('B', 50, 5, 150)

    with pytest.raises(InvalidRuleError):
        RuleTemplates.n_for_price_of_m('B', 50, 3, 5)


def test_default_rules_template():
    rules = RuleTemplates.default_rules()
    assert rules.products == ['A', 'B', 'C']
    assert rules.get('A') == FlatPrice('A', 20)
    assert rules.get('B') == BundlePrice('B', 50, 5, 150)
    assert rules.get('C') == FlatPrice('C', 30)


def test_custom_rule_needs_no_checkout_changes():
    supermarket = Supermarket([FlatPrice('A', 20), EveryNthFree('D', 10, 3)])
    assert supermarket.checkout("DDDDDDA") == 40 + 20


def test_registered_custom_rule_loads_from_dicts(rule_types):
    register_rule_type(EveryNthFree.rule_type, EveryNthFree)
    rules = RuleSet.from_dicts([
        {'rule_type': 'every_nth_free', 'product': 'D', 'cost': 10, 'nth': 3}
    ])
    assert rules.get('D') == EveryNthFree('D', 10, 3)


def test_registration_does_not_outlive_test():
    assert EveryNthFree.rule_type not in RULE_TYPES
    assert PerUnitFee.rule_type not in RULE_TYPES


def test_register_rule_type_rejects_conflicts(rule_types):
    with pytest.raises(InvalidRuleError):
        register_rule_type('flat', EveryNthFree)
    with pytest.raises(InvalidRuleError):
        register_rule_type('not_a_rule', dict)


def test_plain_custom_rule_to_dict():
    assert PerUnitFee('D', 7).to_dict() == {'rule_type': 'per_unit_fee', 'product': 'D', 'fee': 7}


def test_plain_custom_rule_saves_and_loads(tmp_path, rule_types):
    register_rule_type(PerUnitFee.rule_type, PerUnitFee)
    rules_file = tmp_path / "pricing_rules.json"
    RuleSet([FlatPrice('A', 1), PerUnitFee('D', 7)]).save(rules_file)

    loaded = RuleSet.load(rules_file)
    assert loaded.get('A') == FlatPrice('A', 1)
    assert loaded.get('D').fee == 7
    assert Supermarket(loaded).checkout("ADD") == 15


def test_rule_without_product_is_rejected():
    with pytest.raises(InvalidRuleError, match="no product code"):
        RuleSet([FlatPrice('A', 20), ProductlessRule()])
    with pytest.raises(InvalidRuleError):
        Supermarket([ProductlessRule()])
