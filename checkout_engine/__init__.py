"""Supermarket Checkout Engine - Core Module"""

__version__ = "1.0.0"

# Default price list configuration
DEFAULT_PRICE_LIST = {
    'A': {
        'rule_type': 'flat',
        'cost': 20
    },
    'B': {
        'rule_type': 'bundle',
        'lone_cost': 50,
        'bundle_size': 5,  # 5 for the price of 3
        'bundle_cost': 150
    },
    'C': {
        'rule_type': 'flat',
        'cost': 30
    }
}

# Validate every product code is a single character
assert all(len(code) == 1 for code in DEFAULT_PRICE_LIST), "Product codes must be single characters"

# Fields each rule type needs in a price list or rule file
RULE_FIELDS = {
    'flat': ('product', 'cost'),
    'bundle': ('product', 'lone_cost', 'bundle_size', 'bundle_cost')
}
