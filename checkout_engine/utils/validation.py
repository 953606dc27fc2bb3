from typing import Dict, List, Any, Optional, Tuple
import logging

from .. import RULE_FIELDS


logger = logging.getLogger(__name__)


class RuleValidator:
    """Validation of pricing rule fields and rule definitions"""

    COST_LIMITS = {
        'min': 0
    }

    BUNDLE_SIZE_LIMITS = {
        'min': 1
    }

    VALID_RULE_TYPES = list(RULE_FIELDS.keys())

    def validate_product_code(self, product: Any) -> Tuple[bool, Optional[str]]:
        """Validate product code is a single character"""
        if product is None:
            return False, "Product code is missing"

        if not isinstance(product, str):
            return False, f"Product code must be a string, got {type(product).__name__}"

        if len(product) != 1:
            return False, f"Product code must be a single character, got {product!r}"

        return True, None

    def validate_cost(self, cost: Any, label: str = "cost") -> Tuple[bool, Optional[str]]:
        """Validate a cost is a non-negative integer"""
        if cost is None:
            return False, f"{label} is missing"

        # bool is an int subclass but never a price
        if isinstance(cost, bool) or not isinstance(cost, int):
            return False, f"{label} must be an integer, got {cost!r}"

        if cost < self.COST_LIMITS['min']:
            return False, f"{label} {cost} below minimum {self.COST_LIMITS['min']}"

        return True, None

    def validate_bundle_size(self, bundle_size: Any) -> Tuple[bool, Optional[str]]:
        """Validate bundle size is a positive integer"""
        if isinstance(bundle_size, bool) or not isinstance(bundle_size, int):
            return False, f"bundle_size must be an integer, got {bundle_size!r}"

        if bundle_size < self.BUNDLE_SIZE_LIMITS['min']:
            return False, f"bundle_size must be positive, got {bundle_size}"

        return True, None

    def validate_rule_definition(self, definition: Dict[str, Any],
                                 known_types: Optional[List[str]] = None) -> Tuple[bool, List[str]]:
        """Validate a rule definition as found in a price list or rule file"""
        errors = []

        if not isinstance(definition, dict):
            return False, [f"Rule definition must be an object, got {type(definition).__name__}"]

        known_types = known_types or self.VALID_RULE_TYPES
        rule_type = definition.get('rule_type')
        if rule_type not in known_types:
            errors.append(f"Unknown rule type: {rule_type!r}")
            return False, errors

        # Custom rule types validate their own fields
        required_fields = RULE_FIELDS.get(rule_type, ())
        for field in required_fields:
            if field not in definition or definition[field] is None:
                errors.append(f"Required field '{field}' is missing")

        if errors:
            return False, errors

        if 'product' in required_fields:
            valid, error = self.validate_product_code(definition['product'])
            if not valid:
                errors.append(error)

        for field in required_fields:
            if field.endswith('cost'):
                valid, error = self.validate_cost(definition[field], field)
                if not valid:
                    errors.append(error)

        if 'bundle_size' in required_fields:
            valid, error = self.validate_bundle_size(definition['bundle_size'])
            if not valid:
                errors.append(error)

        if errors:
            logger.debug(f"Rule definition {definition} failed validation: {errors}")

        return len(errors) == 0, errors
