from typing import Dict, Any, Optional
import pandas as pd
from datetime import datetime

from ..core.models import CheckoutReceipt


class ReceiptReport:
    """Tabular reports over an itemized checkout receipt"""

    LINE_COLUMNS = ['product', 'quantity', 'rule_type', 'subtotal']
    UNPRICED_COLUMNS = ['product', 'quantity']

    def __init__(self, receipt: CheckoutReceipt, rule_set=None):
        self.receipt = receipt
        self.rule_set = rule_set
        self.report_timestamp = datetime.now()

    def to_dataframe(self) -> pd.DataFrame:
        """One row per line item"""
        rows = [
            {
                'product': item.product,
                'quantity': item.quantity,
                'rule_type': item.rule_type,
                'subtotal': item.subtotal
            }
            for item in self.receipt.line_items
        ]
        return pd.DataFrame(rows, columns=self.LINE_COLUMNS)

    def unpriced_dataframe(self) -> pd.DataFrame:
        """One row per product code no rule priced"""
        rows = [
            {'product': code, 'quantity': count}
            for code, count in sorted(self.receipt.unpriced.items())
        ]
        return pd.DataFrame(rows, columns=self.UNPRICED_COLUMNS)

    def savings(self) -> Optional[int]:
        """Total bundle discount on the receipt, if the rule set is known"""
        if self.rule_set is None:
            return None

        total_savings = 0
        for item in self.receipt.line_items:
            rule = self.rule_set.get(item.product)
            if rule is not None and hasattr(rule, 'savings'):
                total_savings += rule.savings({item.product: item.quantity})
        return total_savings

    def summary(self) -> Dict[str, Any]:
        """Summary of the receipt"""
        df = self.to_dataframe()

        summary = {
            'generated_at': self.report_timestamp.isoformat(),
            'total': self.receipt.total,
            'line_items': len(df),
            'priced_units': self.receipt.priced_units,
            'unpriced_units': self.receipt.unpriced_units,
            'subtotal_by_rule_type': {
                rule_type: int(subtotal)
                for rule_type, subtotal in df.groupby('rule_type')['subtotal'].sum().items()
            } if not df.empty else {}
        }

        savings = self.savings()
        if savings is not None:
            summary['savings'] = savings

        return summary
