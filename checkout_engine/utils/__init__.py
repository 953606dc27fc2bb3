"""Checkout Engine Utilities"""

from .validation import RuleValidator

__all__ = [
    'RuleValidator',
    'ReceiptReport'
]


def __getattr__(name):
    # reporting needs pandas; load it only when a report is asked for
    if name == 'ReceiptReport':
        from .reporting import ReceiptReport
        return ReceiptReport
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
