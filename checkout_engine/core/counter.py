"""Item counting for checkout.

Turns the raw sequence of product codes into a count mapping. Every
character is counted, registered with a rule or not.
"""

from collections import defaultdict
from typing import Dict, Iterable


def count_items(items: Iterable[str]) -> Dict[str, int]:
    """Count occurrences of each product code in the item sequence"""
    counts = defaultdict(int)
    for code in items:
        counts[code] += 1
    return dict(counts)
