"""
Utility functions for the Report Wizard module.
"""

from .formatting import (
    WIZARD_CSS,
    format_euro,
    format_percentage,
)

from .calculations import (
    parse_amount,
    amount_or_zero,
    sum_amounts,
    calculate_net_earnings,
    calculate_earnings,
)

__all__ = [
    'WIZARD_CSS',
    'format_euro',
    'format_percentage',
    'parse_amount',
    'amount_or_zero',
    'sum_amounts',
    'calculate_net_earnings',
    'calculate_earnings',
]
