"""
Calculation utilities for the Report Wizard.

Sums treatments and costs, applies the contract percentage and produces
the EarningsSummary shared by every renderer. Values are computed from
the form state on every call; nothing is cached.
"""

import math
import re
from typing import Iterable, Optional

from report_wizard import EarningsSummary, ReportFormState

# Plain decimal as typed in a number field; comma accepted as separator
DECIMAL_PATTERN = re.compile(r"^[+-]?(?:\d+(?:[.,]\d*)?|[.,]\d+)$")


def parse_amount(raw) -> Optional[float]:
    """
    Parse a user-typed decimal string.

    Args:
        raw: Value from a form field (str, int, float or None)

    Returns:
        The parsed float, or None if the value is empty or not a number
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else None

    text = str(raw).strip()
    if not text or not DECIMAL_PATTERN.match(text):
        return None
    value = float(text.replace(",", "."))
    # Very long digit strings overflow to inf
    return value if math.isfinite(value) else None


def amount_or_zero(raw) -> float:
    """Parsed amount, with empty or non-numeric values counted as 0."""
    value = parse_amount(raw)
    return value if value is not None else 0.0


def sum_amounts(values: Iterable) -> float:
    """Sum of parsed amounts; empty or non-numeric entries count as 0."""
    return sum((amount_or_zero(v) for v in values), 0.0)


def calculate_net_earnings(gross_total: float, cost_total: float, percentage: float) -> float:
    """netEarnings = gross x (percentage / 100) - costs"""
    return gross_total * (percentage / 100) - cost_total


def calculate_earnings(state: ReportFormState) -> EarningsSummary:
    """
    Compute gross total, cost total and net earnings for a form state.

    A non-numeric contract percentage is treated as 0 here; the schema
    keeps such a state from being submitted.
    """
    gross_total = sum_amounts(t.value for t in state.treatments)
    cost_total = sum_amounts(c.value for c in state.costs)
    percentage = amount_or_zero(state.contract_percentage)

    return EarningsSummary(
        gross_total=gross_total,
        cost_total=cost_total,
        net_earnings=calculate_net_earnings(gross_total, cost_total, percentage),
        percentage=percentage,
    )
