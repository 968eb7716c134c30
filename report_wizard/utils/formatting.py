"""
Formatting utilities and CSS for Report Wizard components.
"""

from constants import CURRENCY_SUFFIX, DECIMAL_PLACES


def format_euro(value: float) -> str:
    """
    Format a number as euros with two decimals and a trailing symbol.

    Args:
        value: The numeric value to format

    Returns:
        Formatted string like "100.00€" or "-12.50€"
    """
    if value is None:
        return "—"

    rounded = round(value, DECIMAL_PLACES)
    if rounded == 0:
        rounded = 0.0  # avoid "-0.00€"
    return f"{rounded:.{DECIMAL_PLACES}f}{CURRENCY_SUFFIX}"


def format_percentage(value: float) -> str:
    """Format a contract percentage without trailing zeros (50 -> "50%")."""
    if value is None:
        return "—"
    return f"{value:g}%"


WIZARD_CSS = """
<style>
    .summary-card {
        border: 2px solid #000000;
        background: #ffffff;
        box-shadow: 4px 4px 0 0 #000000;
        padding: 16px;
        margin: 16px 0;
        display: flex;
        justify-content: space-between;
        align-items: center;
    }
    .summary-card span {
        font-weight: 700;
        font-size: 15px;
    }
    .summary-card strong { font-size: 1.4em; }
    .summary-card.net-earnings { background: #dcfce7; }
</style>
"""
