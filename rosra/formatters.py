"""Number formatting helpers for analysis messages and CLI output."""


def format_number(value: float) -> str:
    """Format a magnitude with thousands separators, rounded to a whole number.

    Args:
        value: Amount (sign is dropped)

    Returns:
        Formatted string (e.g., -1234567.8 -> "1,234,568")
    """
    return f"{abs(round(value)):,}"


def format_currency(value: float, currency_symbol: str = "KSh") -> str:
    """Format an amount with a currency symbol (e.g., "KSh 1,234,568")."""
    return f"{currency_symbol} {format_number(value)}"


def format_rounded_currency(value: float, currency_symbol: str = "KSh") -> str:
    """Format an amount abbreviated to K/M/B (e.g., "KSh 4.7M").

    Args:
        value: Amount (sign is dropped)
        currency_symbol: Currency symbol prefix

    Returns:
        Abbreviated currency string
    """
    amount = abs(value)
    if amount >= 1_000_000_000:
        return f"{currency_symbol} {amount / 1_000_000_000:.1f}B"
    if amount >= 1_000_000:
        return f"{currency_symbol} {amount / 1_000_000:.1f}M"
    if amount >= 1_000:
        return f"{currency_symbol} {amount / 1_000:.1f}K"
    return f"{currency_symbol} {amount:.0f}"


def format_percentage(value: float) -> str:
    """Format a percentage value (already x100) with two decimals (e.g., "63.49%")."""
    return f"{value:.2f}%"
