"""Currency formatting for human-readable analytics messages"""

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
}


def format_currency(amount: float, currency: str = "USD") -> str:
    """Format an amount like '$1,234.50'; unknown currencies fall back to the ISO code"""
    symbol = CURRENCY_SYMBOLS.get(currency, f"{currency} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"
