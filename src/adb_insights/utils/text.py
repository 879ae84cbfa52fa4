import re


def slugify(text: str, separator: str = "-") -> str:
    """Lower-case ``text`` and collapse whitespace runs into ``separator``."""
    return re.sub(r"\s+", separator, text.strip().lower())


def format_currency(amount: float) -> str:
    """Format a dollar amount, e.g. ``$45,231.89`` or ``-$12.00``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(value: float) -> str:
    """Format a signed percentage with one decimal, e.g. ``+20.1%``."""
    return f"{'+' if value >= 0 else ''}{value:.1f}%"
