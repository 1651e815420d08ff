"""Display formatting for Brazilian reais and pt-BR month names."""

MONTH_ABBREVIATIONS = (
    "Jan", "Fev", "Mar", "Abr", "Mai", "Jun",
    "Jul", "Ago", "Set", "Out", "Nov", "Dez",
)


def format_currency(value: float) -> str:
    """
    Format a value as BRL, e.g. 1234.5 -> 'R$ 1.234,50'.

    Negative values keep their sign in front: '-R$ 80,00'.
    """
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}"
    # swap separators: 1,234.50 -> 1.234,50
    grouped = grouped.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {grouped}"


def month_label(month: int) -> str:
    """Short pt-BR month name for a 1-based month number."""
    if not 1 <= month <= 12:
        raise ValueError(f"Month out of range: {month}")
    return MONTH_ABBREVIATIONS[month - 1]


def format_percentage(value: float) -> str:
    """Whole-number percentage, e.g. 120.4 -> '120%'."""
    return f"{value:.0f}%"
