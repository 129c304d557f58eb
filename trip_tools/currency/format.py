from .resolver import currency_metadata


def format_price(amount: float, currency: str) -> str:
    meta = currency_metadata(currency)
    return f"{meta.symbol}{amount:,.{meta.decimal_places}f}"


def format_price_compact(amount: float, currency: str) -> str:
    """Short price for cards, e.g. ``$1.5K`` or ``¥2M``."""
    meta = currency_metadata(currency)
    suffix = ""
    display = amount
    if amount >= 1_000_000:
        display, suffix = amount / 1_000_000, "M"
    elif amount >= 1_000:
        display, suffix = amount / 1_000, "K"

    if suffix:
        text = f"{display:.1f}"
        if text.endswith(".0"):
            text = text[:-2]
    else:
        text = f"{display:,.{meta.decimal_places}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
    return f"{meta.symbol}{text}{suffix}"


def format_price_range(min_amount: float, max_amount: float, currency: str) -> str:
    meta = currency_metadata(currency)
    return f"{meta.symbol}{min_amount:,.0f} - {meta.symbol}{max_amount:,.0f}"
