from tabsplit.schemas.breakdown import SharedReceipt

CURRENCY_SYMBOLS = {
    "EUR": "€", "USD": "$", "GBP": "£", "JPY": "¥", "AUD": "A$", "CAD": "C$",
    "CHF": "Fr", "CNY": "¥", "INR": "₹", "KRW": "₩", "BRL": "R$", "MXN": "$",
}

SPLIT_WORDS = {
    2: "two", 3: "three", 4: "four", 5: "five", 6: "six", 7: "seven", 8: "eight",
}

RULE = "─" * 14


def format_currency(code: str | None) -> str:
    """Map an ISO code to its symbol; unknown codes are shown as given."""
    if not code:
        return "$"
    return CURRENCY_SYMBOLS.get(code.upper(), code)


def format_amount(value: float) -> str:
    # Rounding only ever happens here, at display time.
    return f"{value:.2f}"


def split_label(count: int) -> str:
    return f"split between {SPLIT_WORDS.get(count, count)}"


def build_share_message(data: SharedReceipt) -> str:
    """
    Plain-text summary sent alongside a share link.

    Example:
        Hey Alex! Here's your share at Luigi's:

          Pizza (split between two): € 6.00
          ...
          TOTAL: € 14.40
    """
    symbol = format_currency(data.currency)
    restaurant_line = f" at {data.restaurant}" if data.restaurant else ""

    item_lines = []
    for item in data.items:
        label = f" ({split_label(item.split_count)})" if item.split_count > 1 else ""
        item_lines.append(f"  {item.name}{label}: {symbol} {format_amount(item.share)}")

    lines = [
        f"Hey {data.person}! Here's your share{restaurant_line}:",
        "",
        *item_lines,
        "",
        f"  Subtotal: {symbol} {format_amount(data.subtotal)}",
        f"  Tax: {symbol} {format_amount(data.tax)}",
        f"  Tip: {symbol} {format_amount(data.tip)}",
        f"  {RULE}",
        f"  TOTAL: {symbol} {format_amount(data.total)}",
    ]
    return "\n".join(lines)
