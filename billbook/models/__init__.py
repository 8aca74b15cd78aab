from decimal import Decimal, InvalidOperation


def format_inr(amount: Decimal) -> str:
    """Format an amount with Indian digit grouping: 1234567.5 -> 'Rs. 12,34,567.50'"""
    sign = "-" if amount < 0 else ""
    whole, fraction = f"{abs(amount):.2f}".split(".")
    if len(whole) > 3:
        head, tail = whole[:-3], whole[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        whole = ",".join(groups) + "," + tail
    return f"{sign}Rs. {whole}.{fraction}"


def parse_amount(text: str) -> Decimal | None:
    """Parse a rupee amount typed by a user. Returns None on invalid input.

    Accepts formats like '250', '250.50', '1,250.50', 'Rs. 1,250'.
    """
    text = text.strip()
    for prefix in ("Rs.", "Rs", "₹"):
        if text.startswith(prefix):
            text = text[len(prefix):].strip()
            break
    text = text.replace(",", "")
    if not text:
        return None
    try:
        value = Decimal(text)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value
