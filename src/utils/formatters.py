from decimal import Decimal, ROUND_HALF_UP
from datetime import date


def format_indian_number(amount: Decimal, places: int = 0) -> str:
    """Group digits the Indian way: 12,34,567"""
    quantum = Decimal(1).scaleb(-places)
    amount = Decimal(str(amount)).quantize(quantum, rounding=ROUND_HALF_UP)
    sign = '-' if amount < 0 else ''
    whole, _, fraction = f"{abs(amount):f}".partition('.')

    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ','.join(groups + [tail])

    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_inr(amount: Decimal, symbol: str = "Rs.") -> str:
    """Format currency amount as on the offer letter"""
    return f"{symbol} {format_indian_number(amount)}"


def format_offer_date(d: date) -> str:
    """Format date as 'August 1st, 2025'"""
    day = d.day
    if 10 <= day % 100 <= 20:
        suffix = 'th'
    else:
        suffix = {1: 'st', 2: 'nd', 3: 'rd'}.get(day % 10, 'th')
    return f"{d.strftime('%B')} {day}{suffix}, {d.year}"


def parse_date(value) -> date:
    """Accept a date or an ISO 'YYYY-MM-DD' string"""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValueError(f"Invalid date {value!r}, expected YYYY-MM-DD")
