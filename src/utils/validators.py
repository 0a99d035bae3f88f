from decimal import Decimal, InvalidOperation

REQUIRED_OFFER_FIELDS = ('candidate_id', 'job_id', 'application_id', 'designation',
                         'joining_date', 'ctc', 'hr_name')

# Money columns are Numeric(12, 2)
MAX_AMOUNT = Decimal("10000000000")


def parse_amount(value, field_name: str) -> Decimal:
    """Parse a user-supplied money value, rejecting non-numeric and non-finite input"""
    if value is None or isinstance(value, bool) or str(value).strip() == '':
        raise ValueError(f"{field_name} is required")
    try:
        amount = Decimal(str(value).replace(',', '').strip())
    except InvalidOperation:
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    if not amount.is_finite():
        raise ValueError(f"{field_name} must be a finite number")
    if abs(amount) >= MAX_AMOUNT:
        raise ValueError(f"{field_name} must be less than 10,000,000,000")
    return amount


def validate_ctc(value) -> Decimal:
    """CTC must be a positive finite amount"""
    ctc = parse_amount(value, 'ctc')
    if ctc <= 0:
        raise ValueError("ctc must be greater than zero")
    return ctc


def validate_tds(value) -> Decimal:
    """TDS defaults to zero and must not be negative"""
    if value is None or value == '':
        return Decimal('0')
    tds = parse_amount(value, 'tds')
    if tds < 0:
        raise ValueError("tds cannot be negative")
    return tds


def missing_fields(data: dict, required=REQUIRED_OFFER_FIELDS) -> list:
    """Names of required fields that are absent or blank"""
    return [name for name in required if data.get(name) in (None, '')]
