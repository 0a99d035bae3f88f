from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP, getcontext, localcontext
from typing import Dict

PAISE = Decimal("0.01")


@dataclass(frozen=True)
class Amount:
    """A compensation figure expressed per month and per year"""
    monthly: Decimal
    annual: Decimal


@dataclass(frozen=True)
class MonthlyAmount:
    """A figure that is only quoted per month"""
    monthly: Decimal


@dataclass(frozen=True)
class Deductions:
    """Employee-side deductions"""
    pt: Amount
    employee_pf: Amount
    insurance: Amount
    tds: Amount
    total: Amount


@dataclass(frozen=True)
class SalaryBreakup:
    """Full CTC breakup used to populate an offer letter.

    ``fixed_a`` is Component A (CTC minus employer PF) and ``gross`` always
    carries the same annual figure.
    """
    basic: Amount
    hra: Amount
    conveyance: Amount
    medical: Amount
    flexi: Amount
    employer_pf: Amount
    fixed_a: Amount
    deductions: Deductions
    gross: Amount
    net_take_home: MonthlyAmount

    def to_dict(self) -> Dict:
        """Nested dict of the breakup, money as floats rounded to paise"""
        return _to_plain(asdict(self))


@dataclass(frozen=True)
class OfferLetterFields:
    """Annual salary columns stored on an offer letter"""
    basic_salary: Decimal
    hra: Decimal
    conveyance_allowance: Decimal
    medical_allowance: Decimal
    flexi_pay: Decimal
    special_allowance: Decimal
    employer_pf: Decimal
    other_benefits: Decimal
    employee_pf: Decimal
    professional_tax: Decimal
    insurance: Decimal
    income_tax: Decimal
    other_deductions: Decimal
    net_salary: Decimal
    gross_salary: Decimal

    def as_dict(self) -> Dict[str, Decimal]:
        return asdict(self)

    def to_dict(self) -> Dict[str, float]:
        return _to_plain(self.as_dict())


def _to_plain(value):
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    if isinstance(value, Decimal):
        context = getcontext().copy()
        context.prec = max(context.prec, value.adjusted() + 4)
        with localcontext(context):
            return float(value.quantize(PAISE, rounding=ROUND_HALF_UP))
    return value
