from decimal import Decimal, ROUND_HALF_UP, getcontext, localcontext
from models.salary import Amount, MonthlyAmount, Deductions, SalaryBreakup, OfferLetterFields

MONTHS = Decimal('12')

BASIC_SHARE_OF_CTC = Decimal('0.60')
HRA_SHARE_OF_BASIC = Decimal('0.40')

CONVEYANCE_MONTHLY = Decimal('1600')
MEDICAL_MONTHLY = Decimal('1250')

# Statutory PF: 12% of basic, wage ceiling 15,000/month
PF_RATE = Decimal('0.12')
PF_WAGE_CEILING = Decimal('15000')
PF_MONTHLY_CAP = Decimal('1800')

PROFESSIONAL_TAX_MONTHLY = Decimal('200')
INSURANCE_MONTHLY = Decimal('500')

ZERO = Decimal('0')


def to_decimal(value) -> Decimal:
    """Convert int/float/str input to Decimal without binary float noise"""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_whole(value: Decimal) -> Decimal:
    """Round to the nearest whole currency unit, halves away from zero"""
    return value.quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def compute_breakup(ctc_annual, tds_annual=0) -> SalaryBreakup:
    """Decompose an annual CTC into offer letter pay heads.

    Pure arithmetic: nothing is validated here, callers check that CTC is
    positive and TDS non-negative. Flexi pay is the balancing head and goes
    negative for low CTC values and is not clamped. Any finite amount works,
    however many digits it has.
    """
    ctc_annual = to_decimal(ctc_annual)
    tds_annual = to_decimal(tds_annual)

    with _wide_enough(ctc_annual, tds_annual):
        return _breakup(ctc_annual, tds_annual)


def _wide_enough(*values):
    """Context with enough digits to round the given amounts to whole units"""
    context = getcontext().copy()
    context.prec = max([context.prec] + [value.adjusted() + 2 for value in values])
    return localcontext(context)


def _breakup(ctc_annual: Decimal, tds_annual: Decimal) -> SalaryBreakup:
    basic_annual = round_whole(BASIC_SHARE_OF_CTC * ctc_annual)
    basic_monthly = basic_annual / MONTHS

    hra_annual = round_whole(HRA_SHARE_OF_BASIC * basic_annual)
    hra_monthly = hra_annual / MONTHS

    conveyance_annual = CONVEYANCE_MONTHLY * MONTHS
    medical_annual = MEDICAL_MONTHLY * MONTHS

    employer_pf_monthly = min(PF_RATE * min(PF_WAGE_CEILING, basic_monthly), PF_MONTHLY_CAP)
    employer_pf_annual = employer_pf_monthly * MONTHS

    # Component A: the in-hand eligible part of CTC
    fixed_a_annual = ctc_annual - employer_pf_annual

    fixed_heads_annual = basic_annual + hra_annual + conveyance_annual + medical_annual
    flexi_annual = fixed_a_annual - fixed_heads_annual
    flexi_monthly = flexi_annual / MONTHS

    gross_monthly = (fixed_heads_annual + flexi_annual) / MONTHS
    gross_annual = fixed_a_annual

    employee_pf_monthly = employer_pf_monthly
    employee_pf_annual = employee_pf_monthly * MONTHS

    pt_annual = PROFESSIONAL_TAX_MONTHLY * MONTHS
    insurance_annual = INSURANCE_MONTHLY * MONTHS
    tds_monthly = tds_annual / MONTHS

    total_deductions_monthly = employee_pf_monthly + PROFESSIONAL_TAX_MONTHLY + INSURANCE_MONTHLY + tds_monthly
    total_deductions_annual = employee_pf_annual + pt_annual + insurance_annual + tds_annual

    net_take_home_monthly = gross_monthly - total_deductions_monthly

    return SalaryBreakup(
        basic=Amount(monthly=round_whole(basic_monthly), annual=basic_annual),
        hra=Amount(monthly=round_whole(hra_monthly), annual=hra_annual),
        conveyance=Amount(monthly=CONVEYANCE_MONTHLY, annual=conveyance_annual),
        medical=Amount(monthly=MEDICAL_MONTHLY, annual=medical_annual),
        flexi=Amount(monthly=round_whole(flexi_monthly), annual=flexi_annual),
        employer_pf=Amount(monthly=employer_pf_monthly, annual=employer_pf_annual),
        fixed_a=Amount(monthly=gross_monthly, annual=fixed_a_annual),
        deductions=Deductions(
            pt=Amount(monthly=PROFESSIONAL_TAX_MONTHLY, annual=pt_annual),
            employee_pf=Amount(monthly=employee_pf_monthly, annual=employee_pf_annual),
            insurance=Amount(monthly=INSURANCE_MONTHLY, annual=insurance_annual),
            tds=Amount(monthly=tds_monthly, annual=tds_annual),
            total=Amount(monthly=total_deductions_monthly, annual=total_deductions_annual),
        ),
        gross=Amount(monthly=gross_monthly, annual=gross_annual),
        net_take_home=MonthlyAmount(monthly=net_take_home_monthly),
    )


def to_offer_letter_fields(breakup: SalaryBreakup) -> OfferLetterFields:
    """Map a breakup onto the annual salary columns of an offer letter"""
    return OfferLetterFields(
        basic_salary=breakup.basic.annual,
        hra=breakup.hra.annual,
        conveyance_allowance=breakup.conveyance.annual,
        medical_allowance=breakup.medical.annual,
        flexi_pay=breakup.flexi.annual,
        special_allowance=ZERO,  # kept for the older breakup scheme
        employer_pf=breakup.employer_pf.annual,
        other_benefits=ZERO,
        employee_pf=breakup.deductions.employee_pf.annual,
        professional_tax=breakup.deductions.pt.annual,
        insurance=breakup.deductions.insurance.annual,
        income_tax=breakup.deductions.tds.annual,
        other_deductions=breakup.deductions.insurance.annual,
        net_salary=breakup.net_take_home.monthly * MONTHS,
        gross_salary=breakup.gross.annual,
    )
