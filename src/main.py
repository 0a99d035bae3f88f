import argparse
import logging
from config.settings import LOG_LEVEL, CURRENCY_SYMBOL
from processors.salary_calculator import compute_breakup, to_offer_letter_fields
from processors.salary_breakup_generator import SalaryBreakupGenerator
from utils.formatters import format_inr
from utils.validators import validate_ctc, validate_tds

# Configure logging
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def print_breakup(breakup, ctc):
    """Print the breakup as a Component / Monthly / Annual table"""
    money = lambda value: format_inr(value, CURRENCY_SYMBOL)
    deductions = breakup.deductions
    rows = [
        ("Basic Salary", breakup.basic),
        ("House Rent Allowance", breakup.hra),
        ("Conveyance Allowance", breakup.conveyance),
        ("Medical Allowance", breakup.medical),
        ("Flexi Pay", breakup.flexi),
        ("Gross Salary (A)", breakup.gross),
        ("Employer PF", breakup.employer_pf),
        ("Employee PF", deductions.employee_pf),
        ("Professional Tax", deductions.pt),
        ("Insurance", deductions.insurance),
        ("Income Tax (TDS)", deductions.tds),
        ("Total Deductions", deductions.total),
    ]

    print("=" * 60)
    print(f"CTC Breakup for {money(ctc)} per annum")
    print("=" * 60)
    print(f"{'Component':<24}{'Monthly':>18}{'Annual':>18}")
    for label, amount in rows:
        print(f"{label:<24}{money(amount.monthly):>18}{money(amount.annual):>18}")
    print("-" * 60)
    print(f"{'Net Take Home':<24}{money(breakup.net_take_home.monthly):>18}")
    print("=" * 60)


def main(argv=None):
    """Command-line entry point: print (and optionally export) a CTC breakup"""
    parser = argparse.ArgumentParser(description="Offer letter CTC breakup calculator")
    parser.add_argument("ctc", help="Annual cost to company")
    parser.add_argument("--tds", default="0", help="Annual income tax deducted at source")
    parser.add_argument("--excel", metavar="NAME", help="Also write the annexure workbook for this candidate")
    args = parser.parse_args(argv)

    try:
        ctc = validate_ctc(args.ctc)
        tds = validate_tds(args.tds)
    except ValueError as e:
        parser.error(str(e))

    breakup = compute_breakup(ctc, tds)
    logger.debug("Offer letter fields: %s", to_offer_letter_fields(breakup).to_dict())
    print_breakup(breakup, ctc)

    if args.excel:
        filepath = SalaryBreakupGenerator().generate(breakup, ctc, candidate_name=args.excel, designation="")
        logger.info("Annexure written to %s", filepath)

    return breakup


if __name__ == "__main__":
    main()
