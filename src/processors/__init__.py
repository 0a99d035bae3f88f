from .salary_calculator import compute_breakup, to_offer_letter_fields
from .offer_letter_processor import OfferLetterProcessor
from .salary_breakup_generator import SalaryBreakupGenerator


__all__ = [
    'compute_breakup',
    'to_offer_letter_fields',
    'OfferLetterProcessor',
    'SalaryBreakupGenerator'
]
