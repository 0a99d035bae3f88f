from sqlalchemy.orm import Session
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional
from .models import OfferLetterDB

MONEY_COLUMNS = (
    'ctc', 'basic_salary', 'hra', 'conveyance_allowance', 'medical_allowance',
    'flexi_pay', 'special_allowance', 'employer_pf', 'other_benefits',
    'employee_pf', 'professional_tax', 'insurance', 'income_tax',
    'other_deductions', 'net_salary', 'gross_salary',
)


class OfferLetterRepository:
    """Repository for offer letter data operations"""

    def __init__(self, db_session: Session):
        self.db = db_session

    # ========== Offer Letter Operations ==========

    def create_offer_letter(self, **values) -> OfferLetterDB:
        """Insert a new offer letter"""
        offer_letter = OfferLetterDB(**self._quantize_money(values))
        self.db.add(offer_letter)
        self.db.commit()
        self.db.refresh(offer_letter)
        return offer_letter

    def get_offer_letter(self, offer_id: str) -> Optional[OfferLetterDB]:
        """Get offer letter by ID"""
        return self.db.query(OfferLetterDB).filter_by(id=offer_id).first()

    def get_offer_letters(self) -> List[OfferLetterDB]:
        """Get all offer letters, newest first"""
        return self.db.query(OfferLetterDB).order_by(OfferLetterDB.created_at.desc()).all()

    def get_offer_letters_by_application(self, application_id: str) -> List[OfferLetterDB]:
        """Get offer letters raised for an application"""
        return self.db.query(OfferLetterDB).filter_by(application_id=application_id).all()

    def update_offer_letter(self, offer_id: str, **values) -> Optional[OfferLetterDB]:
        """Update the given columns of an offer letter"""
        offer_letter = self.get_offer_letter(offer_id)
        if not offer_letter:
            return None
        for name, value in self._quantize_money(values).items():
            setattr(offer_letter, name, value)
        self.db.commit()
        self.db.refresh(offer_letter)
        return offer_letter

    def delete_offer_letter(self, offer_id: str) -> bool:
        """Delete an offer letter, returns False if it did not exist"""
        offer_letter = self.get_offer_letter(offer_id)
        if not offer_letter:
            return False
        self.db.delete(offer_letter)
        self.db.commit()
        return True

    def bulk_delete_offer_letters(self, offer_ids: List[str]) -> int:
        """Delete several offer letters, returns the number removed"""
        deleted = self.db.query(OfferLetterDB).filter(
            OfferLetterDB.id.in_(offer_ids)
        ).delete(synchronize_session=False)
        self.db.commit()
        return deleted

    # ========== Helper Methods ==========

    def _quantize_money(self, values: dict) -> dict:
        """Round money to the two decimal places the columns hold"""
        quantized = dict(values)
        for name in MONEY_COLUMNS:
            if quantized.get(name) is not None:
                quantized[name] = Decimal(str(quantized[name])).quantize(
                    Decimal('0.01'), rounding=ROUND_HALF_UP
                )
        return quantized
