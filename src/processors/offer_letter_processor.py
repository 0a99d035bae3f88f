import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List
from database.repository import OfferLetterRepository
from database.models import OfferLetterDB, utc_now
from models.offer_letter import (
    OfferRequest, STATUS_DRAFT, STATUS_SENT, STATUS_ACCEPTED, STATUS_REJECTED
)
from models.salary import SalaryBreakup
from processors.salary_calculator import compute_breakup, to_offer_letter_fields
from utils.validators import validate_ctc, validate_tds, missing_fields
from utils.formatters import parse_date
from config.settings import COMPANY_NAME

logger = logging.getLogger(__name__)


class OfferLetterNotFound(LookupError):
    """No offer letter with the requested id"""


EDITABLE_DETAILS = ('designation', 'joining_date', 'hr_name', 'hr_signature', 'template_used')
SALARY_INPUTS = {'ctc', 'tds'}

# Allowed status moves
TRANSITIONS = {
    STATUS_DRAFT: (STATUS_SENT,),
    STATUS_SENT: (STATUS_ACCEPTED, STATUS_REJECTED),
    STATUS_ACCEPTED: (),
    STATUS_REJECTED: (),
}


class OfferLetterProcessor:
    """Create offer letters from a CTC and move them through their lifecycle"""

    def __init__(self, repository: OfferLetterRepository):
        self.repo = repository

    def preview(self, ctc, tds=0) -> SalaryBreakup:
        """Validate inputs and compute a breakup without saving anything"""
        return compute_breakup(validate_ctc(ctc), validate_tds(tds))

    def build_request(self, data: Dict) -> OfferRequest:
        """Turn form or import data into a validated OfferRequest"""
        missing = missing_fields(data)
        if missing:
            raise ValueError(f"Missing required fields: {', '.join(missing)}")

        return OfferRequest(
            candidate_id=str(data['candidate_id']),
            job_id=str(data['job_id']),
            application_id=str(data['application_id']),
            designation=str(data['designation']).strip(),
            joining_date=parse_date(data['joining_date']),
            ctc=validate_ctc(data['ctc']),
            hr_name=str(data['hr_name']).strip(),
            tds=validate_tds(data.get('tds')),
            company_name=data.get('company_name') or None,
            offer_date=parse_date(data['offer_date']) if data.get('offer_date') else None,
        )

    def create_offer(self, request: OfferRequest) -> OfferLetterDB:
        """Compute the salary breakup and save a draft offer letter"""
        ctc = validate_ctc(request.ctc)
        tds = validate_tds(request.tds)

        if self.repo.get_offer_letters_by_application(request.application_id):
            raise ValueError("Offer letter already exists for this application")

        fields = to_offer_letter_fields(compute_breakup(ctc, tds))

        offer_letter = self.repo.create_offer_letter(
            candidate_id=request.candidate_id,
            job_id=request.job_id,
            application_id=request.application_id,
            designation=request.designation,
            joining_date=request.joining_date,
            offer_date=request.offer_date or date.today(),
            company_name=request.company_name or COMPANY_NAME,
            hr_name=request.hr_name,
            ctc=ctc,
            status=STATUS_DRAFT,
            **fields.as_dict()
        )
        logger.info("Created offer letter %s for application %s (CTC %s)",
                    offer_letter.id, request.application_id, ctc)
        return offer_letter

    def recalculate(self, offer_id: str, ctc, tds=0) -> OfferLetterDB:
        """Recompute the salary columns of a draft offer letter"""
        offer_letter = self.get_draft(offer_id)
        ctc = validate_ctc(ctc)
        fields = to_offer_letter_fields(compute_breakup(ctc, validate_tds(tds)))

        logger.info("Recalculating offer letter %s with CTC %s", offer_id, ctc)
        return self.repo.update_offer_letter(offer_letter.id, ctc=ctc, **fields.as_dict())

    def update_details(self, offer_id: str, **details) -> OfferLetterDB:
        """Edit the non-salary details of a draft offer letter"""
        details = self._checked_details(details)
        offer_letter = self.get_draft(offer_id)
        return self.repo.update_offer_letter(offer_letter.id, **details)

    def edit_draft(self, offer_id: str, changes: Dict) -> OfferLetterDB:
        """Apply detail edits and a ctc/tds change together, or nothing at all.

        A missing ctc or tds keeps the stored value. Everything is validated
        before the single write.
        """
        offer_letter = self.get_draft(offer_id)
        details = {k: v for k, v in changes.items() if k not in SALARY_INPUTS}
        values = self._checked_details(details)

        if SALARY_INPUTS & set(changes):
            ctc = validate_ctc(changes.get('ctc', offer_letter.ctc))
            tds = validate_tds(changes.get('tds', offer_letter.income_tax))
            values.update(ctc=ctc, **to_offer_letter_fields(compute_breakup(ctc, tds)).as_dict())
            logger.info("Recalculating offer letter %s with CTC %s", offer_id, ctc)

        if not values:
            return offer_letter
        return self.repo.update_offer_letter(offer_letter.id, **values)

    def mark_sent(self, offer_id: str) -> OfferLetterDB:
        """Record that the letter went out to the candidate"""
        return self._transition(offer_id, STATUS_SENT, email_sent=True, email_sent_at=utc_now())

    def accept(self, offer_id: str) -> OfferLetterDB:
        return self._transition(offer_id, STATUS_ACCEPTED, accepted_at=utc_now())

    def reject(self, offer_id: str) -> OfferLetterDB:
        return self._transition(offer_id, STATUS_REJECTED, rejected_at=utc_now())

    def bulk_import(self, rows: Iterable[Dict]) -> List[OfferLetterDB]:
        """Create one offer letter per row; stops at the first bad row"""
        created = []
        for number, row in enumerate(rows, start=1):
            try:
                created.append(self.create_offer(self.build_request(row)))
            except ValueError as e:
                raise ValueError(f"Row {number}: {e}") from e
        logger.info("Imported %d offer letters", len(created))
        return created

    def breakup_for(self, offer_id: str) -> SalaryBreakup:
        """Recompute the full breakup from a stored offer letter"""
        offer_letter = self.get_offer(offer_id)
        return compute_breakup(offer_letter.ctc, offer_letter.income_tax or Decimal('0'))

    def get_offer(self, offer_id: str) -> OfferLetterDB:
        offer_letter = self.repo.get_offer_letter(offer_id)
        if not offer_letter:
            raise OfferLetterNotFound(f"Offer letter {offer_id} not found")
        return offer_letter

    def get_draft(self, offer_id: str) -> OfferLetterDB:
        offer_letter = self.get_offer(offer_id)
        if offer_letter.status != STATUS_DRAFT:
            raise ValueError(f"Offer letter is {offer_letter.status} and can no longer be edited")
        return offer_letter

    # ========== Helper Methods ==========

    def _checked_details(self, details: Dict) -> Dict:
        unknown = set(details) - set(EDITABLE_DETAILS)
        if unknown:
            raise ValueError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

        details = dict(details)
        if 'joining_date' in details:
            details['joining_date'] = parse_date(details['joining_date'])
        return details

    def _transition(self, offer_id: str, new_status: str, **stamps) -> OfferLetterDB:
        offer_letter = self.get_offer(offer_id)
        if new_status not in TRANSITIONS[offer_letter.status]:
            raise ValueError(f"Cannot move offer letter from {offer_letter.status} to {new_status}")

        logger.info("Offer letter %s: %s -> %s", offer_id, offer_letter.status, new_status)
        return self.repo.update_offer_letter(offer_letter.id, status=new_status, **stamps)
