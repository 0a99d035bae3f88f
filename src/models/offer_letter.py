from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

# Offer letter lifecycle
STATUS_DRAFT = 'draft'
STATUS_SENT = 'sent'
STATUS_ACCEPTED = 'accepted'
STATUS_REJECTED = 'rejected'


@dataclass
class OfferRequest:
    """Data collected from the offer creation form or an import row"""
    candidate_id: str
    job_id: str
    application_id: str
    designation: str
    joining_date: date
    ctc: Decimal
    hr_name: str
    tds: Decimal = Decimal('0')
    company_name: Optional[str] = None
    offer_date: Optional[date] = None
