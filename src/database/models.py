from sqlalchemy import Column, String, Date, Numeric, Text, DateTime, Boolean
from datetime import datetime, date, timezone
import uuid
from .db import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    """Current UTC time as the naive value the DateTime columns store"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class OfferLetterDB(Base):
    """Offer letter database model"""
    __tablename__ = "offer_letters"

    id = Column(String(36), primary_key=True, default=_new_id)
    candidate_id = Column(String, nullable=False, index=True)
    job_id = Column(String, nullable=False)
    application_id = Column(String, nullable=False, index=True)

    # Basic details
    designation = Column(Text, nullable=False)
    joining_date = Column(Date, nullable=False)
    offer_date = Column(Date, nullable=False, default=date.today)
    company_name = Column(Text, nullable=False)
    hr_name = Column(Text, nullable=False)
    hr_signature = Column(Text)

    # Salary details (annual)
    ctc = Column(Numeric(12, 2), nullable=False)
    basic_salary = Column(Numeric(12, 2), nullable=False)
    hra = Column(Numeric(12, 2), nullable=False)
    conveyance_allowance = Column(Numeric(12, 2), default=0)
    medical_allowance = Column(Numeric(12, 2), default=0)
    flexi_pay = Column(Numeric(12, 2), default=0)
    special_allowance = Column(Numeric(12, 2), default=0)
    employer_pf = Column(Numeric(12, 2), nullable=False)
    other_benefits = Column(Numeric(12, 2), default=0)

    # Deductions (annual)
    employee_pf = Column(Numeric(12, 2), nullable=False)
    professional_tax = Column(Numeric(12, 2), nullable=False, default=2400)
    insurance = Column(Numeric(12, 2), default=6000)
    income_tax = Column(Numeric(12, 2), default=0)
    other_deductions = Column(Numeric(12, 2), default=0)
    net_salary = Column(Numeric(12, 2), nullable=False)
    gross_salary = Column(Numeric(12, 2))

    # Document details
    template_used = Column(String(50), default='default')
    email_sent = Column(Boolean, default=False)
    email_sent_at = Column(DateTime)

    # Lifecycle
    status = Column(String(20), nullable=False, default='draft')  # 'draft', 'sent', 'accepted', 'rejected'
    accepted_at = Column(DateTime)
    rejected_at = Column(DateTime)

    # Metadata
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    def to_dict(self) -> dict:
        """JSON-friendly view of the record"""
        result = {}
        for column in self.__table__.columns:
            value = getattr(self, column.name)
            if isinstance(value, (date, datetime)):
                value = value.isoformat()
            elif isinstance(column.type, Numeric) and value is not None:
                value = float(value)
            result[column.name] = value
        return result

    def __repr__(self):
        return f"<OfferLetter(id={self.id}, application={self.application_id}, status={self.status})>"
