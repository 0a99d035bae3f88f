"""
Shared fixtures.

Points the database and output directory at a temporary location before any
project module is imported, since config.settings reads them at import time.
"""

import os
import sys
import tempfile
from pathlib import Path

# === Set environment BEFORE any project imports ===
_TMP_DIR = Path(tempfile.mkdtemp(prefix="offer_tests_"))
os.environ["DATA_DIR"] = str(_TMP_DIR / "data")
os.environ["OUTPUT_DIR"] = str(_TMP_DIR / "output")
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'app.db'}"
os.environ["COMPANY_NAME"] = "Test Company Pvt Ltd"

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))
sys.path.insert(0, str(ROOT / 'src'))

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from database.db import Base, init_db
from database.repository import OfferLetterRepository
from models.offer_letter import OfferRequest
from processors.offer_letter_processor import OfferLetterProcessor


@pytest.fixture
def db_session(tmp_path):
    """Session on a fresh SQLite file per test"""
    engine = create_engine(f"sqlite:///{tmp_path / 'offers.db'}")
    init_db(bind=engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def repository(db_session):
    return OfferLetterRepository(db_session)


@pytest.fixture
def processor(repository):
    return OfferLetterProcessor(repository)


@pytest.fixture
def offer_data():
    """Raw form data for an offer, as posted by the offer creation dialog"""
    return {
        'candidate_id': 'cand-001',
        'job_id': 'job-042',
        'application_id': 'app-777',
        'designation': 'Software Engineer',
        'joining_date': '2025-09-01',
        'ctc': '650000',
        'hr_name': 'Priya Nair',
    }


@pytest.fixture
def make_request():
    """Factory for OfferRequest objects"""
    def _make(application_id='app-777', ctc=Decimal('650000'), tds=Decimal('0'), **overrides):
        values = dict(
            candidate_id='cand-001',
            job_id='job-042',
            application_id=application_id,
            designation='Software Engineer',
            joining_date=date(2025, 9, 1),
            ctc=ctc,
            hr_name='Priya Nair',
            tds=tds,
        )
        values.update(overrides)
        return OfferRequest(**values)
    return _make
