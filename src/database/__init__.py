from .db import engine, SessionLocal, Base, get_db, init_db
from .models import OfferLetterDB
from .repository import OfferLetterRepository

__all__ = [
    'engine',
    'SessionLocal',
    'Base',
    'get_db',
    'init_db',
    'OfferLetterDB',
    'OfferLetterRepository'
]
