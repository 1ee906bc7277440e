"""
Persistence Layer - SQLAlchemy models, engine and stores.
"""

from review_assistant.db.database import Database
from review_assistant.db.models import AnalysisRecord, Base, SessionToken, User
from review_assistant.db.store import AnalysisStore, UserStore

__all__ = [
    "Database",
    "Base",
    "User",
    "SessionToken",
    "AnalysisRecord",
    "AnalysisStore",
    "UserStore",
]
