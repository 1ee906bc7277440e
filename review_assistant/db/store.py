"""
Stores - Create/update/query helpers over the ORM models.

Services never touch SQLAlchemy sessions directly; they go through these.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import select

from review_assistant.core.auth import AuthContext
from review_assistant.db.database import Database
from review_assistant.db.models import AnalysisRecord, SessionToken, User
from review_assistant.models.schemas import (
    AnalysisStatus,
    StoredAnalysis,
    SuggestedChange,
    UserProfile,
)
from review_assistant.api.middleware.error_handler import AnalysisNotFoundError


logger = logging.getLogger(__name__)


class UserStore:
    """Users and their session tokens."""

    def __init__(self, database: Database, session_ttl_hours: int = 24):
        self.db = database
        self.session_ttl = timedelta(hours=session_ttl_hours)

    def upsert_user(
        self,
        github_id: str,
        access_token: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
    ) -> UserProfile:
        """Create the user, or refresh the access token of an existing one."""
        with self.db.session() as session:
            user = session.scalar(select(User).where(User.github_id == github_id))
            if user is None:
                user = User(
                    github_id=github_id,
                    access_token=access_token,
                    name=name,
                    email=email,
                )
                session.add(user)
                logger.info("Created user for GitHub id %s", github_id)
            else:
                user.access_token = access_token
            session.flush()
            return UserProfile(
                id=user.id, github_id=user.github_id, name=user.name, email=user.email
            )

    def create_session(self, user_id: int) -> str:
        """Issue a new opaque session token for the user."""
        token = secrets.token_urlsafe(32)
        now = datetime.utcnow()
        with self.db.session() as session:
            session.add(SessionToken(
                token=token,
                user_id=user_id,
                created_at=now,
                expires_at=now + self.session_ttl,
            ))
        return token

    def resolve_session(self, token: Optional[str]) -> Optional[AuthContext]:
        """Map a session token to its user, or None if unknown or expired."""
        if not token:
            return None
        with self.db.session() as session:
            row = session.scalar(select(SessionToken).where(SessionToken.token == token))
            if row is None:
                return None
            if row.expires_at <= datetime.utcnow():
                session.delete(row)
                return None
            user = row.user
            return AuthContext(
                user_id=user.id,
                github_id=user.github_id,
                access_token=user.access_token,
                name=user.name,
                email=user.email,
            )

    def delete_session(self, token: str) -> bool:
        with self.db.session() as session:
            row = session.scalar(select(SessionToken).where(SessionToken.token == token))
            if row is None:
                return False
            session.delete(row)
            return True


class AnalysisStore:
    """
    Stored batch analyses.

    A record is created in PROCESSING and moves exactly once to COMPLETED
    or FAILED. Records are never deleted.
    """

    def __init__(self, database: Database):
        self.db = database

    def create(self, user_id: int, repo_name: str) -> StoredAnalysis:
        with self.db.session() as session:
            record = AnalysisRecord(
                user_id=user_id,
                repo_name=repo_name,
                changes=[],
                status=AnalysisStatus.PROCESSING.value,
                created_at=datetime.utcnow(),
            )
            session.add(record)
            session.flush()
            return StoredAnalysis.model_validate(record)

    def complete(self, analysis_id: int, changes: List[SuggestedChange]) -> StoredAnalysis:
        return self._finish(
            analysis_id,
            AnalysisStatus.COMPLETED,
            [change.model_dump() for change in changes],
        )

    def fail(self, analysis_id: int) -> StoredAnalysis:
        return self._finish(analysis_id, AnalysisStatus.FAILED, None)

    def _finish(
        self,
        analysis_id: int,
        status: AnalysisStatus,
        changes: Optional[list],
    ) -> StoredAnalysis:
        with self.db.session() as session:
            record = session.get(AnalysisRecord, analysis_id)
            if record is None:
                raise AnalysisNotFoundError(analysis_id)
            if record.status != AnalysisStatus.PROCESSING.value:
                raise ValueError(
                    f"Analysis {analysis_id} already finished with status {record.status}"
                )
            record.status = status.value
            if changes is not None:
                record.changes = changes
            session.flush()
            return StoredAnalysis.model_validate(record)

    def get(self, analysis_id: int, user_id: int) -> StoredAnalysis:
        with self.db.session() as session:
            record = session.get(AnalysisRecord, analysis_id)
            if record is None or record.user_id != user_id:
                raise AnalysisNotFoundError(analysis_id)
            return StoredAnalysis.model_validate(record)

    def list_for_user(self, user_id: int) -> List[StoredAnalysis]:
        """All analyses of a user, newest first."""
        with self.db.session() as session:
            records = session.scalars(
                select(AnalysisRecord)
                .where(AnalysisRecord.user_id == user_id)
                .order_by(AnalysisRecord.created_at.desc(), AnalysisRecord.id.desc())
            ).all()
            return [StoredAnalysis.model_validate(r) for r in records]
