"""Data access layer for portal sessions"""

import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session
from card_portal.infrastructure.database.models import PortalSessionRecord
from card_portal.domain.models import PortalSession, UserProfile


def _parse_id(session_id: str) -> Optional[uuid.UUID]:
    try:
        return uuid.UUID(session_id)
    except (ValueError, AttributeError, TypeError):
        return None


class SessionRepository:
    """Repository for portal sessions"""

    def __init__(self, db: Session):
        self.db = db

    def create_session(self, token: str, user: UserProfile) -> PortalSession:
        """Persist a new session at login"""
        record = PortalSessionRecord(
            user_id=user.id,
            role=user.role,
            token=token,
            profile=asdict(user),
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return self._to_domain(record)

    def get_session(self, session_id: str) -> Optional[PortalSession]:
        """Fetch a session and stamp its last use; None for unknown or malformed ids"""
        record = self._get_record(session_id)
        if record is None:
            return None
        record.last_seen_at = datetime.now(timezone.utc)
        return self._to_domain(record)

    def delete_session(self, session_id: str) -> bool:
        """Tear down a session; returns False when it was already gone"""
        record = self._get_record(session_id)
        if record is None:
            return False
        self.db.delete(record)
        self.db.flush()
        return True

    def delete_sessions_for_user(self, user_id: str) -> int:
        """Drop every session of a user (e.g. after the customer is deleted)"""
        count = (
            self.db.query(PortalSessionRecord)
            .filter(PortalSessionRecord.user_id == user_id)
            .delete(synchronize_session=False)
        )
        return count

    def _get_record(self, session_id: str) -> Optional[PortalSessionRecord]:
        parsed = _parse_id(session_id)
        if parsed is None:
            return None
        return (
            self.db.query(PortalSessionRecord)
            .filter(PortalSessionRecord.id == parsed)
            .first()
        )

    @staticmethod
    def _to_domain(record: PortalSessionRecord) -> PortalSession:
        created_at = record.created_at or datetime.now(timezone.utc)
        return PortalSession(
            session_id=str(record.id),
            token=record.token,
            user=UserProfile(**record.profile),
            created_at=created_at,
        )
