"""SQLAlchemy ORM models for the portal session store"""

import uuid
from sqlalchemy import Column, DateTime, JSON, Text, Uuid
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class PortalSessionRecord(Base):
    """Logged-in portal user: bearer token plus cached profile"""

    __tablename__ = "portal_session"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    role = Column(Text, nullable=False)
    token = Column(Text, nullable=False)
    profile = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    last_seen_at = Column(DateTime(timezone=True), nullable=True)
