# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""CredentialRecord ORM model."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean

from database import Base
from risk.strength import label_for

VALID_CATEGORIES = (
    "social",
    "finance",
    "work",
    "shopping",
    "entertainment",
    "other",
)


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CredentialRecord(Base):
    __tablename__ = "credentials"

    # Opaque and immutable once assigned
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    username = Column(String(255), nullable=False)
    # Plaintext.  The vault is local and single-user; at-rest encryption is
    # not part of this service.
    secret = Column(Text, nullable=False)
    url = Column(String(2048), nullable=True)
    notes = Column(Text, nullable=True)
    category = Column(String(32), nullable=False, default="other", server_default="other")

    # -- Derived from ``secret`` – rewritten whenever the secret changes -----
    strength = Column(Integer, nullable=True)  # 0-100, NULL = not evaluated
    is_compromised = Column(Boolean, nullable=False, default=False)
    # NULL = unknown (never checked, or the check failed); 0 = confirmed clean
    breach_count = Column(Integer, nullable=True)
    last_checked = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    @property
    def breach_status(self) -> str:
        if self.breach_count is None:
            return "unknown"
        return "compromised" if self.breach_count > 0 else "clean"

    @property
    def strength_label(self):
        return label_for(self.strength) if self.strength is not None else None

