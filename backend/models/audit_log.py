# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""AuditLog ORM model – tracks every vault mutation and bulk operation."""

from sqlalchemy import Column, Integer, String, Text, DateTime
from sqlalchemy.sql import func

from database import Base


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    action = Column(String(64), nullable=False, index=True)   # e.g. "vault_create"
    # The record acted upon (NULL for bulk actions such as import/recheck).
    # Not a foreign key: audit rows outlive deleted records.
    record_id = Column(String(36), nullable=True, index=True)
    detail = Column(Text, nullable=True)                      # human-readable note, secrets masked
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
