# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Record store – the only code that writes CredentialRecord rows.

Invariant
---------
A record's strength and breach annotations always describe its *current*
secret.  Every path that sets a secret (create, update, import) re-derives
both before committing:

* strength is recomputed with :func:`risk.strength.evaluate`;
* the breach result is replaced – a failed lookup after a secret change
  leaves the count unknown (NULL) rather than keeping a count that belonged
  to the old secret.

A full recheck leaves secrets untouched, so a failed lookup there keeps the
previous confirmed result.

Every mutation writes an AuditLog row with secrets masked.
"""

from datetime import datetime
from typing import Iterable, List, Optional

from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from core.logger import get_logger
from database import get_db
from models.audit_log import AuditLog
from models.credential import VALID_CATEGORIES, CredentialRecord, utcnow
from risk.breach import BreachCount, BreachLookupResult, BreachOracle, get_oracle
from risk.strength import evaluate

logger = get_logger("vault")

_EDITABLE = ("name", "username", "secret", "url", "notes", "category")
# Optional columns a partial update may clear by sending None
_CLEARABLE = ("url", "notes")


class StoreError(Exception):
    """Base class for record-store errors."""


class RecordNotFound(StoreError):
    pass


class InvalidCategory(StoreError):
    pass


# ---------------------------------------------------------------------------
# Derivation helpers
# ---------------------------------------------------------------------------


def apply_breach_result(
    record: CredentialRecord,
    result: BreachLookupResult,
    now: Optional[datetime] = None,
    keep_previous: bool = False,
) -> None:
    """
    Fold a lookup result into *record*.  An unknown result clears the breach
    annotations unless *keep_previous* is set.
    """
    if isinstance(result, BreachCount):
        record.breach_count = result.count
        record.is_compromised = result.compromised
        record.last_checked = now or utcnow()
    elif not keep_previous:
        record.breach_count = None
        record.is_compromised = False
        record.last_checked = None


def annotate(record: CredentialRecord, result: BreachLookupResult, now: Optional[datetime] = None) -> None:
    """Re-derive every secret-dependent field of *record*."""
    record.strength = evaluate(record.secret).score
    apply_breach_result(record, result, now)


def _check_category(category: str) -> None:
    if category not in VALID_CATEGORIES:
        raise InvalidCategory(f"Invalid category: {category!r}")


def _masked(fields: dict) -> str:
    parts = []
    for key in _EDITABLE:
        if key not in fields:
            continue
        if key == "secret":
            parts.append("password=******")
        elif key == "notes":
            parts.append("notes=<updated>")
        else:
            parts.append(f"{key}={fields[key] or '(empty)'}")
    return ", ".join(parts)


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class CredentialStore:
    """CRUD over CredentialRecord rows, bound to one session and one oracle."""

    def __init__(self, db: Session, oracle: BreachOracle):
        self.db = db
        self.oracle = oracle

    # -- Reads -------------------------------------------------------------

    def list(self, search: Optional[str] = None, category: Optional[str] = None) -> List[CredentialRecord]:
        query = self.db.query(CredentialRecord)
        if category:
            query = query.filter(CredentialRecord.category == category)
        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    CredentialRecord.name.ilike(pattern),
                    CredentialRecord.username.ilike(pattern),
                    CredentialRecord.url.ilike(pattern),
                )
            )
        return query.order_by(CredentialRecord.created_at.desc()).all()

    def get(self, record_id: str) -> CredentialRecord:
        record = self.db.get(CredentialRecord, record_id)
        if record is None:
            raise RecordNotFound(record_id)
        return record

    # -- Writes ------------------------------------------------------------

    async def create(self, fields: dict) -> CredentialRecord:
        """Create and annotate a record.  *fields* uses column names."""
        fields = {k: v for k, v in fields.items() if k in _EDITABLE and v is not None}
        fields.setdefault("category", "other")
        _check_category(fields["category"])

        result = await self.oracle.lookup(fields["secret"])

        now = utcnow()
        record = CredentialRecord(**fields, created_at=now, updated_at=now)
        annotate(record, result, now)
        self.db.add(record)
        self.db.flush()
        self._audit("vault_create", record.id, _masked(fields))
        self.db.commit()
        self.db.refresh(record)

        logger.info("Credential created | id=%s strength=%s breach=%s", record.id, record.strength, record.breach_status)
        return record

    async def create_many(self, rows: Iterable[dict]) -> List[CredentialRecord]:
        """Bulk create (used by import).  Breach lookups run as one batch."""
        rows = [{k: v for k, v in row.items() if k in _EDITABLE and v is not None} for row in rows]
        for row in rows:
            row.setdefault("category", "other")
            _check_category(row["category"])

        results = await self.oracle.lookup_many([row["secret"] for row in rows])

        now = utcnow()
        records = []
        for row, result in zip(rows, results):
            record = CredentialRecord(**row, created_at=now, updated_at=now)
            annotate(record, result, now)
            self.db.add(record)
            records.append(record)
        self.db.flush()
        self._audit("vault_import", None, f"Imported {len(records)} credential(s)")
        self.db.commit()
        return records

    async def update(self, record_id: str, fields: dict) -> CredentialRecord:
        """
        Partial update.  Only keys present change; None clears ``url`` or
        ``notes`` and is ignored for required fields.  A new
        secret re-derives strength and breach status.
        """
        record = self.get(record_id)
        fields = {
            k: v for k, v in fields.items()
            if k in _EDITABLE and (v is not None or k in _CLEARABLE)
        }
        if "category" in fields:
            _check_category(fields["category"])

        secret_changed = "secret" in fields and fields["secret"] != record.secret
        result = await self.oracle.lookup(fields["secret"]) if secret_changed else None

        for key, value in fields.items():
            setattr(record, key, value)
        now = utcnow()
        if result is not None:
            annotate(record, result, now)
        record.updated_at = now

        self._audit("vault_update", record.id, _masked(fields) or "no changes")
        self.db.commit()
        self.db.refresh(record)
        return record

    def delete(self, record_id: str) -> None:
        record = self.get(record_id)
        detail = f"name={record.name}, username={record.username}, category={record.category}"
        self.db.delete(record)
        self._audit("vault_delete", record_id, detail)
        self.db.commit()

    async def recheck_all(self, timeout: Optional[float] = None) -> dict[str, int]:
        """
        Re-query the breach corpus for every record.  Secrets don't change, so
        a failed lookup keeps whatever was known before.
        """
        checked = [(r.id, r.secret) for r in self.db.query(CredentialRecord).all()]
        results = await self.oracle.lookup_many([secret for _, secret in checked], timeout=timeout)

        # Rows may have been edited or deleted while the lookups ran.  A result
        # only applies to a row that still holds the secret it was computed for.
        now = utcnow()
        records = []
        stale = 0
        for (record_id, secret), result in zip(checked, results):
            record = self.db.get(CredentialRecord, record_id, populate_existing=True)
            if record is None:
                continue
            records.append(record)
            if record.secret != secret:
                stale += 1
                continue
            apply_breach_result(record, result, now, keep_previous=True)

        if stale:
            logger.info("Recheck skipped %d record(s) whose password changed mid-check", stale)

        summary = {
            "total": len(records),
            "clean": sum(1 for r in records if r.breach_status == "clean"),
            "compromised": sum(1 for r in records if r.breach_status == "compromised"),
            "unknown": sum(1 for r in records if r.breach_status == "unknown"),
        }
        failed = sum(1 for r in results if not isinstance(r, BreachCount))
        self._audit(
            "vault_recheck",
            None,
            f"Rechecked {len(records)} credential(s), {failed} lookup(s) failed",
        )
        self.db.commit()
        return summary

    def record_export(self, count: int) -> None:
        self._audit("vault_export", None, f"Exported {count} credential(s) to Excel")
        self.db.commit()

    # -- Internals ---------------------------------------------------------

    def _audit(self, action: str, record_id: Optional[str], detail: str) -> None:
        self.db.add(AuditLog(action=action, record_id=record_id, detail=detail))


def get_store(
    db: Session = Depends(get_db),
    oracle: BreachOracle = Depends(get_oracle),
) -> CredentialStore:
    """FastAPI dependency.  Use with Depends(get_store)."""
    return CredentialStore(db, oracle)
