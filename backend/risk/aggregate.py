# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Vault-wide risk roll-up: reuse groups and the 0-100 security score.

Works on any record-like object with ``secret``, ``strength``,
``breach_count`` and ``updated_at`` attributes.  Strength and breach results
must already be attached to the records; nothing here evaluates or looks up
secrets.  Missing annotations are read as "unknown" and never counted
against the score.

Score
-----
    overall = 100
            - weak/N        * 30
            - compromised/N * 40
            - reused/N      * 20
            - old/N         * 10
clamped to 0-100 and rounded half-up.  An empty vault scores 100.
"""

import math
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Sequence

from risk.strength import STRONG_THRESHOLD, WEAK_THRESHOLD

STALE_AFTER_DAYS = 90

_WEIGHTS = {"weak": 30, "compromised": 40, "reused": 20, "old": 10}


@dataclass(frozen=True)
class SecurityScoreSnapshot:
    overall: int = 100
    total: int = 0
    strong: int = 0
    weak: int = 0
    compromised: int = 0
    duplicate: int = 0
    reused: int = 0
    old: int = 0

    @property
    def grade(self) -> str:
        return grade_for(self.overall)


def grade_for(overall: int) -> str:
    """Headline wording for an overall score."""
    if overall >= 80:
        return "Excellent"
    if overall >= 60:
        return "Good"
    if overall >= 40:
        return "Fair"
    return "Poor"


# ---------------------------------------------------------------------------
# Reuse
# ---------------------------------------------------------------------------


def find_duplicates(records: Sequence[Any]) -> dict[str, list[Any]]:
    """
    Group records by exact secret value and keep only groups of two or more.
    Both the groups and their members keep the input order.
    """
    groups: dict[str, list[Any]] = defaultdict(list)
    for record in records:
        secret = getattr(record, "secret", None)
        if secret is None:
            continue
        groups[secret].append(record)
    return {secret: members for secret, members in groups.items() if len(members) > 1}


# ---------------------------------------------------------------------------
# Per-record predicates
# ---------------------------------------------------------------------------


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; the store always writes UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_stale(record: Any, now: datetime, stale_after_days: int = STALE_AFTER_DAYS) -> bool:
    updated_at = getattr(record, "updated_at", None)
    if not isinstance(updated_at, datetime):
        return False
    return _as_utc(updated_at) < _as_utc(now) - timedelta(days=stale_after_days)


def _strength(record: Any) -> Optional[int]:
    value = getattr(record, "strength", None)
    return value if isinstance(value, int) else None


def is_compromised(record: Any) -> bool:
    """Only a confirmed count > 0 counts; an unknown result never does."""
    count = getattr(record, "breach_count", None)
    return isinstance(count, int) and count > 0


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


def aggregate(
    records: Sequence[Any],
    now: Optional[datetime] = None,
    stale_after_days: int = STALE_AFTER_DAYS,
) -> SecurityScoreSnapshot:
    """Compute a fresh :class:`SecurityScoreSnapshot` for *records*."""
    records = list(records)
    total = len(records)
    if total == 0:
        return SecurityScoreSnapshot()

    now = now or datetime.now(timezone.utc)
    strengths = [_strength(r) for r in records]

    duplicates = find_duplicates(records)
    counts = {
        "weak": sum(1 for s in strengths if s is not None and s < WEAK_THRESHOLD),
        "compromised": sum(1 for r in records if is_compromised(r)),
        "reused": sum(len(members) for members in duplicates.values()),
        "old": sum(1 for r in records if is_stale(r, now, stale_after_days)),
    }

    overall = 100.0
    for key, weight in _WEIGHTS.items():
        overall -= counts[key] / total * weight
    overall = max(0.0, min(100.0, overall))

    return SecurityScoreSnapshot(
        overall=int(math.floor(overall + 0.5)),
        total=total,
        strong=sum(1 for s in strengths if s is not None and s >= STRONG_THRESHOLD),
        weak=counts["weak"],
        compromised=counts["compromised"],
        duplicate=len(duplicates),
        reused=counts["reused"],
        old=counts["old"],
    )
