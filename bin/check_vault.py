# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Operator script – recheck every stored credential against the breach corpus
and print the vault's security score.

    python bin/check_vault.py [--timeout SECONDS]

Uses the same database and breach settings as the service (etc/app.conf).
Lookups that fail keep each record's previous result.
"""

import argparse
import asyncio
import sys
import os

# ---------------------------------------------------------------------------
# Path setup so backend modules are importable
# ---------------------------------------------------------------------------
# bin/check_vault.py  →  ../  →  project root
_PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
_BACKEND_DIR  = os.path.join(_PROJECT_ROOT, "backend")
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from core.config import settings              # noqa: E402
from database import Base, SessionLocal, engine  # noqa: E402
from risk.aggregate import aggregate, find_duplicates  # noqa: E402
from risk.breach import BreachOracle          # noqa: E402
from vault.store import CredentialStore       # noqa: E402
import models.audit_log                       # noqa: E402, F401


async def check(timeout=None) -> int:
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        store = CredentialStore(db, BreachOracle())
        summary = await store.recheck_all(timeout=timeout)
        print(
            f"[check_vault] {summary['total']} record(s): {summary['clean']} clean, "
            f"{summary['compromised']} compromised, {summary['unknown']} unknown"
        )

        records = store.list()
        snapshot = aggregate(records, stale_after_days=settings.stale_after_days)
        print(f"[check_vault] Security score: {snapshot.overall}/100 ({snapshot.grade})")
        print(
            f"[check_vault] strong={snapshot.strong} weak={snapshot.weak} "
            f"compromised={snapshot.compromised} reused={snapshot.reused} old={snapshot.old}"
        )

        for members in find_duplicates(records).values():
            names = ", ".join(f"{r.name} ({r.username})" for r in members)
            print(f"[check_vault] Shared password: {names}")

        return 1 if snapshot.compromised else 0
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(description="Recheck the vault against the breach corpus.")
    parser.add_argument("--timeout", type=float, default=None, help="per-lookup timeout in seconds")
    args = parser.parse_args()
    sys.exit(asyncio.run(check(args.timeout)))


if __name__ == "__main__":
    main()
