# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Risk endpoints – strength preview, password generation, the vault-wide
security score and reuse groups.

Nothing here writes to the vault.  Score and duplicates are recomputed from
the current records on every request.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, status

from core.config import settings
from core.logger import get_logger
from risk.aggregate import aggregate, find_duplicates
from risk.generator import GeneratorInputError, PasswordGenerator
from risk.schemas import (
    DuplicateGroup,
    DuplicateMember,
    DuplicateGroupsResponse,
    GeneratedPasswordResponse,
    SecurityScoreResponse,
    StrengthRequest,
    StrengthResponse,
)
from risk.strength import StrengthResult, evaluate
from vault.store import CredentialStore, get_store

logger = get_logger("risk")

router = APIRouter(prefix="/risk", tags=["risk"])

_generator = PasswordGenerator()


def _strength_response(result: StrengthResult) -> StrengthResponse:
    return StrengthResponse(score=result.score, label=result.label, suggestions=list(result.suggestions))


# ---------------------------------------------------------------------------
# POST /risk/strength  – score a password without storing it
# ---------------------------------------------------------------------------


@router.post("/strength", response_model=StrengthResponse)
def strength(body: StrengthRequest):
    return _strength_response(evaluate(body.password))


# ---------------------------------------------------------------------------
# GET /risk/generate  – random password or passphrase
# ---------------------------------------------------------------------------


@router.get("/generate", response_model=GeneratedPasswordResponse)
def generate(
    mode: str = "passphrase",
    length: int = 16,
    word_count: int = 4,
    separator: str = "-",
    include_number: bool = True,
):
    """
    Modes
    -----
    random      – ``length`` 8-64, all four character classes guaranteed.
    passphrase  – ``word_count`` 3-8 words joined by ``separator``
                  (one of ``- _ .`` or space), optional trailing number.
    """
    mode = mode.lower().strip()
    try:
        if mode == "random":
            password = _generator.random_password(length)
        elif mode == "passphrase":
            password = _generator.passphrase(word_count, separator, include_number)
        else:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid mode. Must be 'random' or 'passphrase'",
            )
    except GeneratorInputError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))

    return GeneratedPasswordResponse(password=password, strength=_strength_response(evaluate(password)))


# ---------------------------------------------------------------------------
# GET /risk/score  – aggregate security score
# ---------------------------------------------------------------------------


@router.get("/score", response_model=SecurityScoreResponse)
def score(store: CredentialStore = Depends(get_store)):
    snapshot = aggregate(store.list(), stale_after_days=settings.stale_after_days)
    logger.info(
        "Security score computed | overall=%d total=%d weak=%d compromised=%d reused=%d old=%d",
        snapshot.overall,
        snapshot.total,
        snapshot.weak,
        snapshot.compromised,
        snapshot.reused,
        snapshot.old,
    )
    return SecurityScoreResponse(grade=snapshot.grade, **asdict(snapshot))


# ---------------------------------------------------------------------------
# GET /risk/duplicates  – records sharing a password
# ---------------------------------------------------------------------------


@router.get("/duplicates", response_model=DuplicateGroupsResponse)
def duplicates(store: CredentialStore = Depends(get_store)):
    groups = find_duplicates(store.list())
    return DuplicateGroupsResponse(
        groups=[
            DuplicateGroup(
                size=len(members),
                items=[DuplicateMember.model_validate(m) for m in members],
            )
            for members in groups.values()
        ]
    )
