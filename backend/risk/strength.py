# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Password strength heuristic.

An additive point system: length and character-class bonuses, a diversity
bonus, and penalties for trivially guessable shapes.  The result is clamped
to 0-100 and mapped onto a three-step label.

The function is pure – the secret is scored exactly as given (no trimming,
no case folding) and nothing is persisted or logged.
"""

import re
from dataclasses import dataclass

WEAK = "Weak"
MODERATE = "Moderate"
STRONG = "Strong"

# Shared with the aggregate score: < 40 is weak, >= 70 is strong
WEAK_THRESHOLD = 40
STRONG_THRESHOLD = 70

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SPECIAL = re.compile(r"[^a-zA-Z0-9]")
_LETTERS_ONLY = re.compile(r"[a-zA-Z]+")
_DIGITS_ONLY = re.compile(r"[0-9]+")
_TRIPLE_RUN = re.compile(r"(.)\1{2,}")


@dataclass(frozen=True)
class StrengthResult:
    score: int
    label: str
    suggestions: tuple[str, ...] = ()


def label_for(score: int) -> str:
    """Map a 0-100 score onto Weak / Moderate / Strong."""
    if score < WEAK_THRESHOLD:
        return WEAK
    if score < STRONG_THRESHOLD:
        return MODERATE
    return STRONG


def evaluate(secret: str) -> StrengthResult:
    """
    Score *secret* and collect improvement suggestions.

    Never raises for a ``str`` input; the empty string scores 0.
    """
    score = 0
    suggestions: list[str] = []
    length = len(secret)

    # -- Length ------------------------------------------------------------
    if length >= 8:
        score += 20
    else:
        suggestions.append("Use at least 8 characters")
    if length >= 12:
        score += 10
    if length >= 16:
        score += 10

    # -- Character classes -------------------------------------------------
    if _LOWER.search(secret):
        score += 10
    else:
        suggestions.append("Add lowercase letters")

    if _UPPER.search(secret):
        score += 10
    else:
        suggestions.append("Add uppercase letters")

    if _DIGIT.search(secret):
        score += 15
    else:
        suggestions.append("Add numbers")

    if _SPECIAL.search(secret):
        score += 15
    else:
        suggestions.append("Add special characters (!@#$%^&*)")

    # -- Diversity bonus (code points, not bytes) --------------------------
    if secret and len(set(secret)) >= length * 0.7:
        score += 10

    # -- Penalties ---------------------------------------------------------
    if _LETTERS_ONLY.fullmatch(secret):
        score -= 10
        suggestions.append("Avoid using only letters")
    if _DIGITS_ONLY.fullmatch(secret):
        score -= 20
        suggestions.append("Avoid using only numbers")
    if _TRIPLE_RUN.search(secret):
        score -= 10
        suggestions.append("Avoid repeated characters")

    score = max(0, min(100, score))
    return StrengthResult(score=score, label=label_for(score), suggestions=tuple(suggestions))
