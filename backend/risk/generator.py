# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Password and passphrase generation.

Both modes draw from an injectable random source.  Production code uses the
OS CSPRNG (``secrets.SystemRandom``); tests pass a seeded ``random.Random``
to get reproducible output.

Modes
-----
random      – length 8-64, at least one lowercase, uppercase, digit and
              symbol, shuffled so the guaranteed characters move around.
passphrase  – 3-8 distinct words, each capitalised on a coin flip, joined by
              a separator, optionally followed by a number 0-99.

Out-of-range parameters raise :class:`GeneratorInputError` before anything is
generated.
"""

import random
import secrets
import string
from typing import Optional, Sequence

LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 64
MIN_WORD_COUNT = 3
MAX_WORD_COUNT = 8

SEPARATORS = ("-", "_", ".", " ")

# Short, curated list.  Every entry is lowercase, alphabetic and unique.
WORD_LIST = (
    "apple", "bear", "cedar", "dawn", "eagle", "frost", "grape", "hawk",
    "iris", "jade", "kite", "lake", "maple", "night", "ocean", "peach",
    "quail", "river", "stone", "tiger", "vine", "wave", "xenon", "yak",
    "zebra", "amber", "brook", "crane", "dove", "elm", "flare", "gold",
    "holly", "ivy", "jewel", "knot", "lily", "moss", "oak", "pearl",
    "rose", "sage", "thorn", "umber", "willow", "zeal", "arch", "birch",
    "bright", "calm", "eager", "gentle", "happy", "keen", "lively", "magic",
    "noble", "proud", "quick", "swift", "vivid", "warm", "azure", "brave",
)


class GeneratorInputError(ValueError):
    """Raised for out-of-range generator parameters."""


class PasswordGenerator:
    """Random password / passphrase factory bound to one random source."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        words: Sequence[str] = WORD_LIST,
        symbols: str = SYMBOLS,
    ):
        self._rng = rng if rng is not None else secrets.SystemRandom()
        self._words = tuple(words)
        self._symbols = symbols

    def random_password(self, length: int = 16) -> str:
        if not (MIN_PASSWORD_LENGTH <= length <= MAX_PASSWORD_LENGTH):
            raise GeneratorInputError(
                f"Length must be between {MIN_PASSWORD_LENGTH} and {MAX_PASSWORD_LENGTH}"
            )

        rng = self._rng
        charset = LOWERCASE + UPPERCASE + DIGITS + self._symbols

        # One guaranteed character per class, then fill from the union
        chars = [
            rng.choice(LOWERCASE),
            rng.choice(UPPERCASE),
            rng.choice(DIGITS),
            rng.choice(self._symbols),
        ]
        chars.extend(rng.choice(charset) for _ in range(length - len(chars)))

        # Fisher-Yates, so the guaranteed characters are not stuck up front
        rng.shuffle(chars)
        return "".join(chars)

    def passphrase(
        self,
        word_count: int = 4,
        separator: str = "-",
        include_number: bool = True,
    ) -> str:
        if not (MIN_WORD_COUNT <= word_count <= MAX_WORD_COUNT):
            raise GeneratorInputError(
                f"Word count must be between {MIN_WORD_COUNT} and {MAX_WORD_COUNT}"
            )
        if separator not in SEPARATORS:
            raise GeneratorInputError(f"Separator must be one of {SEPARATORS!r}")
        if word_count > len(self._words):
            raise GeneratorInputError(
                f"Word list has only {len(self._words)} words, {word_count} requested"
            )

        rng = self._rng
        words = []
        for word in rng.sample(self._words, word_count):
            if rng.random() < 0.5:
                word = word[:1].upper() + word[1:]
            words.append(word)

        phrase = separator.join(words)
        if include_number:
            phrase += separator + str(rng.randrange(100))
        return phrase


_default = PasswordGenerator()


def generate_random_password(length: int = 16) -> str:
    return _default.random_password(length)


def generate_passphrase(word_count: int = 4, separator: str = "-", include_number: bool = True) -> str:
    return _default.passphrase(word_count, separator, include_number)
