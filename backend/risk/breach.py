# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Breach lookup against the Pwned Passwords range API (k-anonymity).

Protocol
--------
1. SHA-1 the secret, uppercase hex (the corpus is keyed this way).
2. Send only the first 5 hex characters:  GET {range_url}/{prefix}
3. The body lists every ``SUFFIX:COUNT`` sharing that prefix; scan it for
   our locally kept 35-char suffix.

The plaintext and the full digest never leave the process, and neither is
logged.

Results
-------
Every lookup returns either ``BreachCount(count)`` – the lookup worked, and
``count == 0`` means *confirmed* not found – or ``BreachUnknown(reason)`` when
the answer could not be established (network error, non-2xx, malformed body,
timeout).  Callers must handle both; nothing in this module raises for those
failure modes.
"""

import asyncio
import hashlib
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Iterable, Optional, Union

import httpx

from core.config import settings
from core.logger import get_logger

logger = get_logger("breach")

PREFIX_LENGTH = 5
_SUFFIX_LENGTH = 35
_HEX = frozenset("0123456789ABCDEF")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BreachCount:
    """Lookup succeeded.  ``count`` is the number of times the secret was seen."""

    count: int

    @property
    def compromised(self) -> bool:
        return self.count > 0


@dataclass(frozen=True)
class BreachUnknown:
    """Lookup failed; the secret may or may not be breached."""

    reason: str


BreachLookupResult = Union[BreachCount, BreachUnknown]


class MalformedRangeResponse(ValueError):
    """The range response contained a line that is not ``HEX35:INT``."""


# ---------------------------------------------------------------------------
# Hash helpers
# ---------------------------------------------------------------------------


def sha1_hex(secret: str) -> str:
    """Return the uppercase SHA-1 hex digest of *secret* (UTF-8)."""
    return hashlib.sha1(secret.encode("utf-8")).hexdigest().upper()


def split_hash(digest: str) -> tuple[str, str]:
    """Split a 40-char digest into the 5-char query prefix and the 35-char suffix."""
    digest = digest.upper()
    return digest[:PREFIX_LENGTH], digest[PREFIX_LENGTH:]


def parse_range_response(text: str) -> dict[str, int]:
    """
    Parse a range response body into ``{SUFFIX: count}``.

    Blank lines are skipped and CRLF line endings are tolerated; any other
    line that is not ``<35 hex chars>:<non-negative int>`` raises
    :class:`MalformedRangeResponse`.
    """
    counts: dict[str, int] = {}
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line:
            continue
        suffix, sep, count = line.partition(":")
        suffix = suffix.strip().upper()
        count = count.strip()
        if (
            not sep
            or len(suffix) != _SUFFIX_LENGTH
            or not _HEX.issuperset(suffix)
            or not (count.isascii() and count.isdigit())
        ):
            raise MalformedRangeResponse(f"line {lineno} is not SUFFIX:COUNT")
        counts[suffix] = int(count)
    return counts


# ---------------------------------------------------------------------------
# Oracle
# ---------------------------------------------------------------------------


class BreachOracle:
    """
    Async client for the range API.

    Pass an ``httpx.AsyncClient`` to share a connection pool (or to plug in a
    mock transport in tests); otherwise a short-lived client is opened per
    :meth:`lookup` / :meth:`lookup_many` call.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        range_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        concurrency: Optional[int] = None,
    ):
        self._client = client
        self.range_url = (range_url or settings.hibp_range_url).rstrip("/")
        self.user_agent = user_agent or settings.hibp_user_agent
        self.timeout = settings.hibp_timeout_seconds if timeout is None else timeout
        self.max_retries = settings.hibp_max_retries if max_retries is None else max_retries
        self.retry_backoff = (
            settings.hibp_retry_backoff_seconds if retry_backoff is None else retry_backoff
        )
        self.concurrency = max(1, concurrency or settings.hibp_concurrency)

    @asynccontextmanager
    async def _session(self):
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(
            headers={"User-Agent": self.user_agent},
            timeout=self.timeout,
        ) as client:
            yield client

    # -- Single lookup -------------------------------------------------------

    async def lookup(self, secret: str) -> BreachLookupResult:
        """Return how often *secret* appears in the corpus, or ``BreachUnknown``."""
        async with self._session() as client:
            return await self._lookup(client, secret)

    async def _lookup(self, client: httpx.AsyncClient, secret: str) -> BreachLookupResult:
        prefix, suffix = split_hash(sha1_hex(secret))
        try:
            body = await self._fetch_range(client, prefix)
        except httpx.HTTPError as exc:
            logger.warning("Breach lookup failed | prefix=%s error=%s", prefix, type(exc).__name__)
            return BreachUnknown("transport error")
        if body is None:
            return BreachUnknown("bad status")

        try:
            counts = parse_range_response(body)
        except ValueError as exc:  # MalformedRangeResponse is a ValueError
            logger.warning("Breach lookup failed | prefix=%s error=%s", prefix, exc)
            return BreachUnknown("malformed response")

        return BreachCount(counts.get(suffix, 0))

    async def _fetch_range(self, client: httpx.AsyncClient, prefix: str) -> Optional[str]:
        """
        GET the range for *prefix*, retrying transport errors and non-2xx
        responses with linear backoff.  Returns the body text, ``None`` after
        the last non-2xx response, or re-raises the last transport error.
        """
        url = f"{self.range_url}/{prefix}"
        attempt = 0
        while True:
            try:
                resp = await client.get(url, headers={"User-Agent": self.user_agent})
            except httpx.HTTPError:
                if attempt >= self.max_retries:
                    raise
            else:
                if resp.is_success:
                    return resp.text
                logger.warning(
                    "Breach lookup returned status %d | prefix=%s attempt=%d",
                    resp.status_code,
                    prefix,
                    attempt + 1,
                )
                if attempt >= self.max_retries:
                    return None
            attempt += 1
            await asyncio.sleep(self.retry_backoff * attempt)

    # -- Batch lookup --------------------------------------------------------

    async def lookup_many(
        self,
        secrets: Iterable[str],
        timeout: Optional[float] = None,
    ) -> list[BreachLookupResult]:
        """
        Look up every secret concurrently.

        Lookups are independent: at most ``concurrency`` run at once, each
        one gets its own *timeout* (seconds, including retries), and one that
        times out becomes ``BreachUnknown("timeout")`` without disturbing the
        rest.  Results are returned in input order.
        """
        secrets = list(secrets)
        if not secrets:
            return []
        gate = asyncio.Semaphore(self.concurrency)

        async with self._session() as client:

            async def one(secret: str) -> BreachLookupResult:
                async with gate:
                    try:
                        return await asyncio.wait_for(self._lookup(client, secret), timeout)
                    except asyncio.TimeoutError:
                        logger.warning("Breach lookup timed out after %.1fs", timeout)
                        return BreachUnknown("timeout")

            results = await asyncio.gather(*(one(s) for s in secrets))

        found = sum(1 for r in results if isinstance(r, BreachCount) and r.compromised)
        failed = sum(1 for r in results if isinstance(r, BreachUnknown))
        logger.info(
            "Breach batch complete | total=%d compromised=%d unknown=%d",
            len(results),
            found,
            failed,
        )
        return list(results)


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

_oracle: Optional[BreachOracle] = None


def get_oracle() -> BreachOracle:
    """Process-wide oracle built from settings.  Override in tests."""
    global _oracle
    if _oracle is None:
        _oracle = BreachOracle()
    return _oracle
