"""
Shared test fixtures.

Provides an in-memory SQLite session, a fake Pwned Passwords range API
served through ``httpx.MockTransport``, a BreachOracle bound to it, and a
FastAPI TestClient with both dependencies overridden.
"""

import os

# Must be set before core.config is imported anywhere.
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from database import Base, get_db  # noqa: E402
from main import app  # noqa: E402
from risk.breach import BreachOracle, get_oracle, sha1_hex, split_hash  # noqa: E402
from vault.store import CredentialStore  # noqa: E402

_DECOY = "0" * 35


class FakeCorpus:
    """
    Stand-in for the range endpoint.  ``add(secret, count)`` registers a
    breached secret; ``status`` forces every response to that HTTP status.
    Every requested prefix is recorded in ``requests``, and ``on_request``
    (if set) is called with each request before it is answered.
    """

    def __init__(self):
        self.counts: dict[str, int] = {}
        self.status = 200
        self.requests: list[httpx.Request] = []
        self.on_request = None

    def add(self, secret: str, count: int) -> None:
        self.counts[sha1_hex(secret)] = count

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.on_request is not None:
            self.on_request(request)
        if self.status != 200:
            return httpx.Response(self.status)
        prefix = request.url.path.rsplit("/", 1)[-1]
        lines = [f"{_DECOY}:7"]
        for digest, count in self.counts.items():
            p, suffix = split_hash(digest)
            if p == prefix:
                lines.append(f"{suffix}:{count}")
        return httpx.Response(200, text="\r\n".join(lines))


@pytest.fixture
def corpus():
    return FakeCorpus()


@pytest.fixture
def oracle(corpus):
    client = httpx.AsyncClient(transport=httpx.MockTransport(corpus.handler))
    return BreachOracle(client=client, max_retries=0, retry_backoff=0)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def store(db_session, oracle):
    return CredentialStore(db_session, oracle)


@pytest.fixture
def client(db_session, oracle):
    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_oracle] = lambda: oracle
    yield TestClient(app)
    app.dependency_overrides.clear()
