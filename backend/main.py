# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS and request-logging middleware.
* Mount the two feature routers (vault, risk).
* Create missing tables on startup so a fresh local vault works without
  running the Alembic migrations first.
* Expose a /health endpoint for liveness checks.

Run with ``uvicorn main:app`` from the backend/ directory.
"""

import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response

from core.config import settings
from core.logger import logger
from database import Base, engine
from risk.router import router as risk_router
from vault.router import router as vault_router
import models.audit_log   # noqa: F401  (register tables on Base.metadata)
import models.credential  # noqa: F401

app = FastAPI(title="Password Vault", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs method, path, client IP, status and latency.  Bodies are never logged,
# so passwords submitted to /vault or /risk do not reach the log.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        client_ip = request.client.host if request.client else "unknown"

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            client_ip,
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(vault_router)
app.include_router(risk_router)


@app.on_event("startup")
async def _on_startup():
    Base.metadata.create_all(bind=engine)
    logger.info("Password Vault service starting up")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Password Vault service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}
