"""HTTP trigger for on-demand reconciliation runs.

Usage:
    uvicorn shiptrack.api:app --host 0.0.0.0 --port 8000
"""

from __future__ import annotations

import asyncio
import hmac
from collections.abc import Callable
from logging import getLogger

from fastapi import APIRouter, FastAPI, Header, Request
from fastapi.responses import JSONResponse

from shiptrack.app import build_reconciliation_job
from shiptrack.config import MissingConfigurationError, get_cron_secret
from shiptrack.domain.reconciliation import ReconciliationJob

log = getLogger(__name__)

JobFactory = Callable[[], ReconciliationJob]

_BEARER_PREFIX = "bearer "


def _presented_secret(
    request: Request,
    x_cron_secret: str | None,
    authorization: str | None,
) -> str | None:
    query_secret = request.query_params.get("secret")
    if query_secret:
        return query_secret
    if x_cron_secret:
        return x_cron_secret
    if authorization and authorization.lower().startswith(_BEARER_PREFIX):
        return authorization[len(_BEARER_PREFIX) :].strip()
    return None


def _secret_matches(presented: str | None, expected: str) -> bool:
    if presented is None:
        return False
    return hmac.compare_digest(presented.encode(), expected.encode())


def build_router(job_factory: JobFactory) -> APIRouter:
    router = APIRouter()

    @router.api_route("/api/poll", methods=["GET", "POST"])
    async def poll(
        request: Request,
        x_cron_secret: str | None = Header(default=None),
        authorization: str | None = Header(default=None),
    ) -> JSONResponse:
        """Run one reconciliation cycle if the caller knows the cron secret."""
        try:
            expected = get_cron_secret()
        except MissingConfigurationError:
            log.error("Poll requested but CRON_SECRET is not configured")
            return JSONResponse(status_code=500, content={"error": "CRON_SECRET not configured"})

        if not _secret_matches(_presented_secret(request, x_cron_secret, authorization), expected):
            log.warning("Rejected poll request from %s", request.client)
            return JSONResponse(status_code=401, content={"error": "Invalid secret"})

        # wiring may create the schema, which blocks
        job = await asyncio.to_thread(job_factory)
        summary = await job.run_async()
        message = "Sync complete" if summary.processed else "No active shipments"
        return JSONResponse(
            status_code=200,
            content={
                "message": message,
                "processed": summary.processed,
                "updated": summary.updated,
                "failed": summary.failed,
            },
        )

    @router.get("/healthz")
    async def healthz() -> JSONResponse:
        return JSONResponse(status_code=200, content={"status": "ok"})

    return router


def create_app(job_factory: JobFactory | None = None) -> FastAPI:
    app = FastAPI(
        title="ShipTrack",
        description="Carrier status reconciliation trigger",
    )
    app.include_router(build_router(job_factory or build_reconciliation_job))
    return app


app = create_app()
