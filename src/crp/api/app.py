"""FastAPI application for complaint preview, registration and listing."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from crp import __version__
from crp.config import Settings
from crp.errors import (
    InputValidationError,
    PipelineError,
    RateLimited,
    StorageError,
    UpstreamUnavailable,
)
from crp.models import CitizenContact, DuplicateOutcome, RawPost, RejectedOutcome
from crp.pipeline import Resolver, build_resolver
from crp.utils.logging import get_logger
from crp.utils.time import utc_now


logger = get_logger(__name__)


SERVICE_NAME = "Civic Mirror Backend"
MIN_TITLE_CHARS = 5
MIN_KEYWORD_CHARS = 2
MAX_FETCH_LIMIT = 50
MAX_LIST_LIMIT = 200
REJECTION_SUGGESTION = (
    "Only posts about potholes, water, electricity, garbage etc. are accepted"
)


class RegisterRequest(RawPost):
    """A post to register plus optional citizen contact details."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    citizen_email: Optional[str] = None
    citizen_phone: Optional[str] = None


class BatchRequest(BaseModel):
    keyword: str = "pothole"
    source: str = "delhi"
    limit: int = 10


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


def create_app(
    resolver: Optional[Resolver] = None, settings: Optional[Settings] = None
) -> FastAPI:
    """Create the API app; a resolver is built from settings when not supplied."""
    settings = settings or Settings()
    resolver = resolver or build_resolver(settings)
    app = FastAPI(
        title="Complaint Routing API",
        version=__version__,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_url],
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        fields = sorted(
            {".".join(str(part) for part in error["loc"][1:]) for error in exc.errors()}
        )
        return _error(400, "Invalid request", fields=fields)

    @app.exception_handler(InputValidationError)
    async def handle_input_error(request: Request, exc: InputValidationError) -> JSONResponse:
        return _error(400, str(exc))

    @app.exception_handler(RateLimited)
    async def handle_rate_limited(request: Request, exc: RateLimited) -> JSONResponse:
        logger.warning("api.rate_limited path=%s retry_after=%s", request.url.path, exc.retry_after)
        return _error(
            429, "Rate limit reached", message=str(exc), retryAfter=exc.retry_after
        )

    @app.exception_handler(UpstreamUnavailable)
    async def handle_upstream(request: Request, exc: UpstreamUnavailable) -> JSONResponse:
        logger.error("api.upstream_unavailable path=%s error=%s", request.url.path, exc)
        return _error(503, "External service unavailable", message=str(exc))

    @app.exception_handler(StorageError)
    async def handle_storage(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("api.storage_error path=%s error=%s", request.url.path, exc)
        return _error(500, "Database error", message="Could not save to database.")

    @app.exception_handler(PipelineError)
    async def handle_pipeline(request: Request, exc: PipelineError) -> JSONResponse:
        logger.error("api.pipeline_error path=%s error=%s", request.url.path, exc)
        return _error(500, "Internal server error", message=str(exc))

    @app.get("/health")
    async def health() -> dict:
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": utc_now().isoformat(),
            "environment": settings.run_env,
        }

    @app.get("/fetch")
    async def fetch(
        keyword: str = "",
        source: str = "delhi",
        limit: int = 20,
        multi: bool = False,
    ) -> dict:
        """Preview classified posts for a keyword without saving them."""
        if len(keyword.strip()) < MIN_KEYWORD_CHARS:
            raise InputValidationError(
                "keyword query parameter is required (min 2 characters)"
            )
        limit = max(1, min(limit, MAX_FETCH_LIMIT))
        summary = await resolver.preview(keyword, source, limit, multi)
        return {"success": True, **summary.model_dump(mode="json", by_alias=True)}

    @app.post("/register", status_code=201)
    async def register(payload: RegisterRequest):
        """Run one post through the full registration pipeline."""
        if len(payload.title.strip()) < MIN_TITLE_CHARS:
            raise InputValidationError("title is required (min 5 characters)")

        citizen = CitizenContact(email=payload.citizen_email, phone=payload.citizen_phone)
        outcome = await resolver.resolve(payload, citizen)

        if isinstance(outcome, RejectedOutcome):
            return _error(
                422,
                "This post does not appear to be a civic complaint",
                reason=outcome.reason,
                suggestion=REJECTION_SUGGESTION,
            )
        if isinstance(outcome, DuplicateOutcome):
            return _error(
                409,
                "This Reddit post has already been processed",
                redditId=outcome.reddit_id,
            )

        return {
            "success": True,
            "citizenNotified": outcome.citizen_notified,
            **outcome.model_dump(mode="json", by_alias=True),
        }

    @app.get("/all")
    async def list_all(limit: int = 50) -> dict:
        limit = max(1, min(limit, MAX_LIST_LIMIT))
        complaints = await resolver.store.list_recent(limit)
        return {
            "success": True,
            "count": len(complaints),
            "complaints": [c.model_dump(mode="json", by_alias=True) for c in complaints],
        }

    @app.post("/batch-process")
    async def batch_process(payload: Optional[BatchRequest] = None) -> dict:
        """Fetch posts for a keyword and register every civic one."""
        payload = payload or BatchRequest()
        summary = await resolver.batch_process(payload.keyword, payload.source, payload.limit)
        return {"success": True, **summary.model_dump(mode="json", by_alias=True)}

    return app
