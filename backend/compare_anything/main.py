"""
CompareAnything Backend — FastAPI Application Factory

App creation, middleware (CORS, rate limiting, request ID logging), error handlers, router registration.
Run with: uvicorn compare_anything.main:app --reload
"""

import uuid

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from compare_anything import db
from compare_anything.api import compare, comparisons, history
from compare_anything.config import generate_error_code, log, settings
from compare_anything.errors import CompareError, InvalidInput
from compare_anything.limits import limiter

VERSION = "0.1.0"


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log it on the way in and out.

    A client-supplied X-Request-Id is reused, otherwise a fresh one is minted.
    The id is echoed on the response so a failed compare can be matched to its
    log lines.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex[:12]
        log("INFO", "request received", method=request.method, path=request.url.path,
            request_id=request_id)
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        log("INFO", "request finished", path=request.url.path, status=response.status_code,
            request_id=request_id)
        return response


async def compare_error_handler(request: Request, exc: CompareError) -> JSONResponse:
    """Convert any CompareError into {"error": ..., "error_code": ...}."""
    log(
        "WARN" if exc.status_code < 500 else "ERROR",
        "request failed",
        path=request.url.path,
        status=exc.status_code,
        error=exc.message,
        error_code=exc.error_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """A body that is not a JSON object carries no items, so it is an InvalidInput (400)."""
    return await compare_error_handler(request, InvalidInput(error_code=generate_error_code()))


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Steps:
        1. Create FastAPI instance with title, version, description
        2. Add CORS middleware (origins from settings.cors_origins)
        3. Add request ID logging middleware
        4. Add rate limiting (slowapi) and the CompareError handler
        5. Register routers (compare, history, comparisons)
        6. Return the app
    """
    app = FastAPI(
        title="CompareAnything API",
        version=VERSION,
        description="Compare any two things with an LLM — recent, trending and shareable comparisons.",
    )

    # CORS
    origins = [origin.strip() for origin in settings.cors_origins.split(",")]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request ID logging
    app.add_middleware(RequestIdMiddleware)

    # Rate limiting (applied per-endpoint via decorator, not globally)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    app.add_exception_handler(CompareError, compare_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routers
    app.include_router(compare.router)
    app.include_router(history.router)
    app.include_router(comparisons.router)

    return app


app = create_app()


@app.get("/api/health")
async def health_check():
    """
    GET /api/health

    Returns: { "status": "ok", "version": "0.1.0", "persist_failures": int }
    """
    return {"status": "ok", "version": VERSION, "persist_failures": db.persist_failure_count()}
