from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import DataError, IntegrityError

from user_registry.config import settings
from user_registry.db.session import shutdown
from user_registry.dependencies import DB
from user_registry.failures import UniquenessConflict
from user_registry.logging import get_logger
from user_registry.middleware import RequestIDMiddleware
from user_registry.responder import (
    build_problem,
    failure_from_request_errors,
    problem_json,
    problem_response,
)
from user_registry.routers.user import router as user_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Code before yield runs on startup, after yield on shutdown."""
    logger.info("startup", user_min_age=settings.user_min_age)
    yield
    await shutdown()


app = FastAPI(title="User registry", lifespan=lifespan)
app.add_middleware(RequestIDMiddleware)
app.include_router(user_router, prefix=settings.api_prefix)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed bodies, path and query parameters as problems."""
    failure = failure_from_request_errors(exc.errors())
    return problem_response(failure, request.url.path)


@app.exception_handler(IntegrityError)
@app.exception_handler(DataError)
async def integrity_error_handler(
    request: Request, exc: IntegrityError | DataError
) -> JSONResponse:
    """Store rejections not classified by a service (e.g. raised on commit)."""
    return problem_response(UniquenessConflict.from_error(exc), request.url.path)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unhandled exceptions and return a safe problem response.

    - Logs full exception with traceback (includes request_id from context)
    - Returns a generic problem to the client (no stack traces leaked)
    """
    logger.exception("unhandled_exception", path=request.url.path, method=request.method)
    status = HTTPStatus.INTERNAL_SERVER_ERROR
    return problem_json(build_problem(status, "Internal server error", request.url.path, []))


@app.get("/health")
async def health(db: DB) -> dict[str, str]:
    """Health check endpoint: verifies database connectivity."""
    await db.execute(text("SELECT 1"))
    return {"status": "ok"}
