import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException

from vacationplanner.api import admin, auth
from vacationplanner.middleware import AdminPrefilterMiddleware
from vacationplanner.services.auth.errors import (
    AccessDenied,
    ErrorKind,
    error_response,
    kind_response,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="Vacation Planner", version="0.1.0")

# Presence-only check for /admin and /api/admin; route guards do the rest
app.add_middleware(AdminPrefilterMiddleware)


@app.exception_handler(AccessDenied)
async def access_denied_handler(request: Request, exc: AccessDenied):
    """Render guard denials as JSON error bodies."""
    return exc.denial.to_response()


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return kind_response(
        ErrorKind.VALIDATION,
        "Validation failed",
        details=[
            {"loc": list(error["loc"]), "msg": error["msg"], "type": error["type"]}
            for error in exc.errors()
        ],
    )


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    """Keep the ``{"error": ...}`` body shape for framework errors too."""
    return error_response(str(exc.detail), exc.status_code, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error: method=%s, path=%s", request.method, request.url.path
    )
    return kind_response(ErrorKind.UNEXPECTED, "Internal server error")


# Include routers
app.include_router(auth.router)
app.include_router(admin.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
