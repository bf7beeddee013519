"""Error kinds and the JSON bodies the auth layer responds with."""
import enum
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class ErrorKind(enum.Enum):
    """Failure categories, each with its HTTP status and default code."""

    VALIDATION = (status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR")
    AUTHENTICATION = (status.HTTP_401_UNAUTHORIZED, "UNAUTHORIZED")
    AUTHORIZATION = (status.HTTP_403_FORBIDDEN, "FORBIDDEN")
    UNEXPECTED = (status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR")

    def __init__(self, status_code: int, code: str):
        self.status_code = status_code
        self.code = code


def error_response(
    message: str,
    status_code: int,
    code: Optional[str] = None,
    details: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """Failure body: ``{"error": ..., "code": ...}`` plus optional details."""
    content: Dict[str, Any] = {"error": message, "code": code or f"ERROR_{status_code}"}
    if details is not None:
        content["details"] = details
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder(content), headers=headers
    )


def kind_response(
    kind: ErrorKind,
    message: str,
    details: Any = None,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    return error_response(message, kind.status_code, kind.code, details, headers)


def success_response(
    data: Dict[str, Any],
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Mapping[str, str]] = None,
) -> JSONResponse:
    """Success body: ``{"success": true, ...data}``."""
    content = {"success": True, **data}
    return JSONResponse(
        status_code=status_code, content=jsonable_encoder(content), headers=headers
    )


@dataclass(frozen=True)
class Denial:
    """Outcome of a guard that refused a request."""

    kind: ErrorKind
    message: str
    details: Optional[str] = None

    def to_response(self) -> JSONResponse:
        return kind_response(self.kind, self.message, self.details)


class AccessDenied(Exception):
    """Raised by FastAPI dependencies to stop a request at a guard."""

    def __init__(self, denial: Denial):
        super().__init__(denial.message)
        self.denial = denial
