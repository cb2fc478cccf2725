import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

LOGGER = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = "Please provide all required fields."
INVALID_FIELDS_MESSAGE = "Invalid request fields."

_MISSING_ERROR_TYPES = {"missing", "union_tag_not_found"}


class ApiError(HTTPException):
    def __init__(self, status_code: int, code: str, message: str) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.code = code


def _field_name(error: dict) -> str:
    if error["type"].startswith("union_tag_"):
        return "kind"
    names = [part for part in error["loc"] if isinstance(part, str) and part != "body"]
    return names[-1] if names else "body"


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    code = getattr(exc, "code", "http_error")
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": str(exc.detail), "code": code},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    missing = sorted(
        {_field_name(error) for error in errors if error["type"] in _MISSING_ERROR_TYPES}
    )
    LOGGER.warning(
        "Validation error path=%s fields=%s",
        request.url.path,
        [_field_name(error) for error in errors],
    )
    if missing:
        content = {
            "message": MISSING_FIELDS_MESSAGE,
            "code": "missing_fields",
            "fields": missing,
        }
    else:
        content = {
            "message": INVALID_FIELDS_MESSAGE,
            "code": "invalid_fields",
            "fields": sorted({_field_name(error) for error in errors}),
        }
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=content)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception path=%s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error", "code": "internal_error"},
    )


def install_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
