import logging
from typing import List

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Something broke!"


class FieldError(BaseModel):
    field: str
    message: str


class StoreError(Exception):
    """The document store failed to complete an operation."""


class BusinessRuleError(Exception):
    """A request that is well formed but not allowed, answered with 400."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BodyValidationError(Exception):
    def __init__(self, errors: List[FieldError]):
        super().__init__(f"{len(errors)} invalid field(s)")
        self.errors = errors


def validation_response(errors: List[FieldError]) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"errors": [error.model_dump() for error in errors]},
    )


def field_errors_from_pydantic(errors) -> List[FieldError]:
    """Convert pydantic/FastAPI error dicts into ``{field, message}`` pairs."""
    converted = []
    for error in errors:
        # FastAPI prefixes request locations with "body", "path" or "query"
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "path", "query", "header"):
            loc = loc[1:]
        converted.append(FieldError(field=".".join(loc), message=error.get("msg", "")))
    return converted


async def body_validation_handler(request: Request, exc: BodyValidationError):
    return validation_response(exc.errors)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return validation_response(field_errors_from_pydantic(exc.errors()))


async def business_rule_handler(request: Request, exc: BusinessRuleError):
    return PlainTextResponse(exc.message, status_code=400)


async def store_error_handler(request: Request, exc: StoreError):
    logger.error(f"{request.method} {request.url.path} failed: {exc}", exc_info=exc.__cause__ or exc)
    return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}", exc_info=exc)
    return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BodyValidationError, body_validation_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(BusinessRuleError, business_rule_handler)
    app.add_exception_handler(StoreError, store_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
