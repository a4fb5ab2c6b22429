# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error translation for the HTTP layer.

Endpoints let RecordServiceError propagate; the handlers registered here
turn each error kind into one status code and a uniform JSON body.
Malformed request bodies and path parameters are reported as validation
errors with the same shape.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domains.errors import ErrorKind, RecordServiceError

logger = logging.getLogger(__name__)

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(error: RecordServiceError) -> int:
    """HTTP status code for a record error."""
    return STATUS_BY_KIND.get(error.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def record_error_handler(request: Request, exc: RecordServiceError) -> JSONResponse:
    """Render a RecordServiceError as JSON."""
    code = status_for(exc)
    if code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content=exc.to_dict())


def _public_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Render FastAPI request validation failures as validation errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": ErrorKind.VALIDATION.value,
            "type": "ValidationError",
            "message": "Invalid request",
            "details": {"errors": jsonable_encoder(_public_errors(exc))},
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    """Install the error handlers on an application."""
    app.add_exception_handler(RecordServiceError, record_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
