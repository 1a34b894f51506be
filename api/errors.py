"""Mapping of pricedb errors to plain-text HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from pricedb.exceptions import ErrorKind, PriceDBError

logger = logging.getLogger(__name__)

ERROR_STATUS_MAP: dict[ErrorKind, int] = {
    ErrorKind.MALFORMED_ARCHIVE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ROW_SHAPE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FIELD_PARSE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.STORAGE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.SERIALIZATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UPSTREAM_QUERY: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: PriceDBError) -> int:
    return ERROR_STATUS_MAP.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def price_error_handler(request: Request, exc: PriceDBError) -> PlainTextResponse:
    status_code = status_for(exc)
    message = exc.describe()
    log = logger.error if status_code >= 500 else logger.warning
    log(
        "%s %s failed with %d (%s): %s",
        request.method,
        request.url.path,
        status_code,
        exc.kind.value,
        message,
    )
    return PlainTextResponse(message, status_code=status_code)


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the pricedb error handler on the app."""
    app.add_exception_handler(PriceDBError, price_error_handler)
