"""Map domain errors onto HTTP responses."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.errors import (
    AuthenticationRequired,
    BillingError,
    EstateHubError,
    FieldError,
    NotFoundError,
    StorageFailure,
    ValidationError,
)

STATUS_CODES: dict[type[EstateHubError], int] = {
    ValidationError: 400,
    AuthenticationRequired: 401,
    NotFoundError: 404,
    BillingError: 502,
    StorageFailure: 503,
}


def _status_for(exc: EstateHubError) -> int:
    for exc_type in type(exc).__mro__:
        if exc_type in STATUS_CODES:
            return STATUS_CODES[exc_type]
    return 500


async def handle_domain_error(_: Request, exc: EstateHubError) -> JSONResponse:
    return JSONResponse(status_code=_status_for(exc), content=exc.to_payload())


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ())[1:]]
        errors.append(
            FieldError(
                field=".".join(location) or "body",
                message=str(error.get("msg", "invalid value")),
            )
        )
    return await handle_domain_error(request, ValidationError(errors))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EstateHubError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
