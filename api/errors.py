"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from auth.exceptions import (
    AuthError,
    InvalidCredentialsError,
    ManagerAuthorizationDeniedError,
    ManagerAuthorizationRequiredError,
    NotAuthenticatedError,
    SessionExpiredError,
)
from clients.pos_api_client import PosApiError
from core.exceptions import (
    CardValidationError,
    CheckoutValidationError,
    EmptyCartError,
    HeldOrderNotFoundError,
    InsufficientPaymentError,
    InvalidCartTransitionError,
    PaymentMethodRequiredError,
    PosError,
    StoreNotConfiguredError,
)

logger = logging.getLogger(__name__)

# Most specific class wins (handlers are looked up along the exception's MRO)
_POS_ERRORS = [
    (InvalidCartTransitionError, 409, ErrorCodes.INVALID_CART_TRANSITION),
    (HeldOrderNotFoundError, 404, ErrorCodes.HELD_ORDER_NOT_FOUND),
    (PaymentMethodRequiredError, 400, ErrorCodes.PAYMENT_METHOD_REQUIRED),
    (EmptyCartError, 400, ErrorCodes.EMPTY_CART),
    (InsufficientPaymentError, 400, ErrorCodes.INSUFFICIENT_PAYMENT),
    (CardValidationError, 400, ErrorCodes.INVALID_CARD),
    (CheckoutValidationError, 400, ErrorCodes.VALIDATION_ERROR),
    (StoreNotConfiguredError, 409, ErrorCodes.STORE_NOT_CONFIGURED),
    (PosError, 400, ErrorCodes.INVALID_REQUEST),
]

_AUTH_ERRORS = [
    (NotAuthenticatedError, 401, ErrorCodes.NOT_AUTHENTICATED),
    (SessionExpiredError, 401, ErrorCodes.SESSION_EXPIRED),
    (InvalidCredentialsError, 401, ErrorCodes.INVALID_CREDENTIALS),
    (ManagerAuthorizationRequiredError, 403, ErrorCodes.AUTHORIZATION_REQUIRED),
    (ManagerAuthorizationDeniedError, 403, ErrorCodes.AUTHORIZATION_DENIED),
    (AuthError, 403, ErrorCodes.AUTHORIZATION_DENIED),
]


def _json_error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message).model_dump(mode="json"),
    )


def _mapped_handler(status_code: int, code: str):
    async def handler(request: Request, exc: Exception):
        return _json_error(status_code, code, str(exc))
    return handler


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    for exc_class, status_code, code in _POS_ERRORS + _AUTH_ERRORS:
        app.add_exception_handler(exc_class, _mapped_handler(status_code, code))

    @app.exception_handler(PosApiError)
    async def pos_api_error_handler(request: Request, exc: PosApiError):
        logger.error(f"Back office request failed ({exc.status_code}): {exc}")
        return _json_error(502, ErrorCodes.BACK_OFFICE_UNAVAILABLE, str(exc))

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if "not found" in message.lower():
            return _json_error(404, ErrorCodes.NOT_FOUND, message)
        return _json_error(400, ErrorCodes.INVALID_REQUEST, message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _json_error(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _json_error(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred")
