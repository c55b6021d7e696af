"""Cashier sign-in, register actors and manager authorization."""

from auth.exceptions import (
    AuthError,
    NotAuthenticatedError,
    InvalidCredentialsError,
    SessionExpiredError,
    ManagerAuthorizationRequiredError,
    ManagerAuthorizationDeniedError,
)
from auth.types import Actor, CashierSession, ManagerCredentials
