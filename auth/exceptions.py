"""Typed exceptions for cashier and manager authorization failures."""


class AuthError(Exception):
    """Base class for authentication/authorization errors."""


class NotAuthenticatedError(AuthError):
    """No cashier is signed in to the register."""


class ManagerAuthorizationRequiredError(AuthError):
    """
    The action needs a manager's credentials and none were supplied.

    Raised before anything is applied; the caller should prompt for
    manager credentials and retry.
    """


class ManagerAuthorizationDeniedError(AuthError):
    """
    Manager credentials were rejected.

    Either the login failed or the account that logged in does not hold a
    privileged role. The pending action is discarded.
    """

    def __init__(self, message: str, username: str | None = None):
        self.username = username
        super().__init__(message)


class InvalidCredentialsError(AuthError):
    """The back office rejected a cashier's username or password."""


class SessionExpiredError(AuthError):
    """Session has expired and the cashier must sign in again."""
