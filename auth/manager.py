"""Manager re-authorization for gated register actions (discounts)."""

import logging

from pydantic import ValidationError

from auth.exceptions import ManagerAuthorizationDeniedError
from auth.types import Actor, ManagerCredentials
from clients.pos_api_client import PosApiClient, PosApiError
from core.config import RegisterConfig

logger = logging.getLogger(__name__)


class ManagerAuthorizer:
    """Verifies a manager's credentials against the back-office login endpoint.

    The manager's session is not kept; only the identity is returned so the
    caller can attribute the authorized action.
    """

    def __init__(self, api: PosApiClient, config: RegisterConfig):
        self._api = api
        self._config = config

    def authorize(self, credentials: ManagerCredentials) -> Actor:
        """Check credentials and role.

        Returns:
            The authorizing manager.

        Raises:
            ManagerAuthorizationDeniedError: Bad credentials or a non-privileged role.
            PosApiError: The back office failed for another reason (5xx, network).
        """
        try:
            user = self._api.login(credentials.username, credentials.password)
        except PosApiError as e:
            if e.status_code in (400, 401, 403):
                logger.warning("Manager authorization rejected for %s", credentials.username)
                raise ManagerAuthorizationDeniedError(
                    "Invalid manager credentials", username=credentials.username
                )
            raise

        try:
            manager = Actor.model_validate(user)
        except ValidationError:
            raise ManagerAuthorizationDeniedError(
                "Login response did not identify a user", username=credentials.username
            )

        if not manager.has_role(self._config.privileged_roles):
            logger.warning(
                "User %s (role %s) may not authorize discounts",
                manager.username,
                manager.role,
            )
            raise ManagerAuthorizationDeniedError(
                f"User {manager.username} is not authorized to approve discounts",
                username=manager.username,
            )

        logger.info("Discount authorized by %s", manager.username)
        return manager
