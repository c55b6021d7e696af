"""
REST client for the back-office POS API.

The back office is a black box exposing reference data (products,
discounts, customers, tax categories, store settings), order creation and
login. Blocking calls, one timeout, no retries: a failed call raises
PosApiError and the caller leaves its state untouched.
"""

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class PosApiError(Exception):
    """Raised when a back-office request fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class PosApiClient:
    """
    Thin JSON client over the back-office REST API.

    Usage:
        api = PosApiClient("http://localhost:5000/api")
        categories = api.get_tax_categories()
        order = api.create_order(submission.to_wire())
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: int = 10,
        access_token: str | None = None,
        session: requests.Session | None = None,
    ):
        """
        Initialize with the API location.

        Args:
            base_url: API root, e.g. http://localhost:5000/api
            timeout_seconds: Per-request timeout
            access_token: Bearer token of the signed-in cashier, if any
            session: Optional requests.Session (connection reuse, tests)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        if access_token:
            self._session.headers["Authorization"] = f"Bearer {access_token}"

    def _url(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def _request(self, method: str, path: str, json_body: dict | None = None) -> Any:
        """
        Send a request and decode the JSON response.

        Raises:
            PosApiError: On connection failure, non-2xx status, or invalid JSON
        """
        url = self._url(path)
        try:
            response = self._session.request(
                method,
                url,
                json=json_body,
                timeout=self.timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"POS API {method} {path} connection failed: {e}")
            raise PosApiError(f"Connection failed: {e}")

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"POS API {method} {path} returned {response.status_code}: {message}")
            raise PosApiError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError:
            raise PosApiError(
                f"Invalid JSON from {method} {path}",
                status_code=response.status_code,
            )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Extract the server's message ({"message"} or {"error"}), else the status."""
        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict):
            for key in ("message", "error"):
                if isinstance(body.get(key), str) and body[key]:
                    return body[key]
        return f"Request failed with status {response.status_code}"

    # -------------------------------------------------------------------------
    # Reference data
    # -------------------------------------------------------------------------

    def get_products(self) -> list[dict]:
        return self._request("GET", "/products")

    def get_categories(self) -> list[dict]:
        return self._request("GET", "/categories")

    def get_discounts(self) -> list[dict]:
        return self._request("GET", "/discounts")

    def get_customers(self) -> list[dict]:
        return self._request("GET", "/customers")

    def get_tax_categories(self) -> list[dict]:
        return self._request("GET", "/tax-categories")

    def get_store_settings(self) -> dict | list[dict]:
        """Store settings; some deployments return one object, others a list."""
        return self._request("GET", "/store-settings")

    # -------------------------------------------------------------------------
    # Orders and auth
    # -------------------------------------------------------------------------

    def create_order(self, submission: dict) -> dict:
        """
        Create an order.

        Args:
            submission: Wire-format body ({"order": {...}, "items": [...]})

        Returns:
            Created order; contains at least "id"
        """
        return self._request("POST", "/orders", json_body=submission)

    def login(self, username: str, password: str) -> dict:
        """
        Authenticate a back-office user.

        Returns:
            User record (id, username, role, ...) plus tokens

        Raises:
            PosApiError: status_code 401 for bad credentials
        """
        return self._request(
            "POST",
            "/auth/login",
            json_body={"username": username, "password": password},
        )
