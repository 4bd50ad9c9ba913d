"""
HTTP client for the club backend API.
"""

import logging
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from frontend.exceptions import APIForbiddenError
from frontend.exceptions import APIResponseError
from frontend.exceptions import APITimeoutError
from frontend.exceptions import APIUnavailableError
from frontend.exceptions import APIValidationError
from frontend.exceptions import SessionExpiredError

logger = logging.getLogger(__name__)

# Endpoints that answer 401 as part of their normal contract.
SESSION_PROBE_PATH = "/api/members/me"
AUTH_PATH_PREFIX = "/auth/"


class BackendClient:
    """Client for the backend API, bound to one member's bearer token."""

    # Default timeouts (connection timeout, read timeout)
    DEFAULT_TIMEOUT = (5, 15)

    # Retries only for idempotent reads
    DEFAULT_RETRY_TOTAL = 2
    DEFAULT_RETRY_BACKOFF_FACTOR = 0.3
    DEFAULT_RETRY_STATUS_FORCELIST = [502, 503, 504]

    def __init__(self, base_url: str, token: str | None = None, timeout: tuple[float, float] | None = None):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.session = self._create_session()

    def _create_session(self) -> requests.Session:
        """Create a requests session with a retry strategy for GET requests."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.DEFAULT_RETRY_TOTAL,
            backoff_factor=self.DEFAULT_RETRY_BACKOFF_FACTOR,
            status_forcelist=self.DEFAULT_RETRY_STATUS_FORCELIST,
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        session.headers.update({"Accept": "application/json"})
        return session

    def _headers(self) -> dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Endpoint path, starting with a slash
            params: Optional query parameters
            json: Optional JSON body
            files: Optional multipart files

        Returns:
            Decoded JSON, or None for an empty body

        Raises:
            SessionExpiredError: The token was rejected on a regular endpoint
            APIForbiddenError: The member may not perform the request
            APIResponseError: Any other error status
            APITimeoutError: The request timed out
            APIUnavailableError: The backend could not be reached
        """
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, path, params)

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=json,
                files=files,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise APITimeoutError(f"Backend timed out on {method} {path}") from e
        except requests.exceptions.RequestException as e:
            raise APIUnavailableError(f"Backend unreachable on {method} {path}: {e}") from e

        self._validate_response(path, response)
        return self._parse_response(response)

    def _validate_response(self, path: str, response: requests.Response) -> None:
        """Raise the error matching the response status, if any."""
        if response.status_code < 400:
            return

        payload: dict[str, Any] = {}
        try:
            data = response.json()
            if isinstance(data, dict):
                payload = data
        except ValueError:
            pass
        message = payload.get("error") or payload.get("message") or f"HTTP {response.status_code}"

        if response.status_code == 401 and self.token and not self._is_auth_path(path):
            raise SessionExpiredError(message, response.status_code, payload)
        if response.status_code == 403:
            raise APIForbiddenError(message, response.status_code, payload)
        raise APIResponseError(message, response.status_code, payload)

    def _parse_response(self, response: requests.Response) -> Any:
        content = response.text.strip()
        if not content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIValidationError(f"Failed to parse response: {content[:100]}") from e

    @staticmethod
    def _is_auth_path(path: str) -> bool:
        return path.startswith(AUTH_PATH_PREFIX) or path == SESSION_PROBE_PATH

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: dict[str, Any] | None = None, files: dict[str, Any] | None = None) -> Any:
        return self.request("POST", path, json=json, files=files)

    def put(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return self.request("PUT", path, json=json)

    def patch(self, path: str, json: dict[str, Any] | None = None) -> Any:
        return self.request("PATCH", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
