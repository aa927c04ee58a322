from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Protocol

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


logger = logging.getLogger(__name__)


class APIClientError(RuntimeError):
    """Base error for API client failures."""

    def __init__(self, message: str, response: Optional[requests.Response] = None) -> None:
        super().__init__(message)
        self.response = response

    def has_response(self) -> bool:
        return self.response is not None


class APIClientTimeout(APIClientError):
    """Raised when request times out."""


class APIClientHTTPError(APIClientError):
    """Raised for non-success HTTP responses."""


class Dispatcher(Protocol):
    """Anything able to send a GET for an endpoint and hand back the raw response."""

    def dispatch(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> requests.Response:
        ...


class BaseAPIClient:
    """
    Reusable base HTTP client for external APIs.

    Features:
    - Persistent session
    - Default headers
    - Retry with exponential backoff
    - Configurable timeout
    - Raw response dispatch (parsing is left to the caller)
    """

    DEFAULT_TIMEOUT = 15  # seconds
    DEFAULT_RETRIES = 3
    DEFAULT_BACKOFF_FACTOR = 0.5
    USER_AGENT = "twitch-helix-client/0.1"

    def __init__(
        self,
        base_url: str,
        default_headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
        backoff_factor: Optional[float] = None,
    ) -> None:

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout or self.DEFAULT_TIMEOUT

        self.session = requests.Session()

        # Default headers
        headers = {
            "User-Agent": self.USER_AGENT,
            "Accept": "application/json",
        }

        if default_headers:
            headers.update(default_headers)

        self.session.headers.update(headers)

        # Retry strategy
        retry_strategy = Retry(
            total=retries if retries is not None else self.DEFAULT_RETRIES,
            backoff_factor=backoff_factor if backoff_factor is not None else self.DEFAULT_BACKOFF_FACTOR,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    # ---------------------------------------------------
    # Core request method
    # ---------------------------------------------------
    def dispatch(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Send GET request and return the raw response.

        Transport failures and HTTP statuses >= 400 raise APIClientError
        subclasses; the response (when one exists) is attached to the error
        so the upstream error body stays readable.
        """

        url = self.build_url(endpoint)
        logger.debug(f"GET {url} params={dict(params) if params else {}}")

        try:
            response = self.session.get(
                url,
                params=dict(params) if params else None,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise APIClientTimeout(
                f"Request timed out calling {url}"
            ) from e
        except requests.RequestException as e:
            raise APIClientError(
                f"Request failed calling {url}",
                response=getattr(e, "response", None),
            ) from e

        if response.status_code >= 400:
            raise APIClientHTTPError(
                f"HTTP {response.status_code} returned from {url}",
                response=response,
            )

        return response

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "BaseAPIClient":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> None:
        """Context manager exit - close session."""
        self.close()
