from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Type, TypeVar, Union

import requests
from pydantic import BaseModel, ValidationError

from .client_base import APIClientError, Dispatcher
from .paginator import PageRequest, Paginator
from .schema import Cursor, RateLimit, coerce_int


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class UnknownRateLimitKey(KeyError):
    """Raised when asking for a rate limit field that does not exist."""


class PayloadKind(str, Enum):
    """Shape of the decoded body, decided once at parse time."""

    ITEMS = "items"  # top-level `data` key
    SINGLE = "single"  # any other JSON value
    EMPTY = "empty"  # no response, or a body that is not JSON


@dataclass(frozen=True)
class ErrorDetail:
    message: str
    exception: Exception


def _decode_json(response: Optional[requests.Response]) -> Any:
    """Best-effort JSON decode; None for absent, empty or malformed bodies."""
    if response is None:
        return None
    try:
        return response.json()
    except (ValueError, RecursionError):
        logger.debug(f"Response body is not JSON (status {response.status_code})")
        return None


class Result:
    """
    Normalized wrapper around one HTTP response.

    Parsing is best-effort: the transport error decides `success`, and a
    body that cannot be decoded only leaves the Result empty. Callers must
    check `success` before trusting `data`; `error()` is the diagnostic
    surface for failed calls.
    """

    UNAVAILABLE_MESSAGE = "API Unavailable"
    RATE_LIMIT_HEADERS = {
        "limit": "Ratelimit-Limit",
        "remaining": "Ratelimit-Remaining",
        "reset": "Ratelimit-Reset",
    }

    def __init__(
        self,
        response: Optional[requests.Response],
        exception: Optional[Exception] = None,
        request: Optional[PageRequest] = None,
    ) -> None:
        self.response = response
        self.status: int = response.status_code if response is not None else 0

        self.success: bool = exception is None
        self.exception = exception

        self.request = request

        self.kind = PayloadKind.EMPTY
        self.data: List[Any] = []
        self.raw_payload: Any = None
        self.total: int = 0
        self.cursor: Optional[Cursor] = None

        self._process_payload(response)

        self.rate_limit_info = self._read_rate_limit(response)
        self.paginator = Paginator.from_result(self)

    @classmethod
    def fetch(
        cls,
        dispatcher: Dispatcher,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
    ) -> "Result":
        """Dispatch a request and wrap whatever comes back; never raises transport errors."""
        request = PageRequest(dispatcher=dispatcher, endpoint=endpoint, params=dict(params or {}))

        try:
            response = dispatcher.dispatch(endpoint, dict(request.params))
        except APIClientError as e:
            logger.warning(f"Request to {endpoint} failed: {e}")
            return cls(e.response, exception=e, request=request)

        return cls(response, request=request)

    def replay(self, params: Mapping[str, Any]) -> Optional["Result"]:
        """Re-issue the originating request with new parameters."""
        if self.request is None:
            return None
        return self.fetch(self.request.dispatcher, self.request.endpoint, params)

    # -------------------------------------------------
    # Error reporting
    # -------------------------------------------------
    def error(self) -> str:
        """
        Return the last HTTP or API error.

        Prefers the upstream `message` field of the error body, then the
        transport error text. Without an error response attached (which
        includes successful Results) the generic UNAVAILABLE_MESSAGE is
        returned.
        """
        error_response = getattr(self.exception, "response", None)
        if self.exception is None or error_response is None:
            return self.UNAVAILABLE_MESSAGE

        body = _decode_json(error_response)
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])

        return str(self.exception)

    @property
    def error_detail(self) -> Optional[ErrorDetail]:
        if self.success or self.exception is None:
            return None
        return ErrorDetail(message=self.error(), exception=self.exception)

    # -------------------------------------------------
    # Data access
    # -------------------------------------------------
    def count(self) -> int:
        if self.kind is not PayloadKind.ITEMS:
            return 0
        return len(self.data)

    def shift(self) -> Any:
        """
        Remove and return the first item (use for single user/video queries).

        Destructive: every call consumes one item. Use `peek()` to look at
        the first item without consuming it.
        """
        if self.kind is not PayloadKind.ITEMS or not self.data:
            return None
        return self.data.pop(0)

    def peek(self) -> Any:
        if self.kind is not PayloadKind.ITEMS or not self.data:
            return None
        return self.data[0]

    def records(self, model: Type[M]) -> List[M]:
        """Validate the items against `model`, dropping the ones that do not fit."""
        records: List[M] = []
        for item in self.data:
            try:
                records.append(model.model_validate(item))
            except ValidationError as e:
                logger.warning(f"Skipping item that does not match {model.__name__}: {e}")
        return records

    # -------------------------------------------------
    # Rate limit
    # -------------------------------------------------
    def rate_limit(self, key: Optional[str] = None) -> Union[None, int, Dict[str, int]]:
        """
        Get rate limit information.

        Returns None when the response carried no rate limit headers,
        otherwise the full mapping or the field named by `key`.
        """
        if self.rate_limit_info is None:
            return None

        values = self.rate_limit_info.model_dump()
        if key is None:
            return values

        if key not in values:
            raise UnknownRateLimitKey(key)

        return values[key]

    # -------------------------------------------------
    # Pagination
    # -------------------------------------------------
    def has_next(self) -> bool:
        return self.paginator is not None and self.paginator.has_next()

    def has_back(self) -> bool:
        return self.paginator is not None and self.paginator.has_back()

    def first(self) -> Optional["Result"]:
        return self.paginator.first() if self.paginator is not None else None

    def next(self) -> Optional["Result"]:
        return self.paginator.next() if self.paginator is not None else None

    def back(self) -> Optional["Result"]:
        return self.paginator.back() if self.paginator is not None else None

    # -------------------------------------------------
    # Parsing
    # -------------------------------------------------
    def _process_payload(self, response: Optional[requests.Response]) -> None:
        payload = _decode_json(response)

        if payload is None:
            return

        if not isinstance(payload, dict) or "data" not in payload:
            self.kind = PayloadKind.SINGLE
            self.raw_payload = payload
            return

        data = payload.get("data")
        if data is None:
            data = []
        elif not isinstance(data, list):
            data = [data]

        self.kind = PayloadKind.ITEMS
        self.data = data
        self.total = coerce_int(payload.get("total"))
        self.cursor = Cursor.from_pagination(payload.get("pagination"))

    def _read_rate_limit(self, response: Optional[requests.Response]) -> Optional[RateLimit]:
        if response is None or self.RATE_LIMIT_HEADERS["remaining"] not in response.headers:
            return None

        return RateLimit(
            **{
                field: response.headers.get(header)
                for field, header in self.RATE_LIMIT_HEADERS.items()
            }
        )

    def __repr__(self) -> str:
        return (
            f"<Result status={self.status} success={self.success} "
            f"kind={self.kind.value} count={self.count()} total={self.total}>"
        )
