from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, Optional

from .client_base import Dispatcher
from .schema import Cursor

if TYPE_CHECKING:
    from .result import Result


logger = logging.getLogger(__name__)

# Query parameters owned by the paginator; everything else is replayed as-is.
PAGINATION_KEYS = ("after", "before")


@dataclass(frozen=True)
class PageRequest:
    """The request that produced a Result, kept so it can be replayed."""

    dispatcher: Dispatcher
    endpoint: str
    params: Dict[str, Any] = field(default_factory=dict)


class Paginator:
    """
    Replays the request behind a Result with an adjusted cursor parameter.

    A Paginator belongs to exactly one Result and never outlives it. The
    original parameters are only read, so several reads may run
    concurrently, but advancing calls on one Paginator must be serialized
    by the caller.

    Traversal ends when the cursor for a direction is absent: the matching
    method returns None without dispatching. An empty page that still
    carries a cursor is not treated as the end.
    """

    FIRST = "first"
    NEXT = "after"
    BACK = "before"

    def __init__(self, result: "Result") -> None:
        self.result = result
        # Last direction used; None while no cursor has been consumed.
        self.action: Optional[str] = None

    @classmethod
    def from_result(cls, result: "Result") -> Optional["Paginator"]:
        if result.cursor is None and result.request is None:
            return None
        return cls(result)

    @property
    def cursor(self) -> Optional[Cursor]:
        return self.result.cursor

    @property
    def original_params(self) -> Dict[str, Any]:
        if self.result.request is None:
            return {}
        return dict(self.result.request.params)

    def has_next(self) -> bool:
        return self.cursor is not None and self.cursor.after is not None

    def has_back(self) -> bool:
        return self.cursor is not None and self.cursor.before is not None

    def cursor_value(self) -> Optional[str]:
        """Cursor token for the last used direction, if any."""
        if self.cursor is None:
            return None
        if self.action == self.NEXT:
            return self.cursor.after
        if self.action == self.BACK:
            return self.cursor.before
        return None

    def apply(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Return a copy of `params` with the pagination keys replaced by the
        ones for the last used direction (cleared for `first`).
        """
        applied = {k: v for k, v in (params or {}).items() if k not in PAGINATION_KEYS}

        token = self.cursor_value()
        if token is not None:
            applied[self.action] = token

        return applied

    # -------------------------------------------------
    # Traversal
    # -------------------------------------------------
    def first(self) -> Optional["Result"]:
        if self.result.request is None:
            return None
        self.action = self.FIRST
        return self._replay()

    def next(self) -> Optional["Result"]:
        if not self.has_next():
            return None
        self.action = self.NEXT
        return self._replay()

    def back(self) -> Optional["Result"]:
        if not self.has_back():
            return None
        self.action = self.BACK
        return self._replay()

    def _replay(self) -> Optional["Result"]:
        # A cursor without a recorded request has nothing to replay.
        if self.result.request is None:
            return None
        logger.info(f"Paginating {self.result.request.endpoint} ({self.action})")
        return self.result.replay(self.apply(self.original_params))
