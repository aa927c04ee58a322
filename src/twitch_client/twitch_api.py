from __future__ import annotations

import logging
import os
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .client_base import BaseAPIClient
from .paginator import Paginator
from .result import Result


logger = logging.getLogger(__name__)


class TwitchConfigError(RuntimeError):
    """Raised when required environment configuration is missing or invalid."""


class MissingParameterError(ValueError):
    """Raised before dispatch when a request lacks its required parameters."""


Identifier = Union[int, str]


class TwitchClient(BaseAPIClient):
    """
    Helix API client.

    Every endpoint method returns a Result; transport failures end up in
    `Result.success` / `Result.error()` instead of being raised. Only
    caller mistakes (missing parameters, bad configuration) raise.

    Configuration comes from the environment unless passed explicitly:

        TWITCH_CLIENT_ID    - Application client ID (required)
        TWITCH_TOKEN        - OAuth token, sent as a Bearer token
        TWITCH_BASE_URL     - Override the Helix base URL
        TWITCH_TIMEOUT_SEC  - Request timeout (default: 15)
    """

    DEFAULT_BASE_URL = "https://api.twitch.tv/helix"

    def __init__(
        self,
        client_id: Optional[str] = None,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.client_id: Optional[str] = client_id or os.getenv("TWITCH_CLIENT_ID") or None
        self.token: Optional[str] = token or os.getenv("TWITCH_TOKEN") or None
        base_url = base_url or os.getenv("TWITCH_BASE_URL") or self.DEFAULT_BASE_URL

        if not self.client_id:
            raise TwitchConfigError(
                "TWITCH_CLIENT_ID must be set (or client_id passed) to call the Helix API."
            )

        if timeout is None:
            timeout_raw = os.getenv("TWITCH_TIMEOUT_SEC", "15").strip()
            try:
                timeout = float(timeout_raw)
            except ValueError as e:
                raise TwitchConfigError(
                    f"TWITCH_TIMEOUT_SEC must be a number, got '{timeout_raw}'."
                ) from e

        headers = {"Client-ID": self.client_id}
        if self.token:
            # Never log the token; just attach it to headers.
            headers["Authorization"] = f"Bearer {self.token}"

        super().__init__(base_url=base_url, default_headers=headers, timeout=timeout)
        logger.info(
            f"TwitchClient initialized for {self.base_url} "
            f"({'authenticated' if self.token else 'client-id only'})."
        )

    # -------------------------------------------------
    # Generic query
    # -------------------------------------------------
    def query(
        self,
        endpoint: str,
        params: Optional[Mapping[str, Any]] = None,
        paginator: Optional[Paginator] = None,
    ) -> Result:
        """
        Send a GET to `endpoint` and wrap the outcome in a Result.

        When a paginator is given, its last used direction and cursor are
        applied to `params` before dispatch.
        """
        params = dict(params or {})
        if paginator is not None:
            params = paginator.apply(params)
        return Result.fetch(self, endpoint, params)

    # -------------------------------------------------
    # Videos
    # -------------------------------------------------
    def get_videos(
        self, params: Optional[Mapping[str, Any]] = None, paginator: Optional[Paginator] = None
    ) -> Result:
        params = dict(params or {})
        self._validate_required(params, ["id", "user_id", "game_id"])
        return self.query("videos", params, paginator=paginator)

    def get_videos_by_id(
        self, video_id: Identifier, params: Optional[Mapping[str, Any]] = None
    ) -> Result:
        return self.get_videos({**(params or {}), "id": video_id})

    def get_videos_by_user(
        self,
        user_id: Identifier,
        params: Optional[Mapping[str, Any]] = None,
        paginator: Optional[Paginator] = None,
    ) -> Result:
        return self.get_videos({**(params or {}), "user_id": user_id}, paginator=paginator)

    def get_videos_by_game(
        self,
        game_id: Identifier,
        params: Optional[Mapping[str, Any]] = None,
        paginator: Optional[Paginator] = None,
    ) -> Result:
        return self.get_videos({**(params or {}), "game_id": game_id}, paginator=paginator)

    # -------------------------------------------------
    # Users
    # -------------------------------------------------
    def get_users(self, params: Optional[Mapping[str, Any]] = None) -> Result:
        return self.query("users", params)

    def get_users_by_ids(self, ids: Iterable[Identifier]) -> Result:
        return self.get_users({"id": [str(i) for i in ids]})

    def get_users_by_names(self, names: Iterable[str]) -> Result:
        return self.get_users({"login": list(names)})

    def insert_users(
        self,
        result: Result,
        identifier_attribute: str = "user_id",
        insert_to: str = "user",
    ) -> Result:
        """
        Attach the matching user record to every item of `result`.

        Items are dicts; each gets `item[insert_to]` set to the user whose
        `id` equals `item[identifier_attribute]` (None when the lookup did
        not return it). The result is modified in place and returned.
        """
        user_ids: List[str] = [
            str(item[identifier_attribute])
            for item in result.data
            if isinstance(item, dict) and item.get(identifier_attribute) is not None
        ]

        if not user_ids:
            return result

        users = self.get_users_by_ids(dict.fromkeys(user_ids))
        if not users.success:
            logger.warning(f"Could not load users for enrichment: {users.error()}")

        by_id: Dict[str, Any] = {
            str(user.get("id")): user for user in users.data if isinstance(user, dict)
        }

        for item in result.data:
            if isinstance(item, dict):
                item[insert_to] = by_id.get(str(item.get(identifier_attribute)))

        return result

    # -------------------------------------------------
    # Helpers
    # -------------------------------------------------
    @staticmethod
    def _validate_required(params: Mapping[str, Any], one_of: List[str]) -> None:
        if not any(params.get(key) not in (None, "", []) for key in one_of):
            raise MissingParameterError(
                f"Parameters require at least one of: {', '.join(one_of)}."
            )
