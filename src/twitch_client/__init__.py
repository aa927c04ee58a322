"""
twitch-helix-client

Typed wrapper around the Twitch Helix REST API.

Every call returns a Result: a normalized envelope with a success flag,
the decoded items (or the single object for non-list endpoints), the
upstream total, the pagination cursor and the rate limit headers. Results
know the request that produced them, so paging is a method call away.

Usage:
------
    from twitch_client import TwitchClient

    with TwitchClient() as client:
        result = client.get_videos_by_user(12826)

        if not result.success:
            print(result.error())

        while result is not None and result.success:
            for video in result.data:
                ...
            result = result.next()  # None once the cursor is gone

Configuration:
--------------
    TWITCH_CLIENT_ID    - Application client ID (required)
    TWITCH_TOKEN        - OAuth token (optional)
    TWITCH_BASE_URL     - Override https://api.twitch.tv/helix
    TWITCH_TIMEOUT_SEC  - Request timeout (default: 15)
"""

# -----------------------------------------------------------------------------
# Transport
# -----------------------------------------------------------------------------
from .client_base import (
    BaseAPIClient,
    Dispatcher,
    APIClientError,
    APIClientHTTPError,
    APIClientTimeout,
)

# -----------------------------------------------------------------------------
# Response envelope and pagination
# -----------------------------------------------------------------------------
from .result import Result, PayloadKind, ErrorDetail, UnknownRateLimitKey
from .paginator import Paginator, PageRequest

# -----------------------------------------------------------------------------
# Helix client
# -----------------------------------------------------------------------------
from .twitch_api import TwitchClient, TwitchConfigError, MissingParameterError

# -----------------------------------------------------------------------------
# Typed records
# -----------------------------------------------------------------------------
from .schema import Cursor, RateLimit, User, Video


__all__ = [
    # Transport
    "BaseAPIClient",
    "Dispatcher",
    "APIClientError",
    "APIClientHTTPError",
    "APIClientTimeout",
    # Envelope / pagination
    "Result",
    "PayloadKind",
    "ErrorDetail",
    "UnknownRateLimitKey",
    "Paginator",
    "PageRequest",
    # Client
    "TwitchClient",
    "TwitchConfigError",
    "MissingParameterError",
    # Schema
    "Cursor",
    "RateLimit",
    "User",
    "Video",
]
