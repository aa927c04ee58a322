from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def coerce_int(v: Any) -> int:
    if v is None:
        return 0
    try:
        if isinstance(v, str):
            v = v.strip()
        return int(v)
    except (ValueError, TypeError):
        return 0


class Cursor(BaseModel):
    """
    Upstream pagination token.

    Helix sends a single opaque `cursor` that is valid in both directions,
    so `from_pagination` maps it onto `after` and `before` unless the
    payload already carries the explicit keys.
    """

    model_config = ConfigDict(frozen=True)

    before: Optional[str] = Field(None, description="Token for the previous page")
    after: Optional[str] = Field(None, description="Token for the next page")

    @classmethod
    def from_pagination(cls, pagination: Any) -> Optional["Cursor"]:
        if not isinstance(pagination, dict):
            return None

        shared = pagination.get("cursor") or None
        before = pagination.get("before") or shared
        after = pagination.get("after") or shared

        if before is None and after is None:
            return None

        return cls(before=str(before) if before else None, after=str(after) if after else None)


class RateLimit(BaseModel):
    """Values of the Ratelimit-* response headers."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(0, description="Ratelimit-Limit header")
    remaining: int = Field(0, description="Ratelimit-Remaining header")
    reset: int = Field(0, description="Ratelimit-Reset header (epoch seconds)")

    @field_validator("limit", "remaining", "reset", mode="before")
    @classmethod
    def validate_int_fields(cls, v):
        return coerce_int(v)


class User(BaseModel):
    """A Helix user record."""

    id: str
    login: str
    display_name: Optional[str] = None
    type: Optional[str] = None
    broadcaster_type: Optional[str] = None
    description: Optional[str] = None
    profile_image_url: Optional[str] = None
    offline_image_url: Optional[str] = None
    view_count: int = 0
    created_at: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v):
        return str(v) if isinstance(v, int) else v

    @field_validator("view_count", mode="before")
    @classmethod
    def validate_view_count(cls, v):
        return coerce_int(v)


class Video(BaseModel):
    """
    A Helix video record.

    Only `id` and `user_id` are required; the rest of the upstream fields
    are optional because archive, highlight and upload payloads differ.
    The enrichment slot `user` is filled by `TwitchClient.insert_users`.
    """

    id: str = Field(..., description="Video ID")
    user_id: str = Field(..., description="Owner user ID")
    user_login: Optional[str] = None
    user_name: Optional[str] = None
    stream_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[str] = None
    published_at: Optional[str] = None
    url: Optional[str] = None
    thumbnail_url: Optional[str] = None
    viewable: Optional[str] = None
    view_count: int = Field(0, description="Number of views")
    language: Optional[str] = None
    type: Optional[str] = None
    duration: Optional[str] = None

    user: Optional[Dict[str, Any]] = Field(
        None, description="Matching user record, when enriched"
    )

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def validate_ids(cls, v):
        return str(v) if isinstance(v, int) else v

    @field_validator("view_count", mode="before")
    @classmethod
    def validate_view_count(cls, v):
        return coerce_int(v)
