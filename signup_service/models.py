from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field

from signup_service.user_store import PublicUserView


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    """ISO-8601 UTC with millisecond precision, e.g. 2024-05-01T10:00:00.000Z."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CredentialsRequest(BaseModel):
    # Presence is checked by the store so a missing field maps to the same 400 body.
    email: Optional[str] = Field(default=None, description="Identifier when IDENTIFIER_FIELD=email")
    username: Optional[str] = Field(default=None, description="Identifier when IDENTIFIER_FIELD=username")
    password: Optional[str] = None

    def identifier(self, field: str) -> str:
        primary = self.username if field == "username" else self.email
        fallback = self.email if field == "username" else self.username
        return primary or fallback or ""


class SignupRequest(CredentialsRequest):
    name: Optional[str] = Field(default=None, description="Optional display name")


class LoginRequest(CredentialsRequest):
    pass


class PasswordUpdateRequest(BaseModel):
    password: Optional[str] = None


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    status: str
    time: str


class StatsResponse(BaseModel):
    totalUsers: int
    lastSignup: Optional[str] = None


def user_view_payload(view: PublicUserView, *, identifier_field: str) -> dict[str, Any]:
    return {
        "name": view.display_name,
        identifier_field: view.identifier,
        "createdAt": format_timestamp(view.created_at),
    }
