from __future__ import annotations

from fastapi import Request

from signup_service.user_store import InMemoryUserStore


# The store and the secret live on app.state so each create_app() call gets
# its own registry. Tests rely on that isolation.


def get_user_store(request: Request) -> InMemoryUserStore:
    return request.app.state.user_store


def get_secret(request: Request) -> str:
    secret = getattr(request.app.state, "secret", None)
    if secret is None:
        # Only reachable if the lifespan hook was bypassed without passing secret=.
        raise RuntimeError("Secret key has not been loaded")
    return secret


def get_identifier_field(request: Request) -> str:
    return request.app.state.settings.identifier_field
