from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from signup_service.deps import get_identifier_field, get_secret, get_user_store
from signup_service.models import LoginRequest, MessageResponse, SignupRequest, format_timestamp
from signup_service.user_store import InMemoryUserStore, InvalidCredentials, UserAlreadyExists

logger = logging.getLogger("signup_service.auth")

router = APIRouter(tags=["auth"])


@router.post("/signup", status_code=201, response_model=MessageResponse)
async def signup(
    payload: SignupRequest = Body(...),
    store: InMemoryUserStore = Depends(get_user_store),
    identifier_field: str = Depends(get_identifier_field),
):
    identifier = payload.identifier(identifier_field)
    logger.info("Signup attempt: %s", identifier)

    try:
        store.create(identifier=identifier, password=payload.password or "", display_name=payload.name)
    except ValueError as e:
        return JSONResponse({"message": str(e)}, status_code=400)
    except UserAlreadyExists:
        logger.warning("Signup failed: user already exists: %s", identifier)
        return JSONResponse({"message": "User already exists"}, status_code=409)

    logger.info("User signed up: %s", identifier)
    return JSONResponse({"message": "Signup successful"}, status_code=201)


@router.post("/login", response_model=MessageResponse)
async def login(
    payload: LoginRequest = Body(...),
    store: InMemoryUserStore = Depends(get_user_store),
    secret: str = Depends(get_secret),
    identifier_field: str = Depends(get_identifier_field),
):
    identifier = payload.identifier(identifier_field)
    logger.info("Login attempt: %s", identifier)

    try:
        authed = store.authenticate(identifier=identifier, password=payload.password or "", secret=secret)
    except InvalidCredentials:
        logger.warning("Login failed for user: %s", identifier)
        return JSONResponse({"message": "Invalid credentials"}, status_code=401)

    logger.info(
        "Login successful: %s (issuedAt=%s)",
        authed.user.identifier,
        format_timestamp(datetime.now(timezone.utc)),
    )
    # Echoing the secret is kept for parity with existing clients. Do not ship this as-is.
    return JSONResponse({"message": f"Logged in with the secret: {authed.secret}"})
