from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse

from signup_service.deps import get_identifier_field, get_user_store
from signup_service.models import MessageResponse, PasswordUpdateRequest, user_view_payload
from signup_service.user_store import InMemoryUserStore, UserNotFound

logger = logging.getLogger("signup_service.users")

router = APIRouter(prefix="/users", tags=["users"])

_NOT_FOUND = {"message": "User not found"}


@router.get("")
async def list_users(
    store: InMemoryUserStore = Depends(get_user_store),
    identifier_field: str = Depends(get_identifier_field),
):
    return JSONResponse([user_view_payload(v, identifier_field=identifier_field) for v in store.list()])


@router.get("/{identifier}")
async def get_user(
    identifier: str,
    store: InMemoryUserStore = Depends(get_user_store),
    identifier_field: str = Depends(get_identifier_field),
):
    try:
        view = store.get(identifier=identifier)
    except UserNotFound:
        return JSONResponse(_NOT_FOUND, status_code=404)
    return JSONResponse(user_view_payload(view, identifier_field=identifier_field))


@router.put("/{identifier}/password", response_model=MessageResponse)
async def update_password(
    identifier: str,
    payload: PasswordUpdateRequest = Body(...),
    store: InMemoryUserStore = Depends(get_user_store),
):
    try:
        store.update_password(identifier=identifier, new_password=payload.password or "")
    except UserNotFound:
        return JSONResponse(_NOT_FOUND, status_code=404)
    except ValueError as e:
        return JSONResponse({"message": str(e)}, status_code=400)

    logger.info("Password updated: %s", identifier)
    return JSONResponse({"message": "Password updated successfully"})


@router.delete("/{identifier}", response_model=MessageResponse)
async def delete_user(identifier: str, store: InMemoryUserStore = Depends(get_user_store)):
    try:
        store.delete(identifier=identifier)
    except UserNotFound:
        return JSONResponse(_NOT_FOUND, status_code=404)

    logger.info("User deleted: %s", identifier)
    return JSONResponse({"message": "User deleted successfully"})
