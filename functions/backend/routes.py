"""
HTTP routes for the storefront API.
"""

from __future__ import annotations

import logging
import time
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, PlainTextResponse

from backend.db import DbClient, DocumentExistsError
from backend.dependencies import get_current_user, get_db_client, get_identity_client
from backend.identity import AccountCreationError, IdentityClient
from backend.schemas import (
    USER_UPDATABLE_FIELDS,
    CreateProductRequest,
    CreateUserRequest,
    ErrorResponse,
    UpdateUserRequest,
    UserEnvelope,
    UserUpdatedResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}
AUTH_ERROR_RESPONSES = {
    **ERROR_RESPONSES,
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
}


def _is_set(value) -> bool:
    """
    Whether a patch value counts as provided. None, empty strings, zero and
    False are skipped; lists count even when empty so a cart can be cleared.
    """
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0
    return True


def _generate_product_id() -> str:
    return f"prod_{int(time.time() * 1000)}_{uuid4().hex[:6]}"


@router.get("/", response_class=PlainTextResponse)
def root():
    return "Hello from the storefront API!"


@router.get(
    "/categories",
    response_model=list[dict],
    responses={500: {"model": ErrorResponse}},
)
def list_categories(db: DbClient = Depends(get_db_client)):
    try:
        # Categories are opaque attribute bags; encode inside the try.
        return JSONResponse(content=jsonable_encoder(db.list_categories()))
    except Exception:
        logger.exception("Error fetching categories")
        raise HTTPException(status_code=500, detail="Error fetching categories")


@router.post(
    "/users",
    response_model=UserEnvelope,
    status_code=201,
    responses=ERROR_RESPONSES,
)
def create_user(
    payload: CreateUserRequest,
    db: DbClient = Depends(get_db_client),
    identity: IdentityClient = Depends(get_identity_client),
):
    """
    Register an identity account, then store the matching profile under
    the issued uid.
    """
    try:
        uid = identity.create_account(
            email=payload.email,
            password=payload.password,
            display_name=f"{payload.firstName} {payload.lastName}",
        )
    except AccountCreationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Error creating account")
        raise HTTPException(status_code=500, detail=str(e))

    profile = {
        "firstName": payload.firstName,
        "lastName": payload.lastName,
        "email": payload.email,
        "phone": payload.phone or "",
        "cart": [],
        "wishlist": [],
        "addresses": [],
    }
    try:
        user = db.create_user(uid, profile)
    except Exception as e:
        logger.exception("Error creating user %s", uid)
        raise HTTPException(status_code=500, detail=str(e))

    logger.info("Created user %s", uid)
    return UserEnvelope(uid=uid, user=user)


@router.get(
    "/users/me", response_model=UserEnvelope, responses=AUTH_ERROR_RESPONSES
)
def get_me(
    claims: dict = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    uid = claims["uid"]
    try:
        user = db.get_user(uid)
    except Exception as e:
        logger.exception("Error fetching user %s", uid)
        raise HTTPException(status_code=500, detail=str(e))

    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return UserEnvelope(uid=uid, user=user)


@router.patch(
    "/users/me",
    response_model=UserUpdatedResponse,
    responses=AUTH_ERROR_RESPONSES,
)
def update_me(
    payload: UpdateUserRequest,
    claims: dict = Depends(get_current_user),
    db: DbClient = Depends(get_db_client),
):
    uid = claims["uid"]
    try:
        existing = db.get_user(uid)
    except Exception as e:
        logger.exception("Error updating user %s", uid)
        raise HTTPException(status_code=500, detail=str(e))
    if existing is None:
        raise HTTPException(status_code=404, detail="User not found")

    updates = {}
    for name in USER_UPDATABLE_FIELDS:
        value = getattr(payload, name)
        if _is_set(value):
            updates[name] = value
    if not updates:
        raise HTTPException(status_code=400, detail="No valid fields to update")

    try:
        user = db.update_user(uid, updates)
    except Exception as e:
        logger.exception("Error updating user %s", uid)
        raise HTTPException(status_code=500, detail=str(e))
    # Deleted between the read and the write.
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    return UserUpdatedResponse(message="User updated", user=user)


@router.post(
    "/products",
    response_model=dict,
    status_code=201,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse}},
)
def create_product(
    payload: CreateProductRequest, db: DbClient = Depends(get_db_client)
):
    data = payload.model_dump(exclude={"id"})
    product_id = payload.id or _generate_product_id()
    try:
        product = db.create_product(product_id, data)
    except DocumentExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.exception("Error creating product %s", product_id)
        raise HTTPException(status_code=500, detail=str(e))
    return product
