"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException

from backend.config import get_settings
from backend.db import DbClient, FirestoreDbClient, InMemoryDbClient
from backend.firebase import get_firebase_app
from backend.identity import (
    FirebaseIdentityClient,
    IdentityClient,
    InMemoryIdentityClient,
    InvalidTokenError,
)

logger = logging.getLogger(__name__)

_db_client: DbClient | None = None
_identity_client: IdentityClient | None = None


def _use_in_memory() -> bool:
    return get_settings().use_in_memory_backends


def get_db_client() -> DbClient:
    """
    Return a singleton DB client shared across requests.
    """
    global _db_client
    if _db_client:
        return _db_client

    if _use_in_memory():
        logger.warning("Using in-memory document store")
        _db_client = InMemoryDbClient()
    else:
        app = get_firebase_app(get_settings().firebase_key)
        _db_client = FirestoreDbClient(app=app)
    return _db_client


def get_identity_client() -> IdentityClient:
    global _identity_client
    if _identity_client:
        return _identity_client

    if _use_in_memory():
        logger.warning("Using in-memory identity provider")
        _identity_client = InMemoryIdentityClient()
    else:
        app = get_firebase_app(get_settings().firebase_key)
        _identity_client = FirebaseIdentityClient(app=app)
    return _identity_client


def get_current_user(
    authorization: Optional[str] = Header(None),
    identity: IdentityClient = Depends(get_identity_client),
) -> dict:
    """
    Verify the bearer token and return its claims (uid, email, ...).
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="No token provided")

    token = authorization.split(" ")[1]
    try:
        return identity.verify_token(token)
    except InvalidTokenError as e:
        logger.warning("Token verification failed: %s", e)
        raise HTTPException(status_code=401, detail="Invalid or expired token")
