"""
Firebase Admin SDK bootstrap shared by the Firestore and Auth clients.
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)


class FirebaseConfigError(RuntimeError):
    """Raised when the service account credential cannot be loaded."""


def load_credential(firebase_key: Optional[str]) -> Optional[credentials.Base]:
    """
    Build a certificate credential from the service-account JSON string.

    Returns None when no key is configured so the SDK falls back to
    Application Default Credentials.
    """
    if not firebase_key:
        return None
    try:
        service_account = json.loads(firebase_key)
    except json.JSONDecodeError as e:
        raise FirebaseConfigError(f"FIREBASE_KEY is not valid JSON: {e}") from e
    try:
        return credentials.Certificate(service_account)
    except ValueError as e:
        raise FirebaseConfigError(f"Invalid service account: {e}") from e


def get_firebase_app(firebase_key: Optional[str] = None) -> firebase_admin.App:
    """Return the default firebase-admin app, initializing it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    credential = load_credential(firebase_key)
    if credential is None:
        logger.info("FIREBASE_KEY not set; using application default credentials")
    return firebase_admin.initialize_app(credential)
