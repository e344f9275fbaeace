"""
Document store abstraction for Firestore and an in-memory test implementation.
"""

from __future__ import annotations

import base64
import copy
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Protocol

from firebase_admin import firestore
from google.api_core import exceptions
from google.cloud.firestore_v1 import SERVER_TIMESTAMP, DocumentReference, GeoPoint

USERS_COLLECTION = "users"
CATEGORIES_COLLECTION = "categories"
PRODUCTS_COLLECTION = "products"


class DocumentExistsError(Exception):
    """A create targeted a document id that is already taken."""


class DbClient(Protocol):
    """Interface for document store access."""

    def list_categories(self) -> list[dict]:
        ...

    def get_user(self, uid: str) -> Optional[dict]:
        ...

    def create_user(self, uid: str, data: dict) -> dict:
        ...

    def update_user(self, uid: str, updates: dict) -> Optional[dict]:
        ...

    def create_product(self, product_id: str, data: dict) -> dict:
        ...

    def get_product(self, product_id: str) -> Optional[dict]:
        ...


def to_json_safe(value: Any) -> Any:
    """Convert Firestore-native values into plain JSON-compatible ones."""
    if isinstance(value, dict):
        return {key: to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(item) for item in value]
    if isinstance(value, GeoPoint):
        return {"latitude": value.latitude, "longitude": value.longitude}
    if isinstance(value, DocumentReference):
        return value.path
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


def _with_id(doc_id: str, data: Optional[dict]) -> dict:
    return {"id": doc_id, **to_json_safe(data or {})}


class InMemoryDbClient:
    """Simple in-memory document store for development and tests."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, dict]] = {
            USERS_COLLECTION: {},
            CATEGORIES_COLLECTION: {},
            PRODUCTS_COLLECTION: {},
        }
        self.writes: list[tuple[str, str, dict]] = []

    def _collection(self, name: str) -> Dict[str, dict]:
        return self.collections.setdefault(name, {})

    def _get(self, collection: str, doc_id: str) -> Optional[dict]:
        data = self._collection(collection).get(doc_id)
        if data is None:
            return None
        return _with_id(doc_id, copy.deepcopy(data))

    def _set(self, collection: str, doc_id: str, data: dict) -> None:
        self._collection(collection)[doc_id] = copy.deepcopy(data)
        self.writes.append((collection, doc_id, data))

    def add_category(self, data: dict, category_id: str | None = None) -> str:
        """Seed a category; the API itself never writes categories."""
        category_id = category_id or uuid.uuid4().hex
        self._collection(CATEGORIES_COLLECTION)[category_id] = copy.deepcopy(data)
        return category_id

    def list_categories(self) -> list[dict]:
        return [
            _with_id(doc_id, copy.deepcopy(data))
            for doc_id, data in self._collection(CATEGORIES_COLLECTION).items()
        ]

    def get_user(self, uid: str) -> Optional[dict]:
        return self._get(USERS_COLLECTION, uid)

    def create_user(self, uid: str, data: dict) -> dict:
        record = {**data, "createdAt": datetime.now(timezone.utc)}
        self._set(USERS_COLLECTION, uid, record)
        return self._get(USERS_COLLECTION, uid)

    def update_user(self, uid: str, updates: dict) -> Optional[dict]:
        existing = self._collection(USERS_COLLECTION).get(uid)
        if existing is None:
            return None
        self._set(USERS_COLLECTION, uid, {**existing, **updates})
        return self._get(USERS_COLLECTION, uid)

    def create_product(self, product_id: str, data: dict) -> dict:
        if product_id in self._collection(PRODUCTS_COLLECTION):
            raise DocumentExistsError(f"Product {product_id} already exists")
        now = datetime.now(timezone.utc)
        record = {**data, "createdAt": now, "updatedAt": now}
        self._set(PRODUCTS_COLLECTION, product_id, record)
        return self._get(PRODUCTS_COLLECTION, product_id)

    def get_product(self, product_id: str) -> Optional[dict]:
        return self._get(PRODUCTS_COLLECTION, product_id)

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        for collection in self.collections.values():
            collection.clear()
        self.writes.clear()


class FirestoreDbClient:
    """
    Firestore-backed implementation. Timestamps are assigned by the server,
    so every write is followed by a read to return the stored record.
    """

    def __init__(self, client: Any = None, app: Any = None):
        self.client = client if client is not None else firestore.client(app)

    def _read(self, doc_ref) -> Optional[dict]:
        snapshot = doc_ref.get()
        if not snapshot.exists:
            return None
        return _with_id(snapshot.id, snapshot.to_dict())

    def list_categories(self) -> list[dict]:
        snapshots = self.client.collection(CATEGORIES_COLLECTION).get()
        return [_with_id(doc.id, doc.to_dict()) for doc in snapshots]

    def get_user(self, uid: str) -> Optional[dict]:
        return self._read(self.client.collection(USERS_COLLECTION).document(uid))

    def create_user(self, uid: str, data: dict) -> dict:
        doc_ref = self.client.collection(USERS_COLLECTION).document(uid)
        doc_ref.set({**data, "createdAt": SERVER_TIMESTAMP})
        return self._read(doc_ref)

    def update_user(self, uid: str, updates: dict) -> Optional[dict]:
        doc_ref = self.client.collection(USERS_COLLECTION).document(uid)
        try:
            doc_ref.update(updates)
        except exceptions.NotFound:
            return None
        return self._read(doc_ref)

    def create_product(self, product_id: str, data: dict) -> dict:
        doc_ref = self.client.collection(PRODUCTS_COLLECTION).document(product_id)
        try:
            doc_ref.create(
                {**data, "createdAt": SERVER_TIMESTAMP, "updatedAt": SERVER_TIMESTAMP}
            )
        except exceptions.Conflict as e:
            raise DocumentExistsError(f"Product {product_id} already exists") from e
        return self._read(doc_ref)

    def get_product(self, product_id: str) -> Optional[dict]:
        return self._read(
            self.client.collection(PRODUCTS_COLLECTION).document(product_id)
        )
