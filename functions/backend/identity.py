"""
Identity provider abstraction for Firebase Authentication and in-memory testing.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Protocol

from firebase_admin import auth, exceptions


class InvalidTokenError(Exception):
    """The bearer token could not be verified."""


class AccountCreationError(Exception):
    """The identity provider rejected the new account."""


class IdentityClient(Protocol):
    """Operations the API needs from the identity provider."""

    def verify_token(self, token: str) -> dict:
        ...

    def create_account(self, email: str, password: str, display_name: str) -> str:
        ...


@dataclass
class InMemoryIdentityClient:
    """Test double that issues opaque tokens for known accounts."""

    accounts: dict = field(default_factory=dict)
    tokens: dict = field(default_factory=dict)

    def create_account(self, email: str, password: str, display_name: str) -> str:
        if any(a["email"] == email for a in self.accounts.values()):
            raise AccountCreationError(
                "The user with the provided email already exists (EMAIL_EXISTS)."
            )
        uid = uuid.uuid4().hex[:28]
        self.accounts[uid] = {
            "email": email,
            "password": password,
            "display_name": display_name,
        }
        return uid

    def issue_token(self, uid: str, email: str | None = None) -> str:
        token = uuid.uuid4().hex
        account = self.accounts.get(uid, {})
        self.tokens[token] = {"uid": uid, "email": email or account.get("email")}
        return token

    def verify_token(self, token: str) -> dict:
        claims = self.tokens.get(token)
        if claims is None:
            raise InvalidTokenError("Unknown token")
        return dict(claims)

    def reset(self) -> None:
        self.accounts.clear()
        self.tokens.clear()


class FirebaseIdentityClient:
    """Firebase Authentication backed identity client."""

    def __init__(self, app: Any = None):
        self.app = app

    def verify_token(self, token: str) -> dict:
        try:
            return auth.verify_id_token(token, app=self.app)
        except (ValueError, exceptions.FirebaseError) as e:
            # Covers malformed, expired, revoked and certificate fetch failures.
            raise InvalidTokenError(str(e)) from e

    def create_account(self, email: str, password: str, display_name: str) -> str:
        try:
            user = auth.create_user(
                email=email,
                password=password,
                display_name=display_name,
                app=self.app,
            )
        except (
            auth.EmailAlreadyExistsError,
            exceptions.InvalidArgumentError,
            ValueError,
        ) as e:
            # ValueError comes from the SDK's local argument checks.
            raise AccountCreationError(str(e)) from e
        return user.uid
