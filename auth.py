# -*- coding: utf-8 -*-
"""
Account store and bearer-token interfaces that gate the task endpoints.

Password hashing and OAuth code exchange live outside this service. The
store and token service here are what the HTTP layer needs to check a
`Authorization: Bearer <token>` header and resolve it to a user.
"""

import copy
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from settings import CONFIG


class DuplicateEmailError(ValueError):
    pass


class InvalidTokenError(Exception):
    pass


# ==============================================================================
# ACCOUNT STORE
# ==============================================================================
class UserStore(ABC):
    """Account persistence; emails are unique across users."""

    @abstractmethod
    def create_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    @abstractmethod
    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class InMemoryUserStore(UserStore):
    def __init__(self):
        self._users: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()

    def create_user(self, user: Dict[str, Any]) -> Dict[str, Any]:
        email = user.get("email")
        if not email:
            raise ValueError("email is required")
        with self._lock:
            if any(existing["email"] == email for existing in self._users.values()):
                raise DuplicateEmailError("Email already registered")
            record = dict(user)
            record["id"] = uuid.uuid4().hex
            record.setdefault("createdAt", datetime.now(timezone.utc).isoformat())
            self._users[record["id"]] = record
            return copy.deepcopy(record)

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            for user in self._users.values():
                if user["email"] == email:
                    return copy.deepcopy(user)
        return None

    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            user = self._users.get(user_id)
            return copy.deepcopy(user) if user else None

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                return None
            new_email = changes.get("email")
            if new_email and new_email != user["email"] and any(
                other["email"] == new_email for other in self._users.values()
            ):
                raise DuplicateEmailError("Email already registered")
            user.update({k: v for k, v in changes.items() if k != "id"})
            return copy.deepcopy(user)


# ==============================================================================
# TOKENS
# ==============================================================================
class TokenService:
    """Signed, time-limited tokens carrying {id, email}."""

    def __init__(self, secret: str, max_age: int = CONFIG["token_max_age_seconds"]):
        if not secret:
            raise ValueError("A token secret is required")
        self.serializer = URLSafeTimedSerializer(secret, salt="otisium-auth")
        self.max_age = max_age

    def issue(self, user: Dict[str, Any]) -> str:
        return self.serializer.dumps({"id": user["id"], "email": user["email"]})

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            return self.serializer.loads(token, max_age=self.max_age)
        except SignatureExpired as e:
            raise InvalidTokenError("Token expired") from e
        except BadSignature as e:
            raise InvalidTokenError("Invalid token") from e


def bearer_token(header_value: Optional[str]) -> Optional[str]:
    """Extracts <token> from 'Bearer <token>'; anything else gives None."""
    if not header_value or not header_value.startswith("Bearer "):
        return None
    token = header_value[len("Bearer "):].strip()
    return token or None


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": user.get("id"),
        "name": user.get("name"),
        "email": user.get("email"),
        "picture": user.get("picture"),
    }
