"""Email OTP sign-in with a locally persisted session."""

import json
import logging
import os
from pathlib import Path
from typing import Any

import requests

from health_analyzer.models import User

logger = logging.getLogger(__name__)

AUTH_API_URL = os.environ.get("AUTH_API_URL", "http://localhost:9000")
AUTH_TIMEOUT = float(os.environ.get("AUTH_TIMEOUT", "10"))
LOCAL_STORE_PATH = os.environ.get("LOCAL_STORE_PATH", ".health_analyzer/local_store.json")

STORE_KEY = "auth-storage"
SESSION_MARKER_KEY = "DEVV_CODE_SID"

# Backend payloads use camelCase keys.
_USER_KEYS = {
    "uid": "uid",
    "name": "name",
    "email": "email",
    "projectId": "project_id",
    "project_id": "project_id",
    "createdTime": "created_time",
    "created_time": "created_time",
    "lastLoginTime": "last_login_time",
    "last_login_time": "last_login_time",
}


class AuthError(Exception):
    pass


class LocalStore:
    """JSON file key/value store. A missing or unreadable file reads as empty."""

    def __init__(self, path: str | Path = LOCAL_STORE_PATH):
        self.path = Path(path)

    def _load(self) -> dict:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable local store %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def get(self, key: str, default: Any = None) -> Any:
        return self._load().get(key, default)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


def user_from_payload(payload: dict) -> User:
    if not isinstance(payload, dict):
        raise TypeError(f"user profile must be an object, got {type(payload).__name__}")
    fields = {_USER_KEYS[k]: v for k, v in payload.items() if k in _USER_KEYS}
    return User(**fields)


class AuthBackendClient:
    def __init__(self, base_url: str = AUTH_API_URL, timeout: float = AUTH_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _post(self, path: str, payload: dict) -> dict:
        try:
            response = requests.post(f"{self.base_url}{path}", json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            raise AuthError(f"Auth request to {path} failed: {e}") from e
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise AuthError(f"Auth response from {path} is not JSON") from e
        if not isinstance(data, dict):
            raise AuthError(f"Auth response from {path} is not an object")
        return data

    def send_otp(self, email: str) -> None:
        self._post("/api/v1/auth/send-otp", {"email": email})

    def verify_otp(self, email: str, code: str) -> dict:
        data = self._post("/api/v1/auth/verify-otp", {"email": email, "code": code})
        if not isinstance(data.get("user"), dict) or not data.get("sid"):
            raise AuthError("Auth response missing user or sid")
        return data

    def logout(self, sid: str | None) -> None:
        self._post("/api/v1/auth/logout", {"sid": sid})


class AuthSession:
    """Sign-in state for one client.

    Every key this session reads or writes is prefixed with ``scope``, so
    several clients can share one store without seeing each other's session.
    """

    def __init__(self, backend: AuthBackendClient, store: LocalStore, scope: str = ""):
        self.backend = backend
        self.store = store
        self.scope = scope
        self.user: User | None = None
        self.is_authenticated = False
        self.is_loading = False
        self._rehydrate()

    def _key(self, name: str) -> str:
        return f"{self.scope}:{name}" if self.scope else name

    def _rehydrate(self) -> None:
        saved = self.store.get(self._key(STORE_KEY)) or {}
        user = saved.get("user")
        try:
            self.user = User(**user) if user else None
        except (TypeError, ValueError):
            logger.warning("Discarding malformed cached user")
            self.user = None
        self.is_authenticated = bool(saved.get("is_authenticated")) and self.user is not None

    def _persist(self) -> None:
        self.store.set(self._key(STORE_KEY), {
            "user": self.user.model_dump() if self.user else None,
            "is_authenticated": self.is_authenticated,
        })

    @property
    def sid(self) -> str | None:
        return self.store.get(self._key(SESSION_MARKER_KEY))

    def send_otp(self, email: str) -> None:
        self.is_loading = True
        try:
            self.backend.send_otp(email)
        except AuthError:
            logger.warning("Send OTP failed for %s", email)
            raise
        finally:
            self.is_loading = False

    def login(self, email: str, code: str) -> User:
        self.is_loading = True
        try:
            data = self.backend.verify_otp(email, code)
            sid = data["sid"]
            user = user_from_payload(data["user"])
        except AuthError:
            logger.warning("Login failed for %s", email)
            raise
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Login failed for %s: malformed backend reply", email)
            raise AuthError(f"Malformed login response: {e}") from e
        finally:
            self.is_loading = False

        self.store.set(self._key(SESSION_MARKER_KEY), sid)
        self.user = user
        self.is_authenticated = True
        self._persist()
        logger.info("User %s signed in", user.uid)
        return user

    def logout(self) -> None:
        try:
            self.backend.logout(self.sid)
        except AuthError as e:
            logger.warning("Remote logout failed, clearing local session anyway: %s", e)
        self.store.remove(self._key(SESSION_MARKER_KEY))
        self.user = None
        self.is_authenticated = False
        self._persist()

    def check_auth_status(self) -> bool:
        was = (self.user, self.is_authenticated)
        if self.sid and self.user is not None:
            self.is_authenticated = True
        else:
            self.user = None
            self.is_authenticated = False
        if (self.user, self.is_authenticated) != was:
            self._persist()
        return self.is_authenticated
