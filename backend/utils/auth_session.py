# utils/auth_session.py
import json
import logging
from pathlib import Path
from typing import Dict, Optional

import httpx

logger = logging.getLogger(__name__)

USER_KEY = "user_data"
TOKEN_KEY = "user_token"


class MemoryTokenStore:
    """Key/value storage kept in memory (tests, short lived scripts)."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str):
        self._data[key] = value

    def remove(self, key: str):
        self._data.pop(key, None)


class FileTokenStore(MemoryTokenStore):
    """Key/value storage persisted as a JSON file, the CLI counterpart of browser localStorage."""

    def __init__(self, path):
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            try:
                self._data = json.loads(self.path.read_text(encoding="utf-8"))
            except ValueError:
                logger.warning("Ignoring unreadable session file %s", self.path)

    def _flush(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")

    def set(self, key: str, value: str):
        super().set(key, value)
        self._flush()

    def remove(self, key: str):
        super().remove(key)
        self._flush()


def _user_record(user: dict) -> dict:
    return {
        "id": user.get("id"),
        "name": user.get("full_name") or user.get("username"),
        "email": user.get("email"),
        "phone": user.get("phone") or "",
        "address": user.get("address") or "",
    }


class AuthSession:
    """
    Client side session for the Caffinity API.

    Keeps the signed-in user record and bearer token in a store so a later run can
    restore them with check_session(). Every call returns ``{"success": bool}``, with
    a ``message`` on failure; transport errors are reported as "Network error".
    """

    def __init__(
        self,
        base_url: str = "http://localhost:5000",
        store: Optional[MemoryTokenStore] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        self._client = client or httpx.Client(base_url=base_url, timeout=timeout)
        self.store = store if store is not None else MemoryTokenStore()
        self.user: Optional[dict] = None
        self.loading = True

    @property
    def token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def auth_headers(self) -> Dict[str, str]:
        token = self.token
        return {"Authorization": f"Bearer {token}"} if token else {}

    def check_session(self) -> Optional[dict]:
        try:
            saved_user = self.store.get(USER_KEY)
            if saved_user and self.token:
                self.user = json.loads(saved_user)
        except ValueError:
            logger.error("Error checking session, stored user is not valid JSON")
        finally:
            self.loading = False
        return self.user

    def _save_user(self, user: dict):
        self.user = user
        self.store.set(USER_KEY, json.dumps(user))

    def login(self, email: str, password: str) -> dict:
        try:
            response = self._client.post("/api/auth/login", json={"email": email, "password": password})
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Login error: {e}")
            return {"success": False, "message": "Network error"}

        if not data.get("success"):
            return {"success": False, "message": data.get("message") or data.get("error")}

        self._save_user(_user_record(data["user"]))
        self.store.set(TOKEN_KEY, data["token"])
        return {"success": True}

    def register(self, user_data: dict) -> dict:
        try:
            response = self._client.post("/api/auth/register", json=user_data)
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Register error: {e}")
            return {"success": False, "message": "Network error"}

        if not data.get("success"):
            return {"success": False, "message": data.get("message") or data.get("error")}

        # Sign in right away with the same credentials
        return self.login(user_data["email"], user_data["password"])

    def logout(self):
        self.user = None
        self.store.remove(USER_KEY)
        self.store.remove(TOKEN_KEY)

    def update_profile(self, updated_data: dict) -> dict:
        try:
            response = self._client.put("/api/auth/profile", json=updated_data, headers=self.auth_headers())
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Update profile error: {e}")
            return {"success": False, "message": "Network error"}

        if not data.get("success"):
            return {"success": False, "message": data.get("message") or data.get("error")}

        # Submitted fields win over the stored record
        self._save_user({**(self.user or {}), **updated_data})
        return {"success": True}

    def close(self):
        self._client.close()
