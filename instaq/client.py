"""HTTP client for the InstaQ API with an explicit session context.

The mobile app kept its token and cached profile in global storage. Here the
session is an object handed to the client: ``begin`` on login or signup,
``end`` on logout or when the server rejects the token.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional, Protocol

import httpx

logger = logging.getLogger(__name__)

TOKEN_KEY = "userToken"
USER_KEY = "userData"


class CredentialStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryCredentialStore:
    def __init__(self):
        self._values: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class FileCredentialStore:
    """Key-value store persisted as a small JSON file."""

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        return json.loads(self.path.read_text(encoding="utf-8") or "{}")

    def _write(self, values: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(values), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        values = self._read()
        values[key] = value
        self._write(values)

    def delete(self, key: str) -> None:
        values = self._read()
        if values.pop(key, None) is not None:
            self._write(values)


class SessionContext:
    def __init__(self, store: Optional[CredentialStore] = None):
        self.store = store if store is not None else MemoryCredentialStore()

    @property
    def token(self) -> Optional[str]:
        return self.store.get(TOKEN_KEY)

    @property
    def user(self) -> Optional[dict[str, Any]]:
        raw = self.store.get(USER_KEY)
        return json.loads(raw) if raw else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def begin(self, token: str, user: Optional[dict[str, Any]] = None) -> None:
        if not token:
            raise ValueError("token is required to begin a session")
        self.store.set(TOKEN_KEY, token)
        if user is not None:
            self.store.set(USER_KEY, json.dumps(user))

    def update_user(self, user: dict[str, Any]) -> None:
        self.store.set(USER_KEY, json.dumps(user))

    def end(self) -> None:
        self.store.delete(TOKEN_KEY)
        self.store.delete(USER_KEY)

    def auth_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[list[dict[str, str]]] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.errors = errors or []


class SessionExpired(ApiError):
    """The server refused the session token; the session has been ended."""


class InstaQClient:
    def __init__(
        self,
        session: SessionContext,
        http: Optional[httpx.Client] = None,
        base_url: str = "http://localhost:8000",
        timeout: float = 10.0,
    ):
        self.session = session
        self.http = http if http is not None else httpx.Client(base_url=base_url, timeout=timeout)

    def _request(self, method: str, path: str, *, auth: bool = True, **kwargs) -> Any:
        headers = self.session.auth_headers() if auth else {"Content-Type": "application/json"}
        response = self.http.request(method, path, headers=headers, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code == 401 and auth:
            logger.info("Session rejected by server, clearing credentials")
            self.session.end()
            raise SessionExpired(401, body.get("message", "Session expired"))
        if response.is_error:
            raise ApiError(response.status_code, body.get("message", response.reason_phrase), body.get("errors"))
        return body

    def _start_session(self, tokens: dict[str, Any]) -> dict[str, Any]:
        self.session.begin(tokens["access_token"])
        profile = self.me()
        self.session.update_user(profile)
        return profile

    # Auth

    def login(self, email: str, password: str) -> dict[str, Any]:
        tokens = self._request("POST", "/api/auth/login", auth=False, json={"email": email, "password": password})
        return self._start_session(tokens)

    def register(self, name: str, email: str, password: str, **profile: Any) -> dict[str, Any]:
        body = {"name": name, "email": email, "password": password, **profile}
        tokens = self._request("POST", "/api/auth/register", auth=False, json=body)
        return self._start_session(tokens)

    def logout(self) -> None:
        self.session.end()

    def me(self) -> dict[str, Any]:
        return self._request("GET", "/api/auth/me")

    # Attendance

    def submit_scan(
        self,
        qr_code_data: dict[str, Any],
        location: Optional[dict[str, Any]] = None,
        notes: Optional[str] = None,
    ) -> dict[str, Any]:
        body: dict[str, Any] = {"qrCodeData": qr_code_data}
        if location is not None:
            body["location"] = location
        if notes is not None:
            body["notes"] = notes
        return self._request("POST", "/api/attendance/scan", json=body)["data"]

    def list_attendance(
        self,
        date: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        limit: int = 10,
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if date:
            params["date"] = date
        if status:
            params["status"] = status
        return self._request("GET", "/api/attendance", params=params)["data"]

    def get_attendance(self, record_id: str) -> dict[str, Any]:
        return self._request("GET", f"/api/attendance/{record_id}")["data"]

    def attendance_stats(self, date: Optional[str] = None) -> dict[str, Any]:
        params = {"date": date} if date else None
        return self._request("GET", "/api/attendance/stats", params=params)["data"]

    def update_status(self, record_id: str, status: str, notes: Optional[str] = None) -> dict[str, Any]:
        body: dict[str, Any] = {"status": status}
        if notes is not None:
            body["notes"] = notes
        return self._request("PUT", f"/api/attendance/{record_id}/status", json=body)["data"]

    def delete_attendance(self, record_id: str) -> str:
        return self._request("DELETE", f"/api/attendance/{record_id}")["data"]["deletedId"]
