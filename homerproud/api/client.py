"""HTTP client for the Make Homer Proud REST API.

All calls are blocking and meant to run on a worker thread (see
``homerproud.tasks``).  Every failure is raised as :class:`ApiError`.

Usage::

    with ApiClient("http://localhost:8000") as api:
        coaches = api.list_gods()
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, TypeVar

import httpx

from .models import (
    Coach,
    PreferencesUpdate,
    Session,
    SessionType,
    TodaySessions,
    UserPreferences,
    UserStats,
    format_datetime,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0

T = TypeVar("T")


# ── errors ───────────────────────────────────────────────────────────────


class ApiErrorKind(Enum):
    INVALID_URL = "invalid_url"
    NETWORK = "network"
    DECODING = "decoding"
    SERVER = "server"
    UNKNOWN = "unknown"


class ApiError(Exception):
    """Single tagged error for everything that can go wrong talking to the API."""

    def __init__(
        self,
        kind: ApiErrorKind,
        detail: str = "",
        *,
        status_code: int | None = None,
    ) -> None:
        self.kind = kind
        self.detail = detail
        self.status_code = status_code
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.kind is ApiErrorKind.INVALID_URL:
            return "Invalid URL"
        if self.kind is ApiErrorKind.NETWORK:
            return f"Network error: {self.detail}"
        if self.kind is ApiErrorKind.DECODING:
            return f"Decoding error: {self.detail}"
        if self.kind is ApiErrorKind.SERVER:
            return f"Server error: {self.status_code}"
        return "Unknown error"

    @classmethod
    def invalid_url(cls, url: str) -> ApiError:
        return cls(ApiErrorKind.INVALID_URL, url)

    @classmethod
    def network(cls, exc: Exception) -> ApiError:
        return cls(ApiErrorKind.NETWORK, str(exc) or type(exc).__name__)

    @classmethod
    def decoding(cls, exc: Exception) -> ApiError:
        return cls(ApiErrorKind.DECODING, str(exc) or type(exc).__name__)

    @classmethod
    def server(cls, status_code: int) -> ApiError:
        return cls(ApiErrorKind.SERVER, status_code=status_code)

    @classmethod
    def unknown(cls, detail: str = "") -> ApiError:
        return cls(ApiErrorKind.UNKNOWN, detail)


# ── client ───────────────────────────────────────────────────────────────


class ApiClient:
    """Thin, typed wrapper over ``httpx.Client``.

    *transport* is passed straight to httpx, which lets tests plug in an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._base_url = validate_base_url(base_url)
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ── coaches ─────────────────────────────────────────────────────

    def list_gods(self) -> list[Coach]:
        data = self._request("GET", "/gods")
        return self._decode(_coach_list, data)

    def get_god(self, god_id: int) -> Coach:
        data = self._request("GET", f"/gods/{god_id}")
        return self._decode(Coach.from_dict, data)

    # ── sessions ────────────────────────────────────────────────────

    def create_session(
        self,
        god_id: int,
        session_type: SessionType,
        duration_seconds: int,
        started_at: datetime,
    ) -> Session:
        body = {
            "god_id": god_id,
            "session_type": session_type.api_category,
            "duration_seconds": duration_seconds,
            "started_at": format_datetime(started_at),
        }
        data = self._request("POST", "/sessions", json=body, expected=(200, 201))
        return self._decode(Session.from_dict, data)

    def complete_session(
        self, session_id: int, completed_at: datetime | None = None,
    ) -> Session:
        when = completed_at or datetime.now(timezone.utc)
        body = {"completed_at": format_datetime(when)}
        data = self._request("PATCH", f"/sessions/{session_id}/complete", json=body)
        return self._decode(Session.from_dict, data)

    def today_sessions(self) -> TodaySessions:
        data = self._request("GET", "/sessions/today")
        return self._decode(TodaySessions.from_dict, data)

    # ── stats ───────────────────────────────────────────────────────

    def stats(self) -> UserStats:
        data = self._request("GET", "/stats")
        return self._decode(UserStats.from_dict, data)

    # ── preferences ─────────────────────────────────────────────────

    def preferences(self) -> UserPreferences:
        data = self._request("GET", "/preferences")
        return self._decode(UserPreferences.from_dict, data)

    def update_preferences(self, update: PreferencesUpdate) -> UserPreferences:
        data = self._request("PUT", "/preferences", json=update.to_payload())
        return self._decode(UserPreferences.from_dict, data)

    def toggle_favorite(self, god_id: int) -> UserPreferences:
        data = self._request(
            "PATCH", "/preferences/favorites", json={"god_id": god_id},
        )
        return self._decode(UserPreferences.from_dict, data)

    def set_selected_god(self, god_id: int | None) -> UserPreferences:
        data = self._request(
            "PATCH", "/preferences/selected-god", json={"god_id": god_id},
        )
        return self._decode(UserPreferences.from_dict, data)

    # ── health ──────────────────────────────────────────────────────

    def check_health(self) -> bool:
        """True when the server answers ``GET /health`` with 200."""
        try:
            response = self._client.get("/health")
        except httpx.HTTPError as exc:
            logger.debug("Health check failed: %s", exc)
            return False
        return response.status_code == 200

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        expected: tuple[int, ...] = (200,),
    ) -> Any:
        try:
            response = self._client.request(method, path, json=json)
        except httpx.TransportError as exc:
            raise ApiError.network(exc) from exc
        except httpx.HTTPError as exc:
            raise ApiError.unknown(str(exc)) from exc

        if response.status_code not in expected:
            logger.debug("%s %s -> %s", method, path, response.status_code)
            raise ApiError.server(response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise ApiError.decoding(exc) from exc

    @staticmethod
    def _decode(parser: Callable[[Any], T], data: Any) -> T:
        try:
            return parser(data)
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise ApiError.decoding(exc) from exc


def _coach_list(data: Any) -> list[Coach]:
    if not isinstance(data, list):
        raise TypeError(f"expected a list of gods, got {type(data).__name__}")
    return [Coach.from_dict(item) for item in data]


def validate_base_url(base_url: str) -> str:
    """Normalised *base_url*, or ``ApiError`` of kind ``INVALID_URL``."""
    try:
        url = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ApiError.invalid_url(str(base_url)) from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ApiError.invalid_url(base_url)
    return str(url).rstrip("/")
