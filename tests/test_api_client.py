"""Tests for the REST client, run against ``httpx.MockTransport``."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from homerproud.api.client import ApiClient, ApiError, ApiErrorKind
from homerproud.api.models import PreferencesUpdate, SessionType

ATHENA = {
    "id": 1,
    "name": "Athena",
    "domain": "Wisdom & Strategy",
    "icon": "owl",
    "coaching_style": "Calm and strategic.",
    "focus_messages": ["Think it through."],
    "break_messages": ["Rest the mind."],
    "session_start_messages": ["Plan, then act."],
}

SESSION = {
    "id": 42,
    "god_id": 1,
    "session_type": "focus",
    "duration_seconds": 1500,
    "started_at": "2026-03-02T09:30:00Z",
    "completed_at": None,
    "was_completed": False,
}

PREFS = {
    "id": 1,
    "user_id": "default",
    "selected_god_id": None,
    "favorite_god_ids": [1, 3],
    "auto_select_favorites": True,
    "created_at": "2026-03-01T08:00:00.123456Z",
    "updated_at": "2026-03-02T08:00:00+00:00",
}


class Recorder:
    """MockTransport handler that records requests and replays canned responses."""

    def __init__(self, routes):
        self.routes = routes
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key not in self.routes:
            return httpx.Response(404, json={"detail": "not found"})
        status, body = self.routes[key]
        if isinstance(body, bytes):
            return httpx.Response(status, content=body)
        return httpx.Response(status, json=body)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self):
        return json.loads(self.last.content)


def make_client(routes) -> tuple[ApiClient, Recorder]:
    recorder = Recorder(routes)
    client = ApiClient("http://olympus.test:8000/", transport=httpx.MockTransport(recorder))
    return client, recorder


# ═══════════════════════════════════════════════════════════════════════════
#  ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════


class TestEndpoints:

    def test_list_gods(self):
        client, rec = make_client({("GET", "/gods"): (200, [ATHENA])})
        gods = client.list_gods()
        assert [g.name for g in gods] == ["Athena"]
        assert gods[0].focus_messages == ("Think it through.",)
        assert rec.last.url.host == "olympus.test"

    def test_get_god(self):
        client, rec = make_client({("GET", "/gods/1"): (200, ATHENA)})
        assert client.get_god(1).coaching_style == "Calm and strategic."

    def test_create_session_body(self):
        client, rec = make_client({("POST", "/sessions"): (201, SESSION)})
        started = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)
        session = client.create_session(1, SessionType.LONG_BREAK, 900, started)
        assert session.id == 42
        assert rec.last_json() == {
            "god_id": 1,
            "session_type": "break",
            "duration_seconds": 900,
            "started_at": "2026-03-02T09:30:00Z",
        }

    def test_create_session_accepts_200(self):
        client, _ = make_client({("POST", "/sessions"): (200, SESSION)})
        started = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)
        assert client.create_session(1, SessionType.FOCUS, 1500, started).id == 42

    def test_complete_session(self):
        done = dict(SESSION, completed_at="2026-03-02T09:55:00Z", was_completed=True)
        client, rec = make_client({("PATCH", "/sessions/42/complete"): (200, done)})
        when = datetime(2026, 3, 2, 9, 55, tzinfo=timezone.utc)
        session = client.complete_session(42, when)
        assert session.was_completed
        assert session.completed_at == when
        assert rec.last_json() == {"completed_at": "2026-03-02T09:55:00Z"}

    def test_today_sessions(self):
        client, _ = make_client({
            ("GET", "/sessions/today"): (200, {"count": 1, "sessions": [SESSION]}),
        })
        today = client.today_sessions()
        assert today.count == 1
        assert today.sessions[0].session_type == "focus"

    def test_stats(self):
        body = {
            "id": 1, "user_id": "default", "total_sessions": 9,
            "total_focus_minutes": 200, "current_streak": 2,
            "last_session_date": "2026-03-01",
            "sessions_by_god": {"Athena": 6, "Zeus": 3},
        }
        client, _ = make_client({("GET", "/stats"): (200, body)})
        stats = client.stats()
        assert stats.total_focus_minutes == 200
        assert stats.sessions_by_god == {"Athena": 6, "Zeus": 3}

    def test_preferences(self):
        client, _ = make_client({("GET", "/preferences"): (200, PREFS)})
        prefs = client.preferences()
        assert prefs.favorite_god_ids == (1, 3)
        assert prefs.auto_select_favorites
        assert prefs.selected_god_id is None
        assert prefs.created_at.microsecond == 123456

    def test_update_preferences_omits_unset_fields(self):
        client, rec = make_client({("PUT", "/preferences"): (200, PREFS)})
        client.update_preferences(PreferencesUpdate(auto_select_favorites=False))
        assert rec.last_json() == {"auto_select_favorites": False}

    def test_toggle_favorite(self):
        client, rec = make_client({("PATCH", "/preferences/favorites"): (200, PREFS)})
        client.toggle_favorite(3)
        assert rec.last_json() == {"god_id": 3}

    def test_set_selected_god(self):
        selected = dict(PREFS, selected_god_id=2)
        client, rec = make_client({("PATCH", "/preferences/selected-god"): (200, selected)})
        assert client.set_selected_god(2).selected_god_id == 2
        assert rec.last_json() == {"god_id": 2}

    def test_clear_selected_god_sends_null(self):
        client, rec = make_client({("PATCH", "/preferences/selected-god"): (200, PREFS)})
        client.set_selected_god(None)
        assert rec.last_json() == {"god_id": None}


# ═══════════════════════════════════════════════════════════════════════════
#  ERRORS
# ═══════════════════════════════════════════════════════════════════════════


class TestErrors:

    def test_server_error_status(self):
        client, _ = make_client({("GET", "/stats"): (503, {"detail": "down"})})
        with pytest.raises(ApiError) as info:
            client.stats()
        assert info.value.kind is ApiErrorKind.SERVER
        assert info.value.status_code == 503
        assert str(info.value) == "Server error: 503"

    def test_create_session_rejects_other_2xx(self):
        client, _ = make_client({("POST", "/sessions"): (204, b"")})
        with pytest.raises(ApiError) as info:
            client.create_session(1, SessionType.FOCUS, 1500, datetime.now(timezone.utc))
        assert info.value.kind is ApiErrorKind.SERVER

    def test_non_json_body(self):
        client, _ = make_client({("GET", "/gods"): (200, b"<html>oops</html>")})
        with pytest.raises(ApiError) as info:
            client.list_gods()
        assert info.value.kind is ApiErrorKind.DECODING
        assert str(info.value).startswith("Decoding error: ")

    def test_missing_field(self):
        broken = {k: v for k, v in ATHENA.items() if k != "domain"}
        client, _ = make_client({("GET", "/gods/1"): (200, broken)})
        with pytest.raises(ApiError) as info:
            client.get_god(1)
        assert info.value.kind is ApiErrorKind.DECODING

    def test_bad_date(self):
        client, _ = make_client({
            ("GET", "/sessions/today"): (200, {
                "count": 1, "sessions": [dict(SESSION, started_at="yesterday")],
            }),
        })
        with pytest.raises(ApiError) as info:
            client.today_sessions()
        assert info.value.kind is ApiErrorKind.DECODING

    def test_date_without_offset(self):
        client, _ = make_client({
            ("POST", "/sessions"): (201, dict(SESSION, started_at="2026-03-02T09:30:00")),
        })
        with pytest.raises(ApiError) as info:
            client.create_session(1, SessionType.FOCUS, 1500, datetime.now(timezone.utc))
        assert info.value.kind is ApiErrorKind.DECODING

    @pytest.mark.parametrize("body", [[1, 2], "oops", 3, True])
    @pytest.mark.parametrize("method, path, call", [
        ("GET", "/gods/1", lambda api: api.get_god(1)),
        ("POST", "/sessions", lambda api: api.create_session(
            1, SessionType.FOCUS, 1500, datetime.now(timezone.utc))),
        ("PATCH", "/sessions/42/complete", lambda api: api.complete_session(42)),
        ("GET", "/sessions/today", lambda api: api.today_sessions()),
        ("GET", "/stats", lambda api: api.stats()),
        ("GET", "/preferences", lambda api: api.preferences()),
        ("PUT", "/preferences", lambda api: api.update_preferences(
            PreferencesUpdate(auto_select_favorites=True))),
        ("PATCH", "/preferences/favorites", lambda api: api.toggle_favorite(1)),
        ("PATCH", "/preferences/selected-god", lambda api: api.set_selected_god(1)),
    ])
    def test_wrong_body_shape_is_decoding_error(self, method, path, call, body):
        client, _ = make_client({(method, path): (201 if method == "POST" else 200, body)})
        with pytest.raises(ApiError) as info:
            call(client)
        assert info.value.kind is ApiErrorKind.DECODING

    @pytest.mark.parametrize("body", [ATHENA, "oops", 3, [1, 2]])
    def test_gods_list_wrong_shape(self, body):
        client, _ = make_client({("GET", "/gods"): (200, body)})
        with pytest.raises(ApiError) as info:
            client.list_gods()
        assert info.value.kind is ApiErrorKind.DECODING

    def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = ApiClient("http://olympus.test", transport=httpx.MockTransport(handler))
        with pytest.raises(ApiError) as info:
            client.list_gods()
        assert info.value.kind is ApiErrorKind.NETWORK
        assert str(info.value) == "Network error: connection refused"

    @pytest.mark.parametrize("url", ["", "olympus", "ftp://olympus.test", "http://"])
    def test_invalid_base_url(self, url):
        with pytest.raises(ApiError) as info:
            ApiClient(url)
        assert info.value.kind is ApiErrorKind.INVALID_URL
        assert str(info.value) == "Invalid URL"

    def test_unknown_error_message(self):
        assert str(ApiError.unknown()) == "Unknown error"


# ═══════════════════════════════════════════════════════════════════════════
#  HEALTH
# ═══════════════════════════════════════════════════════════════════════════


class TestHealth:

    def test_healthy(self):
        client, rec = make_client({("GET", "/health"): (200, {"status": "healthy"})})
        assert client.check_health() is True
        assert rec.last.url.path == "/health"

    def test_unhealthy_status(self):
        client, _ = make_client({("GET", "/health"): (500, {"status": "bad"})})
        assert client.check_health() is False

    def test_unreachable(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        client = ApiClient("http://olympus.test", transport=httpx.MockTransport(handler))
        assert client.check_health() is False

    def test_context_manager_closes(self):
        client, _ = make_client({})
        with client as api:
            assert api is client
        assert client._client.is_closed
