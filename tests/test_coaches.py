"""Tests for coach selection and the cached coach roster."""

import random

import httpx
import pytest

from homerproud.api.client import ApiClient
from homerproud.api.models import UserPreferences
from homerproud.coaches import choose_coach, resolve_launch_coach

from helpers import FakeApi, SignalCollector, make_coach

COACHES = [make_coach(1, "Athena"), make_coach(2, "Zeus"), make_coach(3, "Ares")]


# ═══════════════════════════════════════════════════════════════════════════
#  SELECTION RULE
# ═══════════════════════════════════════════════════════════════════════════


class TestChooseCoach:

    def test_selected_wins(self):
        prefs = UserPreferences(selected_god_id=2, favorite_god_ids=(3,),
                                auto_select_favorites=True)
        assert choose_coach(COACHES, prefs).name == "Zeus"

    def test_favorites_when_auto_select(self):
        prefs = UserPreferences(favorite_god_ids=(1, 3), auto_select_favorites=True)
        rng = random.Random(5)
        picks = {choose_coach(COACHES, prefs, rng).id for _ in range(40)}
        assert picks <= {1, 3}

    def test_favorites_ignored_without_auto_select(self):
        prefs = UserPreferences(favorite_god_ids=(1,), auto_select_favorites=False)
        rng = random.Random(5)
        picks = {choose_coach(COACHES, prefs, rng).id for _ in range(60)}
        assert picks == {1, 2, 3}

    def test_no_preferences_random(self):
        assert choose_coach(COACHES, None, random.Random(1)) in COACHES

    def test_unknown_selected_falls_through(self):
        prefs = UserPreferences(selected_god_id=99)
        assert choose_coach(COACHES, prefs, random.Random(1)) in COACHES

    def test_empty_catalog(self):
        assert choose_coach([], UserPreferences()) is None


class TestResolveLaunchCoach:

    def test_selected_fetched_by_id(self):
        api = FakeApi(preferences=UserPreferences(selected_god_id=3))
        assert resolve_launch_coach(api).name == "Ares"
        assert api.called("get_god") == [("get_god", 3)]
        assert api.called("list_gods") == []

    def test_random_favorite(self):
        api = FakeApi(preferences=UserPreferences(
            favorite_god_ids=(2,), auto_select_favorites=True,
        ))
        assert resolve_launch_coach(api, random.Random(0)).name == "Zeus"

    def test_random_when_no_preference(self):
        api = FakeApi()
        coach = resolve_launch_coach(api, random.Random(0))
        assert coach in api.coaches
        assert len(api.called("list_gods")) == 1

    def test_preferences_failure_falls_back(self):
        api = FakeApi(preferences=UserPreferences(selected_god_id=1))
        api.failing = {"preferences"}
        assert resolve_launch_coach(api, random.Random(0)) in api.coaches

    def test_missing_selected_god_falls_back(self):
        api = FakeApi(preferences=UserPreferences(selected_god_id=99))
        assert resolve_launch_coach(api, random.Random(0)) in api.coaches

    def test_empty_catalog(self):
        assert resolve_launch_coach(FakeApi(coaches=[])) is None

    @pytest.mark.parametrize("prefs_body", ["oops", [1, 2], 5])
    def test_malformed_preferences_fall_back(self, prefs_body):
        zeus = {
            "id": 2, "name": "Zeus", "domain": "Sky & Thunder", "icon": "bolt",
            "coaching_style": "Commanding.", "focus_messages": [],
            "break_messages": [], "session_start_messages": [],
        }

        def handler(request):
            if request.url.path == "/preferences":
                return httpx.Response(200, json=prefs_body)
            if request.url.path == "/gods":
                return httpx.Response(200, json=[zeus])
            return httpx.Response(404)

        api = ApiClient("http://olympus.test", transport=httpx.MockTransport(handler))
        assert resolve_launch_coach(api, random.Random(0)).name == "Zeus"


class TestEngineBootstrap:

    def test_load_coach_from_preferences(self, qapp, engine, fake_api):
        fake_api.prefs = UserPreferences(selected_god_id=2)
        coaches = SignalCollector()
        engine.coach_changed.connect(coaches.slot)
        engine.load_coach_from_preferences()
        assert engine.coach.name == "Zeus"
        assert coaches.last.name == "Zeus"

    def test_catalog_down_keeps_current_coach(self, qapp, engine, fake_api):
        fake_api.failing = {"preferences", "list_gods"}
        engine.load_coach_from_preferences()
        assert engine.coach.name == "Athena"


# ═══════════════════════════════════════════════════════════════════════════
#  ROSTER
# ═══════════════════════════════════════════════════════════════════════════


class TestRoster:

    def test_load(self, roster, fake_api):
        changed = SignalCollector()
        loading = SignalCollector()
        roster.changed.connect(changed.slot)
        roster.loading_changed.connect(loading.slot)
        roster.load()
        assert [c.name for c in roster.coaches] == ["Athena", "Zeus", "Ares"]
        assert roster.preferences is not None
        assert loading.items == [True, False]
        assert len(changed) == 1
        assert not roster.is_loading

    def test_load_failure(self, roster, fake_api):
        failed = SignalCollector()
        roster.failed.connect(failed.slot)
        fake_api.failing = {"list_gods"}
        roster.load()
        assert roster.error == "Network error: list_gods is down"
        assert failed.last == roster.error
        assert roster.coaches == []

    def test_retry_clears_error(self, roster, fake_api):
        fake_api.failing = {"preferences"}
        roster.load()
        assert roster.error is not None
        fake_api.failing = set()
        roster.load()
        assert roster.error is None

    def test_favorite_views(self, roster, fake_api):
        fake_api.prefs = UserPreferences(favorite_god_ids=(3,), selected_god_id=2)
        roster.load()
        assert [c.name for c in roster.favorite_gods] == ["Ares"]
        assert [c.name for c in roster.non_favorite_gods] == ["Athena", "Zeus"]
        assert roster.selected_god.name == "Zeus"
        assert roster.is_favorite(fake_api.coaches[2])
        assert roster.is_selected(fake_api.coaches[1])
        assert roster.coach_for_session().name == "Zeus"

    def test_views_before_load(self, roster):
        assert roster.favorite_gods == []
        assert roster.selected_god is None
        assert roster.coach_for_session() is None

    def test_toggle_favorite(self, roster, fake_api):
        roster.load()
        ares = roster.find(3)
        roster.toggle_favorite(ares)
        assert roster.is_favorite(ares)
        roster.toggle_favorite(ares)
        assert not roster.is_favorite(ares)
        assert fake_api.called("toggle_favorite") == [
            ("toggle_favorite", 3), ("toggle_favorite", 3),
        ]

    def test_select_and_clear(self, roster, fake_api):
        roster.load()
        roster.select(roster.find(1))
        assert roster.selected_god.name == "Athena"
        roster.clear_selection()
        assert roster.selected_god is None
        assert fake_api.called("set_selected_god")[-1] == ("set_selected_god", None)

    def test_auto_select_favorites(self, roster, fake_api):
        roster.load()
        roster.set_auto_select_favorites(True)
        assert roster.preferences.auto_select_favorites is True
        update = fake_api.called("update_preferences")[0][1]
        assert update.to_payload() == {"auto_select_favorites": True}

    def test_failed_write_keeps_cache(self, roster, fake_api):
        roster.load()
        before = roster.preferences
        failed = SignalCollector()
        roster.failed.connect(failed.slot)
        fake_api.failing = {"toggle_favorite"}
        roster.toggle_favorite(roster.find(1))
        assert roster.preferences is before
        assert failed.last.startswith("Could not toggle favorite: ")
        assert roster.error is None
