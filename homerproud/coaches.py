"""Coach (god) selection.

Which god coaches a session is decided by priority:

1. the god explicitly selected in the user's preferences,
2. a random favorite, when auto-select-favorites is on and favorites exist,
3. a random god from the full catalog.

``resolve_launch_coach`` applies the rule against the server at launch;
``CoachRoster`` keeps the catalog and preferences cached for the views
and writes every preference change straight through to the server.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Sequence

from PyQt6.QtCore import QObject, pyqtSignal

from .api.client import ApiClient, ApiError
from .api.models import Coach, PreferencesUpdate, UserPreferences
from .tasks import TaskRunner

logger = logging.getLogger(__name__)


def choose_coach(
    coaches: Sequence[Coach],
    preferences: UserPreferences | None,
    rng: random.Random | None = None,
) -> Coach | None:
    """Apply the selection priority to data already in memory."""
    rng = rng or random.Random()
    if preferences is not None:
        if preferences.selected_god_id is not None:
            for coach in coaches:
                if coach.id == preferences.selected_god_id:
                    return coach
        if preferences.auto_select_favorites:
            favorites = [c for c in coaches if c.id in preferences.favorite_god_ids]
            if favorites:
                return rng.choice(favorites)
    if not coaches:
        return None
    return rng.choice(list(coaches))


def resolve_launch_coach(
    api: ApiClient, rng: random.Random | None = None,
) -> Coach | None:
    """Pick the coach for a fresh app launch.  Blocking; run it in a task.

    Any failure while reading preferences falls back to a random god.
    Failure to fetch the catalog itself propagates as ``ApiError``.
    """
    rng = rng or random.Random()
    try:
        prefs = api.preferences()
        if prefs.selected_god_id is not None:
            return api.get_god(prefs.selected_god_id)
        if prefs.auto_select_favorites and prefs.favorite_god_ids:
            return api.get_god(rng.choice(list(prefs.favorite_god_ids)))
    except ApiError as exc:
        logger.warning("Falling back to a random coach: %s", exc)

    coaches = api.list_gods()
    if not coaches:
        return None
    return rng.choice(coaches)


class CoachRoster(QObject):
    """Cached coach catalog plus user preferences.

    Signals
    -------
    changed()
        Catalog or preferences were replaced.
    loading_changed(is_loading: bool)
    failed(message: str)
        A load or a preference write failed.  Loads can be retried with
        :meth:`load`.
    """

    changed = pyqtSignal()
    loading_changed = pyqtSignal(bool)
    failed = pyqtSignal(str)

    def __init__(
        self,
        api: ApiClient,
        runner: Any = None,
        parent: QObject | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        super().__init__(parent)
        self._api = api
        self._runner = runner if runner is not None else TaskRunner(self)
        self._rng = rng or random.Random()
        self._coaches: list[Coach] = []
        self._preferences: UserPreferences | None = None
        self._loading = False
        self._error: str | None = None

    # ── data ────────────────────────────────────────────────────────

    @property
    def coaches(self) -> list[Coach]:
        return list(self._coaches)

    @property
    def preferences(self) -> UserPreferences | None:
        return self._preferences

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def error(self) -> str | None:
        """Message of the last failed load, cleared by a successful one."""
        return self._error

    @property
    def favorite_gods(self) -> list[Coach]:
        if self._preferences is None:
            return []
        favs = self._preferences.favorite_god_ids
        return [c for c in self._coaches if c.id in favs]

    @property
    def non_favorite_gods(self) -> list[Coach]:
        if self._preferences is None:
            return list(self._coaches)
        favs = self._preferences.favorite_god_ids
        return [c for c in self._coaches if c.id not in favs]

    @property
    def selected_god(self) -> Coach | None:
        if self._preferences is None or self._preferences.selected_god_id is None:
            return None
        return self.find(self._preferences.selected_god_id)

    def find(self, coach_id: int) -> Coach | None:
        for coach in self._coaches:
            if coach.id == coach_id:
                return coach
        return None

    def is_favorite(self, coach: Coach) -> bool:
        return (
            self._preferences is not None
            and coach.id in self._preferences.favorite_god_ids
        )

    def is_selected(self, coach: Coach) -> bool:
        return (
            self._preferences is not None
            and self._preferences.selected_god_id == coach.id
        )

    def coach_for_session(self) -> Coach | None:
        return choose_coach(self._coaches, self._preferences, self._rng)

    # ── loading ─────────────────────────────────────────────────────

    def load(self) -> None:
        """Fetch catalog and preferences in the background."""
        if self._loading:
            return
        self._set_loading(True)
        api = self._api

        def job() -> tuple[list[Coach], UserPreferences]:
            return api.list_gods(), api.preferences()

        self._runner.submit(job, self._on_loaded, self._on_load_failed,
                            description="load coaches")

    def _on_loaded(self, result: tuple[list[Coach], UserPreferences]) -> None:
        self._coaches, self._preferences = list(result[0]), result[1]
        self._error = None
        self._set_loading(False)
        self.changed.emit()

    def _on_load_failed(self, exc: Exception) -> None:
        logger.warning("Failed to load coach selection data: %s", exc)
        self._error = str(exc)
        self._set_loading(False)
        self.failed.emit(self._error)

    def _set_loading(self, loading: bool) -> None:
        self._loading = loading
        self.loading_changed.emit(loading)

    # ── write-through preference changes ────────────────────────────

    def toggle_favorite(self, coach: Coach) -> None:
        self._write(lambda: self._api.toggle_favorite(coach.id), "toggle favorite")

    def select(self, coach: Coach) -> None:
        self._write(lambda: self._api.set_selected_god(coach.id), "select coach")

    def clear_selection(self) -> None:
        self._write(lambda: self._api.set_selected_god(None), "clear selection")

    def set_auto_select_favorites(self, enabled: bool) -> None:
        update = PreferencesUpdate(auto_select_favorites=enabled)
        self._write(lambda: self._api.update_preferences(update),
                    "update auto-select favorites")

    def _write(self, job, description: str) -> None:
        def on_error(exc: Exception) -> None:
            logger.warning("Failed to %s: %s", description, exc)
            self.failed.emit(f"Could not {description}: {exc}")

        self._runner.submit(job, self._on_preferences, on_error,
                            description=description)

    def _on_preferences(self, preferences: UserPreferences) -> None:
        self._preferences = preferences
        self.changed.emit()
