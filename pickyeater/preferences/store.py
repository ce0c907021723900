from __future__ import annotations

import logging
import threading
from typing import Callable

from ..matching.models import Preferences

logger = logging.getLogger(__name__)

# (user_id, previous, current); either side is None on create / delete.
PreferencesListener = Callable[[str, Preferences | None, Preferences | None], None]


class PreferencesStore:
    """In-memory per-user preference storage with change notifications."""

    def __init__(self) -> None:
        self._preferences: dict[str, Preferences] = {}
        self._listeners: list[PreferencesListener] = []
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Preferences | None:
        with self._lock:
            return self._preferences.get(user_id)

    def get_or_default(self, user_id: str) -> Preferences:
        return self.get(user_id) or Preferences()

    def save(self, user_id: str, preferences: Preferences) -> None:
        with self._lock:
            previous = self._preferences.get(user_id)
            self._preferences[user_id] = preferences
            listeners = list(self._listeners)
        if previous != preferences:
            self._notify(listeners, user_id, previous, preferences)

    def delete(self, user_id: str) -> bool:
        with self._lock:
            previous = self._preferences.pop(user_id, None)
            listeners = list(self._listeners)
        if previous is None:
            return False
        self._notify(listeners, user_id, previous, None)
        return True

    def subscribe(self, listener: PreferencesListener) -> Callable[[], None]:
        """Register *listener*; the returned callable unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def user_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._preferences)

    @staticmethod
    def _notify(
        listeners: list[PreferencesListener],
        user_id: str,
        previous: Preferences | None,
        current: Preferences | None,
    ) -> None:
        logger.debug("Preferences changed for %s, notifying %d listeners", user_id, len(listeners))
        for listener in listeners:
            listener(user_id, previous, current)
