"""Local durable cache for the profile and today's log."""

import json
import logging
from dataclasses import dataclass, field
from typing import Protocol

from calories_daily.domain.daylog import DayLog
from calories_daily.domain.documents import (
    day_log_from_document,
    day_log_to_document,
    profile_from_document,
    profile_to_document,
)
from calories_daily.domain.profile import Profile

PROFILE_SLOT = "cd_profile_cache"
TODAY_SLOT = "cd_today_cache"

_logger = logging.getLogger(__name__)


class LocalStore(Protocol):
    """String-keyed durable storage on the device."""

    def get(self, key: str) -> str | None:
        """Return the stored string for a key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a string under a key."""


@dataclass
class InMemoryLocalStore(LocalStore):
    """Process-local store, used when no cache file is configured."""

    slots: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        return self.slots.get(key)

    def set(self, key: str, value: str) -> None:
        """Store a value for a key."""
        self.slots[key] = value


@dataclass
class LocalCache:
    """Typed access to the two cache slots.

    Reads never raise: unreadable entries are logged and treated as absent.
    """

    store: LocalStore

    def load_profile(self) -> Profile | None:
        """Return the cached profile, if any."""
        document = self._read(PROFILE_SLOT)
        if document is None:
            return None
        return profile_from_document(document)

    def save_profile(self, profile: Profile) -> None:
        """Cache the profile."""
        self.store.set(PROFILE_SLOT, json.dumps(profile_to_document(profile)))

    def load_day_log(self, day_id: str) -> DayLog | None:
        """Return the cached log only when it belongs to ``day_id``."""
        document = self._read(TODAY_SLOT)
        if document is None:
            return None
        cached_day = document.get("dayId") or document.get("id")
        if cached_day != day_id:
            _logger.info(
                "Discarding cached day log %s (today is %s)", cached_day, day_id
            )
            return None
        return day_log_from_document(document, day_id=day_id)

    def save_day_log(self, log: DayLog) -> None:
        """Cache the log tagged with its day id."""
        self.store.set(TODAY_SLOT, json.dumps(day_log_to_document(log)))

    def _read(self, key: str) -> dict[str, object] | None:
        raw = self.store.get(key)
        if not raw:
            return None
        try:
            document = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Ignoring unreadable cache slot %s", key)
            return None
        return document if isinstance(document, dict) else None
