"""Reconciler that owns today's food log."""

import asyncio
import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from enum import StrEnum
from typing import Protocol

from calories_daily.domain.daylog import DayLog, FoodEntry, day_id_for
from calories_daily.domain.errors import (
    AuthRequiredError,
    FoodIndexError,
    RemoteUnavailableError,
    StaleDayError,
    ValidationError,
)
from calories_daily.domain.session import SessionUser
from calories_daily.services.local_cache import LocalCache
from calories_daily.services.remote import call_remote

Clock = Callable[[], date]

_logger = logging.getLogger(__name__)


class DayLogRepository(Protocol):
    """Remote per-user, per-day log documents."""

    def get_day(self, user_id: str, day_id: str) -> DayLog | None:
        """Return the stored log for a user and day, if present."""

    def save_day(self, user_id: str, log: DayLog) -> None:
        """Merge the log into the stored document for its day."""


class ReconcilerState(StrEnum):
    """Lifecycle of the reconciler."""

    UNINITIALIZED = "uninitialized"
    HYDRATING = "hydrating"
    READY = "ready"
    STALE = "stale"


def make_food_entry(  # noqa: PLR0913
    name: str,
    kcal: float,
    protein: float = 0.0,
    carb: float = 0.0,
    fat: float = 0.0,
    logged_at: datetime | None = None,
) -> FoodEntry:
    """Build a food entry stamped with the current time (millisecond precision)."""
    stamp = logged_at or datetime.now(tz=UTC)
    return FoodEntry(
        name=name.strip(),
        kcal=kcal,
        protein=protein,
        carb=carb,
        fat=fat,
        logged_at=stamp.replace(microsecond=stamp.microsecond // 1000 * 1000),
    )


def validate_food_entry(entry: FoodEntry) -> None:
    """Raise ValidationError unless the entry can be logged."""
    if not isinstance(entry.name, str) or not entry.name.strip():
        raise ValidationError("Food name is required")
    if not _is_finite_number(entry.kcal):
        raise ValidationError("kcal must be a finite number")
    for label, value in (
        ("kcal", entry.kcal),
        ("protein", entry.protein),
        ("carb", entry.carb),
        ("fat", entry.fat),
    ):
        if not _is_finite_number(value) or value < 0:
            raise ValidationError(f"{label} must be a non-negative number")


@dataclass
class DayLogReconciler:
    """Keeps today's log consistent across memory, local cache and remote store.

    Every mutation recomputes totals (DayLog derives them on construction),
    then writes the log through to the local cache and, when a session is
    attached, to the remote store before returning. All operations are
    serialized on one lock so writes land in the order they were requested.
    """

    repository: DayLogRepository
    local_cache: LocalCache
    clock: Clock = date.today
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    _log: DayLog = field(init=False)
    _state: ReconcilerState = field(init=False, default=ReconcilerState.UNINITIALIZED)
    _session: SessionUser | None = field(init=False, default=None)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)
    _hydrate_ticket: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        self._log = DayLog.empty(self._today_id())

    @property
    def log(self) -> DayLog:
        """Return the current log (immutable snapshot)."""
        return self._log

    @property
    def state(self) -> ReconcilerState:
        """Return the lifecycle state."""
        return self._state

    @property
    def session(self) -> SessionUser | None:
        """Return the user whose remote log receives writes, if any."""
        return self._session

    async def hydrate(self, session: SessionUser | None) -> DayLog:
        """Load today's log for the session.

        Authenticated sessions read the remote document (creating an empty one
        when missing) and the remote copy wins over the local cache. Anonymous
        sessions use the local cache only. If a newer hydrate is requested
        while this one waits or reads, this one is dropped without applying.
        """
        self._hydrate_ticket += 1
        ticket = self._hydrate_ticket
        async with self._lock:
            if ticket != self._hydrate_ticket:
                _logger.info("Skipping superseded day log hydrate")
                return self._log
            previous_state = self._state
            self._state = ReconcilerState.HYDRATING
            day_id = self._today_id()
            if session is None:
                self._session = None
                self._log = self._load_local(day_id)
                self._state = ReconcilerState.READY
                return self._log

            try:
                remote_log = await self._fetch_or_create(session, day_id)
            except RemoteUnavailableError:
                if ticket != self._hydrate_ticket:
                    _logger.info("Ignoring failed read for superseded session")
                    self._state = previous_state
                    return self._log
                if self._log.day_id != day_id or (
                    previous_state == ReconcilerState.UNINITIALIZED
                ):
                    self._log = self._load_local(day_id)
                self._state = ReconcilerState.READY
                raise

            if ticket != self._hydrate_ticket:
                _logger.info("Dropping day log read for superseded session")
                self._state = previous_state
                return self._log
            self._session = session
            self._log = remote_log
            self._save_local()
            self._state = ReconcilerState.READY
            _logger.info("Hydrated day log %s from remote", day_id)
            return self._log

    async def add_food(self, entry: FoodEntry) -> DayLog:
        """Insert an entry at the front of today's log and persist."""
        validate_food_entry(entry)
        async with self._lock:
            self._ensure_current()
            self._log = self._log.with_food(entry)
            await self._persist()
            return self._log

    async def remove_food(self, index: int) -> DayLog:
        """Remove the entry at index and persist."""
        async with self._lock:
            self._ensure_current()
            if not 0 <= index < len(self._log.foods):
                raise FoodIndexError(
                    f"No food at index {index} (log has {len(self._log.foods)})"
                )
            self._log = self._log.without_food(index)
            await self._persist()
            return self._log

    async def clear(self) -> DayLog:
        """Remove every entry for today and persist. Callers confirm first."""
        async with self._lock:
            self._ensure_current()
            self._log = self._log.cleared()
            await self._persist()
            return self._log

    async def reload(self) -> DayLog:
        """Re-read today's log from the remote store."""
        if self._session is None:
            raise AuthRequiredError("Sign in to reload today's log")
        return await self.hydrate(self._session)

    def check_rollover(self) -> bool:
        """Mark the log stale when the date has moved on; return True if stale."""
        if self._state == ReconcilerState.STALE:
            return True
        if self._log.day_id != self._today_id() and (
            self._state == ReconcilerState.READY
        ):
            _logger.info("Day log %s rolled over", self._log.day_id)
            self._state = ReconcilerState.STALE
            return True
        return False

    async def refresh_if_stale(self) -> DayLog:
        """Re-hydrate for the new date when the current log is stale."""
        if self.check_rollover():
            return await self.hydrate(self._session)
        return self._log

    def _ensure_current(self) -> None:
        if self._state == ReconcilerState.UNINITIALIZED:
            self._log = self._load_local(self._today_id())
            self._state = ReconcilerState.READY
        if self.check_rollover():
            raise StaleDayError(self._log.day_id, self._today_id())

    async def _fetch_or_create(self, session: SessionUser, day_id: str) -> DayLog:
        remote_log = await call_remote(
            lambda: self.repository.get_day(session.user_id, day_id),
            action="day log read",
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )
        if remote_log is not None:
            return remote_log
        empty = DayLog.empty(day_id)
        await call_remote(
            lambda: self.repository.save_day(session.user_id, empty),
            action="day log create",
        )
        return empty

    async def _persist(self) -> None:
        self._save_local()
        session = self._session
        if session is None:
            return
        log = self._log
        try:
            await call_remote(
                lambda: self.repository.save_day(session.user_id, log),
                action="day log write",
            )
        except RemoteUnavailableError as exc:
            raise RemoteUnavailableError(
                "Saved on this device, but syncing to the server failed",
                saved_locally=True,
            ) from exc

    def _save_local(self) -> None:
        try:
            self.local_cache.save_day_log(self._log)
        except Exception:
            _logger.exception("Failed to write day log %s to cache", self._log.day_id)

    def _load_local(self, day_id: str) -> DayLog:
        try:
            cached = self.local_cache.load_day_log(day_id)
        except Exception:
            _logger.exception("Failed to read day log from cache")
            cached = None
        return cached or DayLog.empty(day_id)

    def _today_id(self) -> str:
        return day_id_for(self.clock())


def _is_finite_number(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )
