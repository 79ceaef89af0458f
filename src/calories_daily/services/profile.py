"""Profile, energy expenditure and goal management."""

import asyncio
import logging
import math
from dataclasses import dataclass, field, replace
from typing import Protocol

from calories_daily.domain.daylog import round_half_up
from calories_daily.domain.errors import AuthRequiredError, ValidationError
from calories_daily.domain.profile import (
    DerivedMetrics,
    Gender,
    Goal,
    GoalType,
    Profile,
    ProfileDocument,
)
from calories_daily.domain.session import SessionUser
from calories_daily.services.local_cache import LocalCache
from calories_daily.services.remote import call_remote

MIN_CUT_KCAL = 1200.0

_logger = logging.getLogger(__name__)


class ProfileRepository(Protocol):
    """Remote per-user profile documents."""

    def get_profile(self, user_id: str) -> ProfileDocument | None:
        """Return the stored profile document, if present."""

    def create_profile(self, user_id: str, email: str, profile: Profile) -> None:
        """Create the profile document for a new user."""

    def merge_profile(self, user_id: str, profile: Profile) -> None:
        """Merge the profile into the stored document."""


def compute_bmr(
    gender: Gender, age: float | None, height_cm: float | None, weight_kg: float | None
) -> float | None:
    """Mifflin-St Jeor basal metabolic rate, or None if an input is missing."""
    if age is None or height_cm is None or weight_kg is None:
        return None
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age
    return base + 5 if gender == Gender.MALE else base - 161


def compute_target_kcal(
    tdee: float | None, goal_type: GoalType, delta: float | None
) -> float | None:
    """Daily kcal target for a goal; cut targets never go below 1200."""
    if tdee is None:
        return None
    if goal_type == GoalType.MAINTAIN:
        return tdee
    if delta is None:
        return None
    if goal_type == GoalType.CUT:
        return max(MIN_CUT_KCAL, tdee - delta)
    return tdee + delta


def compute_derived(profile: Profile) -> DerivedMetrics:
    """Compute BMR, TDEE and the goal target without touching any state."""
    bmr = compute_bmr(
        profile.gender, profile.age, profile.height_cm, profile.weight_kg
    )
    activity = profile.activity_factor
    tdee = bmr * activity if bmr is not None and activity and activity > 0 else None
    return DerivedMetrics(
        bmr=bmr,
        tdee=tdee,
        target_kcal=compute_target_kcal(tdee, profile.goal.type, profile.goal.delta),
    )


def with_target(profile: Profile) -> Profile:
    """Return the profile with its goal target re-derived from tdee."""
    target = compute_target_kcal(profile.tdee, profile.goal.type, profile.goal.delta)
    rounded = None if target is None else round_half_up(target)
    return replace(profile, goal=replace(profile.goal, target_kcal=rounded))


@dataclass
class ProfileManager:
    """Owns the live profile and mirrors it to the cache and remote store."""

    repository: ProfileRepository
    local_cache: LocalCache
    retry_attempts: int = 1
    retry_delay_seconds: float = 0.3
    _profile: Profile = field(init=False, default_factory=Profile)
    _session: SessionUser | None = field(init=False, default=None)
    _loaded: bool = field(init=False, default=False)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)
    _hydrate_ticket: int = field(init=False, default=0)

    @property
    def profile(self) -> Profile:
        """Return the current profile."""
        self._ensure_loaded()
        return self._profile

    @property
    def session(self) -> SessionUser | None:
        """Return the user the profile was last hydrated for."""
        return self._session

    async def hydrate(self, session: SessionUser | None) -> Profile:
        """Load the profile for the session; the remote copy wins when present."""
        self._hydrate_ticket += 1
        ticket = self._hydrate_ticket
        async with self._lock:
            if ticket != self._hydrate_ticket:
                _logger.info("Skipping superseded profile hydrate")
                return self._profile
            self._ensure_loaded()
            if session is None:
                self._session = None
                cached = self._load_local()
                if cached is not None:
                    self._profile = cached
                return self._profile

            document = await self._fetch(session)
            if ticket != self._hydrate_ticket:
                return self._profile
            if document is None:
                await self._create(session)
            elif document.profile is None:
                _logger.info("Remote profile for %s is empty", session.user_id)
            else:
                self._profile = with_target(document.profile)
                self._save_local()
            self._session = session
            return self._profile

    async def ensure_remote_document(self, user: SessionUser) -> None:
        """Create the remote profile document if missing; never overwrite it."""
        async with self._lock:
            self._ensure_loaded()
            if await self._fetch(user) is None:
                await self._create(user)

    async def calculate(  # noqa: PLR0913
        self,
        gender: str,
        age: float | None,
        height_cm: float | None,
        weight_kg: float | None,
        activity_factor: float,
    ) -> Profile:
        """Recompute BMR and TDEE from body measurements."""
        parsed_gender = _parse_gender(gender)
        for label, value in (
            ("age", age),
            ("height", height_cm),
            ("weight", weight_kg),
            ("activity factor", activity_factor),
        ):
            if not _is_positive(value):
                raise ValidationError(f"{label} must be a positive number")
        async with self._lock:
            self._ensure_loaded()
            draft = replace(
                self._profile,
                gender=parsed_gender,
                age=age,
                height_cm=height_cm,
                weight_kg=weight_kg,
                activity_factor=activity_factor,
            )
            derived = compute_derived(draft)
            self._profile = with_target(
                replace(
                    draft,
                    bmr=_rounded(derived.bmr),
                    tdee=_rounded(derived.tdee),
                )
            )
            self._save_local()
            return self._profile

    async def apply_goal(self, goal_type: str, delta: float) -> Profile:
        """Set the goal type and offset, re-deriving the target."""
        parsed_type = _parse_goal_type(goal_type)
        if not _is_finite(delta) or delta < 0:
            raise ValidationError("Goal delta must be a non-negative number")
        async with self._lock:
            self._ensure_loaded()
            self._profile = with_target(
                replace(self._profile, goal=Goal(type=parsed_type, delta=delta))
            )
            self._save_local()
            return self._profile

    def preview_goal(self, goal_type: str, delta: float) -> float | None:
        """Return the target a goal would give, without applying it."""
        parsed_type = _parse_goal_type(goal_type)
        if not _is_finite(delta) or delta < 0:
            raise ValidationError("Goal delta must be a non-negative number")
        target = compute_target_kcal(self.profile.tdee, parsed_type, delta)
        return None if target is None else round_half_up(target)

    async def save(self, session: SessionUser | None) -> Profile:
        """Save locally, then merge into the remote document (requires a session)."""
        async with self._lock:
            self._ensure_loaded()
            self._save_local()
            if session is None:
                raise AuthRequiredError("Sign in to save your profile")
            profile = self._profile
            await call_remote(
                lambda: self.repository.merge_profile(session.user_id, profile),
                action="profile save",
            )
            return profile

    async def _fetch(self, user: SessionUser) -> ProfileDocument | None:
        return await call_remote(
            lambda: self.repository.get_profile(user.user_id),
            action="profile read",
            retry_attempts=self.retry_attempts,
            retry_delay_seconds=self.retry_delay_seconds,
        )

    async def _create(self, user: SessionUser) -> None:
        profile = self._profile
        await call_remote(
            lambda: self.repository.create_profile(user.user_id, user.email, profile),
            action="profile create",
        )
        _logger.info("Created remote profile for %s", user.user_id)

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        self._loaded = True
        cached = self._load_local()
        if cached is not None:
            self._profile = cached

    def _load_local(self) -> Profile | None:
        try:
            cached = self.local_cache.load_profile()
        except Exception:
            _logger.exception("Failed to read profile from cache")
            return None
        return None if cached is None else with_target(cached)

    def _save_local(self) -> None:
        try:
            self.local_cache.save_profile(self._profile)
        except Exception:
            _logger.exception("Failed to write profile to cache")


def _parse_gender(value: str) -> Gender:
    try:
        return Gender(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown gender: {value}") from exc


def _parse_goal_type(value: str) -> GoalType:
    try:
        return GoalType(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown goal type: {value}") from exc


def _is_finite(value: object) -> bool:
    return (
        isinstance(value, int | float)
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def _is_positive(value: object) -> bool:
    return _is_finite(value) and value > 0  # type: ignore[operator]


def _rounded(value: float | None) -> float | None:
    return None if value is None else round_half_up(value)
