"""Session state machine driving hydration of the profile and day log."""

import logging
from dataclasses import dataclass, field

from calories_daily.domain.errors import CaloriesDailyError
from calories_daily.domain.session import SessionMode, SessionState, SessionUser
from calories_daily.services.day_log import DayLogReconciler
from calories_daily.services.profile import ProfileManager

_logger = logging.getLogger(__name__)


@dataclass
class SessionController:
    """Applies session-change events, one transition at a time.

    Each transition gets a generation number. A transition that is still
    running when a newer one starts stops at its next step and leaves the
    state to the newer one.
    """

    profile_manager: ProfileManager
    day_log: DayLogReconciler
    _state: SessionState = field(init=False, default_factory=SessionState)
    _generation: int = field(init=False, default=0)

    @property
    def state(self) -> SessionState:
        """Return the result of the latest completed transition."""
        return self._state

    async def handle(self, user: SessionUser | None) -> SessionState:
        """Transition to the given session (None means signed out)."""
        if (
            user is not None
            and self._state.mode == SessionMode.AUTHENTICATED
            and self._state.user == user
        ):
            return self._state

        self._generation += 1
        generation = self._generation
        if user is None:
            await self.profile_manager.hydrate(None)
            await self.day_log.hydrate(None)
            return self._finish(generation, SessionMode.ANONYMOUS, None)

        try:
            await self.profile_manager.ensure_remote_document(user)
            if self._superseded(generation):
                return self._state
            await self.profile_manager.hydrate(user)
            if self._superseded(generation):
                return self._state
            await self.day_log.hydrate(user)
        except CaloriesDailyError as exc:
            _logger.warning(
                "Sync for %s failed, working offline: %s", user.user_id, exc
            )
            if self._superseded(generation):
                return self._state
            await self.profile_manager.hydrate(None)
            await self.day_log.hydrate(None)
            return self._finish(generation, SessionMode.OFFLINE, user, str(exc))

        _logger.info("Session for %s synced", user.user_id)
        return self._finish(generation, SessionMode.AUTHENTICATED, user)

    def _superseded(self, generation: int) -> bool:
        if generation != self._generation:
            _logger.info("Session transition %s superseded", generation)
            return True
        return False

    def _finish(
        self,
        generation: int,
        mode: SessionMode,
        user: SessionUser | None,
        error: str | None = None,
    ) -> SessionState:
        if self._superseded(generation):
            return self._state
        self._state = SessionState(
            mode=mode, user=user, generation=generation, error=error
        )
        return self._state
