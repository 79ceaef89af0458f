"""Error taxonomy shared by the services and the API."""


class CaloriesDailyError(Exception):
    """Base class for errors surfaced to the user."""

    code = "error"


class ValidationError(CaloriesDailyError):
    """User input was rejected before any state change."""

    code = "validation_error"


class FoodIndexError(CaloriesDailyError, IndexError):
    """A food entry index does not exist in today's log."""

    code = "index_error"


class StaleDayError(CaloriesDailyError):
    """A mutation targeted a day log whose date has already passed."""

    code = "stale_day"

    def __init__(self, day_id: str, today_id: str) -> None:
        super().__init__(
            f"Day log {day_id} is stale (today is {today_id}); reload before editing"
        )
        self.day_id = day_id
        self.today_id = today_id


class AuthRequiredError(CaloriesDailyError):
    """A remote-only operation was attempted without a session."""

    code = "auth_required"


class AuthenticationError(CaloriesDailyError):
    """The identity provider rejected a sign-up, sign-in or sign-out."""

    code = "authentication_failed"


class RemoteUnavailableError(CaloriesDailyError):
    """The remote store could not be read or written.

    ``saved_locally`` is True when the triggering mutation was already applied
    in memory and to the local cache, so only its remote sync is missing.
    """

    code = "remote_unavailable"

    def __init__(self, message: str, *, saved_locally: bool = False) -> None:
        super().__init__(message)
        self.saved_locally = saved_locally
