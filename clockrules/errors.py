"""Custom exceptions."""


class ClockRulesError(Exception):
    """Base exception for clockrules."""


class ConfigNotFoundError(ClockRulesError):
    """Raised when no Clockify token is configured."""


class RemoteRequestError(ClockRulesError):
    """Raised when a Clockify request fails at the transport or HTTP level."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ResponseParseError(ClockRulesError):
    """Raised when a Clockify payload is missing a field or has the wrong shape."""


class UnsupportedTimeOffError(ClockRulesError):
    """Raised for time-off requests that are not whole days."""


class NoWorkDataError(ClockRulesError):
    """Raised when no working days are found since the start date."""


class HolidayCalendarError(ClockRulesError):
    """Raised when the public holiday calendar cannot be read."""
