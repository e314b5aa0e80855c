"""Exception types for momo-press."""


class MomoPressError(Exception):
    """Base class for all momo-press errors."""


class InvalidPeriodError(MomoPressError, ValueError):
    """Year/month filter is missing or out of range."""


class MalformedRecordError(MomoPressError, KeyError):
    """A raw transaction is missing a required field."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class SourceError(MomoPressError, OSError):
    """Transaction source could not be read or the artifact could not be written."""


class UserExistsError(MomoPressError):
    """Phone number is already registered."""


class UserNotFoundError(MomoPressError):
    """No account for this phone number."""


class InvalidCredentialsError(MomoPressError):
    """Password does not match."""
