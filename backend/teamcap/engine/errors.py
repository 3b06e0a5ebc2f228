"""Capacity engine error kinds. All are deterministic; none is retried."""


class CapacityError(Exception):
    """Base class for capacity engine failures."""


class InvalidArgumentError(CapacityError, ValueError):
    """Malformed argument such as a week index below 1."""


class CapacityValidationError(CapacityError):
    """Input the user must correct, e.g. a blank team name."""

    code = "VALIDATION_ERROR"


class EmptyTeamError(CapacityValidationError):
    """Team template has no definitions; populate members first."""

    code = "EMPTY_TEAM"
