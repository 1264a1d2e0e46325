"""
Error and warning types for the supervision scheduler.

Distribution problems are reported as condition objects on the result
instead of being raised, so the caller decides how to present them.
"""


class SupervisionError(Exception):
    """Base exception for all supervision scheduling errors."""

    pass


class NoSupervisorsAvailable(SupervisionError):
    """The supervisor pool was empty when a distribution was requested."""

    pass


class RosterError(SupervisionError):
    """The roster workbook could not be read or contains invalid data."""

    pass


class InvalidDateRange(ValueError):
    """A start or end date of the exam period is missing or malformed."""

    pass


class InsufficientSupervisors(UserWarning):
    """
    Fewer distinct supervisors than required slots.

    Non-fatal: the distribution is still produced, reusing names.
    """

    def __init__(self, required: int, available: int, reused=None):
        self.required = required
        self.available = available
        self.shortfall = max(0, required - available)
        self.reused = list(reused or [])
        super().__init__(
            f"{self.shortfall} supervisor(s) short: {required} slot(s) required, "
            f"{available} distinct supervisor(s) available"
        )
