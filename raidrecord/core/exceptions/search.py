"""Search and API exceptions.

Top-level failures (budget, cancellation, transport) abort a search and
propagate to the caller. ReconciliationError is raised per item and is
isolated by the reconciler and the search orchestrator; it never escapes a
search.
"""


class RaidRecordError(Exception):
    """Base exception for RaidRecord errors."""

    pass


class BudgetExceededError(RaidRecordError):
    """Raised before any network call when the point budget cannot cover a search.

    Carries the numbers a caller needs to build a message:
    - remaining_points: points left this hour (None if never observed)
    - reset_in_seconds: seconds until the hourly budget resets
    - required_points: estimated cost of the rejected work
    """

    def __init__(
        self,
        remaining_points: float | None,
        reset_in_seconds: float,
        required_points: float,
    ):
        self.remaining_points = remaining_points
        self.reset_in_seconds = reset_in_seconds
        self.required_points = required_points
        super().__init__(
            f"Not enough API points: {required_points:g} required, "
            f"{remaining_points if remaining_points is not None else 'unknown'} "
            f"remaining (resets in {reset_in_seconds:.0f}s)"
        )

    @property
    def reset_in_minutes(self) -> int:
        """Minutes until reset, rounded up."""
        return int(-(-self.reset_in_seconds // 60))


class SearchCancelledError(RaidRecordError):
    """Raised when a cooperative cancellation request is observed."""

    def __init__(self, message: str = "Search was cancelled"):
        super().__init__(message)


class TransportError(RaidRecordError):
    """Raised for non-success HTTP results or GraphQL errors without data."""

    def __init__(self, message: str, status_code: int = 0, response: str = ""):
        self.message = message
        self.status_code = status_code
        self.response = response
        super().__init__(self.message)


class AuthenticationError(TransportError):
    """Raised when an OAuth access token cannot be obtained."""

    pass


class ReconciliationError(RaidRecordError):
    """Raised when one item of a batch response cannot be normalized."""

    pass


class QueryConstructionError(RaidRecordError):
    """Raised when a batch query cannot be built from its items.

    This occurs when:
    - The item list is empty (zero aliases is invalid GraphQL)
    - A field builder returns something other than a string
    - A variable builder returns malformed definitions or values
    - Two items produce the same variable name
    """

    pass


class CharacterNotFoundError(RaidRecordError):
    """Raised when a character cannot be found on the requested server(s)."""

    def __init__(self, name: str, server: str | None = None):
        self.name = name
        self.server = server
        where = f" @ {server}" if server else ""
        super().__init__(f"Character not found: {name}{where}")
