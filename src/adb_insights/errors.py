"""Error taxonomy for the dashboard data provider.

``NetworkUnavailable`` and ``StorageCorrupt`` are always recovered where they
are raised (logged, defaults used). ``ValidationError``, ``LastTeamError`` and
``TeamNotFoundError`` propagate to the caller for user-facing messaging.
"""


class DashboardError(Exception):
    """Base class for all dashboard errors."""


class NetworkUnavailable(DashboardError):
    """An external fetch failed, timed out or returned an unusable body."""

    def __init__(self, endpoint: str, reason: str):
        super().__init__(f"{endpoint}: {reason}")
        self.endpoint = endpoint
        self.reason = reason


class StorageCorrupt(DashboardError):
    """Persisted state could not be parsed."""


class ValidationError(DashboardError, ValueError):
    """Caller input was rejected."""


class LastTeamError(DashboardError):
    """The only remaining team cannot be deleted."""

    def __init__(self, team_id: str):
        super().__init__("Cannot delete the last team")
        self.team_id = team_id


class TeamNotFoundError(DashboardError, KeyError):
    """No team with the given id exists."""

    def __init__(self, team_id: str):
        super().__init__(team_id)
        self.team_id = team_id

    def __str__(self) -> str:
        return f"Team not found: {self.team_id}"
