"""Team selection and persistence."""

from .context import DEFAULT_TEAMS, PLANS, Team, TeamContext

__all__ = ["DEFAULT_TEAMS", "PLANS", "Team", "TeamContext"]
