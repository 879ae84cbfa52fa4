"""Team context: the team list, the selected team and their persistence.

State is written to local storage after every mutation under two keys, one
holding the serialized team list and one holding the selected team id.
Unreadable stored state is replaced with the built-in default teams.
"""

import json
import sqlite3
import threading
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from adb_insights.config.config import SELECTED_TEAM_STORAGE_KEY, TEAMS_STORAGE_KEY
from adb_insights.data_pipeline.generator import MultiplierProfile, lookup_multiplier
from adb_insights.data_pipeline.storage.local_storage import LocalStorage
from adb_insights.errors import LastTeamError, StorageCorrupt, TeamNotFoundError, ValidationError
from adb_insights.utils.datetime import ensure_aware, parse_iso_timestamp, to_iso, utc_now
from adb_insights.utils.logging import get_logger
from adb_insights.utils.text import slugify

logger = get_logger(__name__)

PLANS = ("free", "pro", "enterprise")


@dataclass(frozen=True)
class Team:
    id: str
    name: str
    slug: str
    plan: str
    member_count: int
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "plan": self.plan,
            "memberCount": self.member_count,
            "createdAt": to_iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Team":
        """Rehydrate a stored team; also reads the older ``value``/``members`` keys."""
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            slug=str(data.get("slug", data.get("value", slugify(str(data["name"]))))),
            plan=str(data["plan"]),
            member_count=int(data.get("memberCount", data.get("members", 1))),
            created_at=ensure_aware(parse_iso_timestamp(str(data["createdAt"]))),
        )


DEFAULT_TEAMS: Tuple[Team, ...] = (
    Team("1", "ADB Insights", "personal", "pro", 1, datetime(2024, 1, 1, tzinfo=timezone.utc)),
    Team("2", "Marketing Team", "marketing", "enterprise", 12, datetime(2024, 2, 15, tzinfo=timezone.utc)),
    Team("3", "Analytics Team", "analytics", "pro", 8, datetime(2024, 3, 10, tzinfo=timezone.utc)),
)


def _validate_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Team name cannot be empty")
    return name.strip()


def _validate_plan(plan: Any) -> str:
    if plan not in PLANS:
        raise ValidationError(f"Unknown plan {plan!r}; expected one of {', '.join(PLANS)}")
    return plan


def _validate_slug(slug: Any) -> str:
    if not isinstance(slug, str) or not slug.strip():
        raise ValidationError("Team slug cannot be empty")
    return slug.strip()


def _validate_member_count(count: Any) -> int:
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise ValidationError(f"Member count must be a positive integer, got {count!r}")
    return count


def _validate_created_at(created_at: Any) -> datetime:
    if not isinstance(created_at, datetime):
        raise ValidationError(f"created_at must be a datetime, got {created_at!r}")
    return ensure_aware(created_at)


FIELD_VALIDATORS: Dict[str, Callable[[Any], Any]] = {
    "name": _validate_name,
    "slug": _validate_slug,
    "plan": _validate_plan,
    "member_count": _validate_member_count,
    "created_at": _validate_created_at,
}


class TeamContext:
    """Tracks the team list and the selected team; persists after every change."""

    def __init__(
        self,
        storage: Optional[LocalStorage] = None,
        id_factory: Optional[Callable[[], str]] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.storage = storage or LocalStorage()
        self._id_factory = id_factory or (lambda: uuid.uuid4().hex)
        self._clock = clock or utc_now
        self._lock = threading.RLock()
        self._listeners: List[Callable[[Team], None]] = []
        self._teams: List[Team] = []
        self._selected: Optional[Team] = None
        self.load()

    # ------------------------------------------------------------------ state

    @property
    def teams(self) -> Tuple[Team, ...]:
        with self._lock:
            return tuple(self._teams)

    @property
    def selected_team(self) -> Team:
        with self._lock:
            return self._selected

    def get(self, team_id: str) -> Team:
        with self._lock:
            for team in self._teams:
                if team.id == team_id:
                    return team
        raise TeamNotFoundError(team_id)

    def multiplier_profile(self) -> MultiplierProfile:
        """Multiplier profile of the selected team."""
        return lookup_multiplier(self.selected_team.id)

    def add_listener(self, callback: Callable[[Team], None]) -> Callable[[], None]:
        """Call ``callback(team)`` whenever the selected team changes.

        Returns:
            A function that removes the listener
        """
        with self._lock:
            self._listeners.append(callback)

        def remove() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return remove

    # ------------------------------------------------------------ persistence

    def load(self) -> None:
        """Restore persisted state, seeding (and saving) defaults when absent or corrupt."""
        try:
            restored = self._read_state()
        except StorageCorrupt as e:
            logger.warning(f"Stored team state unreadable, resetting to defaults: {e}")
            restored = None

        with self._lock:
            if restored is None:
                self._teams = list(DEFAULT_TEAMS)
                self._selected = self._teams[0]
                self._persist()
            else:
                self._teams, self._selected = restored
        logger.info(f"Loaded {len(self._teams)} teams (selected: {self._selected.name})")

    def _read_state(self) -> Optional[Tuple[List[Team], Team]]:
        raw_teams = self.storage.get_item(TEAMS_STORAGE_KEY)
        if raw_teams is None:
            return None

        try:
            teams = [Team.from_dict(item) for item in json.loads(raw_teams)]
        except (json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            raise StorageCorrupt(f"{TEAMS_STORAGE_KEY}: {e}") from e
        if not teams:
            raise StorageCorrupt(f"{TEAMS_STORAGE_KEY}: empty team list")

        selected = teams[0]
        raw_selected = self.storage.get_item(SELECTED_TEAM_STORAGE_KEY)
        if raw_selected is not None:
            try:
                selected_id = json.loads(raw_selected)
            except json.JSONDecodeError:
                logger.warning(f"Ignoring unreadable {SELECTED_TEAM_STORAGE_KEY}")
                selected_id = None
            selected = next((t for t in teams if t.id == selected_id), selected)
        return teams, selected

    def _persist(self) -> None:
        try:
            self.storage.set_item(
                TEAMS_STORAGE_KEY, json.dumps([team.to_dict() for team in self._teams])
            )
            self.storage.set_item(SELECTED_TEAM_STORAGE_KEY, json.dumps(self._selected.id))
        except sqlite3.Error as e:
            logger.error(f"Failed to persist team state: {e}")

    def _set_selected(self, team: Team) -> bool:
        """Point the selection at ``team``; True when the selected team changed."""
        changed = team != self._selected
        self._selected = team
        return changed

    def _notify(self, team: Team) -> None:
        """Tell listeners about a new selection. Called without the lock held."""
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            try:
                callback(team)
            except Exception as e:
                logger.error(f"Team listener error: {e}")

    # -------------------------------------------------------------- mutations

    def create(self, name: str, plan: str = "free") -> Team:
        """Add a team and select it.

        Raises:
            ValidationError: If the name is blank or the plan unknown
        """
        name = _validate_name(name)
        plan = _validate_plan(plan)
        with self._lock:
            existing = {t.id for t in self._teams}
            team_id = self._id_factory()
            while team_id in existing:
                team_id = self._id_factory()
            team = Team(
                id=team_id,
                name=name,
                slug=slugify(name),
                plan=plan,
                member_count=1,
                created_at=ensure_aware(self._clock()),
            )
            self._teams.append(team)
            changed = self._set_selected(team)
            self._persist()
        if changed:
            self._notify(team)
        logger.info(f"Created team {team.name} ({team.id})")
        return team

    def switch(self, team: Union[Team, str]) -> Team:
        """Select a team from the current list.

        Raises:
            TeamNotFoundError: If the team is not in the list
        """
        team_id = team.id if isinstance(team, Team) else str(team)
        with self._lock:
            target = self.get(team_id)
            changed = self._set_selected(target)
            self._persist()
        if changed:
            self._notify(target)
        logger.info(f"Switched to team {target.name}")
        return target

    def update(self, team_id: str, **changes: Any) -> Team:
        """Merge ``changes`` into a team; refreshes the selection if it is that team.

        Every value is checked before any state changes, so a rejected update
        leaves both memory and storage untouched.

        Raises:
            ValidationError: On unknown fields or invalid values
            TeamNotFoundError: If no team has ``team_id``
        """
        unknown = set(changes) - set(FIELD_VALIDATORS)
        if unknown:
            raise ValidationError(f"Cannot update field(s): {', '.join(sorted(unknown))}")
        checked = {field: FIELD_VALIDATORS[field](value) for field, value in changes.items()}

        changed = False
        with self._lock:
            current = self.get(team_id)
            updated = replace(current, **checked)
            self._teams = [updated if t.id == team_id else t for t in self._teams]
            if self._selected.id == team_id:
                changed = self._set_selected(updated)
            self._persist()
        if changed:
            self._notify(updated)
        return updated

    def delete(self, team_id: str) -> None:
        """Remove a team; the first remaining team is selected if it was selected.

        Raises:
            LastTeamError: If only one team remains
            TeamNotFoundError: If no team has ``team_id``
        """
        changed = False
        with self._lock:
            if len(self._teams) <= 1:
                raise LastTeamError(team_id)
            self.get(team_id)
            self._teams = [t for t in self._teams if t.id != team_id]
            if self._selected.id == team_id:
                changed = self._set_selected(self._teams[0])
            selected = self._selected
            self._persist()
        if changed:
            self._notify(selected)
        logger.info(f"Deleted team {team_id}")
