"""Best-effort external signal fetcher.

Fetches a price signal and sample user records from public endpoints.
Every endpoint is optional: a failed call is logged and the previously cached
value (or the generator's built-in default) stays in use.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

import requests

from adb_insights.config.config import (
    API_ENDPOINTS,
    FETCH_TIMEOUT_SEC,
    SIGNAL_ENDPOINTS,
    SIGNAL_REFRESH_INTERVAL_SEC,
)
from adb_insights.data_pipeline.collectors.base import BaseCollector
from adb_insights.data_pipeline.scheduler import IntervalScheduler
from adb_insights.errors import NetworkUnavailable
from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)

REFRESH_JOB_ID = "refresh_external_signals"


@dataclass
class SignalCache:
    """Possibly-empty bag of externally sourced values."""
    price: Optional[float] = None
    random_users: List[Dict[str, Any]] = field(default_factory=list)
    placeholder_users: List[Dict[str, Any]] = field(default_factory=list)
    last_refreshed: Optional[datetime] = None

    def is_empty(self) -> bool:
        return self.price is None and not self.random_users and not self.placeholder_users

    def copy(self) -> "SignalCache":
        return SignalCache(
            price=self.price,
            random_users=list(self.random_users),
            placeholder_users=list(self.placeholder_users),
            last_refreshed=self.last_refreshed,
        )


def parse_price(payload: Any) -> float:
    """Extract the USD rate from a coindesk-style ``bpi`` payload."""
    return float(str(payload["bpi"]["USD"]["rate"]).replace(",", ""))


def parse_random_users(payload: Any) -> List[Dict[str, Any]]:
    results = payload["results"]
    if not isinstance(results, list):
        raise TypeError("results is not a list")
    return [user for user in results if isinstance(user, dict)]


def parse_placeholder_users(payload: Any) -> List[Dict[str, Any]]:
    if not isinstance(payload, list):
        raise TypeError("expected a list of users")
    return [user for user in payload if isinstance(user, dict) and user.get("name")]


class ExternalSignalFetcher(BaseCollector):
    """Keeps a :class:`SignalCache` fresh from the configured endpoints."""

    def __init__(
        self,
        scheduler: Optional[IntervalScheduler] = None,
        session: Optional[requests.Session] = None,
        endpoints: Optional[Mapping[str, str]] = None,
        timeout: float = FETCH_TIMEOUT_SEC,
        refresh_interval: float = SIGNAL_REFRESH_INTERVAL_SEC,
        on_event: Optional[Callable[[Dict[str, Any]], None]] = None,
    ):
        super().__init__("external_signals", on_event)
        self.scheduler = scheduler
        self.session = session or requests.Session()
        self.endpoints = dict(endpoints or API_ENDPOINTS)
        self.timeout = timeout
        self.refresh_interval = refresh_interval
        self._cache = SignalCache()
        self._lock = threading.Lock()
        self._parsers = {
            "crypto": ("price", parse_price),
            "random_users": ("random_users", parse_random_users),
            "placeholder_users": ("placeholder_users", parse_placeholder_users),
        }

    def _get_json(self, name: str) -> Any:
        """GET one endpoint and decode its JSON body.

        Raises:
            NetworkUnavailable: On connection error, timeout, non-2xx or bad JSON
        """
        url = self.endpoints.get(name)
        if not url:
            raise NetworkUnavailable(name, "endpoint not configured")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            raise NetworkUnavailable(name, str(e)) from e

    def _fetch_signal(self, name: str) -> Any:
        _, parser = self._parsers[name]
        payload = self._get_json(name)
        try:
            return parser(payload)
        except (KeyError, TypeError, ValueError) as e:
            raise NetworkUnavailable(name, f"malformed body: {e}") from e

    def refresh(self) -> Dict[str, bool]:
        """Fetch every signal endpoint independently and update the cache.

        Returns:
            Per-endpoint success map for this refresh
        """
        outcome: Dict[str, bool] = {}
        for name in SIGNAL_ENDPOINTS:
            try:
                value = self._fetch_signal(name)
            except NetworkUnavailable as e:
                self._handle_error(e, "refresh")
                outcome[name] = False
                continue

            attr, _ = self._parsers[name]
            with self._lock:
                setattr(self._cache, attr, value)
            self._record_success()
            outcome[name] = True

        if any(outcome.values()):
            with self._lock:
                self._cache.last_refreshed = datetime.now().astimezone()
        else:
            logger.warning("Some external APIs failed to load, using fallback data")

        self._emit_event(self._create_base_event(type="signal_refresh", results=outcome))
        return outcome

    def test_connectivity(self) -> Dict[str, bool]:
        """Probe every configured endpoint; never touches the cache."""
        results: Dict[str, bool] = {}
        for name, url in self.endpoints.items():
            try:
                response = self.session.get(url, timeout=self.timeout)
                results[name] = bool(response.ok)
            except requests.RequestException as e:
                logger.debug(f"Connectivity check failed for {name}: {e}")
                results[name] = False
        return results

    def signals(self) -> SignalCache:
        """Copy of the current cache, safe to read while a refresh runs."""
        with self._lock:
            return self._cache.copy()

    def has_signal(self) -> bool:
        with self._lock:
            return not self._cache.is_empty()

    def start(self) -> None:
        """Refresh once now, then on the configured interval."""
        if self.is_running:
            logger.warning("External signal fetcher already running")
            return
        self.is_running = True
        self.refresh()
        if self.scheduler is not None:
            self.scheduler.add_interval_job(
                self.refresh, self.refresh_interval, REFRESH_JOB_ID, name="External signal refresh"
            )

    def stop(self) -> None:
        self.is_running = False
        if self.scheduler is not None:
            self.scheduler.remove_job(REFRESH_JOB_ID)
