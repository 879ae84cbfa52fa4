"""Dashboard snapshot generator.

Combines a team multiplier profile, a time-of-day activity factor and the
optional external price signal into a fresh :class:`DashboardSnapshot`.
Randomness comes from an injected ``random.Random`` and the clock is an
injected callable, so a seeded generator with a fixed clock is reproducible.
"""

import math
import random
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from adb_insights.config.config import (
    ACTIVITY_FEED_COUNT,
    ACTIVITY_MAX_MINUTES,
    ACTIVITY_PLACEHOLDER_LIMIT,
    BASE_ACTIVE_ACCOUNTS,
    BASE_ACTIVE_USERS,
    BASE_GROWTH_RATE,
    BASE_NEW_CUSTOMERS,
    BASE_TOTAL_REVENUE,
    BUSINESS_HOURS,
    BUSINESS_VARIATION,
    CHANNEL_JITTER,
    DEFAULT_TEAM_ID,
    EXTENDED_HOURS,
    EXTENDED_VARIATION,
    NIGHT_VARIATION,
    PRICE_REFERENCE,
    RECENT_SALES_COUNT,
    REVENUE_BASE,
    REVENUE_MONTHLY_STEP,
    REVENUE_REALIZED_NOISE,
    SALE_AMOUNT_SPAN,
    SALE_MIN_AMOUNT,
    TEAM_MULTIPLIERS,
    TRAFFIC_BASE_VISITORS,
    TRAFFIC_DAYS,
    TRAFFIC_JITTER,
    TRAFFIC_WEEKDAY_FACTOR,
    TRAFFIC_WEEKEND_FACTOR,
)
from adb_insights.config.schemas import (
    ActivityItem,
    ChannelStat,
    DashboardMetrics,
    DashboardSnapshot,
    RevenuePoint,
    Sale,
    TrafficPoint,
)
from adb_insights.data_pipeline import mock_data
from adb_insights.data_pipeline.collectors.external_signals import SignalCache
from adb_insights.utils.datetime import elapsed_label, local_now, to_iso
from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)

MultiplierProfile = Mapping[str, float]
IDENTITY_PROFILE: MultiplierProfile = {"revenue": 1.0, "customers": 1.0, "accounts": 1.0}


def lookup_multiplier(
    team_id: Optional[str],
    table: Mapping[str, MultiplierProfile] = TEAM_MULTIPLIERS,
) -> MultiplierProfile:
    """Profile for ``team_id``; unknown or missing ids get the identity profile."""
    profile = table.get(str(team_id)) if team_id is not None else None
    if profile is None:
        return table.get(DEFAULT_TEAM_ID, IDENTITY_PROFILE)
    return profile


def time_of_day_variation(hour: int) -> float:
    """Activity factor for the given wall-clock hour."""
    if BUSINESS_HOURS[0] <= hour <= BUSINESS_HOURS[1]:
        return BUSINESS_VARIATION
    if EXTENDED_HOURS[0] <= hour <= EXTENDED_HOURS[1]:
        return EXTENDED_VARIATION
    return NIGHT_VARIATION


def price_influence(price: Optional[float]) -> float:
    """Revenue scaling derived from the cached price signal; 1.0 when absent."""
    if price is None or not math.isfinite(price) or price <= 0:
        return 1.0
    return price / PRICE_REFERENCE


def sale_amount_text(amount: float) -> str:
    return f"+${amount:.2f}"


class DashboardDataGenerator:
    """Produces dashboard snapshots on demand."""

    def __init__(
        self,
        signal_source: Optional[Callable[[], SignalCache]] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        team_multipliers: Optional[Mapping[str, MultiplierProfile]] = None,
    ):
        """
        Args:
            signal_source: Returns the current external signal cache
            rng: Jitter source; seed it for reproducible output
            clock: Returns the current wall-clock time
            team_multipliers: Team id to multiplier profile table
        """
        self.signal_source = signal_source or SignalCache
        self.rng = rng or random.Random()
        self.clock = clock or local_now
        self.team_multipliers = dict(team_multipliers or TEAM_MULTIPLIERS)

    def multiplier_for(self, team_id: Optional[str]) -> MultiplierProfile:
        return lookup_multiplier(team_id, self.team_multipliers)

    def generate(self, team_id: Optional[str] = None) -> DashboardSnapshot:
        now = self.clock()
        variation = time_of_day_variation(now.hour)
        multiplier = self.multiplier_for(team_id)
        signals = self.signal_source()
        influence = price_influence(signals.price)

        snapshot = DashboardSnapshot(
            metrics=self._generate_metrics(multiplier, variation, influence),
            revenue_data=self._generate_revenue_data(multiplier["revenue"], now.month - 1),
            recent_sales=self._generate_recent_sales(signals.random_users),
            traffic_data=self._generate_traffic_data(now),
            activity_feed=self._generate_activity_feed(signals.placeholder_users),
            top_channels=self._generate_top_channels(),
            notifications=mock_data.NOTIFICATIONS,
            traffic_sources=mock_data.TRAFFIC_SOURCES,
            conversion_funnel=mock_data.CONVERSION_FUNNEL,
            age_distribution=mock_data.AGE_DISTRIBUTION,
            device_types=mock_data.DEVICE_TYPES,
            generated_at=to_iso(now),
            team_id=team_id,
        )
        logger.debug(
            f"Generated snapshot for team {team_id or DEFAULT_TEAM_ID} "
            f"(variation={variation}, influence={influence:.3f})"
        )
        return snapshot

    def _generate_metrics(
        self, multiplier: MultiplierProfile, variation: float, influence: float
    ) -> DashboardMetrics:
        rng = self.rng
        return DashboardMetrics(
            total_revenue=BASE_TOTAL_REVENUE * multiplier["revenue"] * influence
            + rng.random() * 1000 * variation,
            new_customers=math.floor(
                BASE_NEW_CUSTOMERS * multiplier["customers"] + rng.random() * 50 * variation
            ),
            active_accounts=math.floor(
                BASE_ACTIVE_ACCOUNTS * multiplier["accounts"] + rng.random() * 100 * variation
            ),
            growth_rate=max(0.0, BASE_GROWTH_RATE + (rng.random() - 0.5) * 2),
            active_users=math.floor(
                BASE_ACTIVE_USERS * multiplier["customers"] + rng.random() * 20 * variation
            ),
        )

    def _generate_revenue_data(self, team_multiplier: float, current_month: int) -> Tuple[RevenuePoint, ...]:
        """Twelve monthly buckets; months up to the current one carry realised noise."""
        points = []
        for index, month in enumerate(mock_data.MONTHS):
            base = (REVENUE_BASE + index * REVENUE_MONTHLY_STEP) * team_multiplier
            if index <= current_month:
                base += self.rng.random() * REVENUE_REALIZED_NOISE
            points.append(RevenuePoint(name=month, total=math.floor(base)))
        return tuple(points)

    def _random_amount(self) -> str:
        return sale_amount_text(self.rng.random() * SALE_AMOUNT_SPAN + SALE_MIN_AMOUNT)

    def _generate_recent_sales(self, random_users: Sequence[Dict[str, Any]]) -> Tuple[Sale, ...]:
        sampled = [s for s in (self._sale_from_user(u) for u in random_users[:RECENT_SALES_COUNT]) if s]
        if sampled:
            return tuple(sampled)

        sales = []
        for _ in range(RECENT_SALES_COUNT):
            name = self.rng.choice(mock_data.SALE_NAMES)
            sales.append(Sale(
                name=name,
                email=f"{name.lower().replace(' ', '.', 1)}@company.com",
                amount=self._random_amount(),
                avatar=mock_data.PLACEHOLDER_AVATAR,
            ))
        return tuple(sales)

    def _sale_from_user(self, user: Dict[str, Any]) -> Optional[Sale]:
        """Map a sampled user record to a sale; records without a name are skipped."""
        name_parts = user.get("name")
        if not isinstance(name_parts, dict):
            return None
        name = f"{name_parts.get('first', '')} {name_parts.get('last', '')}".strip()
        if not name:
            return None
        picture = user.get("picture")
        avatar = picture.get("thumbnail") if isinstance(picture, dict) else None
        return Sale(
            name=name,
            email=str(user.get("email", "")),
            amount=self._random_amount(),
            avatar=avatar or mock_data.PLACEHOLDER_AVATAR,
        )

    def _generate_traffic_data(self, now: datetime) -> Tuple[TrafficPoint, ...]:
        """Trailing window of daily visitors ending today."""
        today = now.date()
        points = []
        for offset in range(TRAFFIC_DAYS - 1, -1, -1):
            day = today - timedelta(days=offset)
            factor = TRAFFIC_WEEKDAY_FACTOR if day.weekday() < 5 else TRAFFIC_WEEKEND_FACTOR
            jitter = 1 - TRAFFIC_JITTER + self.rng.random() * 2 * TRAFFIC_JITTER
            points.append(TrafficPoint(
                date=day.isoformat(),
                visitors=math.floor(TRAFFIC_BASE_VISITORS * factor * jitter),
            ))
        return tuple(points)

    def _generate_activity_feed(self, placeholder_users: Sequence[Dict[str, Any]]) -> Tuple[ActivityItem, ...]:
        users: List[str] = [
            str(u["name"]) for u in placeholder_users[:ACTIVITY_PLACEHOLDER_LIMIT] if u.get("name")
        ]
        if not users:
            users = list(mock_data.ACTIVITY_USERS)

        items = []
        for _ in range(ACTIVITY_FEED_COUNT):
            minutes_ago = self.rng.randint(1, ACTIVITY_MAX_MINUTES)
            items.append(ActivityItem(
                user=self.rng.choice(users),
                action=self.rng.choice(mock_data.ACTIVITY_ACTIONS),
                time=elapsed_label(minutes_ago),
                avatar=mock_data.PLACEHOLDER_AVATAR,
            ))
        return tuple(items)

    def _generate_top_channels(self) -> Tuple[ChannelStat, ...]:
        channels = []
        for name, visitors, percentage, change in mock_data.TOP_CHANNELS:
            visitor_factor = 1 - CHANNEL_JITTER + self.rng.random() * 2 * CHANNEL_JITTER
            share_factor = 1 - CHANNEL_JITTER + self.rng.random() * 2 * CHANNEL_JITTER
            channels.append(ChannelStat(
                name=name,
                visitors=math.floor(visitors * visitor_factor),
                percentage=round(percentage * share_factor, 1),
                change=change,
            ))
        return tuple(channels)
