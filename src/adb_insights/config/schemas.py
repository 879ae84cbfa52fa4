"""Schema definitions for dashboard snapshots.

All records are frozen and list fields are tuples, so a snapshot handed to
several subscribers cannot be changed by any of them.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class DashboardMetrics:
    total_revenue: float
    new_customers: int
    active_accounts: int
    growth_rate: float
    active_users: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "newCustomers": self.new_customers,
            "activeAccounts": self.active_accounts,
            "growthRate": self.growth_rate,
            "activeUsers": self.active_users,
        }


@dataclass(frozen=True)
class RevenuePoint:
    name: str   # month abbreviation
    total: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Sale:
    name: str
    email: str
    amount: str  # currency text, e.g. "+$120.50"
    avatar: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TrafficPoint:
    date: str  # YYYY-MM-DD
    visitors: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ActivityItem:
    user: str
    action: str
    time: str
    avatar: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ChannelStat:
    name: str
    visitors: int
    percentage: float
    change: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    time: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Segment:
    """Named share used by the static audience sections."""
    name: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DashboardSnapshot:
    """One complete generated dashboard dataset."""

    metrics: DashboardMetrics
    revenue_data: Tuple[RevenuePoint, ...]
    recent_sales: Tuple[Sale, ...]
    traffic_data: Tuple[TrafficPoint, ...]
    activity_feed: Tuple[ActivityItem, ...]
    top_channels: Tuple[ChannelStat, ...]
    notifications: Tuple[Notification, ...]
    traffic_sources: Tuple[Segment, ...]
    conversion_funnel: Tuple[Segment, ...]
    age_distribution: Tuple[Segment, ...]
    device_types: Tuple[Segment, ...]
    generated_at: str
    team_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready form with the dashboard's camelCase keys."""
        return {
            "metrics": self.metrics.to_dict(),
            "revenueData": [p.to_dict() for p in self.revenue_data],
            "recentSales": [s.to_dict() for s in self.recent_sales],
            "trafficData": [p.to_dict() for p in self.traffic_data],
            "activityFeed": [a.to_dict() for a in self.activity_feed],
            "topChannels": [c.to_dict() for c in self.top_channels],
            "notifications": [n.to_dict() for n in self.notifications],
            "trafficSources": [s.to_dict() for s in self.traffic_sources],
            "conversionFunnel": [s.to_dict() for s in self.conversion_funnel],
            "ageDistribution": [s.to_dict() for s in self.age_distribution],
            "deviceTypes": [s.to_dict() for s in self.device_types],
            "generatedAt": self.generated_at,
            "teamId": self.team_id,
        }
