"""Dashboard service layer: broadcasting, export and the composition root."""

from .broadcaster import SubscriptionBroadcaster
from .dashboard_service import DashboardService, build_dashboard_service

__all__ = ["DashboardService", "SubscriptionBroadcaster", "build_dashboard_service"]
