"""Project-wide single-source configuration constants for the dashboard data provider."""

from pathlib import Path
from adb_insights.utils.path_utils import find_repo_root

# ----- Base directory configuration -------
PROJECT_ROOT = find_repo_root()
DATA_DIR: Path = PROJECT_ROOT / "datasets"

# ------ IO paths -------
LOCAL_STORAGE_PATH: Path = DATA_DIR / "local_storage.db"
EXPORT_DIR: Path = DATA_DIR / "exports"
EXPORT_BASENAME: str = "dashboard-data"

# ------ Persisted state keys -------
TEAMS_STORAGE_KEY: str = "dashboard-teams"
SELECTED_TEAM_STORAGE_KEY: str = "dashboard-selected-team"

# ------- Timers -------
BROADCAST_INTERVAL_SEC: float = 10.0        # Snapshot push to subscribers
SIGNAL_REFRESH_INTERVAL_SEC: float = 300.0  # 5 minutes; external signal refresh
FETCH_TIMEOUT_SEC: float = 5.0              # Per-request timeout for external fetches

# ------- External signal endpoints (GET, no auth, best effort) -------
API_ENDPOINTS: dict[str, str] = {
    "crypto": "https://api.coindesk.com/v1/bpi/currentprice.json",
    "random_users": "https://randomuser.me/api/?results=10",
    "placeholder_users": "https://jsonplaceholder.typicode.com/users",
    "quotes": "https://api.quotable.io/random",
    "public_apis": "https://api.publicapis.org/random?auth=null",
    "httpbin": "https://httpbin.org/uuid",
}
SIGNAL_ENDPOINTS: tuple[str, ...] = ("crypto", "random_users", "placeholder_users")
PRICE_REFERENCE: float = 45000.0            # Price normalisation for revenue influence

# ------- Base metrics (before team multipliers and jitter) -------
BASE_TOTAL_REVENUE: float = 45231.89
BASE_NEW_CUSTOMERS: int = 2350
BASE_ACTIVE_ACCOUNTS: int = 12234
BASE_GROWTH_RATE: float = 20.1
BASE_ACTIVE_USERS: int = 573

# ------- Team multiplier profiles -------
DEFAULT_TEAM_ID: str = "1"
TEAM_MULTIPLIERS: dict[str, dict[str, float]] = {
    "1": {"revenue": 1.0, "customers": 1.0, "accounts": 1.0},  # Personal
    "2": {"revenue": 2.5, "customers": 3.2, "accounts": 2.8},  # Marketing Team
    "3": {"revenue": 1.8, "customers": 2.1, "accounts": 1.9},  # Analytics Team
}

# ------- Time-of-day activity -------
BUSINESS_HOURS: tuple[int, int] = (9, 17)   # inclusive
EXTENDED_HOURS: tuple[int, int] = (6, 22)   # inclusive
BUSINESS_VARIATION: float = 1.5
EXTENDED_VARIATION: float = 1.0
NIGHT_VARIATION: float = 0.3

# ------- Series shapes -------
REVENUE_BASE: int = 3000
REVENUE_MONTHLY_STEP: int = 200
REVENUE_REALIZED_NOISE: float = 1000.0
TRAFFIC_DAYS: int = 30
TRAFFIC_BASE_VISITORS: int = 1200
TRAFFIC_WEEKDAY_FACTOR: float = 1.3
TRAFFIC_WEEKEND_FACTOR: float = 0.7
TRAFFIC_JITTER: float = 0.2                 # +/-20%
CHANNEL_JITTER: float = 0.2                 # +/-20%

# ------- List sizes -------
RECENT_SALES_COUNT: int = 5
ACTIVITY_FEED_COUNT: int = 8
ACTIVITY_PLACEHOLDER_LIMIT: int = 10        # Max sampled users used as activity actors
ACTIVITY_MAX_MINUTES: int = 120
SALE_MIN_AMOUNT: float = 50.0
SALE_AMOUNT_SPAN: float = 2000.0
