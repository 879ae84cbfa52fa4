"""CSV/JSON renderings of a dashboard snapshot and traffic range filtering.

The CSV layout is three titled sections (metrics, monthly revenue, recent
sales) separated by blank lines. Values are written unquoted, so a field
that contains a comma will shift the columns of its row.
"""

from datetime import date
from pathlib import Path
from typing import Tuple, Union

from adb_insights.config.config import EXPORT_BASENAME
from adb_insights.config.schemas import DashboardSnapshot, TrafficPoint
from adb_insights.utils.io import atomic_write_text, dump_json
from adb_insights.utils.logging import get_logger

logger = get_logger(__name__)

EXPORT_FORMATS = ("csv", "json")


def _number(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_csv(snapshot: DashboardSnapshot) -> str:
    m = snapshot.metrics
    lines = [
        "Metrics",
        "Total Revenue,New Customers,Active Accounts,Growth Rate,Active Users",
        ",".join(_number(v) for v in (
            m.total_revenue, m.new_customers, m.active_accounts, m.growth_rate, m.active_users
        )),
        "",
        "Monthly Revenue",
        "Month,Revenue",
    ]
    lines.extend(f"{point.name},{point.total}" for point in snapshot.revenue_data)
    lines.extend(["", "Recent Sales", "Name,Email,Amount"])
    lines.extend(f"{sale.name},{sale.email},{sale.amount}" for sale in snapshot.recent_sales)
    return "\n".join(lines)


def to_json(snapshot: DashboardSnapshot) -> str:
    return dump_json(snapshot.to_dict())


def render(snapshot: DashboardSnapshot, fmt: str = "csv") -> str:
    """Render ``snapshot`` in ``fmt``.

    Raises:
        ValueError: If the format is not csv or json
    """
    if fmt == "csv":
        return to_csv(snapshot)
    if fmt == "json":
        return to_json(snapshot)
    raise ValueError(f"Unsupported export format: {fmt}")


def write_export(snapshot: DashboardSnapshot, fmt: str, directory: Union[str, Path]) -> Path:
    """Write ``dashboard-data.<fmt>`` into ``directory`` and return its path."""
    content = render(snapshot, fmt)
    path = atomic_write_text(Path(directory) / f"{EXPORT_BASENAME}.{fmt}", content)
    logger.info(f"Exported dashboard data to {path}")
    return path


def filter_traffic(snapshot: DashboardSnapshot, start: date, end: date) -> Tuple[TrafficPoint, ...]:
    """Traffic points whose date falls within ``[start, end]``."""
    if start > end:
        start, end = end, start
    return tuple(
        point for point in snapshot.traffic_data
        if start <= date.fromisoformat(point.date) <= end
    )
