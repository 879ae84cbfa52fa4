"""Tests for CSV/JSON export and traffic filtering."""

import json
from datetime import date

import pytest

from adb_insights.service.export import filter_traffic, render, to_csv, to_json, write_export


@pytest.fixture
def snapshot(generator):
    return generator.generate("1")


def test_csv_sections(snapshot):
    lines = to_csv(snapshot).split("\n")
    assert lines[0] == "Metrics"
    assert lines[1] == "Total Revenue,New Customers,Active Accounts,Growth Rate,Active Users"
    assert len(lines[2].split(",")) == 5
    assert lines[3] == ""
    assert lines[4] == "Monthly Revenue"
    assert lines[5] == "Month,Revenue"
    assert lines[6] == f"Jan,{snapshot.revenue_data[0].total}"
    assert lines[18] == ""
    assert lines[19] == "Recent Sales"
    assert lines[20] == "Name,Email,Amount"

    sale_rows = lines[21:]
    assert len(sale_rows) == 5
    first = snapshot.recent_sales[0]
    assert sale_rows[0] == f"{first.name},{first.email},{first.amount}"


def test_csv_metric_values(snapshot):
    values = to_csv(snapshot).split("\n")[2].split(",")
    assert float(values[0]) == pytest.approx(snapshot.metrics.total_revenue)
    assert int(values[1]) == snapshot.metrics.new_customers


def test_json_is_pretty_printed_snapshot(snapshot):
    content = to_json(snapshot)
    assert content.startswith('{\n  "metrics": {')
    assert json.loads(content) == snapshot.to_dict()


def test_render_rejects_unknown_format(snapshot):
    with pytest.raises(ValueError):
        render(snapshot, "xlsx")


@pytest.mark.parametrize("fmt", ["csv", "json"])
def test_write_export(snapshot, temp_data_dir, fmt):
    path = write_export(snapshot, fmt, temp_data_dir / "exports")
    assert path.name == f"dashboard-data.{fmt}"
    assert path.read_text(encoding="utf-8") == render(snapshot, fmt)
    assert not list(path.parent.glob("*.tmp"))


def test_filter_traffic_inclusive(snapshot):
    # fixed clock: traffic ends 2024-06-03
    points = filter_traffic(snapshot, date(2024, 6, 1), date(2024, 6, 3))
    assert [p.date for p in points] == ["2024-06-01", "2024-06-02", "2024-06-03"]


def test_filter_traffic_swapped_bounds_and_empty(snapshot):
    assert len(filter_traffic(snapshot, date(2024, 6, 3), date(2024, 5, 28))) == 7
    assert filter_traffic(snapshot, date(2023, 1, 1), date(2023, 1, 31)) == ()
