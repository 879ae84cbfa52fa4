"""Tests for the external signal fetcher, with HTTP mocked out."""

from unittest.mock import Mock

import pytest
import requests

from adb_insights.config.config import API_ENDPOINTS
from adb_insights.data_pipeline.collectors.external_signals import (
    REFRESH_JOB_ID,
    ExternalSignalFetcher,
    parse_placeholder_users,
    parse_price,
)
from helpers import make_response, routed_session

PRICE_BODY = {"bpi": {"USD": {"rate": "67,512.3400", "code": "USD"}}}
RANDOM_USERS_BODY = {"results": [
    {"name": {"first": "Ada", "last": "Lovelace"}, "email": "ada@example.com"},
]}
PLACEHOLDER_BODY = [{"id": 1, "name": "Leanne Graham"}, {"id": 2, "name": "Ervin Howell"}]


def _all_ok_routes():
    return {
        API_ENDPOINTS["crypto"]: make_response(PRICE_BODY),
        API_ENDPOINTS["random_users"]: make_response(RANDOM_USERS_BODY),
        API_ENDPOINTS["placeholder_users"]: make_response(PLACEHOLDER_BODY),
    }


def test_parse_price_strips_thousands_separator():
    assert parse_price(PRICE_BODY) == pytest.approx(67512.34)


def test_parse_placeholder_users_requires_list():
    with pytest.raises(TypeError):
        parse_placeholder_users({"name": "x"})
    assert parse_placeholder_users([{"name": ""}, {"name": "A"}, "junk"]) == [{"name": "A"}]


def test_refresh_populates_cache():
    events = []
    fetcher = ExternalSignalFetcher(session=routed_session(_all_ok_routes()), on_event=events.append)
    assert fetcher.refresh() == {"crypto": True, "random_users": True, "placeholder_users": True}

    signals = fetcher.signals()
    assert signals.price == pytest.approx(67512.34)
    assert signals.random_users[0]["email"] == "ada@example.com"
    assert [u["name"] for u in signals.placeholder_users] == ["Leanne Graham", "Ervin Howell"]
    assert signals.last_refreshed is not None
    assert fetcher.has_signal()
    assert events[-1]["type"] == "signal_refresh"


def test_refresh_failures_are_independent():
    routes = _all_ok_routes()
    routes[API_ENDPOINTS["crypto"]] = requests.Timeout("slow")
    routes[API_ENDPOINTS["random_users"]] = make_response({"unexpected": True})
    fetcher = ExternalSignalFetcher(session=routed_session(routes))

    outcome = fetcher.refresh()
    assert outcome == {"crypto": False, "random_users": False, "placeholder_users": True}
    signals = fetcher.signals()
    assert signals.price is None
    assert signals.random_users == []
    assert len(signals.placeholder_users) == 2


def test_failed_refresh_keeps_previous_values():
    routes = _all_ok_routes()
    session = routed_session(routes)
    fetcher = ExternalSignalFetcher(session=session)
    fetcher.refresh()

    routes[API_ENDPOINTS["crypto"]] = make_response(status_code=503)
    routes[API_ENDPOINTS["random_users"]] = requests.ConnectionError("down")
    fetcher.refresh()
    assert fetcher.signals().price == pytest.approx(67512.34)
    assert len(fetcher.signals().random_users) == 1


def test_all_endpoints_down_leaves_cache_empty(offline_session):
    fetcher = ExternalSignalFetcher(session=offline_session)
    assert not any(fetcher.refresh().values())
    assert not fetcher.has_signal()
    assert fetcher.signals().last_refreshed is None


def test_invalid_json_counts_as_failure():
    routes = _all_ok_routes()
    bad = make_response()
    bad.json.side_effect = ValueError("Expecting value")
    routes[API_ENDPOINTS["placeholder_users"]] = bad
    fetcher = ExternalSignalFetcher(session=routed_session(routes))
    assert fetcher.refresh()["placeholder_users"] is False


def test_requests_use_timeout():
    session = routed_session(_all_ok_routes())
    fetcher = ExternalSignalFetcher(session=session, timeout=2.5)
    fetcher.refresh()
    for call in session.get.call_args_list:
        assert call.kwargs["timeout"] == 2.5


def test_connectivity_probes_every_endpoint_without_touching_cache():
    routes = _all_ok_routes()
    routes[API_ENDPOINTS["quotes"]] = make_response(status_code=500)
    routes[API_ENDPOINTS["httpbin"]] = make_response({"uuid": "x"})
    fetcher = ExternalSignalFetcher(session=routed_session(routes))

    results = fetcher.test_connectivity()
    assert set(results) == set(API_ENDPOINTS)
    assert results["crypto"] is True
    assert results["quotes"] is False
    assert results["public_apis"] is False
    assert results["httpbin"] is True
    assert not fetcher.has_signal()


def test_start_refreshes_and_schedules(manual_scheduler):
    session = routed_session(_all_ok_routes())
    fetcher = ExternalSignalFetcher(scheduler=manual_scheduler, session=session, refresh_interval=300)
    session.get.assert_not_called()

    fetcher.start()
    assert session.get.call_count == 3
    assert manual_scheduler.has_job(REFRESH_JOB_ID)

    manual_scheduler.start()
    manual_scheduler.advance(600)
    assert session.get.call_count == 9

    fetcher.stop()
    assert not manual_scheduler.has_job(REFRESH_JOB_ID)


def test_failing_event_callback_is_contained():
    fetcher = ExternalSignalFetcher(
        session=routed_session(_all_ok_routes()), on_event=Mock(side_effect=RuntimeError("boom"))
    )
    assert all(fetcher.refresh().values())


def test_status_counts_successes_and_failures():
    routes = _all_ok_routes()
    routes[API_ENDPOINTS["crypto"]] = requests.ConnectionError("refused")
    fetcher = ExternalSignalFetcher(session=routed_session(routes))
    fetcher.refresh()

    status = fetcher.status()
    assert status["source"] == "external_signals"
    assert status["successes"] == 2
    assert status["errors"] == 1
    assert "refused" in status["last_error"]
