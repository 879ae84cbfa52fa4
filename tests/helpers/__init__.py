"""Test helper utilities."""

from unittest.mock import Mock

import requests


def make_response(payload=None, status_code=200):
    """Build a Mock standing in for a ``requests.Response``."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    if not response.ok:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    return response


def routed_session(routes):
    """Mock session answering ``get(url)`` from a ``{url: response or exception}`` map."""
    session = Mock()

    def get(url, timeout=None):
        outcome = routes.get(url)
        if outcome is None:
            raise requests.ConnectionError(f"no route for {url}")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    session.get.side_effect = get
    return session
