"""Mock responses and an in-memory backend shared by the tests."""

from unittest.mock import Mock
from urllib.parse import urlparse

BASE_URL = "http://testserver"


def create_mock_response(data, status_code=200):
    """Create a mock response object."""
    mock_response = Mock()
    mock_response.status_code = status_code
    if isinstance(data, Exception):
        mock_response.json.side_effect = data
        mock_response.text = "not json"
    else:
        mock_response.json.return_value = data
        mock_response.text = str(data)
    return mock_response


def make_item(year, value, iso_code="MY", country_name="Malaysia", item_id=None):
    """One indicator item as the backend serializes it."""
    return {
        "id": item_id if item_id is not None else year,
        "year": year,
        "value": value,
        "country_name": country_name,
        "iso_code": iso_code,
    }


def make_page(items, total=None, limit=100, offset=0):
    return {
        "data": items,
        "total": len(items) if total is None else total,
        "limit": limit,
        "offset": offset,
    }


class FakeBackend:
    """
    Stand-in for requests.request that serves the dashboard API from memory.

    ``series[category][country]`` holds item lists; ``/data/{category}``
    applies country, year, year_from, year_to, limit and offset the way the
    real backend does. ``fail`` maps a category to a status code to return.
    """

    def __init__(self, series=None, countries=None, token="test-token"):
        self.series = series or {}
        self.countries = countries or []
        self.token = token
        self.fail = {}
        self.calls = []

    def __call__(self, method, url, params=None, json=None, headers=None, timeout=None):
        path = urlparse(url).path
        params = params or {}
        headers = headers or {}
        self.calls.append((method, path, dict(params), dict(headers)))

        if path == "/health":
            return create_mock_response({"status": "ok"})

        if path == "/auth/login":
            if json == {"username": "analyst", "password": "secret"}:
                return create_mock_response({
                    "access_token": self.token,
                    "token_type": "bearer",
                    "expires_at": 1893456000,
                })
            return create_mock_response({"detail": "Incorrect username or password"}, 401)

        if headers.get("Authorization") != f"Bearer {self.token}":
            return create_mock_response({"detail": "Not authenticated"}, 401)

        if path == "/auth/me":
            return create_mock_response({"username": "analyst"})

        if path == "/data/countries":
            return create_mock_response(make_page(self.countries))

        category = path.rsplit("/", 1)[-1]
        if category in self.fail:
            return create_mock_response({"detail": "boom"}, self.fail[category])
        if category not in self.series:
            return create_mock_response({"detail": "Not Found"}, 404)

        items = []
        for code, rows in self.series[category].items():
            if "country" in params and params["country"] != code:
                continue
            items.extend(rows)
        if "year" in params:
            items = [i for i in items if i["year"] == int(params["year"])]
        if "year_from" in params:
            items = [i for i in items if i["year"] >= int(params["year_from"])]
        if "year_to" in params:
            items = [i for i in items if i["year"] <= int(params["year_to"])]

        limit = int(params.get("limit", 100))
        offset = int(params.get("offset", 0))
        return create_mock_response(
            make_page(items[offset:offset + limit], total=len(items), limit=limit, offset=offset)
        )

    def data_calls(self, category):
        return [c for c in self.calls if c[1] == f"/data/{category}"]


