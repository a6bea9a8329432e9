"""Utility functions for the econdash package."""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional
import requests
from .exceptions import (
    BadRequestError,
    DataParsingError,
    HTTPStatusError,
    InvalidParameterError,
    NotFoundError,
    TokenStoreError,
)
from .models import CategoryQuery, Country, IndicatorPoint, PagedResult


DEFAULT_TOKEN_PATH = os.path.join("~", ".econdash", "access_token")


class TokenStore:
    """Single-slot, file-based store for the raw bearer token.

    Each ``save`` overwrites the previous token; a missing or empty file
    means there is no session.
    """

    def __init__(self, path: Optional[str] = None):
        path = path or os.environ.get("ECONDASH_TOKEN_FILE", DEFAULT_TOKEN_PATH)
        self.path = Path(path).expanduser()

    def load(self) -> Optional[str]:
        """Return the persisted token, or None."""
        try:
            if not self.path.exists():
                return None
            token = self.path.read_text(encoding="utf-8").strip()
            return token or None
        except OSError as e:
            raise TokenStoreError(f"Error reading token file: {e}")

    def save(self, token: str) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(token, encoding="utf-8")
        except OSError as e:
            raise TokenStoreError(f"Error writing token file: {e}")

    def clear(self) -> None:
        try:
            if self.path.exists():
                self.path.unlink()
        except OSError as e:
            raise TokenStoreError(f"Error removing token file: {e}")


class MemoryTokenStore:
    """Non-persistent token slot, used when persistence is disabled."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def load(self) -> Optional[str]:
        return self._token or None

    def save(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


def handle_api_errors(response: requests.Response) -> None:
    """Raise the matching exception for a non-2xx, non-401 response."""
    if 200 <= response.status_code < 300:
        return

    message = None
    body = None
    try:
        body = response.json()
        if isinstance(body, dict):
            # FastAPI-style {"detail": ...}
            detail = body.get("detail", body.get("message"))
            if isinstance(detail, list) and detail:
                detail = detail[0].get("msg", detail[0]) if isinstance(detail[0], dict) else detail[0]
            if detail is not None:
                message = str(detail)
    except (ValueError, AttributeError):
        pass

    if message is None:
        message = response.text or "Unknown error"

    status = response.status_code
    if status == 404:
        raise NotFoundError(f"Not found: {message}", status_code=status, body=body)
    elif status in (400, 422):
        raise BadRequestError(f"Bad request: {message}", status_code=status, body=body)
    else:
        raise HTTPStatusError(f"HTTP {status}: {message}", status_code=status, body=body)


def validate_query(query: CategoryQuery) -> CategoryQuery:
    """Reject filter combinations whose meaning the server does not define."""
    if query.year is not None and (query.year_from is not None or query.year_to is not None):
        raise InvalidParameterError(
            "'year' cannot be combined with 'year_from'/'year_to'. "
            f"Found: year={query.year}, year_from={query.year_from}, year_to={query.year_to}"
        )

    if query.year_from is not None and query.year_to is not None and query.year_from > query.year_to:
        raise InvalidParameterError(
            f"'year_from' ({query.year_from}) must not be after 'year_to' ({query.year_to})"
        )

    for name in ("limit", "offset"):
        value = getattr(query, name)
        if value is not None and value < 0:
            raise InvalidParameterError(f"'{name}' must be non-negative, got {value}")

    return query


def build_query(query: Optional[CategoryQuery] = None, **filters) -> CategoryQuery:
    """Merge keyword filters into a CategoryQuery, rejecting unknown keys."""
    unknown = set(filters) - set(CategoryQuery.field_names())
    if unknown:
        raise InvalidParameterError(
            f"Unknown filter(s) {sorted(unknown)}. Must be among: {CategoryQuery.field_names()}"
        )

    values = {}
    if query is not None:
        values = {name: getattr(query, name) for name in CategoryQuery.field_names()}
    values.update(filters)
    return validate_query(CategoryQuery(**values))


def parse_indicator_point(item: Dict[str, Any]) -> IndicatorPoint:
    """Convert one wire item into an IndicatorPoint."""
    try:
        return IndicatorPoint(
            id=item.get("id"),
            year=int(item["year"]),
            value=float(item["value"]) if item.get("value") is not None else None,
            country_code=item["iso_code"],
            country_name=item.get("country_name", item["iso_code"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DataParsingError(f"Malformed indicator item {item!r}: {e}")


def parse_paged(payload: Any, parse_item) -> PagedResult:
    """Convert a {data, total, limit, offset} payload into a PagedResult."""
    if not isinstance(payload, dict) or "data" not in payload:
        raise DataParsingError("Response is missing the 'data' field")

    data = [parse_item(item) for item in payload["data"] or []]
    try:
        return PagedResult(
            data=data,
            total=int(payload.get("total", len(data))),
            limit=int(payload.get("limit", len(data))),
            offset=int(payload.get("offset", 0)),
        )
    except (TypeError, ValueError) as e:
        raise DataParsingError(f"Malformed pagination fields: {e}")


def parse_country(item: Dict[str, Any]) -> Country:
    try:
        return Country(code=item["code"], name=item.get("name") or item["code"])
    except (KeyError, TypeError) as e:
        raise DataParsingError(f"Malformed country item {item!r}: {e}")


def distinct_countries(points: List[IndicatorPoint]) -> List[Country]:
    """Distinct countries in order of first appearance."""
    seen = {}
    for point in points:
        if point.country_code not in seen:
            seen[point.country_code] = Country(point.country_code, point.country_name)
    return list(seen.values())


def join_url(base_url: str, path: str) -> str:
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def decode_json(response: requests.Response) -> Any:
    """Decode a successful response body."""
    try:
        return response.json()
    except ValueError as e:
        raise DataParsingError(f"Failed to parse JSON response: {e}")
