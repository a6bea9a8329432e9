"""Typed access to the indicator, country and auth endpoints."""

import logging
from typing import Any, Dict, List, Optional, Union
from .api import ApiClient
from .exceptions import DataParsingError
from .models import (
    CategoryQuery,
    Country,
    IndicatorCategory,
    IndicatorPoint,
    LoginResponse,
    PagedResult,
    UserInfo,
)
from .utils import build_query, parse_country, parse_indicator_point, parse_paged

logger = logging.getLogger(__name__)


class EconomicDataGateway:
    """Handler for the /data, /auth and /health endpoints."""

    def __init__(self, api: ApiClient):
        self.api = api

    @property
    def session(self):
        return self.api.session

    def fetch_category(self,
                       category: Union[IndicatorCategory, str],
                       query: Optional[CategoryQuery] = None,
                       **filters) -> PagedResult[IndicatorPoint]:
        """
        Get one page of an indicator category.

        Args:
            category: Indicator category, as enum member or wire value
            query: Filter struct; keyword filters override its fields
            **filters: country, year, year_from, year_to, limit, offset

        Returns:
            PagedResult of IndicatorPoint

        Raises:
            InvalidParameterError: If 'year' is combined with a year range,
                the range is inverted, or an unknown filter is passed

        Examples:
            gateway.fetch_category("gdp", country="MY", limit=5, offset=10)
            gateway.fetch_category(IndicatorCategory.INFLATION, year_from=2015, year_to=2020)
        """
        category = IndicatorCategory.parse(category)
        query = build_query(query, **filters)

        payload = self.api.get(f"/data/{category.value}", params=query.to_params())
        return parse_paged(payload, parse_indicator_point)

    def fetch_page(self,
                   category: Union[IndicatorCategory, str],
                   country: Optional[str] = None,
                   page: int = 0,
                   page_size: int = 5,
                   year_from: Optional[int] = None,
                   year_to: Optional[int] = None) -> PagedResult[IndicatorPoint]:
        """Get page ``page`` of ``page_size`` rows (offset = page * page_size)."""
        return self.fetch_category(
            category,
            country=country,
            year_from=year_from,
            year_to=year_to,
            limit=page_size,
            offset=page * page_size,
        )

    def get_gdp(self, **filters) -> PagedResult[IndicatorPoint]:
        return self.fetch_category(IndicatorCategory.GDP, **filters)

    def get_population_growth(self, **filters) -> PagedResult[IndicatorPoint]:
        return self.fetch_category(IndicatorCategory.POPULATION, **filters)

    def get_education_expenditure(self, **filters) -> PagedResult[IndicatorPoint]:
        return self.fetch_category(IndicatorCategory.EDUCATION, **filters)

    def get_inflation(self, **filters) -> PagedResult[IndicatorPoint]:
        return self.fetch_category(IndicatorCategory.INFLATION, **filters)

    def get_labour_force(self, **filters) -> PagedResult[IndicatorPoint]:
        return self.fetch_category(IndicatorCategory.LABOUR, **filters)

    def list_countries(self) -> List[Country]:
        """
        Get the distinct countries known to the backend, in server order.

        Returns:
            List of Country (possibly empty)
        """
        payload = self.api.get("/data/countries")
        return parse_paged(payload, parse_country).data

    def login(self, username: str, password: str) -> LoginResponse:
        """
        Exchange credentials for a bearer token and start the session.

        Raises:
            AuthenticationError: If the credentials are rejected
        """
        payload = self.api.post(
            "/auth/login",
            json={"username": username, "password": password},
            authenticated=False,
        )
        try:
            token = LoginResponse(
                access_token=payload["access_token"],
                token_type=payload.get("token_type", "bearer"),
                expires_at=payload.get("expires_at"),
            )
        except (KeyError, TypeError) as e:
            raise DataParsingError(f"Malformed login response: {e}")

        self.session.login(token)
        logger.info("Logged in as %s", username)
        return token

    def logout(self) -> None:
        self.session.logout()

    def get_current_user(self) -> UserInfo:
        payload = self.api.get("/auth/me")
        try:
            return UserInfo(username=payload["username"])
        except (KeyError, TypeError) as e:
            raise DataParsingError(f"Malformed user response: {e}")

    def health_check(self) -> Dict[str, Any]:
        """Call /health without credentials and return its payload."""
        return self.api.get("/health", authenticated=False)
