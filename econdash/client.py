"""Main client class for the econdash package."""

import os
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
import pandas as pd
from .aggregator import IndicatorAggregator, points_to_dataframe, records_to_dataframe
from .analysis import generate_comparative_analysis
from .api import ApiClient
from .gateway import EconomicDataGateway
from .models import (
    CHART_LIMIT,
    DEFAULT_COUNTRY,
    DEFAULT_PAGE_SIZE,
    Country,
    CountryIndicators,
    CountryYearRecord,
    DashboardData,
    IndicatorCategory,
    IndicatorPoint,
    LoginResponse,
    PagedResult,
    UserInfo,
)
from .session import Session
from .state import EconomicDataView
from .utils import MemoryTokenStore, TokenStore


DEFAULT_BASE_URL = "http://localhost:8000"


class EconDashClient:
    """
    Main client for the economic indicators backend.

    Wires a Session into the API transport, the data gateway and the
    multi-indicator aggregator, and hands out per-page view state objects.
    """

    def __init__(self,
                 base_url: Optional[str] = None,
                 persist_token: bool = True,
                 token_path: Optional[str] = None,
                 timeout: Optional[float] = None,
                 max_workers: Optional[int] = None,
                 on_unauthorized: Optional[Callable[[], None]] = None,
                 session: Optional[Session] = None):
        """
        Initialize the client.

        Args:
            base_url: Backend base URL (default: $ECONDASH_API_URL or localhost:8000)
            persist_token: Whether the token survives process restarts
            token_path: Token file (default: $ECONDASH_TOKEN_FILE or ~/.econdash/access_token)
            timeout: Request timeout in seconds, None for no timeout
            max_workers: Thread pool size for concurrent category fetches
            on_unauthorized: Called after a 401 has cleared the session
            session: Use an existing session instead of creating one
        """
        self.base_url = base_url or os.environ.get("ECONDASH_API_URL", DEFAULT_BASE_URL)

        if session is None:
            store = TokenStore(token_path) if persist_token else MemoryTokenStore()
            session = Session(store)
        self.session = session

        self.api = ApiClient(self.session, self.base_url, on_unauthorized=on_unauthorized, timeout=timeout)
        self.gateway = EconomicDataGateway(self.api)
        self.aggregator = IndicatorAggregator(self.gateway, max_workers=max_workers)

    # Session

    def login(self, username: str, password: str) -> LoginResponse:
        return self.gateway.login(username, password)

    def logout(self) -> None:
        self.gateway.logout()

    def is_authenticated(self) -> bool:
        return self.session.is_authenticated()

    def get_current_user(self) -> UserInfo:
        return self.gateway.get_current_user()

    def health_check(self) -> Dict[str, Any]:
        return self.gateway.health_check()

    # Data

    def get_data(self, category: Union[IndicatorCategory, str], **filters) -> PagedResult[IndicatorPoint]:
        """
        Get one page of an indicator category.

        Examples:
            client.get_data("gdp", country="MY", year_from=2010, year_to=2020)
            client.get_data("inflation", country="SG", limit=5, offset=5)
        """
        return self.gateway.fetch_category(category, **filters)

    def get_data_as_dataframe(self, category: Union[IndicatorCategory, str], **filters) -> pd.DataFrame:
        return points_to_dataframe(self.get_data(category, **filters).data)

    def list_countries(self) -> List[Country]:
        return self.gateway.list_countries()

    def get_all_for_country(self, country_code: str, year: Optional[int] = None) -> CountryIndicators:
        return self.aggregator.fetch_all_for_country(country_code, year)

    def get_country_records(self, country_code: str, year: Optional[int] = None) -> List[CountryYearRecord]:
        return self.aggregator.fetch_country_records(country_code, year)

    def get_country_dataframe(self, country_code: str, year: Optional[int] = None) -> pd.DataFrame:
        """All five indicators of a country as a DataFrame, one row per year."""
        return records_to_dataframe(self.get_country_records(country_code, year))

    def get_dashboard(self, countries: Sequence[str], year: Optional[int] = None) -> DashboardData:
        return self.aggregator.fetch_dashboard(countries, year)

    def compare_countries(self,
                          dashboard: DashboardData,
                          selections: Sequence[tuple]) -> str:
        """
        Comparative analysis text for three (country_code, year) selections.

        Args:
            dashboard: Result of get_dashboard() covering the three countries
            selections: Three (country_code, year) pairs
        """
        return generate_comparative_analysis(
            [(code, dashboard.records.get(code, []), year) for code, year in selections],
            dashboard.available_countries,
        )

    def create_view(self,
                    category: Union[IndicatorCategory, str] = IndicatorCategory.GDP,
                    initial_country: str = DEFAULT_COUNTRY,
                    page_size: int = DEFAULT_PAGE_SIZE,
                    chart_limit: int = CHART_LIMIT) -> EconomicDataView:
        """Create the filter/pagination state for one indicator page."""
        return EconomicDataView(
            self.gateway,
            category,
            initial_country=initial_country,
            page_size=page_size,
            chart_limit=chart_limit,
        )
