"""Filter and pagination state behind one indicator's table and chart."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from enum import Enum
from typing import List, Optional, Union
from .exceptions import AuthenticationError, EconDataAPIError
from .gateway import EconomicDataGateway
from .models import (
    CHART_LIMIT,
    DEFAULT_COUNTRY,
    DEFAULT_PAGE_SIZE,
    Country,
    FilterState,
    IndicatorCategory,
    IndicatorPoint,
)

logger = logging.getLogger(__name__)


class ViewState(Enum):
    IDLE = "idle"
    LOADING_TABLE = "loading-table"
    LOADING_CHART = "loading-chart"
    ERROR = "error"


class EconomicDataView:
    """
    State of a single indicator page: filters, pagination, table and chart.

    Two filter states are kept. ``live`` is what the user is editing and
    ``applied`` is what was last submitted; fetches only ever use
    ``applied``. Paging refetches the table only, since the chart always
    loads up to ``chart_limit`` rows in one request.
    """

    def __init__(self,
                 gateway: EconomicDataGateway,
                 category: Union[IndicatorCategory, str] = IndicatorCategory.GDP,
                 initial_country: str = DEFAULT_COUNTRY,
                 page_size: int = DEFAULT_PAGE_SIZE,
                 chart_limit: int = CHART_LIMIT):
        self.gateway = gateway
        self.category = IndicatorCategory.parse(category)
        self.default_filter = FilterState(selected_country=initial_country, page_size=page_size)
        self.chart_limit = chart_limit

        self.live = replace(self.default_filter)
        self.applied = replace(self.default_filter)

        self.table_data: List[IndicatorPoint] = []
        self.chart_data: List[IndicatorPoint] = []
        self.total_count = 0
        self.available_countries: List[Country] = []
        self.error: Optional[str] = None

        self.table_loading = False
        self.chart_loading = False

    @property
    def state(self) -> ViewState:
        if self.table_loading:
            return ViewState.LOADING_TABLE
        if self.chart_loading:
            return ViewState.LOADING_CHART
        if self.error is not None:
            return ViewState.ERROR
        return ViewState.IDLE

    @property
    def table_rows(self) -> List[IndicatorPoint]:
        """Table data, newest year first."""
        return sorted(self.table_data, key=lambda p: p.year, reverse=True)

    def country_name(self, code: Optional[str] = None) -> str:
        """Display name for ``code`` (default: applied country), or the code itself."""
        code = code or self.applied.selected_country
        match = next((c for c in self.available_countries if c.code == code), None)
        return match.name if match else code

    # Editing the live filter

    def set_selected_country(self, code: str) -> None:
        self.live.selected_country = code

    def set_year_range(self, year_from: Optional[int] = None, year_to: Optional[int] = None) -> None:
        self.live.year_from = year_from
        self.live.year_to = year_to

    # Transitions

    def load(self) -> None:
        """Initial load: table and chart, then the country list."""
        self._refresh_all()
        self.fetch_countries()

    def apply_filters(self) -> None:
        """Submit the live filter and refetch table (from page 0) and chart."""
        self.applied = replace(self.live, page=0)
        self.live.page = 0
        self._refresh_all()

    def change_page(self, page: int) -> None:
        if page < 0:
            raise ValueError(f"page must be non-negative, got {page}")
        self.applied.page = page
        self.live.page = page
        self._refresh_table()

    def change_rows_per_page(self, page_size: int) -> None:
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.applied.page_size = page_size
        self.applied.page = 0
        self.live.page_size = page_size
        self.live.page = 0
        self._refresh_table()

    def reset_filters(self) -> None:
        """Restore the default filter and refetch table and chart."""
        self.live = replace(self.default_filter)
        self.applied = replace(self.default_filter)
        self._refresh_all()

    # Fetches

    def fetch_countries(self) -> None:
        try:
            self.available_countries = self.gateway.list_countries()
        except AuthenticationError:
            raise
        except EconDataAPIError as e:
            self._fail("Failed to load country list", e, clear_data=False)

    def fetch_table_data(self) -> None:
        """Fetch the applied page of the table."""
        f = self.applied
        self.table_loading = True
        try:
            result = self.gateway.fetch_category(
                self.category,
                country=f.selected_country,
                year_from=f.year_from,
                year_to=f.year_to,
                limit=f.page_size,
                offset=f.page * f.page_size,
            )
        finally:
            self.table_loading = False

        self.table_data = list(result.data)
        self.total_count = result.total

    def fetch_chart_data(self) -> None:
        """Fetch the whole applied range for the chart, oldest year first."""
        f = self.applied
        self.chart_loading = True
        try:
            result = self.gateway.fetch_category(
                self.category,
                country=f.selected_country,
                year_from=f.year_from,
                year_to=f.year_to,
                limit=self.chart_limit,
            )
        finally:
            self.chart_loading = False

        self.chart_data = sorted(result.data, key=lambda p: p.year)

    def _refresh_all(self) -> None:
        """Fetch table and chart concurrently; report failures after both finish."""
        with ThreadPoolExecutor(max_workers=2) as executor:
            futures = [
                ("table", executor.submit(self.fetch_table_data)),
                ("chart", executor.submit(self.fetch_chart_data)),
            ]
            outcomes = [(kind, future.exception()) for kind, future in futures]

        failures = [(kind, error) for kind, error in outcomes if error is not None]
        for _, error in failures:
            if isinstance(error, AuthenticationError):
                raise error
        for kind, error in failures:
            if not isinstance(error, EconDataAPIError):
                raise error
            self._fail(f"Failed to load {self.category.value} {kind} data", error)

        if not failures:
            self.error = None

    def _refresh_table(self) -> None:
        try:
            self.fetch_table_data()
        except AuthenticationError:
            raise
        except EconDataAPIError as e:
            self._fail(f"Failed to load {self.category.value} table data", e)
        else:
            self.error = None

    def _fail(self, message: str, error: Exception, clear_data: bool = True) -> None:
        logger.error("%s: %s", message, error, exc_info=error)
        self.error = message
        if not clear_data:
            return
        self.table_data = []
        self.chart_data = []
        self.total_count = 0
