"""Concurrent multi-indicator fetches merged into per-year records."""

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Dict, Iterable, List, Optional, Sequence
import pandas as pd
from .exceptions import AggregateFetchError, AuthenticationError
from .gateway import EconomicDataGateway
from .models import (
    CountryIndicators,
    CountryYearRecord,
    DashboardData,
    IndicatorCategory,
    IndicatorPoint,
)
from .utils import distinct_countries

logger = logging.getLogger(__name__)

RECORD_COLUMNS = ["year"] + [c.field_name for c in IndicatorCategory]


def _join_all(futures: Dict, label: str) -> Dict:
    """
    Wait for every future and return their results keyed like ``futures``.

    All futures run to completion. If any failed, an AuthenticationError is
    re-raised as is; otherwise the first failure (in key order) is raised as
    an AggregateFetchError listing every failure.
    """
    wait(list(futures.values()))

    results = {}
    failures = {}
    for key, future in futures.items():
        error = future.exception()
        if error is None:
            results[key] = future.result()
        else:
            failures[key] = error

    if failures:
        for error in failures.values():
            if isinstance(error, AuthenticationError):
                raise error
        first_key, first_error = next(iter(failures.items()))
        logger.warning("Fetching %s failed for %d of %d requests", label, len(failures), len(futures))
        raise AggregateFetchError(
            f"Failed to fetch {label}: {getattr(first_key, 'value', first_key)}: {first_error}",
            failures=failures,
        ) from first_error

    return results


class IndicatorAggregator:
    """Joins the five indicator categories of a country into yearly records."""

    def __init__(self, gateway: EconomicDataGateway, max_workers: Optional[int] = None):
        self.gateway = gateway
        self.max_workers = max_workers

    def fetch_all_for_country(self, country_code: str, year: Optional[int] = None) -> CountryIndicators:
        """
        Fetch all five categories for one country concurrently.

        The call returns only when all five requests have finished. If any one
        of them failed the whole call fails; no partial result is returned.

        Args:
            country_code: ISO country code
            year: Optional exact-year filter applied to every category

        Returns:
            CountryIndicators with one PagedResult per category

        Raises:
            AggregateFetchError: If any category request failed
            AuthenticationError: If any category request got a 401
        """
        workers = self.max_workers or len(IndicatorCategory)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                category: executor.submit(
                    self.gateway.fetch_category, category, country=country_code, year=year
                )
                for category in IndicatorCategory
            }
            results = _join_all(futures, f"indicators for {country_code}")

        return CountryIndicators(**{c.field_name: results[c] for c in IndicatorCategory})

    def fetch_country_records(self, country_code: str, year: Optional[int] = None) -> List[CountryYearRecord]:
        return merge_by_year(self.fetch_all_for_country(country_code, year))

    def fetch_dashboard(self, countries: Sequence[str], year: Optional[int] = None) -> DashboardData:
        """
        Fetch and merge indicators for several countries at once.

        Args:
            countries: ISO codes, e.g. ("MY", "SG", "TH")
            year: Optional exact-year filter

        Returns:
            DashboardData with merged records per country, the distinct
            countries seen in the GDP series and their years (newest first)
        """
        codes = list(dict.fromkeys(countries))
        with ThreadPoolExecutor(max_workers=max(len(codes), 1)) as executor:
            futures = {
                code: executor.submit(self.fetch_all_for_country, code, year)
                for code in codes
            }
            results = _join_all(futures, "dashboard data")

        gdp_points = [p for code in codes for p in results[code].gdp.data]
        years = sorted({p.year for p in gdp_points}, reverse=True)

        return DashboardData(
            records={code: merge_by_year(results[code]) for code in codes},
            available_countries=distinct_countries(gdp_points),
            available_years=years,
        )


def merge_by_year(indicators: CountryIndicators) -> List[CountryYearRecord]:
    """
    Merge the five category series into one record per year.

    Years are the union over all categories, ascending. For each year the
    first point with that year in each category is used; categories without
    one are left as None.
    """
    by_year = {}
    for category, result in indicators.items():
        index = {}
        for point in result.data:
            index.setdefault(point.year, point.value)
        by_year[category] = index

    years = sorted(set().union(*(index.keys() for index in by_year.values())))

    return [
        CountryYearRecord(
            year=year,
            **{c.field_name: by_year[c].get(year) for c in IndicatorCategory},
        )
        for year in years
    ]


def records_to_dataframe(records: Iterable[CountryYearRecord]) -> pd.DataFrame:
    """Convert merged records to a DataFrame (missing values become NaN)."""
    rows = [
        {col: getattr(r, col) for col in RECORD_COLUMNS}
        for r in records
    ]
    df = pd.DataFrame(rows, columns=RECORD_COLUMNS)
    for col in RECORD_COLUMNS[1:]:
        df[col] = df[col].astype(float)
    return df


def points_to_dataframe(points: Iterable[IndicatorPoint]) -> pd.DataFrame:
    """Convert indicator points to a DataFrame with one row per point."""
    columns = ["id", "year", "value", "country_code", "country_name"]
    return pd.DataFrame(
        [[getattr(p, c) for c in columns] for p in points],
        columns=columns,
    )
