"""
econdash - A Python client for an economic indicators dashboard backend

This package provides authenticated access to GDP growth, population growth,
education expenditure, inflation and labour force series per country,
merges them into per-year records, and keeps the filter and pagination
state behind table and chart views.
"""

from .client import EconDashClient
from .exceptions import (
    AggregateFetchError,
    AuthenticationError,
    BadRequestError,
    EconDataAPIError,
    HTTPStatusError,
    InvalidParameterError,
)
from .models import CountryYearRecord, IndicatorCategory, IndicatorPoint, PagedResult
from .state import EconomicDataView, ViewState

__version__ = "0.1.0"

# Make the main client easily accessible
__all__ = [
    "EconDashClient",
    "EconomicDataView",
    "ViewState",
    "IndicatorCategory",
    "IndicatorPoint",
    "CountryYearRecord",
    "PagedResult",
    "EconDataAPIError",
    "AuthenticationError",
    "HTTPStatusError",
    "BadRequestError",
    "InvalidParameterError",
    "AggregateFetchError",
]
