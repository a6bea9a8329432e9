"""Data models for the econdash package."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Generic, List, Optional, TypeVar
from .exceptions import InvalidParameterError

T = TypeVar("T")

DEFAULT_COUNTRY = "MY"
DEFAULT_PAGE_SIZE = 5
CHART_LIMIT = 1000


class IndicatorCategory(Enum):
    """The five indicator series served under /data/{category}."""
    GDP = "gdp"
    POPULATION = "population"
    EDUCATION = "education"
    INFLATION = "inflation"
    LABOUR = "labour"

    @property
    def field_name(self) -> str:
        """Attribute name on CountryYearRecord."""
        return self.value

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @classmethod
    def parse(cls, value) -> "IndicatorCategory":
        """Accept either a member or its wire value ('gdp', 'labour', ...)."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            valid = [c.value for c in cls]
            raise InvalidParameterError(
                f"Invalid category '{value}'. Must be one of: {valid}"
            )


_CATEGORY_LABELS = {
    IndicatorCategory.GDP: "GDP Growth",
    IndicatorCategory.POPULATION: "Population Growth",
    IndicatorCategory.EDUCATION: "Education Expenditure",
    IndicatorCategory.INFLATION: "Inflation Rate",
    IndicatorCategory.LABOUR: "Labor Force",
}


@dataclass(frozen=True)
class IndicatorPoint:
    """A single yearly observation for one country and category."""
    id: int
    year: int
    value: Optional[float]  # null on the wire
    country_code: str  # iso_code on the wire
    country_name: str


@dataclass(frozen=True)
class Country:
    """A country available in the backend."""
    code: str
    name: str


@dataclass
class PagedResult(Generic[T]):
    """One page of a server-side result set.

    ``total`` is the server's count of all matching rows and is independent
    of ``limit``/``offset``; it is not checked against ``len(data)``.
    """
    data: List[T]
    total: int
    limit: int
    offset: int

    @property
    def is_empty(self) -> bool:
        return len(self.data) == 0


@dataclass
class CountryYearRecord:
    """All five indicators of one country for one year."""
    year: int
    gdp: Optional[float] = None
    population: Optional[float] = None
    education: Optional[float] = None
    inflation: Optional[float] = None
    labour: Optional[float] = None

    def get(self, indicator: str) -> Optional[float]:
        return getattr(self, indicator)


@dataclass
class CountryIndicators:
    """The five category results of one aggregate fetch."""
    gdp: PagedResult[IndicatorPoint]
    population: PagedResult[IndicatorPoint]
    education: PagedResult[IndicatorPoint]
    inflation: PagedResult[IndicatorPoint]
    labour: PagedResult[IndicatorPoint]

    def for_category(self, category: IndicatorCategory) -> PagedResult[IndicatorPoint]:
        return getattr(self, category.field_name)

    def items(self):
        return [(c, self.for_category(c)) for c in IndicatorCategory]


@dataclass
class CategoryQuery:
    """Recognised filters for a category request. None means "not set"."""
    country: Optional[str] = None
    year: Optional[int] = None
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    limit: Optional[int] = None
    offset: Optional[int] = None

    @classmethod
    def field_names(cls) -> List[str]:
        return ["country", "year", "year_from", "year_to", "limit", "offset"]

    def to_params(self) -> Dict[str, str]:
        """Wire parameters, omitting unset fields."""
        params = {}
        for name in self.field_names():
            value = getattr(self, name)
            if value is not None:
                params[name] = str(value)
        return params


@dataclass
class FilterState:
    """Filter and pagination values of one data view."""
    selected_country: str = DEFAULT_COUNTRY
    year_from: Optional[int] = None
    year_to: Optional[int] = None
    page: int = 0
    page_size: int = DEFAULT_PAGE_SIZE


@dataclass
class LoginResponse:
    """Token payload issued by POST /auth/login."""
    access_token: str
    token_type: str = "bearer"
    expires_at: Optional[int] = None


@dataclass
class UserInfo:
    """Payload of GET /auth/me."""
    username: str


@dataclass
class DashboardData:
    """Merged records for several countries plus dropdown metadata."""
    records: Dict[str, List[CountryYearRecord]] = field(default_factory=dict)
    available_countries: List[Country] = field(default_factory=list)
    available_years: List[int] = field(default_factory=list)
