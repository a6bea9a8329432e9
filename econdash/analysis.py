"""Formatting helpers and the comparative analysis text for the dashboard."""

import math
from typing import Dict, List, Optional, Sequence, Tuple
from .models import Country, CountryYearRecord, IndicatorCategory

NOT_AVAILABLE = "N/A"

# (country code, merged records, selected year)
Selection = Tuple[str, List[CountryYearRecord], int]


def get_value_for_year(records: Sequence[CountryYearRecord], indicator: str, year: int) -> str:
    """
    Get an indicator for a year, formatted to two decimals.

    Returns:
        The formatted value, or "N/A" if the year or the value is missing
    """
    record = next((r for r in records if r.year == year), None)
    if record is None:
        return NOT_AVAILABLE

    value = record.get(indicator)
    if value is None or math.isnan(value):
        return NOT_AVAILABLE

    return f"{value:.2f}"


def format_number(value) -> str:
    """Group thousands, keeping at most three decimals. "N/A" passes through."""
    if value == NOT_AVAILABLE:
        return value
    num = float(value)
    if math.isnan(num):
        return "NaN"
    text = f"{num:,.3f}".rstrip("0").rstrip(".")
    return text


def country_display_name(code: str, available_countries: Sequence[Country]) -> str:
    """Name of ``code`` among ``available_countries``, else the code itself."""
    match = next((c for c in available_countries if c.code == code), None)
    return match.name if match and match.name else code


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return float("nan")


def _first_match(target: float, values: Sequence[float]) -> int:
    """Index of the first value equal to target (country 1 before 2 before 3)."""
    return list(values).index(target)


def _extremes(values: Sequence[float]) -> Optional[Tuple[int, int]]:
    """(index of max, index of min), or None if any value is NaN."""
    if any(math.isnan(v) for v in values):
        return None
    return _first_match(max(values), values), _first_match(min(values), values)


def generate_comparative_analysis(selections: Sequence[Selection],
                                  available_countries: Sequence[Country] = ()) -> str:
    """
    Build the comparative analysis paragraph for three country selections.

    The GDP sentence names the strongest and lowest growth; the inflation
    sentence names the most stable (lowest) and the highest. Ties go to the
    earliest selection. A sentence is left out when any of its three values
    is missing.

    Args:
        selections: Three (country_code, records, year) tuples
        available_countries: Used to resolve display names

    Returns:
        Analysis text, paragraphs separated by blank lines
    """
    if len(selections) != 3:
        raise ValueError(f"Expected 3 country selections, got {len(selections)}")

    names = [country_display_name(code, available_countries) for code, _, _ in selections]
    gdp = [_to_float(get_value_for_year(records, "gdp", year)) for _, records, year in selections]
    inflation = [_to_float(get_value_for_year(records, "inflation", year)) for _, records, year in selections]

    analysis = f"Comparing the economic indicators for {names[0]}, {names[1]}, and {names[2]}:\n\n"

    gdp_extremes = _extremes(gdp)
    if gdp_extremes is not None:
        high, low = gdp_extremes
        analysis += (
            f"In terms of GDP growth, {names[high]} shows the strongest growth at {gdp[high]:.2f}%, "
            f"while {names[low]} has the lowest at {gdp[low]:.2f}%."
            "\n\n"
        )

    inflation_extremes = _extremes(inflation)
    if inflation_extremes is not None:
        high, low = inflation_extremes
        analysis += (
            f"Regarding inflation rates, {names[low]} maintains the most stable prices with "
            f"{inflation[low]:.2f}% inflation, "
            f"while {names[high]} faces higher inflation at {inflation[high]:.2f}%."
        )

    return analysis


def build_country_insights(code: str,
                           records: Sequence[CountryYearRecord],
                           year: int,
                           available_countries: Sequence[Country] = ()) -> Dict[str, str]:
    """Key figures of one country for the selected year, ready for display."""
    insights = {
        "country": country_display_name(code, available_countries),
        "year": str(year),
    }
    for category in IndicatorCategory:
        value = get_value_for_year(records, category.field_name, year)
        if category is IndicatorCategory.LABOUR:
            value = format_number(value)
        insights[category.label] = value
    return insights
