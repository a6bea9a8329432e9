"""Tests for formatting helpers and comparative analysis."""

import pytest
from econdash.analysis import (
    build_country_insights,
    country_display_name,
    format_number,
    generate_comparative_analysis,
    get_value_for_year,
)
from econdash.models import Country, CountryYearRecord

COUNTRIES = [Country("MY", "Malaysia"), Country("SG", "Singapore"), Country("TH", "Thailand")]


def records(year=2020, gdp=None, inflation=None, **others):
    return [CountryYearRecord(year=year, gdp=gdp, inflation=inflation, **others)]


def selections(gdp=(None, None, None), inflation=(None, None, None), years=(2020, 2020, 2020)):
    codes = ["MY", "SG", "TH"]
    return [
        (code, records(year, gdp=g, inflation=i), year)
        for code, g, i, year in zip(codes, gdp, inflation, years)
    ]


class TestGetValueForYear:
    """Test cases for get_value_for_year."""

    def test_two_decimals(self):
        assert get_value_for_year(records(gdp=4.456), "gdp", 2020) == "4.46"
        assert get_value_for_year(records(gdp=3), "gdp", 2020) == "3.00"

    def test_missing_year(self):
        assert get_value_for_year(records(gdp=1.0), "gdp", 1999) == "N/A"

    def test_missing_value(self):
        assert get_value_for_year(records(gdp=1.0), "education", 2020) == "N/A"

    def test_empty_records(self):
        assert get_value_for_year([], "gdp", 2020) == "N/A"

    def test_nan_value(self):
        assert get_value_for_year(records(gdp=float("nan")), "gdp", 2020) == "N/A"


class TestFormatNumber:
    """Test cases for format_number."""

    def test_not_available_passthrough(self):
        assert format_number("N/A") == "N/A"

    def test_grouping(self):
        assert format_number("15800000.00") == "15,800,000"
        assert format_number(1234.5) == "1,234.5"
        assert format_number(0.1234) == "0.123"


class TestCountryDisplayName:
    """Test cases for country name lookup."""

    def test_known_country(self):
        assert country_display_name("SG", COUNTRIES) == "Singapore"

    def test_unknown_country_falls_back_to_code(self):
        assert country_display_name("VN", COUNTRIES) == "VN"

    def test_empty_country_list(self):
        assert country_display_name("MY", []) == "MY"


class TestComparativeAnalysis:
    """Test cases for generate_comparative_analysis."""

    def test_intro_names_all_three(self):
        text = generate_comparative_analysis(selections(), COUNTRIES)
        assert text.startswith("Comparing the economic indicators for Malaysia, Singapore, and Thailand:")

    def test_gdp_sentence(self):
        text = generate_comparative_analysis(selections(gdp=(4.4, 1.2, 2.0)), COUNTRIES)
        assert ("In terms of GDP growth, Malaysia shows the strongest growth at 4.40%, "
                "while Singapore has the lowest at 1.20%.") in text

    def test_gdp_tie_reports_first_max(self):
        text = generate_comparative_analysis(selections(gdp=(3.00, 5.00, 5.00)), COUNTRIES)
        assert "Singapore shows the strongest growth at 5.00%" in text
        assert "while Malaysia has the lowest at 3.00%" in text

    def test_gdp_tie_reports_first_min(self):
        text = generate_comparative_analysis(selections(gdp=(6.0, 2.0, 2.0)), COUNTRIES)
        assert "Malaysia shows the strongest growth at 6.00%" in text
        assert "while Singapore has the lowest at 2.00%" in text

    def test_three_way_tie_reports_first_country_for_both(self):
        text = generate_comparative_analysis(selections(gdp=(4.00, 4.00, 4.00)), COUNTRIES)
        assert "Malaysia shows the strongest growth at 4.00%" in text
        assert "while Malaysia has the lowest at 4.00%" in text

    def test_comparison_uses_displayed_precision(self):
        """Values equal after rounding to two decimals tie."""
        text = generate_comparative_analysis(selections(gdp=(5.001, 5.004, 1.0)), COUNTRIES)
        assert "Malaysia shows the strongest growth at 5.00%" in text

    def test_inflation_sentence(self):
        text = generate_comparative_analysis(selections(inflation=(2.5, 0.8, 6.1)), COUNTRIES)
        assert ("Regarding inflation rates, Singapore maintains the most stable prices with 0.80% inflation, "
                "while Thailand faces higher inflation at 6.10%.") in text

    def test_missing_value_omits_sentence(self):
        text = generate_comparative_analysis(
            selections(gdp=(1.0, None, 2.0), inflation=(1.0, 2.0, 3.0)), COUNTRIES
        )
        assert "GDP growth" not in text
        assert "Regarding inflation rates" in text

    def test_nan_value_omits_sentence(self):
        text = generate_comparative_analysis(
            selections(gdp=(1.0, 2.0, 3.0), inflation=(float("nan"), 2.0, 3.0)), COUNTRIES
        )
        assert "In terms of GDP growth" in text
        assert "inflation" not in text

    def test_independent_years(self):
        sel = [
            ("MY", records(2019, gdp=1.0) + records(2020, gdp=9.0), 2019),
            ("SG", records(2020, gdp=2.0), 2020),
            ("TH", records(2021, gdp=3.0), 2021),
        ]
        text = generate_comparative_analysis(sel, COUNTRIES)
        assert "Thailand shows the strongest growth at 3.00%" in text
        assert "while Malaysia has the lowest at 1.00%" in text

    def test_unknown_country_uses_code(self):
        sel = selections(gdp=(1.0, 2.0, 3.0))
        text = generate_comparative_analysis(sel, [])
        assert "TH shows the strongest growth" in text

    def test_requires_three_selections(self):
        with pytest.raises(ValueError):
            generate_comparative_analysis(selections()[:2], COUNTRIES)


class TestCountryInsights:
    """Test cases for build_country_insights."""

    def test_insights(self):
        recs = records(2020, gdp=-5.5, inflation=-1.14, population=1.2, education=4.5, labour=15900000)
        insights = build_country_insights("MY", recs, 2020, COUNTRIES)

        assert insights == {
            "country": "Malaysia",
            "year": "2020",
            "GDP Growth": "-5.50",
            "Population Growth": "1.20",
            "Education Expenditure": "4.50",
            "Inflation Rate": "-1.14",
            "Labor Force": "15,900,000",
        }

    def test_insights_missing_year(self):
        insights = build_country_insights("VN", [], 2020, COUNTRIES)
        assert insights["country"] == "VN"
        assert insights["Labor Force"] == "N/A"
