"""
Test suite for price statistics.

Averages round half up to whole dollars; price ranges use nearest-rank indexing
(median at floor(n/2), quartiles at floor(n*0.25) and floor(n*0.75)) with no
interpolation.
"""

import pytest

from price_transparency.services.statistics import (
    calculate_national_average,
    calculate_price_range,
    calculate_regional_average,
    effective_drug_price,
    sort_drug_prices,
)
from price_transparency.tests.conftest import make_drug_price, make_price


class TestNationalAverage:

    def test_empty_is_zero(self) -> None:
        assert calculate_national_average([]) == 0

    def test_mean_rounded_to_whole_dollar(self) -> None:
        prices = [make_price("1", 100), make_price("2", 101), make_price("3", 103)]
        # mean 101.333...
        assert calculate_national_average(prices) == 101

    @pytest.mark.parametrize("values,expected", [
        ([1, 2], 2),        # 1.5 rounds up
        ([2, 3], 3),        # 2.5 rounds up, not to even
        ([10, 11, 11, 11], 11),
    ])
    def test_half_rounds_up(self, values, expected) -> None:
        prices = [make_price(str(i), v) for i, v in enumerate(values)]
        assert calculate_national_average(prices) == expected


class TestRegionalAverage:

    def test_averages_only_matching_state(self) -> None:
        prices = [
            make_price("1", 100, state="CA"),
            make_price("2", 300, state="CA"),
            make_price("3", 1000, state="NY"),
        ]
        assert calculate_regional_average(prices, "CA") == 200
        assert calculate_regional_average(prices, "ny") == 1000

    def test_falls_back_to_national_without_state(self) -> None:
        prices = [make_price("1", 100, state="CA"), make_price("2", 300, state="NY")]
        assert calculate_regional_average(prices) == 200

    def test_falls_back_to_national_when_state_unmatched(self) -> None:
        prices = [make_price("1", 100, state="CA"), make_price("2", 300, state=None)]
        assert calculate_regional_average(prices, "TX") == calculate_national_average(prices)


class TestPriceRange:

    def test_empty_is_all_zero(self) -> None:
        result = calculate_price_range([])
        assert (result.min, result.max, result.median, result.percentile25, result.percentile75) == (0, 0, 0, 0, 0)

    def test_single_value(self) -> None:
        result = calculate_price_range([make_price("1", 42)])
        assert result.min == result.max == result.median == result.percentile25 == result.percentile75 == 42

    def test_nearest_rank_even_count(self) -> None:
        prices = [make_price(str(i), v) for i, v in enumerate([40, 10, 30, 20])]
        result = calculate_price_range(prices)
        assert result.min == 10
        assert result.max == 40
        assert result.median == 30        # sorted[2]
        assert result.percentile25 == 20  # sorted[1]
        assert result.percentile75 == 40  # sorted[3]

    def test_nearest_rank_odd_count(self) -> None:
        prices = [make_price(str(i), v) for i, v in enumerate([5, 1, 4, 2, 3])]
        result = calculate_price_range(prices)
        assert result.median == 3         # sorted[2]
        assert result.percentile25 == 2   # sorted[1]
        assert result.percentile75 == 4   # sorted[3]

    def test_ordering_invariant(self) -> None:
        values = [31250, 36010, 30444, 38999, 33333, 35000, 30001]
        result = calculate_price_range([make_price(str(i), v) for i, v in enumerate(values)])
        assert result.min <= result.percentile25 <= result.median <= result.percentile75 <= result.max


class TestDrugPriceOrdering:

    def test_coupon_price_preferred(self) -> None:
        assert effective_drug_price(make_drug_price("CVS", 150, 120)) == 120
        assert effective_drug_price(make_drug_price("CVS", 150)) == 150

    def test_zero_coupon_price_counts(self) -> None:
        assert effective_drug_price(make_drug_price("CVS", 150, 0)) == 0

    def test_sorted_by_effective_price(self) -> None:
        quotes = [
            make_drug_price("CVS", 100),           # 100
            make_drug_price("Walgreens", 200, 90),  # 90
            make_drug_price("Costco", 95, None),    # 95
        ]
        ordered = sort_drug_prices(quotes)
        assert [q.pharmacyName for q in ordered] == ["Walgreens", "Costco", "CVS"]

    def test_sort_is_stable(self) -> None:
        quotes = [make_drug_price("A", 100), make_drug_price("B", 120, 100), make_drug_price("C", 100)]
        assert [q.pharmacyName for q in sort_drug_prices(quotes)] == ["A", "B", "C"]
