"""
Descriptive statistics over price collections.

Key Functions:
- calculate_national_average: Rounded mean cash price of every candidate
- calculate_regional_average: Rounded mean cash price within one state
- calculate_price_range: Nearest-rank min/quartiles/median/max of cash prices
- effective_drug_price / sort_drug_prices: Coupon-aware pharmacy quote ordering

Rounding:
    Averages round half up to a whole dollar (floor(x + 0.5)), so 2.5 -> 3 and
    -2.5 -> -2. numpy.round would round half to even and is not used here.

Percentiles:
    Nearest-rank indexing over the ascending cash prices: median at floor(n/2),
    quartiles at floor(n*0.25) and floor(n*0.75). No interpolation. For n == 0
    every field is 0; for n == 1 every field equals the single value.
"""

import logging
import math
from typing import List, Optional, Sequence

import numpy as np

from price_transparency.models.schemas import DrugPrice, PriceRange, ProcedurePrice


logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> float:
    return float(math.floor(value + 0.5))


def _cash_prices(prices: Sequence[ProcedurePrice]) -> np.ndarray:
    return np.array([p.pricing.cashPrice for p in prices], dtype=np.float64)


def calculate_national_average(prices: Sequence[ProcedurePrice]) -> float:
    """Mean cash price rounded to a whole dollar; 0 for an empty list."""
    if not prices:
        return 0.0
    return _round_half_up(float(np.mean(_cash_prices(prices))))


def calculate_regional_average(
    prices: Sequence[ProcedurePrice],
    state: Optional[str] = None,
) -> float:
    """
    Mean cash price of records whose providerState matches state.

    Falls back to the national average when no state is given or when no
    record carries that state.
    """
    if state:
        wanted = state.strip().upper()
        regional = [p for p in prices if p.providerState and p.providerState.upper() == wanted]
        if regional:
            return calculate_national_average(regional)
        logger.debug(f"No prices recorded for state {wanted}; using national average")

    return calculate_national_average(prices)


def calculate_price_range(prices: Sequence[ProcedurePrice]) -> PriceRange:
    """
    Nearest-rank spread of cash prices.

    Returns:
        PriceRange with min <= percentile25 <= median <= percentile75 <= max.
    """
    n = len(prices)
    if n == 0:
        return PriceRange(min=0, max=0, median=0, percentile25=0, percentile75=0)

    ordered = np.sort(_cash_prices(prices), kind="stable")
    return PriceRange(
        min=float(ordered[0]),
        max=float(ordered[-1]),
        median=float(ordered[n // 2]),
        percentile25=float(ordered[math.floor(n * 0.25)]),
        percentile75=float(ordered[math.floor(n * 0.75)]),
    )


def effective_drug_price(quote: DrugPrice) -> float:
    """Coupon price when the quote carries one (including 0), else list price."""
    if quote.priceWithCoupon is not None:
        return quote.priceWithCoupon
    return quote.price


def sort_drug_prices(quotes: Sequence[DrugPrice]) -> List[DrugPrice]:
    """Stable ascending sort of pharmacy quotes by effective price."""
    return sorted(quotes, key=effective_drug_price)
