"""
Business logic services for the price transparency backend.

Services:
- merge: Combine same-entity records from several upstreams
- statistics: National/regional averages, nearest-rank price ranges, drug quote ordering
- filtering: Filter, stable sort and paginate search results
- aggregator: HealthcareDataAggregator, the cache-fronted orchestrator used by the API layer

The helper modules are pure functions; only the aggregator holds state (its cache).
"""

from price_transparency.services.aggregator import HealthcareDataAggregator, SubFetch
from price_transparency.services.filtering import (
    build_search_result,
    filter_insurance_plans,
    filter_prices,
    filter_providers,
    haversine_miles,
    paginate,
    sort_prices,
    sort_providers,
)
from price_transparency.services.merge import merge_price_data, merge_provider_data
from price_transparency.services.statistics import (
    calculate_national_average,
    calculate_price_range,
    calculate_regional_average,
    effective_drug_price,
    sort_drug_prices,
)

__all__ = [
    "HealthcareDataAggregator",
    "SubFetch",
    "build_search_result",
    "filter_insurance_plans",
    "filter_prices",
    "filter_providers",
    "haversine_miles",
    "paginate",
    "sort_prices",
    "sort_providers",
    "merge_price_data",
    "merge_provider_data",
    "calculate_national_average",
    "calculate_price_range",
    "calculate_regional_average",
    "effective_drug_price",
    "sort_drug_prices",
]
