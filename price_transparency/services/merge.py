"""
Record merge helpers for the healthcare data aggregator.

Combines same-entity records fetched from several upstreams into one list.
Every helper is pure: inputs are never mutated and new records are built with
``model_copy(update=...)``.

Key Functions:
- merge_provider_data: Left-join quality ratings (and place listings) onto providers
- merge_price_data: Keep one price per (providerId, procedureCode), highest confidence wins

Price Merge Tie-Break:
    A later candidate replaces the current winner only when its confidenceScore is
    strictly greater. Equal scores keep the first-seen record, so with ties the
    result depends on source order.
"""

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from price_transparency.models.schemas import (
    PlaceDetails,
    ProcedurePrice,
    Provider,
    QualityRatings,
)


logger = logging.getLogger(__name__)


PriceKey = Tuple[str, str]


def merge_provider_data(
    providers: Sequence[Provider],
    quality_data: Mapping[str, QualityRatings],
    places: Optional[Iterable[PlaceDetails]] = None,
) -> List[Provider]:
    """
    Attach quality ratings and place listings to directory providers.

    Args:
        providers: Base provider list from the provider directory.
        quality_data: Ratings keyed by NPI. Providers absent from the map keep
            their own qualityRatings.
        places: Optional place listings; a listing whose npi matches a provider
            contributes its operating hours, website and image.

    Returns:
        New provider list in the input order.
    """
    places_by_npi: Dict[str, PlaceDetails] = {}
    for place in places or ():
        if place.npi:
            places_by_npi.setdefault(place.npi, place)

    merged = []
    for provider in providers:
        update = {"qualityRatings": quality_data.get(provider.npi, provider.qualityRatings)}

        place = places_by_npi.get(provider.npi)
        if place is not None:
            if place.operatingHours is not None:
                update["operatingHours"] = place.operatingHours
            if place.website and not provider.website:
                update["website"] = place.website
            if place.imageUrl and not provider.imageUrl:
                update["imageUrl"] = place.imageUrl

        merged.append(provider.model_copy(update=update))

    return merged


def merge_price_data(*sources: Iterable[ProcedurePrice]) -> List[ProcedurePrice]:
    """
    Merge price lists from several sources into one record per key.

    The key is (providerId, procedureCode). Output order follows the first time
    each key was seen across the sources in argument order.

    Example:
        >>> merged = merge_price_data(cms_prices, fair_health_prices)
        >>> len({(p.providerId, p.procedureCode) for p in merged}) == len(merged)
        True
    """
    winners: Dict[PriceKey, ProcedurePrice] = {}
    candidates = 0

    for source in sources:
        for price in source:
            candidates += 1
            key = (price.providerId, price.procedureCode)
            current = winners.get(key)
            if current is None or price.confidenceScore > current.confidenceScore:
                winners[key] = price

    logger.debug(f"Merged {candidates} price candidates into {len(winners)} records")
    return list(winners.values())
