"""Read-side lookups for businesses and their scores."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from ratings.business.business import Business
from ratings.business.geo import bounding_box, haversine_miles
from ratings.projections.business_score import BusinessScore

KM_PER_MILE = 1.609344


def score_for(business_id) -> BusinessScore | None:
    try:
        return current_domain.repository_for(BusinessScore).get(str(business_id))
    except ObjectNotFoundError:
        return None


def businesses_near(latitude: float, longitude: float, radius_km: float = 5, limit: int = 50) -> list[Business]:
    """Registered businesses within ``radius_km``, closest first."""
    min_lat, max_lat, min_lng, max_lng = bounding_box(latitude, longitude, radius_km)
    candidates = (
        current_domain.repository_for(Business)
        ._dao.query.filter(
            latitude__gte=min_lat,
            latitude__lte=max_lat,
            longitude__gte=min_lng,
            longitude__lte=max_lng,
        )
        .limit(None)
        .all()
        .items
    )

    radius_miles = radius_km / KM_PER_MILE
    with_distance = [
        (haversine_miles(latitude, longitude, b.latitude, b.longitude), b) for b in candidates
    ]
    nearby = sorted((pair for pair in with_distance if pair[0] <= radius_miles), key=lambda pair: pair[0])
    return [business for _, business in nearby[:limit]]


def top_rated_businesses(limit: int = 20) -> list[BusinessScore]:
    return (
        current_domain.repository_for(BusinessScore)
        ._dao.query.filter(total_ratings__gt=0)
        .order_by(["-average_score", "-total_ratings"])
        .limit(limit)
        .all()
        .items
    )


def search_businesses_by_name(term: str, limit: int = 20) -> list[Business]:
    """Case-insensitive prefix match on the business name."""
    term = (term or "").strip()
    if not term:
        return []

    candidates = (
        current_domain.repository_for(Business)
        ._dao.query.filter(name__icontains=term)
        .limit(None)
        .all()
        .items
    )
    matches = [b for b in candidates if b.name.lower().startswith(term.lower())]
    matches.sort(key=lambda b: b.name.lower())
    return matches[:limit]
