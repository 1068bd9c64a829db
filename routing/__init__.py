#Marks routing as a package.
#Re-exports clean public APIs (distance_km, estimate_eta_minutes,
#NominatimClient, RequestTokens) so other modules import from routing
#without knowing internal file names.
#No business logic.

from .distance import distance_km, haversine_km, LatLng, ROAD_FACTOR
from .eta_service import estimate_eta_minutes
from .nominatim_client import NominatimClient, PlaceResult
from .request_tokens import RequestTokens

__all__ = [
    "distance_km",
    "haversine_km",
    "LatLng",
    "ROAD_FACTOR",
    "estimate_eta_minutes",
    "NominatimClient",
    "PlaceResult",
    "RequestTokens",
]
