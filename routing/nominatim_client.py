#Purpose: The place lookup "adapter/client".
#Sole responsibility: talk to a Nominatim-compatible geocoder via HTTP and
#return normalized outputs.
#Encapsulates provider-specific details:
#query parameters (format, countrycodes, limit, zoom)
#timeouts and error handling
#parsing response JSON into our internal shape
#It never raises to callers: failures become empty results or a fallback label.

from dataclasses import dataclass
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv
import requests

# Read geocoder settings from environment
# Example in .env:
# NOMINATIM_URL=https://nominatim.openstreetmap.org
load_dotenv()
NOMINATIM_URL = os.getenv("NOMINATIM_URL", "https://nominatim.openstreetmap.org")
NOMINATIM_COUNTRY_CODES = os.getenv("NOMINATIM_COUNTRY_CODES", "eg")
NOMINATIM_USER_AGENT = os.getenv("NOMINATIM_USER_AGENT", "sherouk-rides/0.1")

# Internal coordinate type: (lat, lng)
LatLng = Tuple[float, float]

MIN_QUERY_LENGTH = 3

# Address fields tried in order for the main part of a reverse-geocoded label.
MAIN_NAME_FIELDS = ("road", "suburb", "city_district", "village")
CITY_FIELDS = ("city", "state")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlaceResult:
    """A single place search hit."""
    name: str
    address: str
    location: LatLng


def fallback_label(coords: LatLng) -> str:
    lat, lng = coords
    return f"Pinned Location ({lat:.4f}, {lng:.4f})"


def format_address(address: Dict[str, Any]) -> str:
    """Build '<road-ish>, <city-ish>' from a Nominatim address object."""
    main_name = next((address[key] for key in MAIN_NAME_FIELDS if address.get(key)), "Unknown Road")
    city = next((address[key] for key in CITY_FIELDS if address.get(key)), "")
    return f"{main_name}, {city}"


class NominatimClient:
    """
    Nominatim Adapter / Client

    Sole responsibility:
    - Talk to the geocoder via HTTP
    - Convert internal (lat, lng) to/from the provider's lat/lon strings
    - Return normalized outputs
    """
    def __init__(
        self,
        base_url: Optional[str] = None,
        country_codes: Optional[str] = None,
        limit: int = 5,
        timeout: int = 5,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or NOMINATIM_URL).rstrip("/")
        self.country_codes = country_codes if country_codes is not None else NOMINATIM_COUNTRY_CODES
        self.limit = limit
        self.timeout = timeout #the time to wait for a response before giving up
        self.session = session or requests.Session()
        self.session.headers.update({"User-Agent": NOMINATIM_USER_AGENT})

        if not self.base_url:
            raise ValueError("Geocoder base URL not set. Please set NOMINATIM_URL in the .env file.")

    def _get_json(self, path: str, params: Dict[str, Any]) -> Any:
        response = self.session.get(
            f"{self.base_url}/{path}",
            params=params,
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    #----------------
    # search (free text -> places)
    #----------------
    def search_places(self, query: str) -> List[PlaceResult]:
        """
        Calls the /search endpoint with the given free text.

        Returns an empty list for short queries and on any failure, so callers
        cannot tell a failed lookup from a true zero-result query.
        """
        if not query or len(query) < MIN_QUERY_LENGTH:
            return []

        params = {
            "format": "json",
            "q": query,
            "limit": self.limit,
            "addressdetails": 1,
        }
        if self.country_codes:
            params["countrycodes"] = self.country_codes

        try:
            data = self._get_json("search", params)
            return [self._parse_place(item) for item in data]
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.error(f"Place search failed for {query!r}: {e}")
            return []

    @staticmethod
    def _parse_place(item: Dict[str, Any]) -> PlaceResult:
        display_name = item["display_name"]
        return PlaceResult(
            name=item.get("name") or display_name.split(",")[0],
            address=display_name,
            location=(float(item["lat"]), float(item["lon"])),
        )

    #----------------
    # reverse (coordinates -> label)
    #----------------
    def reverse_geocode(self, coords: LatLng) -> str:
        """
        Calls the /reverse endpoint and builds a readable label.

        Always returns a displayable string; on failure the label embeds the
        raw coordinates.
        """
        lat, lng = coords
        params = {
            "format": "json",
            "lat": lat,
            "lon": lng,
            "zoom": 18,
            "addressdetails": 1,
        }

        try:
            data = self._get_json("reverse", params)
            return format_address(data["address"])
        except (requests.RequestException, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Reverse geocoding failed for {coords}: {e}")
            return fallback_label(coords)
