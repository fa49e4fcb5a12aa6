import logging
from typing import Optional

import httpx
from pydantic import BaseModel

from ..config import GEOCODING_URL, GOOGLE_MAPS_API_KEY, HTTP_TIMEOUT_SECONDS
from ..errors import LookupFailure, MissingCredential

logger = logging.getLogger(__name__)

UNKNOWN = "N/A"
ACCEPTED_STATUSES = {"OK", "ZERO_RESULTS"}


class PlaceName(BaseModel):
    city: str = UNKNOWN
    country: str = UNKNOWN

    def __str__(self) -> str:
        return f"{self.city}, {self.country}"


def _component(components: list[dict], component_type: str) -> str:
    for component in components:
        if component_type in component.get("types", []):
            return component.get("long_name", "")
    return ""


def parse_place(body: dict) -> PlaceName:
    city = UNKNOWN
    country = UNKNOWN
    # later results override earlier ones when they carry the component
    for result in body.get("results", []):
        components = result.get("address_components", [])
        city = _component(components, "locality") or city
        country = _component(components, "country") or country
    return PlaceName(city=city, country=country)


async def resolve_place(
    latitude: float,
    longitude: float,
    client: Optional[httpx.AsyncClient] = None,
    api_key: Optional[str] = None,
) -> PlaceName:
    api_key = GOOGLE_MAPS_API_KEY if api_key is None else api_key
    if not api_key:
        raise MissingCredential("GOOGLE_MAPS_API_KEY was not provided in config!")

    params = {"latlng": f"{latitude},{longitude}", "key": api_key}
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as own_client:
                response = await own_client.get(GEOCODING_URL, params=params)
        else:
            response = await client.get(GEOCODING_URL, params=params)
        response.raise_for_status()
        body = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.error("Reverse geocoding of %s,%s failed: %s", latitude, longitude, e)
        raise LookupFailure() from e

    status = body.get("status")
    if status not in ACCEPTED_STATUSES:
        logger.error("Reverse geocoding returned status %s: %s", status, body.get("error_message"))
        raise LookupFailure()
    return parse_place(body)
