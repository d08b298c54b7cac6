"""Locality extraction and geocoding."""

from crp.location.gazetteer import LOCALITIES, Locality, extract_location
from crp.location.geocode import NominatimGeocoder, RateLimiter, city_center, resolve_location

__all__ = [
    "LOCALITIES",
    "Locality",
    "NominatimGeocoder",
    "RateLimiter",
    "city_center",
    "extract_location",
    "resolve_location",
]
