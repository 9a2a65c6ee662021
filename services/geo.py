"""
Geolocation Service Module
Single-IP lookups against the ip2location.io API
"""

import logging

import requests

from config import Config
from models.errors import ErrorKind, GeoError
from models.location import Location
from utils.validators import is_dotted_quad

logger = logging.getLogger(__name__)


class GeoService:
    """ip2location.io API client"""

    def __init__(self, api_key=None, enable_api=True, api_url=None, timeout=None):
        self.api_key = api_key or ''
        self.enable_api = enable_api
        self.api_url = api_url or Config.GEOIP_API_URL
        self.timeout = timeout if timeout is not None else Config.GEOIP_REQUEST_TIMEOUT

    def fetch_one(self, ip):
        """
        Lookup geolocation information for one IP address

        Makes a single attempt with no retry. The caller is responsible
        for caching the result.

        Args:
            ip: Dotted-quad IPv4 address

        Returns:
            Location on success, GeoError otherwise
        """
        if not is_dotted_quad(ip):
            return GeoError(ErrorKind.INVALID_ADDRESS, 'Invalid IP address.', ip=ip)

        if not self.enable_api:
            return GeoError(ErrorKind.API_DISABLED, 'API disabled.', ip=ip)

        params = {
            "key": self.api_key,
            "ip": ip,
            "format": "json"
        }

        try:
            response = requests.get(self.api_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Request for %s failed: %s", ip, e,
                           extra={"error_kind": ErrorKind.TRANSPORT_ERROR.value})
            return GeoError(ErrorKind.TRANSPORT_ERROR, f"Request failed: {e}", ip=ip)

        try:
            location = Location.from_dict(response.json())
        except (ValueError, TypeError) as e:
            # requests raises a ValueError subclass for undecodable bodies
            logger.warning("Unparseable response for %s (HTTP %s): %s", ip, response.status_code, e,
                           extra={"error_kind": ErrorKind.RESPONSE_PARSE_ERROR.value})
            return GeoError(ErrorKind.RESPONSE_PARSE_ERROR, 'Failed to parse JSON response.', ip=ip)

        logger.debug("Fetched %s -> %s,%s", ip, location.latitude, location.longitude)
        return location
