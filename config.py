"""
Configuration Management Module
Handles loading environment variables for the geolocation cache and map
"""

import os
from dotenv import load_dotenv

load_dotenv()


def _optional_float(value):
    """Parse an optional float setting, empty means unset"""
    if value is None or value.strip() == '':
        return None
    return float(value)


def _optional_int(value):
    """Parse an optional int setting, empty means unset"""
    if value is None or value.strip() == '':
        return None
    return int(value)


class Config:
    """Application configuration class"""

    # Geolocation provider
    GEOIP_API_URL = os.getenv('GEOIP_API_URL', 'https://api.ip2location.io/')
    GEOIP_API_KEY_ENV = 'GEOIP_API_KEY'
    GEOIP_REQUEST_TIMEOUT = _optional_float(os.getenv('GEOIP_REQUEST_TIMEOUT'))
    GEOIP_MAX_CONCURRENCY = _optional_int(os.getenv('GEOIP_MAX_CONCURRENCY'))

    # Persisted cache
    GEOIP_DATA_FILE = os.getenv('GEOIP_DATA_FILE', 'data/geoip.json')

    # Hub gossip log
    HUB_LOG_FILE = os.getenv('HUB_LOG_FILE', '')

    # Map server
    MAP_HOST = os.getenv('MAP_HOST', '127.0.0.1')
    MAP_PORT = int(os.getenv('MAP_PORT', 5000))
    MAP_REFRESH_SECONDS = int(os.getenv('MAP_REFRESH_SECONDS', 10))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.getenv('LOG_FORMAT', 'text')

    @staticmethod
    def get_api_key():
        """
        Read the provider credential from the environment

        Read on every call so the check happens when a geolocator
        is constructed, not when this module is imported.
        """
        return os.getenv(Config.GEOIP_API_KEY_ENV, '')
