"""
Helper Functions Module
Utility helpers for the map display layer
"""

from datetime import datetime, timezone


def utcnow_iso():
    """
    Get current UTC time in ISO format

    Returns:
        String: ISO-formatted UTC timestamp

    Example:
        >>> utcnow_iso()
        '2025-01-15T10:30:45.123456+00:00'
    """
    return datetime.now(timezone.utc).isoformat()


def location_marker(ip, location):
    """
    Convert a Location into a map marker

    Args:
        ip: Cache key for the location
        location: Location record

    Returns:
        Dictionary consumed by the Leaflet page

    Example:
        >>> location_marker("1.2.3.4", Location(ip="1.2.3.4", latitude=10, longitude=20))
        {'ip': '1.2.3.4', 'lat': 10, 'lon': 20, 'city': '', 'country': ''}
    """
    return {
        "ip": ip,
        "lat": location.latitude,
        "lon": location.longitude,
        "city": location.city_name,
        "country": location.country_code or location.country_name,
    }
