"""Shared test data builders"""

from models.location import Location


def location_payload(ip, latitude=10, longitude=20, **overrides):
    """Provider-shaped JSON object for one address"""
    payload = {
        "ip": ip,
        "country_code": "US",
        "country_name": "United States of America",
        "region_name": "California",
        "city_name": "Mountain View",
        "latitude": latitude,
        "longitude": longitude,
        "zip_code": "94043",
        "time_zone": "-07:00",
        "asn": "15169",
        "as": "Google LLC",
        "is_proxy": False,
    }
    payload.update(overrides)
    return payload


class StubClient:
    """Stands in for GeoService; answers from a fixed table and records calls"""

    def __init__(self, answers=None):
        self.answers = answers or {}
        self.calls = []

    def fetch_one(self, ip):
        self.calls.append(ip)
        answer = self.answers.get(ip)
        if answer is None:
            return Location.from_dict(location_payload(ip))
        return answer
