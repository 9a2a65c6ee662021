"""
Location Model Module
Geodata for a single IP address, as returned by ip2location.io
"""

from dataclasses import dataclass

_STRING_FIELDS = (
    "country_code",
    "country_name",
    "region_name",
    "city_name",
    "zip_code",
    "time_zone",
    "asn",
)


@dataclass(frozen=True)
class Location:
    """Location record for one IP, keyed on the wire by provider field names"""

    ip: str
    country_code: str = ""
    country_name: str = ""
    region_name: str = ""
    city_name: str = ""
    latitude: float = 0.0
    longitude: float = 0.0
    zip_code: str = ""
    time_zone: str = ""
    asn: str = ""
    as_name: str = ""  # "as" on the wire
    is_proxy: bool = False

    @classmethod
    def from_dict(cls, payload):
        """
        Build a Location from a decoded JSON object

        Args:
            payload: dict using provider field names ("as", not "as_name")

        Returns:
            Location

        Raises:
            TypeError: payload is not an object
            ValueError: coordinates are missing, not numeric or too large for a float
        """
        if not isinstance(payload, dict):
            raise TypeError(f"expected a JSON object, got {type(payload).__name__}")

        latitude = payload.get("latitude")
        longitude = payload.get("longitude")
        if latitude is None or longitude is None:
            raise ValueError("location is missing latitude/longitude")

        try:
            latitude = float(latitude)
            longitude = float(longitude)
        except OverflowError as e:
            # JSON integers have no size limit
            raise ValueError(f"coordinate out of range: {e}") from e

        strings = {
            name: "" if payload.get(name) is None else str(payload.get(name))
            for name in _STRING_FIELDS
        }
        return cls(
            ip=str(payload.get("ip") or ""),
            latitude=latitude,
            longitude=longitude,
            as_name="" if payload.get("as") is None else str(payload.get("as")),
            is_proxy=bool(payload.get("is_proxy", False)),
            **strings,
        )

    def to_dict(self):
        """Wire/disk form of this record"""
        return {
            "ip": self.ip,
            "country_code": self.country_code,
            "country_name": self.country_name,
            "region_name": self.region_name,
            "city_name": self.city_name,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "zip_code": self.zip_code,
            "time_zone": self.time_zone,
            "asn": self.asn,
            "as": self.as_name,
            "is_proxy": self.is_proxy,
        }
