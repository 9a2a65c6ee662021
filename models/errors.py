"""
Error Model Module
Tagged error values shared by the store, the lookup client and the geolocator
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Kinds of failure a geolocation operation can report"""

    INITIALIZATION_FAULT = "initialization_fault"
    MALFORMED_STORE_FILE = "malformed_store_file"
    INVALID_ADDRESS = "invalid_address"
    API_DISABLED = "api_disabled"
    RESPONSE_PARSE_ERROR = "response_parse_error"
    TRANSPORT_ERROR = "transport_error"
    NOT_FOUND = "not_found"
    CORRUPT_ENTRY = "corrupt_entry"
    SAVE_FAILURE = "save_failure"


class GeoError(Exception):
    """
    A failed geolocation operation

    Per-address failures are returned as values next to successful
    Location results; they are only raised where startup must stop.
    """

    def __init__(self, kind, message, ip=None):
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message
        self.ip = ip

    def __repr__(self):
        return f"GeoError({self.kind.value!r}, {self.message!r}, ip={self.ip!r})"

    def to_dict(self):
        data = {"error": self.message, "kind": self.kind.value}
        if self.ip is not None:
            data["ip"] = self.ip
        return data


class StoreFormatError(GeoError):
    """Persisted cache file exists but is not one of the accepted JSON shapes"""

    def __init__(self, message, path=None):
        super().__init__(ErrorKind.MALFORMED_STORE_FILE, message)
        self.path = path


def is_error(result):
    """True when a lookup result is an error value rather than a Location"""
    return isinstance(result, GeoError)
