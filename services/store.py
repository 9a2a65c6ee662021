"""
Persistent Store Module
Reads and writes the IP -> Location cache file
"""

import json
import logging
from pathlib import Path

from models.errors import ErrorKind, StoreFormatError
from models.location import Location

logger = logging.getLogger(__name__)


class GeoStore:
    """
    JSON file adapter for the geolocation cache

    Two shapes are accepted on read:
        [{"1.2.3.4": {...}}, {"5.6.7.8": {...}}]   (array of single-key objects)
        {"1.2.3.4": {...}, "5.6.7.8": {...}}       (one flat object)
    Only the flat object shape is written.
    """

    def __init__(self, path):
        self.path = Path(path)

    def load(self):
        """
        Read the cache file into a new mapping

        Returns:
            Dict of IP -> Location, empty when the file does not exist

        Raises:
            StoreFormatError: file is not valid JSON or not an accepted shape
        """
        if not self.path.exists():
            logger.info("No GeoIP data file at %s, starting empty", self.path)
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise StoreFormatError(f"Invalid JSON in {self.path}: {e}", path=str(self.path)) from e

        if isinstance(data, list):
            pairs = self._pairs_from_array(data)
        elif isinstance(data, dict):
            pairs = data.items()
        else:
            raise StoreFormatError(
                f"Expected a JSON array or object in {self.path}, got {type(data).__name__}",
                path=str(self.path)
            )

        mapping = {}
        for raw_ip, payload in pairs:
            ip = raw_ip.strip()
            location = self._parse_entry(ip, payload)
            if location is None:
                continue
            logger.debug("Loaded %s -> %s,%s", ip, location.latitude, location.longitude)
            mapping[ip] = location

        logger.info("Loaded %d locations from %s", len(mapping), self.path)
        return mapping

    def save(self, mapping):
        """
        Write the mapping as a flat JSON object, 2-space indented

        Args:
            mapping: Dict of IP -> Location

        Returns:
            True on success, False if the write failed
        """
        payload = {ip: location.to_dict() for ip, location in mapping.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)
        except (OSError, TypeError, ValueError) as e:
            logger.error(
                "Error saving to file %s: %s", self.path, e,
                extra={"error_kind": ErrorKind.SAVE_FAILURE.value}
            )
            return False

        logger.info("Saved %d locations to %s", len(payload), self.path)
        return True

    def _pairs_from_array(self, records):
        for index, record in enumerate(records):
            if not isinstance(record, dict) or len(record) != 1:
                raise StoreFormatError(
                    f"Array element {index} in {self.path} is not a single-key object",
                    path=str(self.path)
                )
            yield next(iter(record.items()))

    @staticmethod
    def _parse_entry(ip, payload):
        if payload is None:
            logger.warning("Skipping %s: no location stored", ip)
            return None
        try:
            return Location.from_dict(payload)
        except (TypeError, ValueError) as e:
            logger.warning("Skipping %s: %s", ip, e)
            return None
