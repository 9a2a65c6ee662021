"""
Geolocator Module
In-memory IP -> Location cache backed by a JSON file, with optional
fall-through to the remote lookup API
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor

from config import Config
from models.errors import ErrorKind, GeoError
from services.geo import GeoService
from services.store import GeoStore

logger = logging.getLogger(__name__)


class IpGeolocator:
    """
    Geolocation cache

    With enable_api=False every answer comes from the loaded mapping and
    misses are NOT_FOUND. With enable_api=True misses are fetched through
    the GeoService and merged into the mapping.

    Construction does not raise for a missing credential; check
    has_error() before using the instance.
    """

    def __init__(self, data_file_path=None, enable_api=True, client=None, max_concurrency=None):
        self.data_file_path = data_file_path or Config.GEOIP_DATA_FILE
        self.enable_api = enable_api
        self.max_concurrency = max_concurrency
        self._store = GeoStore(self.data_file_path)
        self._locations = {}
        self._client = client

        self._err = self._load()

    def has_error(self):
        return self._err is not None

    def get_error(self):
        return self._err

    def _load(self):
        api_key = ''
        if self.enable_api:
            api_key = Config.get_api_key()
            if not api_key:
                return GeoError(
                    ErrorKind.INITIALIZATION_FAULT,
                    f"{Config.GEOIP_API_KEY_ENV} environment variable not set"
                )

        if self._client is None:
            self._client = GeoService(api_key=api_key, enable_api=self.enable_api)

        # StoreFormatError propagates: a corrupt cache file stops startup
        self._locations = self._store.load()
        return None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def lookup(self, ip):
        """
        Resolve one IP address

        Args:
            ip: IP string, used as-is (not trimmed)

        Returns:
            Location, or GeoError describing why none is available
        """
        return await self._lookup(ip, None)

    async def _lookup(self, ip, executor):
        if ip in self._locations:
            location = self._locations[ip]
            if location is None:
                return GeoError(ErrorKind.CORRUPT_ENTRY, 'Failed to get location', ip=ip)
            return location

        if not self.enable_api:
            return GeoError(ErrorKind.NOT_FOUND, 'Failed to get location', ip=ip)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(executor, self._client.fetch_one, ip)
        if not isinstance(result, GeoError):
            self._update(ip, result)
        return result

    async def lookup_all(self, ip_addresses):
        """
        Resolve a batch concurrently

        Every address gets its own worker thread unless max_concurrency
        is set. Results are aligned with the input; a failure at one
        position does not affect the others.
        """
        ip_addresses = list(ip_addresses)
        if not ip_addresses:
            return []

        workers = min(self.max_concurrency or len(ip_addresses), len(ip_addresses))
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="geoip-lookup")
        try:
            if self.max_concurrency:
                semaphore = asyncio.Semaphore(self.max_concurrency)

                async def bounded(ip):
                    async with semaphore:
                        return await self._lookup(ip, executor)

                tasks = [bounded(ip) for ip in ip_addresses]
            else:
                tasks = [self._lookup(ip, executor) for ip in ip_addresses]

            results = await asyncio.gather(*tasks, return_exceptions=True)
        finally:
            executor.shutdown(wait=False)

        return [self._as_result(ip, result) for ip, result in zip(ip_addresses, results)]

    async def merge_and_lookup(self, ip_addresses):
        """
        Fetch every address not yet cached

        Returns:
            Set of all IP keys known after the merge
        """
        # dict.fromkeys drops repeats within the batch, keeping first-seen order
        to_lookup = [ip for ip in dict.fromkeys(ip_addresses) if ip not in self._locations]

        if to_lookup and self.enable_api:
            logger.info("Looking up %d new addresses", len(to_lookup))
            results = await self.lookup_all(to_lookup)
            failed = sum(1 for result in results if isinstance(result, GeoError))
            if failed:
                logger.warning("%d of %d lookups failed", failed, len(results))

        return set(self._locations)

    def size(self):
        return len(self._locations)

    def __len__(self):
        return self.size()

    def keys(self):
        return iter(self._locations.keys())

    def entries(self):
        return iter(self._locations.items())

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self):
        """Flush the mapping to the data file; failures are logged, not raised"""
        return self._store.save(self._locations)

    def _update(self, ip, location):
        self._locations[ip] = location

    @staticmethod
    def _as_result(ip, result):
        if isinstance(result, GeoError):
            return result
        if isinstance(result, Exception):
            # unexpected errors stay confined to their own position
            logger.error("Unexpected lookup failure for %s: %r", ip, result)
            return GeoError(ErrorKind.TRANSPORT_ERROR, str(result), ip=ip)
        return result
