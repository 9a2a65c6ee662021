"""
Services package
Cache file storage, remote lookups and the geolocation cache
"""

from .store import GeoStore
from .geo import GeoService
from .geolocator import IpGeolocator
from .logparser import HubLogMonitor, parse_gossip_addresses, process_hub_log

__all__ = ['GeoStore', 'GeoService', 'IpGeolocator',
           'HubLogMonitor', 'parse_gossip_addresses', 'process_hub_log']
