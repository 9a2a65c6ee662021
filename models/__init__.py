"""
Models package
Location records and error values
"""

from .location import Location
from .errors import ErrorKind, GeoError, StoreFormatError, is_error

__all__ = ['Location', 'ErrorKind', 'GeoError', 'StoreFormatError', 'is_error']
