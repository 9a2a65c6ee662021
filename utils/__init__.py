"""
Utils package
Utility functions and helpers
"""

from .validators import is_dotted_quad
from .helpers import (
    utcnow_iso,
    location_marker
)

__all__ = [
    'is_dotted_quad',
    'utcnow_iso',
    'location_marker'
]
