"""
Validation Utilities Module
Input validation functions for the geolocation cache
"""

import re

# Four dot-separated groups of 1-3 digits. Octet ranges are not checked,
# so "999.999.999.999" passes. Digits are ASCII only.
DOTTED_QUAD_PATTERN = re.compile(r'^\d{1,3}(\.\d{1,3}){3}$', re.ASCII)


def is_dotted_quad(address):
    """
    Check that a string has dotted-quad IPv4 shape

    Args:
        address: String to validate

    Returns:
        Boolean indicating if the string is four groups of 1-3 digits

    Example:
        >>> is_dotted_quad("8.8.8.8")
        True
        >>> is_dotted_quad("999.999.999.999")
        True
        >>> is_dotted_quad("999.1")
        False
    """
    if not isinstance(address, str):
        return False
    # re.match with $ would accept a trailing newline
    return DOTTED_QUAD_PATTERN.fullmatch(address) is not None
