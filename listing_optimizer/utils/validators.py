"""
ASIN validation
"""
from ..config import ASIN_PATTERN
from ..errors import InvalidAsin


def is_valid_asin(asin) -> bool:
    """True when ``asin`` is exactly 10 uppercase letters or digits"""
    return isinstance(asin, str) and ASIN_PATTERN.fullmatch(asin) is not None


def validate_asin(asin) -> str:
    if not is_valid_asin(asin):
        raise InvalidAsin("Invalid ASIN format. Must be 10 alphanumeric characters.")
    return asin
