"""
===============================================================================
HAMILTON - Numerical and Text-Format Constants
===============================================================================
Central repository for the tolerances and text-format definitions shared by
the quaternion value type and the command-line tool.

The canonical text form of a quaternion is

    <a>(+/-)<b>i(+/-)<c>j(+/-)<d>k

with every component printed to DISPLAY_DECIMALS decimal places.
===============================================================================
"""

import re


# =============================================================================
# NUMERICAL TOLERANCES
# =============================================================================
PRECISION = 1e-6                       # Absolute tolerance for equality / zero tests
HASH_DECIMALS = 6                      # Rounding applied before hashing (matches PRECISION)

# =============================================================================
# TEXT FORMAT
# =============================================================================
DISPLAY_DECIMALS = 2                   # Digits after the decimal point in to_string()
IMAGINARY_UNITS = ('i', 'j', 'k')      # Suffixes, in component order
EXPECTED_FORMAT = 'a(+/-)bi(+/-)cj(+/-)dk'

# One numeric token: optional minus, digits, optional fraction, optional unit.
# re.ASCII keeps \d to 0-9 only.
TOKEN_PATTERN = re.compile(r'(-?\d+(?:\.\d+)?)([ijk])?', re.ASCII)


def get_component_index(suffix) -> int:
    """
    Look up the component slot addressed by a token suffix.

    Args:
        suffix: None (real part) or one of 'i', 'j', 'k'

    Returns:
        Index into the (a, b, c, d) component array

    Raises:
        ValueError: If suffix is not recognized
    """
    if suffix is None:
        return 0
    if suffix not in IMAGINARY_UNITS:
        raise ValueError(f"Unknown unit: {suffix}. Valid: {list(IMAGINARY_UNITS)}")
    return IMAGINARY_UNITS.index(suffix) + 1
