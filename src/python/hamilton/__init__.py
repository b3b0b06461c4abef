"""
===============================================================================
HAMILTON - Quaternion Algebra Package
===============================================================================
Immutable quaternion value type with text round-tripping and tolerance-based
comparison, plus a small command-line front end.

Submodules:
    constants  -- tolerances and the canonical text format
    quaternion -- Quaternion value type, FormatError, DivisionByZero
    main       -- command-line entry point (``hamilton``)
===============================================================================
"""

from hamilton.constants import PRECISION
from hamilton.quaternion import (
    Quaternion, QuaternionError, FormatError, DivisionByZero
)

__version__ = '1.0.0'

__all__ = [
    'PRECISION', 'Quaternion', 'QuaternionError', 'FormatError',
    'DivisionByZero',
]
