"""
===============================================================================
HAMILTON - Quaternion Value Type
===============================================================================

Immutable quaternion numbers with the basic algebra of the division ring H:

    q = a + b*i + c*j + d*k,        i^2 = j^2 = k^2 = ijk = -1

where a is the real part and (b, c, d) are the imaginary parts. Unlike an
attitude quaternion, a value of this type is never normalized: the four
components are stored exactly as given and every operation returns a new
instance.

Text Format
-----------
The canonical form written by ``to_string()`` is

    -1.00-2.00i+3.00j-4.00k

Each component is printed with two decimals. The sign placed in front of an
imaginary part is decided on the unrounded value, so 0.001 prints as
``+0.00i`` while -0.001 prints as ``-0.00i``. ``parse()`` accepts this form
and anything else from which signed, optionally suffixed decimal tokens can
be scanned.

Tolerance
---------
``is_zero()`` and equality compare against the absolute tolerance
``PRECISION = 1e-6``. Equality is symmetric: each pair of components must
satisfy |lhs - rhs| < PRECISION.

References
----------
    [1] Kuipers, "Quaternions and Rotation Sequences", Princeton, 1999.
    [2] Hamilton, "On Quaternions", Philosophical Magazine, 1844.

===============================================================================
"""

import logging
import math
import numbers
from decimal import Decimal, ROUND_HALF_UP, localcontext
from typing import Union

import numpy as np

from hamilton.constants import (
    PRECISION, HASH_DECIMALS, DISPLAY_DECIMALS, IMAGINARY_UNITS,
    EXPECTED_FORMAT, TOKEN_PATTERN, get_component_index
)

logger = logging.getLogger(__name__)


# =============================================================================
# ERRORS
# =============================================================================

class QuaternionError(Exception):
    """Base class for all errors raised by quaternion operations."""


class FormatError(QuaternionError, ValueError):
    """
    Raised when a string cannot be converted to a quaternion.

    Attributes
    ----------
    text : str
        The offending input.
    expected : str
        Shape of the canonical text form.
    """

    def __init__(self, text, expected: str = EXPECTED_FORMAT) -> None:
        self.text = text
        self.expected = expected
        super().__init__(
            f"Cannot extract quaternion components from {text!r}. "
            f"Expected: {expected}"
        )

    def __reduce__(self):
        return (type(self), (self.text, self.expected))


class DivisionByZero(QuaternionError, ZeroDivisionError):
    """
    Raised when inverting or dividing by a zero quaternion.

    Attributes
    ----------
    dividend : Quaternion or None
        Left operand of the division, None when raised by ``inverse()``.
    divisor : Quaternion
        The (near-)zero quaternion.
    """

    def __init__(self, message: str, divisor: 'Quaternion',
                 dividend: 'Quaternion' = None) -> None:
        self.divisor = divisor
        self.dividend = dividend
        super().__init__(message)

    def __reduce__(self):
        return (type(self), (self.args[0], self.divisor, self.dividend))


def _format_component(value: float) -> str:
    """
    Format one component with DISPLAY_DECIMALS decimals.

    Rounds half-up on the shortest decimal representation of the double,
    so 0.005 -> '0.01' and 0.125 -> '0.13'. Negative values that round to
    zero keep their sign ('-0.00').
    """
    if not math.isfinite(value):
        return f"{value:.{DISPLAY_DECIMALS}f}"

    quantum = Decimal(1).scaleb(-DISPLAY_DECIMALS)
    with localcontext() as ctx:
        # Wide enough for the integer digits of any finite double
        ctx.prec = 400
        rounded = Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{rounded:f}"


class Quaternion:
    """
    Immutable quaternion a + b*i + c*j + d*k.

    Attributes
    ----------
    components : np.ndarray
        Copy of the component array [a, b, c, d].

    Examples
    --------
    >>> i = Quaternion(0.0, 1.0, 0.0, 0.0)
    >>> j = Quaternion(0.0, 0.0, 1.0, 0.0)
    >>> i.times(j).to_string()
    '0.000.00i0.00j+1.00k'
    >>> Quaternion.parse('-1-2i+3j-4k')
    Quaternion(a=-1.0, b=-2.0, c=3.0, d=-4.0)
    """

    __slots__ = ('_q',)

    PRECISION = PRECISION

    # numpy scalars defer to __rmul__ instead of broadcasting
    __array_ufunc__ = None

    def __init__(self, a: float, b: float, c: float, d: float) -> None:
        """
        Store the four components verbatim.

        Parameters
        ----------
        a : float
            Real part.
        b : float
            Imaginary part i.
        c : float
            Imaginary part j.
        d : float
            Imaginary part k.
        """
        q = np.array([a, b, c, d], dtype=np.float64)
        q.flags.writeable = False
        object.__setattr__(self, '_q', q)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__} is immutable")

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    def real_part(self) -> float:
        """Real part a."""
        return float(self._q[0])

    def i_part(self) -> float:
        """Imaginary part i (coefficient b)."""
        return float(self._q[1])

    def j_part(self) -> float:
        """Imaginary part j (coefficient c)."""
        return float(self._q[2])

    def k_part(self) -> float:
        """Imaginary part k (coefficient d)."""
        return float(self._q[3])

    @property
    def components(self) -> np.ndarray:
        """
        Full quaternion as a 4-element numpy array [a, b, c, d].

        Returns
        -------
        np.ndarray
            Writable copy of the internal component array.
        """
        return self._q.copy()

    # =========================================================================
    # TEXT CONVERSION
    # =========================================================================

    def to_string(self) -> str:
        """
        Convert the quaternion to its canonical text form.

        The real part carries only its own sign. An imaginary part is
        prefixed with '+' when its unrounded value is strictly positive;
        otherwise the sign produced by the number formatting is used.

        Returns
        -------
        str
            String of the form "a+bi+cj+dk" without brackets or spaces,
            e.g. "-1.00-2.00i+3.00j-4.00k".
        """
        parts = [_format_component(self.real_part())]
        for value, unit in zip(self._q[1:], IMAGINARY_UNITS):
            text = _format_component(float(value)) + unit
            if value > 0:
                text = '+' + text
            parts.append(text)
        return ''.join(parts)

    @classmethod
    def parse(cls, s: str) -> 'Quaternion':
        """
        Convert a string to a quaternion. Reverse of ``to_string()``.

        Every token matching an optional minus sign, digits, an optional
        fraction and an optional unit letter is read from left to right.
        A token without a unit sets the real part, a token ending in i, j
        or k sets that imaginary part. Missing components are 0.0 and a
        component given more than once keeps its last value. Characters
        that do not form a token ('+', spaces, brackets...) are skipped.

        Parameters
        ----------
        s : str
            Text such as produced by ``to_string()``, e.g. "-1-2i+3j-4k".

        Returns
        -------
        Quaternion
            The quaternion represented by s.

        Raises
        ------
        FormatError
            If s is not a string, contains no token at all, or a token
            cannot be converted to a float.
        """
        if not isinstance(s, str):
            raise FormatError(s)

        values = [0.0, 0.0, 0.0, 0.0]
        matched = False
        try:
            for match in TOKEN_PATTERN.finditer(s):
                number, unit = match.groups()
                values[get_component_index(unit)] = float(number)
                matched = True
        except ValueError as exc:
            raise FormatError(s) from exc

        if not matched:
            logger.debug("No quaternion tokens found in %r", s)
            raise FormatError(s)

        logger.debug("Parsed %r as %s", s, values)
        return cls(*values)

    value_of = parse

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        """
        Unambiguous representation for debugging.

        Format: Quaternion(a=..., b=..., c=..., d=...)
        """
        return (f"Quaternion(a={self.real_part()!r}, b={self.i_part()!r}, "
                f"c={self.j_part()!r}, d={self.k_part()!r})")

    # =========================================================================
    # PREDICATES
    # =========================================================================

    def is_zero(self) -> bool:
        """
        Test whether the quaternion is zero.

        Returns
        -------
        bool
            True if the real part and all imaginary parts are within
            PRECISION of zero.
        """
        return bool(np.all(np.abs(self._q) < PRECISION))

    # =========================================================================
    # QUATERNION ARITHMETIC
    # =========================================================================

    def conjugate(self) -> 'Quaternion':
        """
        Conjugate of the quaternion.

            conjugate(a + bi + cj + dk) = a - bi - cj - dk

        Returns
        -------
        Quaternion
            The conjugate quaternion.
        """
        a, b, c, d = self._q
        return Quaternion(a, -b, -c, -d)

    def opposite(self) -> 'Quaternion':
        """
        Opposite (additive inverse) of the quaternion.

            opposite(a + bi + cj + dk) = -a - bi - cj - dk
        """
        a, b, c, d = -self._q
        return Quaternion(a, b, c, d)

    def plus(self, q: 'Quaternion') -> 'Quaternion':
        """
        Component-wise sum of two quaternions.

        Parameters
        ----------
        q : Quaternion
            Addend.

        Returns
        -------
        Quaternion
            self + q.
        """
        a, b, c, d = self._q + q._q
        return Quaternion(a, b, c, d)

    def minus(self, q: 'Quaternion') -> 'Quaternion':
        """
        Component-wise difference, equal to ``self.plus(q.opposite())``.

        Parameters
        ----------
        q : Quaternion
            Subtrahend.

        Returns
        -------
        Quaternion
            self - q.
        """
        a, b, c, d = self._q - q._q
        return Quaternion(a, b, c, d)

    def times(self, other: Union['Quaternion', float, int]) -> 'Quaternion':
        """
        Multiply by another quaternion (Hamilton product) or by a real.

        Quaternion multiplication is NOT commutative: in general
        p.times(q) != q.times(p). The Hamilton product formula is:

            (a1 + b1*i + c1*j + d1*k) * (a2 + b2*i + c2*j + d2*k) =

            (a1*a2 - b1*b2 - c1*c2 - d1*d2) +
            (a1*b2 + b1*a2 + c1*d2 - d1*c2) i +
            (a1*c2 - b1*d2 + c1*a2 + d1*b2) j +
            (a1*d2 + b1*c2 - c1*b2 + d1*a2) k

        A real coefficient r scales every component.

        Parameters
        ----------
        other : Quaternion or float
            Right-hand factor.

        Returns
        -------
        Quaternion
            self * other.

        Raises
        ------
        TypeError
            If other is neither a Quaternion nor a real number.
        """
        if isinstance(other, Quaternion):
            a1, b1, c1, d1 = self._q
            a2, b2, c2, d2 = other._q

            x = a1 * a2 - b1 * b2 - c1 * c2 - d1 * d2
            y = a1 * b2 + b1 * a2 + c1 * d2 - d1 * c2
            z = a1 * c2 - b1 * d2 + c1 * a2 + d1 * b2
            w = a1 * d2 + b1 * c2 - c1 * b2 + d1 * a2
            return Quaternion(x, y, z, w)

        if isinstance(other, numbers.Real):
            a, b, c, d = self._q * float(other)
            return Quaternion(a, b, c, d)

        raise TypeError(
            f"Cannot multiply Quaternion by {type(other).__name__}"
        )

    def inverse(self) -> 'Quaternion':
        """
        Multiplicative inverse of the quaternion.

            1 / (a + bi + cj + dk) = (a - bi - cj - dk) / n,
            n = a^2 + b^2 + c^2 + d^2

        Note that n is the squared norm.

        Returns
        -------
        Quaternion
            q^-1 such that q * q^-1 = 1.

        Raises
        ------
        DivisionByZero
            If the quaternion is zero within PRECISION.
        """
        if self.is_zero():
            logger.debug("Refusing to invert zero quaternion %s", self)
            raise DivisionByZero(f"Cannot invert zero quaternion: {self}", divisor=self)

        norm_sq = np.dot(self._q, self._q)
        a, b, c, d = self._q
        return Quaternion(a / norm_sq, -b / norm_sq, -c / norm_sq, -d / norm_sq)

    def divide_by_right(self, q: 'Quaternion') -> 'Quaternion':
        """
        Right quotient: multiplication by the inverse on the right.

        Parameters
        ----------
        q : Quaternion
            Right divisor.

        Returns
        -------
        Quaternion
            self * inverse(q).

        Raises
        ------
        DivisionByZero
            If q is zero within PRECISION.
        """
        if q.is_zero():
            raise DivisionByZero(
                f"Division by zero: cannot compute {self}/{q}",
                divisor=q, dividend=self
            )
        return self.times(q.inverse())

    def divide_by_left(self, q: 'Quaternion') -> 'Quaternion':
        """
        Left quotient: multiplication by the inverse on the left.

        Parameters
        ----------
        q : Quaternion
            Left divisor.

        Returns
        -------
        Quaternion
            inverse(q) * self.

        Raises
        ------
        DivisionByZero
            If q is zero within PRECISION.
        """
        try:
            return q.inverse().times(self)
        except DivisionByZero as exc:
            raise DivisionByZero(
                f"Division by zero: cannot compute {self}/{q}",
                divisor=q, dividend=self
            ) from exc

    def dot_mult(self, q: 'Quaternion') -> 'Quaternion':
        """
        Dot product (p * conjugate(q) + q * conjugate(p)) / 2.

        The imaginary parts of the result vanish mathematically; any
        floating-point residue is kept as computed.

        Parameters
        ----------
        q : Quaternion
            Second factor.

        Returns
        -------
        Quaternion
            Quaternion whose real part is the Euclidean dot product.
        """
        return self.times(q.conjugate()).plus(q.times(self.conjugate())).times(0.5)

    def norm(self) -> float:
        """
        Euclidean norm sqrt(a^2 + b^2 + c^2 + d^2).

        Returns
        -------
        float
            Norm of the quaternion.
        """
        return float(np.sqrt(np.dot(self._q, self._q)))

    # =========================================================================
    # EQUALITY AND HASHING
    # =========================================================================

    def equals(self, q: object) -> bool:
        """
        Equality within tolerance.

        Two quaternions are equal when every pair of components differs by
        less than PRECISION in absolute value. The comparison is symmetric.

        Parameters
        ----------
        q : object
            Object to compare against.

        Returns
        -------
        bool
            True if q is a Quaternion equal to self.
        """
        if not isinstance(q, Quaternion):
            return False
        return bool(np.all(np.abs(self._q - q._q) < PRECISION))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        """
        Hash based on components rounded to HASH_DECIMALS.

        Equal quaternions hash equally when their components fall in the
        same rounding bucket, which always holds for bit-identical values.
        Two components within PRECISION of each other may still straddle
        a bucket boundary.
        """
        # + 0.0 folds -0.0 into 0.0
        rounded = np.round(self._q, decimals=HASH_DECIMALS) + 0.0
        return hash(tuple(float(x) for x in rounded))

    # =========================================================================
    # OPERATOR OVERLOADS
    # =========================================================================

    def __add__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.plus(other)
        return NotImplemented

    def __sub__(self, other: 'Quaternion') -> 'Quaternion':
        if isinstance(other, Quaternion):
            return self.minus(other)
        return NotImplemented

    def __mul__(self, other: Union['Quaternion', float, int]) -> 'Quaternion':
        """
        Multiplication operator.

        - Quaternion * Quaternion -> Hamilton product
        - Quaternion * scalar -> component-wise scaling

        There is no division operator; use
        ``divide_by_right`` or ``divide_by_left``.
        """
        if isinstance(other, (Quaternion, numbers.Real)):
            return self.times(other)
        return NotImplemented

    def __rmul__(self, other: Union[float, int]) -> 'Quaternion':
        """Right-multiplication by a scalar: scalar * Quaternion."""
        if isinstance(other, numbers.Real):
            return self.times(other)
        return NotImplemented

    def __neg__(self) -> 'Quaternion':
        return self.opposite()

    def __abs__(self) -> float:
        return self.norm()

    # =========================================================================
    # COPYING
    # =========================================================================

    def clone(self) -> 'Quaternion':
        """Return an independent copy with identical components."""
        a, b, c, d = self._q
        return Quaternion(a, b, c, d)

    def __copy__(self) -> 'Quaternion':
        return self.clone()

    def __deepcopy__(self, memo) -> 'Quaternion':
        return self.clone()

    def __reduce__(self):
        return (Quaternion, tuple(float(x) for x in self._q))
