#!/usr/bin/env python3
#
# Copyright 2022 Max Planck Insitute Magdeburg
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
#
#
"""
Exact rational arithmetic with fixed-width (32-bit) numerator and denominator.

Unlike fractions.Fraction, an ExactRational never grows beyond 32-bit
components. Arithmetic is carried out on unbounded Python ints, reduced by
the GCD and, if the result still does not fit, both components are halved
until it does. That last step loses accuracy and is reported with a
RationalOverflowWarning.

Three sentinel encodings extend the field:

    (0, 0)   NaN
    (1, 0)   +Infinity
    (-1, 0)  -Infinity

They fall out of the ordinary cross-multiplication formulas, e.g. dividing
by zero yields a signed infinity and 0/0 yields NaN.
"""

import logging
import math
import numbers
import operator
import re
import sys
import warnings
from fractions import Fraction
from typing import Callable, Optional, Tuple

from ..errors import FormatError, RationalOverflowWarning
from ..names import (INT32_MIN, INT32_MAX, INT64_MAX, FLOAT_CONVERSION_LIMIT, ZERO_TOLERANCE, NAN_TOKEN,
                     POS_INF_TOKEN, NEG_INF_TOKEN)

LOG = logging.getLogger(__name__)

_FRACTIONAL_FORM = re.compile(r'\s*(-)?\s*(0|[1-9][0-9]*)\s*(?:/\s*(0|[1-9][0-9]*)\s*)?')
_DECIMAL_FORM = re.compile(r'\s*(-)?\s*(0|[1-9][0-9]*)\s*(?:\.\s*([0-9]+)\s*)?')


def _sign(x: int) -> int:
    return (x > 0) - (x < 0)


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero"""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def _overflown(n: int, d: int) -> bool:
    return not (INT32_MIN <= n <= INT32_MAX and INT32_MIN <= d <= INT32_MAX)


_overflow_handler = None


def set_overflow_handler(handler: Optional[Callable[[int, int], None]]):
    """
    Register a callback for lossy downscales.

    The handler is called with the reduced wide numerator and denominator
    every time an operation has to scale an ExactRational down, alongside the
    RationalOverflowWarning. Pass None to remove it.

    Returns:
        The previously registered handler
    """
    global _overflow_handler
    previous, _overflow_handler = _overflow_handler, handler
    return previous


def _report_overflow(n: int, d: int, stacklevel: int):
    LOG.debug('Scaling down rational %d/%d to fit 32-bit components.', n, d)
    if _overflow_handler is not None:
        _overflow_handler(n, d)
    # warn_explicit with a fresh registry reports repeated identical overflows every time
    frame = sys._getframe(stacklevel)
    warnings.warn_explicit(f"ExactRational {n}/{d} overflows 32-bit components and is scaled down, "
                           "which loses accuracy.",
                           RationalOverflowWarning,
                           frame.f_code.co_filename,
                           frame.f_lineno,
                           module=frame.f_globals.get('__name__'),
                           registry={},
                           module_globals=frame.f_globals)


def _normalize(n: int, d: int, warn: bool = True, stacklevel: int = 4) -> Tuple[int, int]:
    """
    Bring a wide numerator/denominator pair into canonical 32-bit form.

    stacklevel counts the frames from _report_overflow up to the user code the
    warning is attributed to.
    """
    if d == 0:
        return _sign(n), 0
    if d < 0:
        n, d = -n, -d
    g = math.gcd(n, d)
    n, d = n // g, d // g
    if _overflown(n, d):
        if warn:
            _report_overflow(n, d, stacklevel)
        while _overflown(n, d):
            n, d = _trunc_div(n, 2), _trunc_div(d, 2)
        if d == 0:
            return _sign(n), 0
        g = math.gcd(n, d)
        n, d = n // g, d // g
    return n, d


def _accumulate(digits: str) -> Tuple[int, int]:
    """Read decimal digits into a value bounded by the 64-bit range.

    Returns:
        (value, consumed): the accumulated value and how many digits fit
    """
    value = 0
    for i, ch in enumerate(digits):
        digit = ord(ch) - ord('0')
        if value > (INT64_MAX - digit) // 10:
            return value, i
        value = value * 10 + digit
    return value, len(digits)


class ExactRational:
    """
    Reduced fraction with 32-bit components and NaN/Infinity sentinels.

    Instances are immutable. Operators accept ExactRational and int operands;
    floats must be converted explicitly with ExactRational.from_float.
    """

    __slots__ = ('_numerator', '_denominator')

    def __init__(self, numerator=0, denominator=1):
        """
        Args:
            numerator: integer numerator, or an ExactRational to copy
            denominator: integer denominator; a negative value flips both signs
        """
        if isinstance(numerator, ExactRational) and denominator == 1:
            self._numerator, self._denominator = numerator._numerator, numerator._denominator
            return
        self._numerator, self._denominator = _normalize(operator.index(numerator), operator.index(denominator),
                                                        stacklevel=3)

    @classmethod
    def _from_wide(cls, numerator: int, denominator: int, warn: bool = True) -> 'ExactRational':
        result = cls.__new__(cls)
        result._numerator, result._denominator = _normalize(numerator, denominator, warn)
        return result

    # -------------------------------------------------------------------------
    # Components and predicates
    # -------------------------------------------------------------------------

    @property
    def numerator(self) -> int:
        return self._numerator

    @property
    def denominator(self) -> int:
        return self._denominator

    @property
    def is_zero(self) -> bool:
        return self._numerator == 0 and self._denominator != 0

    @property
    def is_nan(self) -> bool:
        return self._numerator == 0 and self._denominator == 0

    @property
    def is_infinity(self) -> bool:
        return self._numerator != 0 and self._denominator == 0

    @property
    def is_positive_infinity(self) -> bool:
        return self._numerator == 1 and self._denominator == 0

    @property
    def is_negative_infinity(self) -> bool:
        return self._numerator == -1 and self._denominator == 0

    @property
    def is_finite(self) -> bool:
        return self._denominator != 0

    @property
    def sign(self) -> int:
        return _sign(self._numerator)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    @staticmethod
    def _coerce(value) -> Optional['ExactRational']:
        if isinstance(value, ExactRational):
            return value
        if isinstance(value, numbers.Integral):
            return ExactRational(int(value))
        return None

    def __add__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ExactRational._from_wide(self._numerator * other._denominator + other._numerator * self._denominator,
                                        self._denominator * other._denominator)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ExactRational._from_wide(self._numerator * other._denominator - other._numerator * self._denominator,
                                        self._denominator * other._denominator)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ExactRational._from_wide(self._numerator * other._numerator, self._denominator * other._denominator)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ExactRational._from_wide(self._numerator * other._denominator, self._denominator * other._numerator)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other / self

    def __mod__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self - math.trunc(self / other) * other

    def __rmod__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other % self

    def __neg__(self) -> 'ExactRational':
        return ExactRational._from_wide(-self._numerator, self._denominator)

    def __pos__(self) -> 'ExactRational':
        return self

    def __abs__(self) -> 'ExactRational':
        return ExactRational._from_wide(abs(self._numerator), self._denominator)

    def __pow__(self, exponent) -> 'ExactRational':
        """Integer power by square-and-multiply; a negative exponent inverts first."""
        exponent = operator.index(exponent)
        base = self
        if exponent < 0:
            base = ExactRational._from_wide(self._denominator, self._numerator)
            exponent = -exponent
        result = ExactRational.ONE
        while exponent > 0:
            if exponent % 2 == 1:
                result = result * base
            base = base * base
            exponent //= 2
        return result

    def invert(self) -> 'ExactRational':
        return ExactRational._from_wide(self._denominator, self._numerator)

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare_to(self, other) -> int:
        """Compare by cross multiplication: -1 if less, 0 if equal, 1 if greater.

        NaN is not treated specially here, only in equality.
        """
        rational = self._coerce(other)
        if rational is None:
            raise TypeError(f"Cannot compare ExactRational with {type(other).__name__}")
        other = rational
        return _sign(self._numerator * other._denominator - other._numerator * self._denominator)

    def __eq__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        if self.is_nan:
            return False
        return self._numerator == other._numerator and self._denominator == other._denominator

    def __hash__(self):
        if self._denominator == 0:
            return hash((self._numerator, self._denominator))
        return hash(Fraction(self._numerator, self._denominator))

    def __lt__(self, other):
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) < 0

    def __le__(self, other):
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) <= 0

    def __gt__(self, other):
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) > 0

    def __ge__(self, other):
        if self._coerce(other) is None:
            return NotImplemented
        return self.compare_to(other) >= 0

    def __bool__(self) -> bool:
        return not self.is_zero

    # -------------------------------------------------------------------------
    # Rounding
    # -------------------------------------------------------------------------

    def __floor__(self) -> 'ExactRational':
        if not self.is_finite:
            return self
        return ExactRational(self._numerator // self._denominator)

    def __ceil__(self) -> 'ExactRational':
        if not self.is_finite:
            return self
        return ExactRational(-(-self._numerator // self._denominator))

    def __trunc__(self) -> 'ExactRational':
        if not self.is_finite:
            return self
        return ExactRational(_trunc_div(self._numerator, self._denominator))

    def __round__(self, ndigits=None) -> 'ExactRational':
        """Round half up, to an integer or to ndigits decimal places."""
        if not self.is_finite:
            return self
        scale = 10**ndigits if ndigits and ndigits > 0 else 1
        rounded = (2 * self._numerator * scale + self._denominator) // (2 * self._denominator)
        return ExactRational._from_wide(rounded, scale)

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def __float__(self) -> float:
        if self._denominator == 0:
            return math.nan if self._numerator == 0 else math.copysign(math.inf, self._numerator)
        return self._numerator / self._denominator

    def __int__(self) -> int:
        if self.is_nan:
            return 0
        if self.is_positive_infinity:
            return INT32_MAX
        if self.is_negative_infinity:
            return INT32_MIN
        return _trunc_div(self._numerator, self._denominator)

    def to_fraction(self) -> Fraction:
        if not self.is_finite:
            raise ValueError(f"{self} has no Fraction representation")
        return Fraction(self._numerator, self._denominator)

    @classmethod
    def from_fraction(cls, value: Fraction) -> 'ExactRational':
        return cls._from_wide(value.numerator, value.denominator)

    @classmethod
    def from_float(cls, value: float) -> 'ExactRational':
        """
        Closest binary fraction of a float that fits the fixed-width representation.

        Numerator and denominator are doubled while the value still has a
        fractional part and both stay below int64_max / 2. Values outside the
        32-bit range map to the infinity sentinels, NaN maps to NaN.
        """
        x = float(value)
        if math.isnan(x):
            return cls.NAN
        if x > INT32_MAX:
            return cls.POSITIVE_INFINITY
        if x < INT32_MIN:
            return cls.NEGATIVE_INFINITY

        negative = x < 0
        if negative:
            x = -x
        d = 1
        while x - math.floor(x) >= ZERO_TOLERANCE and x <= FLOAT_CONVERSION_LIMIT and d <= FLOAT_CONVERSION_LIMIT:
            x *= 2
            d *= 2
        n = round(x)
        return cls._from_wide(-n if negative else n, d, warn=False)

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> 'ExactRational':
        """
        Parse fractional ("-3/4") or decimal ("-0.75") text.

        The fractional grammar is tried first. Empty text is zero and the
        tokens NaN, Infinity and -Infinity map to the sentinels.

        Raises:
            FormatError: if neither grammar matches
        """
        if not isinstance(text, str):
            raise FormatError(f"Expected text, got {type(text).__name__}")
        token = text.strip()
        if not token:
            return cls.ZERO
        if token == NAN_TOKEN:
            return cls.NAN
        if token == POS_INF_TOKEN:
            return cls.POSITIVE_INFINITY
        if token == NEG_INF_TOKEN:
            return cls.NEGATIVE_INFINITY

        match = _FRACTIONAL_FORM.fullmatch(text)
        if match:
            return cls._parse_fractional(*match.groups())
        match = _DECIMAL_FORM.fullmatch(text)
        if match:
            return cls._parse_decimal(*match.groups())
        raise FormatError(f"Invalid rational number: {text!r}", text)

    @classmethod
    def try_parse(cls, text: str, default=None):
        """Parse text, returning default instead of raising on malformed input."""
        try:
            return cls.parse(text)
        except FormatError:
            return default

    @classmethod
    def _parse_fractional(cls, minus: Optional[str], num_digits: str, den_digits: Optional[str]) -> 'ExactRational':
        sign = -1 if minus else 1
        numerator, num_used = _accumulate(num_digits)
        if den_digits is None:
            if num_used < len(num_digits):
                return cls.NEGATIVE_INFINITY if minus else cls.POSITIVE_INFINITY
            return cls._from_wide(sign * numerator, 1, warn=False)

        denominator, den_used = _accumulate(den_digits)
        # digits beyond the 64-bit range are dropped; rescale the other side by the same power of ten
        delta = (len(num_digits) - num_used) - (len(den_digits) - den_used)
        if delta > 0:
            denominator //= 10**delta
        elif delta < 0:
            numerator //= 10**-delta
        return cls._from_wide(sign * numerator, denominator, warn=False)

    @classmethod
    def _parse_decimal(cls, minus: Optional[str], int_digits: str, frac_digits: Optional[str]) -> 'ExactRational':
        sign = -1 if minus else 1
        numerator, used = _accumulate(int_digits)
        if used < len(int_digits):
            return cls.NEGATIVE_INFINITY if minus else cls.POSITIVE_INFINITY
        denominator = 1
        for ch in frac_digits or '':
            digit = ord(ch) - ord('0')
            if numerator > (INT64_MAX - digit) // 10 or denominator > INT64_MAX // 10:
                break
            numerator = numerator * 10 + digit
            denominator *= 10
        return cls._from_wide(sign * numerator, denominator, warn=False)

    def __str__(self) -> str:
        return self.__format__('')

    def __format__(self, format_spec: str) -> str:
        if self.is_nan:
            return NAN_TOKEN
        if self.is_positive_infinity:
            return POS_INF_TOKEN
        if self.is_negative_infinity:
            return NEG_INF_TOKEN
        if self._denominator == 1:
            return format(self._numerator, format_spec)
        return f"{format(self._numerator, format_spec)}/{format(self._denominator, format_spec)}"

    def __repr__(self) -> str:
        return f"ExactRational({self._numerator}, {self._denominator})"


ExactRational.ZERO = ExactRational(0, 1)
ExactRational.ONE = ExactRational(1, 1)
ExactRational.NAN = ExactRational._from_wide(0, 0)
ExactRational.POSITIVE_INFINITY = ExactRational._from_wide(1, 0)
ExactRational.NEGATIVE_INFINITY = ExactRational._from_wide(-1, 0)


# =============================================================================
# Interpolation helpers
# =============================================================================


def clamp(value: ExactRational, minimum: ExactRational, maximum: ExactRational) -> ExactRational:
    if value < minimum:
        return minimum
    if value > maximum:
        return maximum
    return value


def clamp01(value: ExactRational) -> ExactRational:
    if value.numerator < 0:
        return ExactRational.ZERO
    if value.numerator > value.denominator:
        return ExactRational.ONE
    return value


def lerp(a: ExactRational, b: ExactRational, t: ExactRational) -> ExactRational:
    return a + (b - a) * clamp01(t)


def lerp_unclamped(a: ExactRational, b: ExactRational, t: ExactRational) -> ExactRational:
    return a + (b - a) * t


def repeat(t: ExactRational, length: ExactRational) -> ExactRational:
    """Wrap t into the interval [0, length]."""
    return clamp(t - math.floor(t / length) * length, ExactRational.ZERO, length)


def ping_pong(t: ExactRational, length: ExactRational) -> ExactRational:
    """Move t back and forth between 0 and length."""
    t = repeat(t, 2 * length)
    return length - abs(t - length)
