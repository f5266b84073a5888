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
Complex numbers with polar helpers and a compact text form.

The text form uses an engineering-style imaginary unit:

    0        zero
    1.5      real only
    j2.0     imaginary only
    -j2.0
    1.5 + j2.0
    1.5 - j2.0

Transcendental functions are composed from exp and log.
"""

import math
import numbers
import re
from typing import Optional

from ..errors import FormatError

_NUMBER = r'(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][-+]?[0-9]+)?|inf|nan|infinity)'
_COMPLEX_FORM = re.compile(rf'\s*(?:(?P<re>[-+]?{_NUMBER})(?:\s*(?P<op>[-+])\s*j\s*(?P<im>{_NUMBER}))?'
                           rf'|(?P<jsign>[-+])?\s*j\s*(?P<jim>{_NUMBER}))\s*',
                           re.IGNORECASE)


class ComplexNumber:
    """Immutable complex value (real, imag)."""

    __slots__ = ('_real', '_imag')

    def __init__(self, real: float = 0.0, imag: float = 0.0):
        if isinstance(real, ComplexNumber):
            real, imag = real.real, real.imag
        elif isinstance(real, complex):
            real, imag = real.real, real.imag
        self._real = float(real)
        self._imag = float(imag)

    @classmethod
    def from_polar(cls, magnitude: float, argument: float) -> 'ComplexNumber':
        return cls(magnitude * math.cos(argument), magnitude * math.sin(argument))

    @property
    def real(self) -> float:
        return self._real

    @property
    def imag(self) -> float:
        return self._imag

    @property
    def sqr_magnitude(self) -> float:
        return self._real * self._real + self._imag * self._imag

    @property
    def magnitude(self) -> float:
        return math.hypot(self._real, self._imag)

    @property
    def argument(self) -> float:
        return math.atan2(self._imag, self._real)

    @property
    def conjugated(self) -> 'ComplexNumber':
        return ComplexNumber(self._real, -self._imag)

    @property
    def normalized(self) -> 'ComplexNumber':
        """Unit-magnitude value with the same argument; zero stays zero."""
        mag = self.magnitude
        if mag == 0.0:
            return ComplexNumber.ZERO
        return ComplexNumber(self._real / mag, self._imag / mag)

    def with_magnitude(self, magnitude: float) -> 'ComplexNumber':
        mag = self.magnitude
        if mag == 0.0:
            return ComplexNumber(magnitude, 0.0)
        return self * (magnitude / mag)

    def with_argument(self, argument: float) -> 'ComplexNumber':
        return ComplexNumber.from_polar(self.magnitude, argument)

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    @staticmethod
    def _coerce(value) -> Optional['ComplexNumber']:
        if isinstance(value, ComplexNumber):
            return value
        if isinstance(value, (numbers.Real, complex)):
            return ComplexNumber(value)
        return None

    def __add__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ComplexNumber(self._real + other._real, self._imag + other._imag)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ComplexNumber(self._real - other._real, self._imag - other._imag)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other - self

    def __mul__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return ComplexNumber(self._real * other._real - self._imag * other._imag,
                             self._imag * other._real + self._real * other._imag)

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        scale = other.sqr_magnitude
        product = self * other.conjugated
        return ComplexNumber(product._real / scale, product._imag / scale)

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return other / self

    def __pow__(self, exponent):
        return pow(self, exponent)

    def __neg__(self) -> 'ComplexNumber':
        return ComplexNumber(-self._real, -self._imag)

    def __pos__(self) -> 'ComplexNumber':
        return self

    def __abs__(self) -> float:
        return self.magnitude

    def __eq__(self, other):
        other = self._coerce(other)
        if other is None:
            return NotImplemented
        return self._real == other._real and self._imag == other._imag

    def __hash__(self):
        return hash(complex(self._real, self._imag))

    def __bool__(self) -> bool:
        return self._real != 0.0 or self._imag != 0.0

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def __complex__(self) -> complex:
        return complex(self._real, self._imag)

    def to_float(self) -> float:
        """Real part; the imaginary part is dropped."""
        return self._real

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def __format__(self, format_spec: str) -> str:
        def fmt(x: float) -> str:
            return format(x, format_spec) if format_spec else repr(x)

        re_part, im_part = self._real, self._imag
        if im_part == 0.0:
            return fmt(re_part) if re_part != 0.0 else "0"
        # a NaN imaginary part is written out as jnan
        sign = '-' if im_part < 0.0 else '+'
        im_text = fmt(abs(im_part))
        if re_part == 0.0:
            return f"-j{im_text}" if sign == '-' else f"j{im_text}"
        return f"{fmt(re_part)} {sign} j{im_text}"

    def __str__(self) -> str:
        return self.__format__('')

    def __repr__(self) -> str:
        return f"ComplexNumber({self._real!r}, {self._imag!r})"

    @classmethod
    def parse(cls, text: str) -> 'ComplexNumber':
        """
        Parse the compact text form produced by str() or format().

        Raises:
            FormatError: if text is not of the form 'a', 'jb', '-jb', 'a + jb' or 'a - jb'
        """
        if not isinstance(text, str):
            raise FormatError(f"Expected text, got {type(text).__name__}")
        match = _COMPLEX_FORM.fullmatch(text)
        if match is None:
            raise FormatError(f"Invalid complex number: {text!r}", text)
        if match.group('jim') is not None:
            imag = float(match.group('jim'))
            return cls(0.0, -imag if match.group('jsign') == '-' else imag)
        real = float(match.group('re'))
        if match.group('im') is None:
            return cls(real, 0.0)
        imag = float(match.group('im'))
        return cls(real, -imag if match.group('op') == '-' else imag)

    @classmethod
    def try_parse(cls, text: str, default=None):
        try:
            return cls.parse(text)
        except FormatError:
            return default


ComplexNumber.ZERO = ComplexNumber(0.0, 0.0)
ComplexNumber.ONE = ComplexNumber(1.0, 0.0)
ComplexNumber.J = ComplexNumber(0.0, 1.0)

_LN2 = math.log(2.0)
_LN10 = math.log(10.0)


# =============================================================================
# Transcendental functions
# =============================================================================


def exp(x: ComplexNumber) -> ComplexNumber:
    x = ComplexNumber(x)
    return ComplexNumber.from_polar(math.exp(x.real), x.imag)


def log(x: ComplexNumber, base: Optional[ComplexNumber] = None) -> ComplexNumber:
    """Principal natural logarithm, or the logarithm to base if given."""
    x = ComplexNumber(x)
    mag = x.magnitude
    result = ComplexNumber(math.log(mag) if mag > 0.0 else -math.inf, x.argument)
    if base is None:
        return result
    return result / log(base)


def log2(x: ComplexNumber) -> ComplexNumber:
    return log(x) / _LN2


def log10(x: ComplexNumber) -> ComplexNumber:
    return log(x) / _LN10


def pow(x: ComplexNumber, p) -> ComplexNumber:
    return exp(ComplexNumber(p) * log(x))


def sin(x: ComplexNumber) -> ComplexNumber:
    j = ComplexNumber.J
    return (exp(j * x) - exp(-j * x)) / (2 * j)


def cos(x: ComplexNumber) -> ComplexNumber:
    j = ComplexNumber.J
    return (exp(j * x) + exp(-j * x)) / 2


def sinh(x: ComplexNumber) -> ComplexNumber:
    return (exp(x) - exp(-x)) / 2


def cosh(x: ComplexNumber) -> ComplexNumber:
    return (exp(x) + exp(-x)) / 2


def lerp(a: ComplexNumber, b: ComplexNumber, t: float) -> ComplexNumber:
    return lerp_unclamped(a, b, min(max(t, 0.0), 1.0))


def lerp_unclamped(a: ComplexNumber, b: ComplexNumber, t: float) -> ComplexNumber:
    a, b = ComplexNumber(a), ComplexNumber(b)
    return ComplexNumber(a.real + (b.real - a.real) * t, a.imag + (b.imag - a.imag) * t)
