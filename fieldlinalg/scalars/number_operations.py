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
Scalar domain operations.

Matrices, vectors and the Gauss algorithm are written once against the
NumberOperations interface. Each scalar domain provides one implementation:

    FloatOperations     Python float, zero test |x| < tolerance
    ComplexOperations   ComplexNumber, zero test |z| < tolerance
    RationalOperations  ExactRational, exact zero test

Arithmetic itself goes through the ordinary Python operators, which all
three scalar types support. The operations object supplies what differs:
the neutral elements, the zero test, equality, conversion and text.
"""

import cmath
import math
import numbers
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Union

import numpy as np
import sympy

from ..errors import FormatError
from ..names import FLOAT, COMPLEX, RATIONAL, ZERO_TOLERANCE, EQUALITY_REL_TOL, EQUALITY_ABS_TOL
from .complex_number import ComplexNumber
from .exact_rational import ExactRational


class NumberOperations(ABC):
    """
    Operations of one scalar domain.

    The default instance of each domain is a singleton, reachable through
    instance() or get_number_operations(). Float and complex domains can be
    instantiated with a custom tolerance.
    """

    name: str = None

    @classmethod
    def instance(cls) -> 'NumberOperations':
        """Returns the shared default instance of this domain"""
        if cls.__dict__.get('_instance') is None:
            cls._instance = cls()
        return cls._instance

    @abstractmethod
    def zero(self):
        pass

    @abstractmethod
    def one(self):
        pass

    @abstractmethod
    def value_of(self, value):
        """Convert a scalar of any domain (or a plain Python number) into this domain"""
        pass

    @abstractmethod
    def coerce(self, value):
        """Convert an operator operand; refuses conversions that would silently lose information"""
        pass

    @abstractmethod
    def is_zero(self, value) -> bool:
        pass

    @abstractmethod
    def equals(self, a, b) -> bool:
        pass

    @abstractmethod
    def parse_value(self, text: str):
        pass

    def conjugate(self, value):
        return value

    def magnitude(self, value) -> float:
        return abs(float(value))

    def format_value(self, value, format_spec: str = '') -> str:
        return format(value, format_spec)

    def to_numpy_dtype(self):
        return object

    def to_numpy_value(self, value):
        return value

    @abstractmethod
    def to_sympy(self, value) -> sympy.Expr:
        pass

    def same_domain(self, other: 'NumberOperations') -> bool:
        return self.name == other.name

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class FloatOperations(NumberOperations):
    """IEEE floating point with a fixed absolute zero tolerance"""

    name = FLOAT

    def __init__(self, tolerance: float = ZERO_TOLERANCE, rel_tol: float = EQUALITY_REL_TOL,
                 abs_tol: float = EQUALITY_ABS_TOL):
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance
        self.rel_tol = rel_tol
        self.abs_tol = abs_tol

    def zero(self) -> float:
        return 0.0

    def one(self) -> float:
        return 1.0

    def value_of(self, value) -> float:
        if isinstance(value, ComplexNumber):
            return value.to_float()
        if isinstance(value, complex):
            return value.real
        return float(value)

    def coerce(self, value) -> float:
        if isinstance(value, numbers.Real) and not isinstance(value, bool):
            return float(value)
        raise TypeError(f"Cannot use {type(value).__name__} as a float scalar")

    def is_zero(self, value) -> bool:
        return -self.tolerance < value < self.tolerance

    def equals(self, a, b) -> bool:
        return math.isclose(a, b, rel_tol=self.rel_tol, abs_tol=self.abs_tol)

    def parse_value(self, text: str) -> float:
        try:
            return float(text)
        except ValueError:
            raise FormatError(f"Invalid float: {text!r}", text) from None

    def format_value(self, value, format_spec: str = '') -> str:
        return format(value, format_spec) if format_spec else repr(value)

    def to_numpy_dtype(self):
        return np.float64

    def to_numpy_value(self, value) -> float:
        return float(value)

    def to_sympy(self, value) -> sympy.Expr:
        return sympy.Float(value)

    def __repr__(self) -> str:
        return f"FloatOperations(tolerance={self.tolerance})"


class ComplexOperations(NumberOperations):
    """ComplexNumber with a fixed absolute zero tolerance on the magnitude"""

    name = COMPLEX

    def __init__(self, tolerance: float = ZERO_TOLERANCE, rel_tol: float = EQUALITY_REL_TOL,
                 abs_tol: float = EQUALITY_ABS_TOL):
        if tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {tolerance}")
        self.tolerance = tolerance
        self.rel_tol = rel_tol
        self.abs_tol = abs_tol

    def zero(self) -> ComplexNumber:
        return ComplexNumber.ZERO

    def one(self) -> ComplexNumber:
        return ComplexNumber.ONE

    def value_of(self, value) -> ComplexNumber:
        if isinstance(value, (ComplexNumber, complex)):
            return ComplexNumber(value)
        return ComplexNumber(float(value), 0.0)

    def coerce(self, value) -> ComplexNumber:
        if isinstance(value, (ComplexNumber, complex)) or (isinstance(value, numbers.Real)
                                                           and not isinstance(value, bool)):
            return ComplexNumber(value)
        raise TypeError(f"Cannot use {type(value).__name__} as a complex scalar")

    def is_zero(self, value) -> bool:
        return value.magnitude < self.tolerance

    def equals(self, a, b) -> bool:
        return cmath.isclose(complex(a), complex(b), rel_tol=self.rel_tol, abs_tol=self.abs_tol)

    def parse_value(self, text: str) -> ComplexNumber:
        return ComplexNumber.parse(text)

    def conjugate(self, value) -> ComplexNumber:
        return value.conjugated

    def magnitude(self, value) -> float:
        return value.magnitude

    def format_value(self, value, format_spec: str = '') -> str:
        return format(value, format_spec)

    def to_numpy_dtype(self):
        return np.complex128

    def to_numpy_value(self, value) -> complex:
        return complex(value)

    def to_sympy(self, value) -> sympy.Expr:
        return sympy.Float(value.real) + sympy.I * sympy.Float(value.imag)

    def __repr__(self) -> str:
        return f"ComplexOperations(tolerance={self.tolerance})"


class RationalOperations(NumberOperations):
    """ExactRational with exact zero test and exact equality"""

    name = RATIONAL

    def zero(self) -> ExactRational:
        return ExactRational.ZERO

    def one(self) -> ExactRational:
        return ExactRational.ONE

    def value_of(self, value) -> ExactRational:
        if isinstance(value, ExactRational):
            return value
        if isinstance(value, numbers.Integral):
            return ExactRational(int(value))
        if isinstance(value, Fraction):
            return ExactRational.from_fraction(value)
        if isinstance(value, ComplexNumber):
            return ExactRational.from_float(value.to_float())
        if isinstance(value, complex):
            return ExactRational.from_float(value.real)
        return ExactRational.from_float(value)

    def coerce(self, value) -> ExactRational:
        if isinstance(value, ExactRational):
            return value
        if isinstance(value, numbers.Integral) and not isinstance(value, bool):
            return ExactRational(int(value))
        if isinstance(value, Fraction):
            return ExactRational.from_fraction(value)
        raise TypeError(f"Cannot use {type(value).__name__} as a rational scalar; "
                        "convert floats explicitly with ExactRational.from_float")

    def is_zero(self, value) -> bool:
        return value.is_zero

    def equals(self, a, b) -> bool:
        return a == b

    def parse_value(self, text: str) -> ExactRational:
        return ExactRational.parse(text)

    def magnitude(self, value) -> float:
        return abs(float(value))

    def to_sympy(self, value) -> sympy.Expr:
        if value.is_nan:
            return sympy.nan
        if value.is_positive_infinity:
            return sympy.oo
        if value.is_negative_infinity:
            return -sympy.oo
        return sympy.Rational(value.numerator, value.denominator)


_DOMAINS = {
    FLOAT: FloatOperations,
    COMPLEX: ComplexOperations,
    RATIONAL: RationalOperations,
}


def get_number_operations(domain: Union[str, NumberOperations] = FLOAT) -> NumberOperations:
    """
    Resolve a domain name to its operations singleton.

    Args:
        domain: FLOAT, COMPLEX, RATIONAL or an already configured NumberOperations

    Returns:
        The NumberOperations for the domain
    """
    if isinstance(domain, NumberOperations):
        return domain
    try:
        return _DOMAINS[domain].instance()
    except KeyError:
        raise ValueError(f"Unknown scalar domain {domain!r}, expected one of {sorted(_DOMAINS)}") from None
