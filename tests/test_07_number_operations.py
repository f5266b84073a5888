"""Test the scalar domain operations and the error taxonomy."""
from fractions import Fraction

import numpy as np
import pytest
import sympy

from fieldlinalg import (get_number_operations, FloatOperations, ComplexOperations, RationalOperations,
                         ExactRational, ComplexNumber, LinAlgError, InvalidArgument, DimensionMismatch, FormatError,
                         Matrix)
from fieldlinalg.names import *


def test_singletons(domain):
    ops = get_number_operations(domain)
    assert ops is get_number_operations(domain)
    assert ops.name == domain
    assert get_number_operations(ops) is ops
    with pytest.raises(ValueError):
        get_number_operations('quaternion')


def test_neutral_elements(domain):
    ops = get_number_operations(domain)
    assert ops.is_zero(ops.zero())
    assert not ops.is_zero(ops.one())
    assert ops.one() * ops.one() == ops.one()


def test_zero_tolerance():
    assert FloatOperations.instance().is_zero(9e-6)
    assert not FloatOperations.instance().is_zero(2e-5)
    assert ComplexOperations.instance().is_zero(ComplexNumber(6e-6, 6e-6))
    assert not ComplexOperations.instance().is_zero(ComplexNumber(1e-5, 1e-5))
    assert not RationalOperations.instance().is_zero(ExactRational(1, 2147483647))
    assert FloatOperations(tolerance=1e-3).is_zero(5e-4)
    with pytest.raises(ValueError):
        FloatOperations(tolerance=0)


def test_cross_domain_conversion():
    rational = get_number_operations(RATIONAL)
    assert rational.value_of(0.25) == ExactRational(1, 4)
    assert rational.value_of(Fraction(2, 6)) == ExactRational(1, 3)
    assert rational.value_of(ComplexNumber(1.5, 7)) == ExactRational(3, 2)
    assert get_number_operations(FLOAT).value_of(ExactRational(3, 4)) == 0.75
    assert get_number_operations(FLOAT).value_of(2 + 3j) == 2.0
    assert get_number_operations(COMPLEX).value_of(ExactRational(1, 2)) == ComplexNumber(0.5, 0)


def test_coerce_refuses_lossy_operands():
    with pytest.raises(TypeError):
        get_number_operations(RATIONAL).coerce(0.5)
    with pytest.raises(TypeError):
        get_number_operations(FLOAT).coerce(1j)
    with pytest.raises(TypeError):
        get_number_operations(FLOAT).coerce(ExactRational(1, 2))
    assert get_number_operations(RATIONAL).coerce(np.int64(3)) == ExactRational(3)
    assert get_number_operations(COMPLEX).coerce(2) == ComplexNumber(2, 0)


def test_conjugate_and_magnitude():
    ops = get_number_operations(COMPLEX)
    assert ops.conjugate(ComplexNumber(1, 2)) == ComplexNumber(1, -2)
    assert ops.magnitude(ComplexNumber(3, -4)) == 5.0
    assert get_number_operations(RATIONAL).magnitude(ExactRational(-1, 4)) == 0.25
    assert get_number_operations(FLOAT).conjugate(-1.5) == -1.5


def test_text(domain):
    ops = get_number_operations(domain)
    value = ops.coerce(3) / ops.coerce(4)
    assert ops.equals(ops.parse_value(ops.format_value(value)), value)
    with pytest.raises(FormatError):
        ops.parse_value("three quarters")


def test_sympy_values():
    rational = get_number_operations(RATIONAL)
    assert rational.to_sympy(ExactRational(-2, 3)) == sympy.Rational(-2, 3)
    assert rational.to_sympy(ExactRational.POSITIVE_INFINITY) == sympy.oo
    assert rational.to_sympy(ExactRational.NAN) is sympy.nan
    assert get_number_operations(COMPLEX).to_sympy(ComplexNumber(1, 2)) == sympy.Float(1) + 2 * sympy.I


def test_error_taxonomy():
    for error in (InvalidArgument, DimensionMismatch, FormatError):
        assert issubclass(error, LinAlgError)
        assert issubclass(error, ValueError)
    with pytest.raises(DimensionMismatch) as info:
        Matrix(2, 2) * Matrix(3, 1)
    assert info.value.expected == 2
    assert info.value.found == 3
    with pytest.raises(FormatError) as info:
        ExactRational.parse("x/y")
    assert info.value.text == "x/y"
