"""Test matrix construction, access, arithmetic and conversions."""
from fractions import Fraction

import numpy as np
import pytest
import sympy

from fieldlinalg import (Matrix, Vector, ExactRational, ComplexNumber, FloatOperations, DimensionMismatch,
                         InvalidArgument, FormatError)
from fieldlinalg.names import *


def test_construction(domain):
    m = Matrix(2, 3, [1, 2, 3, 4], ops=domain)
    assert m.shape == (2, 3)
    assert m.domain == domain
    zero = m.ops.zero()
    assert m.values[4:] == [zero, zero]
    assert m[1, 0] == m.ops.coerce(4)
    truncated = Matrix(1, 2, [1, 2, 3, 4], ops=domain)
    assert truncated.values == [m.ops.coerce(1), m.ops.coerce(2)]


@pytest.mark.parametrize("rows, cols", [(0, 1), (1, 0), (-2, 3)])
def test_non_positive_dimensions_are_rejected(rows, cols):
    with pytest.raises(InvalidArgument):
        Matrix(rows, cols)


def test_identity_and_from_rows(domain):
    identity = Matrix.identity(3, domain)
    assert identity == Matrix.from_rows([[1, 0, 0], [0, 1, 0], [0, 0, 1]], domain)
    with pytest.raises(DimensionMismatch):
        Matrix.from_rows([[1, 2], [3]], domain)
    with pytest.raises(InvalidArgument):
        Matrix.from_rows([], domain)


def test_element_access_with_negative_indices():
    m = Matrix.from_rows([[1, 2], [3, 4]])
    assert m[-1, -1] == 4.0
    m[0, -1] = 7
    assert m[0, 1] == 7.0
    with pytest.raises(IndexError):
        m[2, 0]


def test_resize_keeps_overlap_and_zero_fills(domain):
    m = Matrix.from_rows([[1, 2], [3, 4]], domain)
    m.rows = 3
    m.cols = 3
    assert m == Matrix.from_rows([[1, 2, 0], [3, 4, 0], [0, 0, 0]], domain)
    m.rows = 1
    m.cols = 1
    assert m == Matrix.from_rows([[1]], domain)
    with pytest.raises(InvalidArgument):
        m.rows = 0


def test_slices_are_independent_copies(domain):
    m = Matrix.from_rows([[1, 2, 3], [4, 5, 6], [7, 8, 9]], domain)
    block = m[1:, :2]
    assert block == Matrix.from_rows([[4, 5], [7, 8]], domain)
    block[0, 0] = 100
    assert m[1, 0] == m.ops.coerce(4)
    assert m[0, :] == Matrix.from_rows([[1, 2, 3]], domain)


def test_slice_assignment(domain):
    m = Matrix(3, 3, ops=domain)
    m[:2, 1:] = Matrix.from_rows([[1, 2], [3, 4]], domain)
    assert m == Matrix.from_rows([[0, 1, 2], [0, 3, 4], [0, 0, 0]], domain)
    with pytest.raises(DimensionMismatch):
        m[:2, :2] = Matrix(3, 3, ops=domain)
    with pytest.raises(InvalidArgument):
        m[::2, :]


def test_blocks_are_validated():
    m = Matrix(3, 3)
    assert m.get_block(1, 2, 0, 3).shape == (2, 3)
    with pytest.raises(InvalidArgument):
        m.get_block(2, 2, 0, 1)
    with pytest.raises(InvalidArgument):
        m.get_block(0, 0, 0, 1)
    with pytest.raises(InvalidArgument):
        m.set_block(0, 1, -1, 1, Matrix(1, 1))
    with pytest.raises(DimensionMismatch):
        m.set_block(0, 2, 0, 2, Matrix(1, 2))


def test_rows_and_columns_as_vectors(domain):
    m = Matrix.from_rows([[1, 2, 3], [4, 5, 6]], domain)
    assert m.row_at(1) == Vector.from_values([4, 5, 6], domain)
    assert m.column_at(-1) == Vector.from_values([3, 6], domain)


def test_arithmetic(domain):
    a = Matrix.from_rows([[1, 2], [3, 4]], domain)
    b = Matrix.from_rows([[0, 1], [1, 0]], domain)
    assert a + b == Matrix.from_rows([[1, 3], [4, 4]], domain)
    assert a - b == Matrix.from_rows([[1, 1], [2, 4]], domain)
    assert a * b == Matrix.from_rows([[2, 1], [4, 3]], domain)
    assert 2 * a == Matrix.from_rows([[2, 4], [6, 8]], domain)
    assert a * 2 == 2 * a
    assert (2 * a) / 2 == a
    assert -a == Matrix.from_rows([[-1, -2], [-3, -4]], domain)
    assert a * Vector.from_values([1, 1], domain) == Vector.from_values([3, 7], domain)


def test_shape_mismatch_raises():
    with pytest.raises(DimensionMismatch):
        Matrix(2, 2) + Matrix(2, 3)
    with pytest.raises(DimensionMismatch):
        Matrix(2, 3) * Matrix(2, 3)
    with pytest.raises(DimensionMismatch):
        Matrix(2, 3) * Vector(2)


def test_mixing_domains_raises():
    with pytest.raises(TypeError):
        Matrix(2, 2, ops=FLOAT) + Matrix(2, 2, ops=RATIONAL)
    with pytest.raises(TypeError):
        Matrix(2, 2, ops=FLOAT) * Matrix(2, 2, ops=COMPLEX)
    with pytest.raises(TypeError):
        Matrix(2, 2, ops=RATIONAL) * 0.5


def test_equality_uses_domain_tolerance():
    a = Matrix.from_rows([[1.0, 2.0]])
    assert a == Matrix.from_rows([[1.0 + 1e-9, 2.0]])
    assert a != Matrix.from_rows([[1.1, 2.0]])
    assert a != Matrix.from_rows([[1.0], [2.0]])
    assert Matrix(1, 1, ops=FLOAT) != Matrix(1, 1, ops=RATIONAL)
    strict = FloatOperations(tolerance=1e-12, rel_tol=1e-12, abs_tol=1e-12)
    assert Matrix(1, 1, [1.0], strict) != Matrix(1, 1, [1.0 + 1e-9], strict)


def test_transposed(domain):
    m = Matrix.from_rows([[1, 2, 3], [4, 5, 6]], domain)
    assert m.transposed() == Matrix.from_rows([[1, 4], [2, 5], [3, 6]], domain)
    assert m.transposed().transposed() == m


def test_power(domain):
    fib = Matrix.from_rows([[1, 1], [1, 0]], domain)
    assert fib ** 10 == Matrix.from_rows([[89, 55], [55, 34]], domain)
    assert Matrix.pow(fib, 0) == Matrix.identity(2, domain)
    assert fib ** -1 == fib.inverse()
    assert fib ** -3 * fib ** 3 == Matrix.identity(2, domain)


def test_negative_power_of_identity(domain):
    assert Matrix.pow(Matrix.identity(3, domain), -5) == Matrix.identity(3, domain)


def test_power_of_singular_and_non_square(domain, singular_rows):
    assert Matrix.from_rows(singular_rows, domain) ** -1 is None
    with pytest.raises(DimensionMismatch):
        Matrix(2, 3, ops=domain) ** 2


def test_domain_conversions():
    m = Matrix.from_rows([[0.5, -0.25], [3.0, 1.0]])
    rational = m.to_rational()
    assert rational.domain == RATIONAL
    assert rational[0, 0] == ExactRational(1, 2)
    assert rational.to_float() == m
    assert m.to_complex()[1, 0] == ComplexNumber(3.0, 0.0)
    complex_matrix = Matrix.from_rows([[1 + 2j]], COMPLEX)
    assert complex_matrix.to_float()[0, 0] == 1.0
    assert m.try_to_rational() == rational
    assert Matrix.from_rows([[1e12]]).try_to_rational() is None


def test_numpy_interop():
    array = np.array([[1.0, 2.0], [3.0, 4.5]])
    m = Matrix.from_numpy(array)
    assert m.domain == FLOAT
    np.testing.assert_array_equal(m.to_numpy(), array)
    assert Matrix.from_numpy(np.array([[1j, 2]])).domain == COMPLEX
    np.testing.assert_array_equal(Matrix.from_numpy(np.array([[1j, 2]])).to_numpy(), np.array([[1j, 2]]))
    exact = Matrix.from_numpy(np.array([[1, 2], [3, 4]]))
    assert exact.domain == RATIONAL
    assert exact[1, 1] == ExactRational(4)
    with pytest.raises(InvalidArgument):
        Matrix.from_numpy(np.zeros(3))


def test_sympy_interop():
    m = Matrix.from_rows([[Fraction(1, 3), 2], [0, -1]], RATIONAL)
    assert m.to_sympy() == sympy.Matrix([[sympy.Rational(1, 3), 2], [0, -1]])


def test_raw_round_trip_and_repair(domain):
    m = Matrix.from_rows([[1, 2], [3, 4]], domain)
    assert Matrix.from_raw(*m.to_raw(), ops=domain) == m
    repaired = Matrix.from_raw(0, 2, [1, 2, 3], ops=domain)
    assert repaired == Matrix.from_rows([[1, 2]], domain)
    padded = Matrix.from_raw(2, 2, [1], ops=domain)
    assert padded == Matrix.from_rows([[1, 0], [0, 0]], domain)
    assert Matrix.from_raw(-1, -1, None, ops=domain) == Matrix(1, 1, ops=domain)


def test_text_round_trip(domain):
    m = Matrix.from_rows([[1, -2, 3], [0, 5, 6]], domain) / 4
    text = str(m)
    assert text.count('\n') == 1
    assert text.count('\t') == 4
    assert Matrix.parse(text, domain) == m


def test_text_form():
    m = Matrix.from_rows([[1, 2], [3, 4]], RATIONAL) / 2
    assert str(m) == "1/2\t1\n3/2\t2"
    assert format(Matrix.from_rows([[1.0, 2.5]]), '.2f') == "1.00\t2.50"


@pytest.mark.parametrize("text", ["", "1\t2\n3", "1\tx"])
def test_parse_rejects_malformed_text(text):
    with pytest.raises(FormatError):
        Matrix.parse(text)
    assert Matrix.try_parse(text) is None
