"""Test vectors: access, arithmetic, geometry and text."""
import math

import numpy as np
import pytest

from fieldlinalg import Vector, Matrix, ExactRational, ComplexNumber, DimensionMismatch, InvalidArgument, FormatError
from fieldlinalg.names import *


def test_construction_and_resize(domain):
    v = Vector(3, [1, 2], ops=domain)
    assert v == Vector.from_values([1, 2, 0], domain)
    assert Vector.ones(2, domain) == Vector.from_values([1, 1], domain)
    v.dim = 4
    assert v == Vector.from_values([1, 2, 0, 0], domain)
    v.dim = 1
    assert v == Vector.from_values([1], domain)
    with pytest.raises(InvalidArgument):
        Vector(0)
    with pytest.raises(InvalidArgument):
        v.dim = -1


def test_slices(domain):
    v = Vector.from_values([1, 2, 3, 4], domain)
    tail = v[2:]
    assert tail == Vector.from_values([3, 4], domain)
    tail[0] = 10
    assert v[2] == v.ops.coerce(3)
    v[:2] = Vector.from_values([7, 8], domain)
    assert v == Vector.from_values([7, 8, 3, 4], domain)
    assert v[-1] == v.ops.coerce(4)
    with pytest.raises(DimensionMismatch):
        v[:2] = Vector.from_values([1, 2, 3], domain)
    with pytest.raises(InvalidArgument):
        v.get_block(3, 2)


def test_arithmetic(domain):
    a = Vector.from_values([1, 2, 3], domain)
    b = Vector.from_values([3, 2, 1], domain)
    assert a + b == Vector.from_values([4, 4, 4], domain)
    assert a - b == Vector.from_values([-2, 0, 2], domain)
    assert 2 * a == a * 2 == Vector.from_values([2, 4, 6], domain)
    assert a / 2 * 2 == a
    assert -a == Vector.from_values([-1, -2, -3], domain)
    with pytest.raises(DimensionMismatch):
        a + Vector(2, ops=domain)


def test_dot_and_magnitude():
    a = Vector.from_values([1.0, 2.0, 2.0])
    assert a.dot(Vector.from_values([1.0, 0.0, 1.0])) == 3.0
    assert a.sqr_magnitude == 9.0
    assert a.magnitude == 3.0
    assert a.normalized().magnitude == pytest.approx(1.0)
    assert Vector(2).normalized() == Vector(2)


def test_complex_dot_conjugates_second_operand():
    a = Vector.from_values([1j, 1], COMPLEX)
    b = Vector.from_values([1j, 0], COMPLEX)
    assert a.dot(b) == ComplexNumber(1, 0)
    assert a.dot(a) == ComplexNumber(2, 0)
    assert a.magnitude == pytest.approx(math.sqrt(2))


def test_rational_geometry_is_exact():
    v = Vector.from_values([3, 4], RATIONAL)
    axis = Vector.from_values([1, 1], RATIONAL)
    assert v.project(axis) == Vector.from_values([ExactRational(7, 2), ExactRational(7, 2)], RATIONAL)
    assert v.reflect(axis) == Vector.from_values([4, 3], RATIONAL)
    assert v.magnitude == 5.0


def test_angles():
    x = Vector.from_values([1.0, 0.0])
    y = Vector.from_values([0.0, 2.0])
    assert x.angle_between(y) == pytest.approx(math.pi / 2)
    assert x.angle_between(x) == 0.0
    assert x.angle_between(-x) == pytest.approx(math.pi)
    assert x.cos_angle_between(Vector.from_values([1.0, 1.0])) == pytest.approx(math.sqrt(0.5))


def test_matrix_views(domain):
    v = Vector.from_values([1, 2, 3], domain)
    assert v.transposed() == Matrix.from_rows([[1, 2, 3]], domain)
    assert v.to_matrix() == Matrix.from_rows([[1], [2], [3]], domain)
    assert v.to_matrix().column_at(0) == v


def test_mixing_domains_raises():
    with pytest.raises(TypeError):
        Vector(2, ops=FLOAT) + Vector(2, ops=COMPLEX)
    with pytest.raises(TypeError):
        Vector(2, ops=RATIONAL).dot(Vector(2, ops=FLOAT))


def test_conversions():
    v = Vector.from_values([0.5, 1.5])
    assert v.to_rational() == Vector.from_values([ExactRational(1, 2), ExactRational(3, 2)], RATIONAL)
    assert v.to_complex().to_float() == v
    np.testing.assert_array_equal(v.to_numpy(), np.array([0.5, 1.5]))
    assert Vector.from_numpy(np.array([1, 2])).domain == RATIONAL
    assert Vector.from_numpy(np.array([1.0, 2.0]), COMPLEX) == Vector.from_values([1, 2], COMPLEX)
    assert Vector.from_values([math.pi]).try_to_rational() is not None
    assert Vector.from_values([1e20]).try_to_rational() is None


def test_raw_repair(domain):
    v = Vector.from_values([1, 2, 3], domain)
    assert Vector.from_raw(*v.to_raw(), ops=domain) == v
    assert Vector.from_raw(5, [1, 2], ops=domain).dim == 2
    assert Vector.from_raw(3, [], ops=domain) == Vector(3, ops=domain)
    assert Vector.from_raw(0, None, ops=domain) == Vector(1, ops=domain)


def test_text(domain):
    v = Vector.from_values([1, -2, 3], domain) / 2
    assert str(v).startswith('(') and str(v).endswith(')')
    assert Vector.parse(str(v), domain) == v
    assert str(Vector.from_values([1, 2], RATIONAL) / 2) == "(1/2, 1)"
    assert format(Vector.from_values([1.0, 2.0]), '.1f') == "(1.0, 2.0)"
    assert str(Vector.from_values([1 + 2j, -1j], COMPLEX)) == "(1.0 + j2.0, -j1.0)"


@pytest.mark.parametrize("text", ["", "1, 2", "()", "(1, x)"])
def test_parse_rejects_malformed_text(text):
    with pytest.raises(FormatError):
        Vector.parse(text)
    assert Vector.try_parse(text) is None
