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
"""Dense vectors over a scalar domain"""

import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import DimensionMismatch, FormatError, InvalidArgument
from .matrix import Matrix, _check_dimension, _infer_domain, _key_range, _normalize_index
from .names import FLOAT, COMPLEX, RATIONAL
from .scalars.number_operations import NumberOperations, get_number_operations

LOG = logging.getLogger(__name__)


class Vector:
    """
    Dense vector of dimension dim.

    v[i] reads or writes one entry, v[a:b] copies a sub-vector and
    v[a:b] = w writes a vector of the same length.
    """

    def __init__(self, dim: int, values: Optional[Iterable] = None, ops: Union[str, NumberOperations] = FLOAT):
        self._ops = get_number_operations(ops)
        self._values = [self._ops.zero()] * _check_dimension('dim', dim)
        if values is not None:
            self.set_values(values)

    @classmethod
    def _wrap(cls, values: List, ops: NumberOperations) -> 'Vector':
        vector = cls.__new__(cls)
        vector._ops = ops
        vector._values = values
        return vector

    @classmethod
    def ones(cls, dim: int, ops: Union[str, NumberOperations] = FLOAT) -> 'Vector':
        vector = cls(dim, ops=ops)
        vector._values = [vector._ops.one()] * vector.dim
        return vector

    @classmethod
    def from_values(cls, values: Sequence, ops: Union[str, NumberOperations] = FLOAT) -> 'Vector':
        values = list(values)
        return cls(len(values), values, ops)

    def set_values(self, values: Iterable):
        """Overwrite entries from the front; surplus values are ignored"""
        if values is None:
            raise InvalidArgument("values must not be None")
        for i, value in enumerate(values):
            if i >= len(self._values):
                break
            self._values[i] = self._ops.coerce(value)

    @property
    def ops(self) -> NumberOperations:
        return self._ops

    @property
    def domain(self) -> str:
        return self._ops.name

    @property
    def dim(self) -> int:
        return len(self._values)

    @dim.setter
    def dim(self, value: int):
        """Resize in place, keeping the leading entries and zero filling new ones"""
        value = _check_dimension('dim', value)
        keep = min(value, len(self._values))
        self._values = self._values[:keep] + [self._ops.zero()] * (value - keep)

    @property
    def values(self) -> List:
        return list(self._values)

    def clone(self) -> 'Vector':
        return Vector._wrap(list(self._values), self._ops)

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self):
        return iter(list(self._values))

    # -------------------------------------------------------------------------
    # Element and block access
    # -------------------------------------------------------------------------

    def __getitem__(self, key):
        if isinstance(key, slice):
            start, length = _key_range(key, self.dim, 'vector')
            return self.get_block(start, length)
        return self._values[_normalize_index(key, self.dim, 'vector')]

    def __setitem__(self, key, value):
        if isinstance(key, slice):
            start, length = _key_range(key, self.dim, 'vector')
            self.set_block(start, length, value)
            return
        self._values[_normalize_index(key, self.dim, 'vector')] = self._ops.coerce(value)

    def _check_block(self, start: int, length: int):
        if length <= 0:
            raise InvalidArgument(f"Block length must be positive, got {length}")
        if start < 0 or start + length > self.dim:
            raise InvalidArgument(f"Entries {start}..{start + length} outside of 0..{self.dim}")

    def get_block(self, start: int, length: int) -> 'Vector':
        self._check_block(start, length)
        return Vector._wrap(self._values[start:start + length], self._ops)

    def set_block(self, start: int, length: int, value: 'Vector'):
        """
        Raises:
            InvalidArgument: if the block is empty or not inside the vector
            DimensionMismatch: if value does not have the block's length
        """
        self._check_block(start, length)
        if not isinstance(value, Vector):
            raise TypeError(f"Block value must be a Vector, got {type(value).__name__}")
        self._check_domain(value)
        if value.dim != length:
            raise DimensionMismatch(f"Block of length {length} cannot hold a vector of dimension {value.dim}",
                                    expected=length,
                                    found=value.dim)
        self._values[start:start + length] = value._values

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _check_domain(self, other):
        if not self._ops.same_domain(other.ops):
            raise TypeError(f"Cannot combine {self._ops.name} and {other.ops.name} operands")

    def _check_same_dim(self, other: 'Vector'):
        self._check_domain(other)
        if self.dim != other.dim:
            raise DimensionMismatch(f"Vector dimensions differ: {self.dim} and {other.dim}",
                                    expected=self.dim,
                                    found=other.dim)

    def _scalar(self, value):
        try:
            return self._ops.coerce(value)
        except TypeError:
            return None

    def __add__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_dim(other)
        return Vector._wrap([a + b for a, b in zip(self._values, other._values)], self._ops)

    def __sub__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        self._check_same_dim(other)
        return Vector._wrap([a - b for a, b in zip(self._values, other._values)], self._ops)

    def __neg__(self) -> 'Vector':
        return Vector._wrap([-a for a in self._values], self._ops)

    def __pos__(self) -> 'Vector':
        return self.clone()

    def __mul__(self, other):
        scalar = self._scalar(other)
        if scalar is None:
            return NotImplemented
        return Vector._wrap([a * scalar for a in self._values], self._ops)

    def __rmul__(self, other):
        scalar = self._scalar(other)
        if scalar is None:
            return NotImplemented
        return Vector._wrap([scalar * a for a in self._values], self._ops)

    def __truediv__(self, other):
        scalar = self._scalar(other)
        if scalar is None:
            return NotImplemented
        return Vector._wrap([a / scalar for a in self._values], self._ops)

    def __eq__(self, other):
        if not isinstance(other, Vector):
            return NotImplemented
        if self.dim != other.dim or not self._ops.same_domain(other._ops):
            return False
        equals = self._ops.equals
        return all(equals(a, b) for a, b in zip(self._values, other._values))

    __hash__ = None

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def dot(self, other: 'Vector'):
        """Inner product; the second operand is conjugated for complex vectors"""
        self._check_same_dim(other)
        conjugate = self._ops.conjugate
        result = self._ops.zero()
        for a, b in zip(self._values, other._values):
            result = result + a * conjugate(b)
        return result

    @property
    def sqr_magnitude(self) -> float:
        magnitude = self._ops.magnitude
        return math.fsum(magnitude(a) ** 2 for a in self._values)

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.sqr_magnitude)

    def normalized(self) -> 'Vector':
        """Unit vector in the same direction; the zero vector stays zero"""
        magnitude = self.magnitude
        if magnitude == 0.0:
            return self.clone()
        return self / self._ops.value_of(magnitude)

    def project(self, axis: 'Vector') -> 'Vector':
        """Projection onto axis"""
        return self.dot(axis) / axis.dot(axis) * axis

    def reflect(self, normal: 'Vector') -> 'Vector':
        """Reflection across the line spanned by normal"""
        return 2 * self.project(normal) - self

    def cos_angle_between(self, other: 'Vector') -> float:
        dot = self.dot(other)
        dot = dot.real if self._ops.name == COMPLEX else float(dot)
        return dot / (self.magnitude * other.magnitude)

    def angle_between(self, other: 'Vector') -> float:
        """Angle in radians, in [0, pi]"""
        cos_angle = self.cos_angle_between(other)
        if cos_angle >= 1.0:
            return 0.0
        if cos_angle <= -1.0:
            return math.pi
        return math.acos(cos_angle)

    def transposed(self) -> Matrix:
        """1 x dim row matrix"""
        return Matrix._wrap(1, self.dim, list(self._values), self._ops)

    def to_matrix(self) -> Matrix:
        """dim x 1 column matrix"""
        return Matrix._wrap(self.dim, 1, list(self._values), self._ops)

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def convert(self, ops: Union[str, NumberOperations]) -> 'Vector':
        target = get_number_operations(ops)
        return Vector._wrap([target.value_of(v) for v in self._values], target)

    def to_float(self) -> 'Vector':
        return self.convert(FLOAT)

    def to_complex(self) -> 'Vector':
        return self.convert(COMPLEX)

    def to_rational(self) -> 'Vector':
        return self.convert(RATIONAL)

    def try_to_rational(self) -> Optional['Vector']:
        converted = self.to_rational()
        for original, value in zip(self._values, converted._values):
            if not self._ops.equals(self._ops.value_of(value), original):
                return None
        return converted

    def to_numpy(self) -> np.ndarray:
        array = np.empty(self.dim, dtype=self._ops.to_numpy_dtype())
        for i, value in enumerate(self._values):
            array[i] = self._ops.to_numpy_value(value)
        return array

    @classmethod
    def from_numpy(cls, array, ops: Union[str, NumberOperations, None] = None) -> 'Vector':
        array = np.asarray(array)
        if array.ndim != 1:
            raise InvalidArgument(f"Expected a one dimensional array, got {array.ndim} dimensions")
        target = get_number_operations(ops if ops is not None else _infer_domain(array))
        _check_dimension('dim', array.shape[0])
        return cls._wrap([target.value_of(v) for v in array], target)

    def to_raw(self) -> Tuple[int, List]:
        return self.dim, list(self._values)

    @classmethod
    def from_raw(cls, dim: int, values: Optional[Sequence], ops: Union[str, NumberOperations] = FLOAT) -> 'Vector':
        """
        Rebuild a vector from serialized state.

        The dimension is taken from the stored values; without values the
        vector becomes max(dim, 1) zeros.
        """
        target = get_number_operations(ops)
        values = list(values) if values is not None else []
        if not values:
            LOG.debug('Repairing raw vector of dimension %d without values.', dim)
            return cls._wrap([target.zero()] * max(dim, 1), target)
        if len(values) != dim:
            LOG.debug('Raw vector dimension %d does not match %d values.', dim, len(values))
        return cls._wrap([target.value_of(v) for v in values], target)

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def to_string(self, format_spec: str = '') -> str:
        fmt = self._ops.format_value
        return '(' + ', '.join(fmt(v, format_spec) for v in self._values) + ')'

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec)

    def __repr__(self) -> str:
        return f"Vector({self.dim}, {self._values!r}, ops={self._ops.name!r})"

    @classmethod
    def parse(cls, text: str, ops: Union[str, NumberOperations] = FLOAT) -> 'Vector':
        """
        Parse the '(a, b, c)' form produced by str().

        Raises:
            FormatError: if the parentheses are missing, there are no entries
                or an entry cannot be read
        """
        target = get_number_operations(ops)
        if not isinstance(text, str):
            raise FormatError(f"Expected text, got {type(text).__name__}")
        body = text.strip()
        if len(body) < 2 or body[0] != '(' or body[-1] != ')':
            raise FormatError(f"Vector text must be enclosed in parentheses: {text!r}", text)
        body = body[1:-1]
        if not body.strip():
            raise FormatError("Vector text has no entries", text)
        return cls._wrap([target.parse_value(cell.strip()) for cell in body.split(',')], target)

    @classmethod
    def try_parse(cls, text: str, ops: Union[str, NumberOperations] = FLOAT, default=None):
        try:
            return cls.parse(text, ops)
        except FormatError:
            return default
