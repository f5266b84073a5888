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
Dense matrices over a scalar domain.

A Matrix stores its entries as one flat list in row-major order together with
the NumberOperations of its domain (float, complex or rational). All
algorithms are written once against those operations.

    >>> from fieldlinalg import Matrix, RATIONAL
    >>> m = Matrix.from_rows([[2, 1], [1, 1]], RATIONAL)
    >>> print(m.inverse())
    1	-1
    -1	2
"""

import logging
import operator
from typing import Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
import sympy

from .errors import DimensionMismatch, FormatError, InvalidArgument
from .gauss import Gauss, RowReductionResult
from .names import FLOAT, COMPLEX, RATIONAL
from .scalars.number_operations import NumberOperations, get_number_operations

LOG = logging.getLogger(__name__)


def _check_dimension(name: str, value) -> int:
    value = operator.index(value)
    if value <= 0:
        raise InvalidArgument(f"{name} must be positive, got {value}")
    return value


def _normalize_index(index, size: int, axis: str) -> int:
    index = operator.index(index)
    if index < 0:
        index += size
    if not 0 <= index < size:
        raise IndexError(f"{axis} index {index} out of range for size {size}")
    return index


def _key_range(key, size: int, axis: str) -> Tuple[int, int]:
    """(start, length) addressed by an int or a slice"""
    if isinstance(key, slice):
        start, stop, step = key.indices(size)
        if step != 1:
            raise InvalidArgument(f"{axis} slices must have step 1, got {step}")
        return start, max(stop - start, 0)
    return _normalize_index(key, size, axis), 1


class Matrix:
    """
    Dense rows x cols matrix.

    Entries are addressed with m[r, c]; if either index is a slice the result
    is an independent sub-matrix. Operators require both operands to share
    the scalar domain, mixing domains raises TypeError.
    """

    def __init__(self, rows: int, cols: int, values: Optional[Iterable] = None,
                 ops: Union[str, NumberOperations] = FLOAT):
        """
        Args:
            rows: number of rows, positive
            cols: number of columns, positive
            values: optional row-major seed, truncated or zero padded to fit
            ops: scalar domain name or NumberOperations

        Raises:
            InvalidArgument: if a dimension is not positive
        """
        self._ops = get_number_operations(ops)
        self._rows = _check_dimension('rows', rows)
        self._cols = _check_dimension('cols', cols)
        self._values = [self._ops.zero()] * (self._rows * self._cols)
        if values is not None:
            self.set_values(values)

    @classmethod
    def _wrap(cls, rows: int, cols: int, values: List, ops: NumberOperations) -> 'Matrix':
        """Adopt an already converted value list without copying"""
        matrix = cls.__new__(cls)
        matrix._ops = ops
        matrix._rows = rows
        matrix._cols = cols
        matrix._values = values
        return matrix

    @classmethod
    def identity(cls, n: int, ops: Union[str, NumberOperations] = FLOAT) -> 'Matrix':
        matrix = cls(n, n, ops=ops)
        one = matrix._ops.one()
        for i in range(n):
            matrix._values[i * n + i] = one
        return matrix

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence], ops: Union[str, NumberOperations] = FLOAT) -> 'Matrix':
        """Build a matrix from nested row sequences"""
        rows = [list(row) for row in rows]
        if not rows or not rows[0]:
            raise InvalidArgument("Matrix needs at least one row and one column")
        cols = len(rows[0])
        for i, row in enumerate(rows):
            if len(row) != cols:
                raise DimensionMismatch(f"Row {i} has {len(row)} entries, expected {cols}", expected=cols,
                                        found=len(row))
        return cls(len(rows), cols, [value for row in rows for value in row], ops)

    def set_values(self, values: Iterable):
        """Overwrite entries in row-major order; surplus values are ignored"""
        if values is None:
            raise InvalidArgument("values must not be None")
        size = len(self._values)
        for i, value in enumerate(values):
            if i >= size:
                break
            self._values[i] = self._ops.coerce(value)

    # -------------------------------------------------------------------------
    # Shape
    # -------------------------------------------------------------------------

    @property
    def ops(self) -> NumberOperations:
        return self._ops

    @property
    def domain(self) -> str:
        return self._ops.name

    @property
    def rows(self) -> int:
        return self._rows

    @rows.setter
    def rows(self, value: int):
        """Resize in place, keeping the overlapping rows and zero filling new ones"""
        value = _check_dimension('rows', value)
        if value == self._rows:
            return
        keep = min(value, self._rows) * self._cols
        self._values = self._values[:keep] + [self._ops.zero()] * ((value * self._cols) - keep)
        self._rows = value

    @property
    def cols(self) -> int:
        return self._cols

    @cols.setter
    def cols(self, value: int):
        """Resize in place, keeping the overlapping columns and zero filling new ones"""
        value = _check_dimension('cols', value)
        if value == self._cols:
            return
        zero = self._ops.zero()
        keep = min(value, self._cols)
        values = []
        for r in range(self._rows):
            start = r * self._cols
            values.extend(self._values[start:start + keep])
            values.extend([zero] * (value - keep))
        self._values = values
        self._cols = value

    @property
    def shape(self) -> Tuple[int, int]:
        return self._rows, self._cols

    @property
    def is_square(self) -> bool:
        return self._rows == self._cols

    @property
    def values(self) -> List:
        """Row-major copy of the entries"""
        return list(self._values)

    def clone(self) -> 'Matrix':
        return Matrix._wrap(self._rows, self._cols, list(self._values), self._ops)

    # -------------------------------------------------------------------------
    # Element and block access
    # -------------------------------------------------------------------------

    @staticmethod
    def _split_key(key):
        if not isinstance(key, tuple) or len(key) != 2:
            raise TypeError("Matrix indices must be a (row, column) pair")
        return key

    def __getitem__(self, key):
        r, c = self._split_key(key)
        if isinstance(r, slice) or isinstance(c, slice):
            row_start, row_len = _key_range(r, self._rows, 'row')
            col_start, col_len = _key_range(c, self._cols, 'column')
            return self.get_block(row_start, row_len, col_start, col_len)
        return self._values[_normalize_index(r, self._rows, 'row') * self._cols +
                            _normalize_index(c, self._cols, 'column')]

    def __setitem__(self, key, value):
        r, c = self._split_key(key)
        if isinstance(r, slice) or isinstance(c, slice):
            row_start, row_len = _key_range(r, self._rows, 'row')
            col_start, col_len = _key_range(c, self._cols, 'column')
            self.set_block(row_start, row_len, col_start, col_len, value)
            return
        self._values[_normalize_index(r, self._rows, 'row') * self._cols +
                     _normalize_index(c, self._cols, 'column')] = self._ops.coerce(value)

    def _check_block(self, row_start: int, row_len: int, col_start: int, col_len: int):
        if row_len <= 0 or col_len <= 0:
            raise InvalidArgument(f"Block size must be positive, got {row_len}x{col_len}")
        if row_start < 0 or row_start + row_len > self._rows:
            raise InvalidArgument(f"Rows {row_start}..{row_start + row_len} outside of 0..{self._rows}")
        if col_start < 0 or col_start + col_len > self._cols:
            raise InvalidArgument(f"Columns {col_start}..{col_start + col_len} outside of 0..{self._cols}")

    def get_block(self, row_start: int, row_len: int, col_start: int, col_len: int) -> 'Matrix':
        """
        Copy of the row_len x col_len block starting at (row_start, col_start).

        Raises:
            InvalidArgument: if the block is empty or not inside the matrix
        """
        self._check_block(row_start, row_len, col_start, col_len)
        values = []
        for r in range(row_start, row_start + row_len):
            start = r * self._cols + col_start
            values.extend(self._values[start:start + col_len])
        return Matrix._wrap(row_len, col_len, values, self._ops)

    def set_block(self, row_start: int, row_len: int, col_start: int, col_len: int, value: 'Matrix'):
        """
        Write value into the row_len x col_len block starting at (row_start, col_start).

        Raises:
            InvalidArgument: if the block is empty or not inside the matrix
            DimensionMismatch: if value does not have the shape of the block
            TypeError: if value is not a Matrix of the same domain
        """
        self._check_block(row_start, row_len, col_start, col_len)
        if not isinstance(value, Matrix):
            raise TypeError(f"Block value must be a Matrix, got {type(value).__name__}")
        self._check_domain(value)
        if value.shape != (row_len, col_len):
            raise DimensionMismatch(f"Block of size {row_len}x{col_len} cannot hold a "
                                    f"{value.rows}x{value.cols} matrix",
                                    expected=(row_len, col_len),
                                    found=value.shape)
        for i in range(row_len):
            start = (row_start + i) * self._cols + col_start
            self._values[start:start + col_len] = value._values[i * col_len:(i + 1) * col_len]

    def row_at(self, row: int):
        """Copy of a row as a Vector"""
        from .vector import Vector
        row = _normalize_index(row, self._rows, 'row')
        return Vector._wrap(self._values[row * self._cols:(row + 1) * self._cols], self._ops)

    def column_at(self, col: int):
        """Copy of a column as a Vector"""
        from .vector import Vector
        col = _normalize_index(col, self._cols, 'column')
        return Vector._wrap(self._values[col::self._cols], self._ops)

    # -------------------------------------------------------------------------
    # Elementary row operations
    # -------------------------------------------------------------------------

    def swap_rows(self, i: int, j: int):
        c = self._cols
        v = self._values
        v[i * c:(i + 1) * c], v[j * c:(j + 1) * c] = v[j * c:(j + 1) * c], v[i * c:(i + 1) * c]

    def scale_row(self, row: int, factor):
        v = self._values
        for idx in range(row * self._cols, (row + 1) * self._cols):
            v[idx] = v[idx] * factor

    def add_row(self, dst: int, factor, src: int):
        """Add factor times row src to row dst"""
        v = self._values
        c = self._cols
        for col in range(c):
            v[dst * c + col] = v[dst * c + col] + factor * v[src * c + col]

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def _check_domain(self, other):
        if not self._ops.same_domain(other.ops):
            raise TypeError(f"Cannot combine {self._ops.name} and {other.ops.name} operands")

    def _check_same_shape(self, other: 'Matrix'):
        self._check_domain(other)
        if self.shape != other.shape:
            raise DimensionMismatch(f"Matrix sizes differ: {self._rows}x{self._cols} and {other.rows}x{other.cols}",
                                    expected=self.shape,
                                    found=other.shape)

    def _scalar(self, value):
        try:
            return self._ops.coerce(value)
        except TypeError:
            return None

    def __add__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        return Matrix._wrap(self._rows, self._cols, [a + b for a, b in zip(self._values, other._values)], self._ops)

    def __sub__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        self._check_same_shape(other)
        return Matrix._wrap(self._rows, self._cols, [a - b for a, b in zip(self._values, other._values)], self._ops)

    def __neg__(self) -> 'Matrix':
        return Matrix._wrap(self._rows, self._cols, [-a for a in self._values], self._ops)

    def __pos__(self) -> 'Matrix':
        return self.clone()

    def __mul__(self, other):
        from .vector import Vector
        if isinstance(other, Matrix):
            return self._multiply_matrix(other)
        if isinstance(other, Vector):
            return self._multiply_vector(other)
        scalar = self._scalar(other)
        if scalar is None:
            return NotImplemented
        return Matrix._wrap(self._rows, self._cols, [a * scalar for a in self._values], self._ops)

    def __rmul__(self, other):
        scalar = self._scalar(other)
        if scalar is None:
            return NotImplemented
        return Matrix._wrap(self._rows, self._cols, [scalar * a for a in self._values], self._ops)

    def __truediv__(self, other):
        scalar = self._scalar(other)
        if scalar is None:
            return NotImplemented
        return Matrix._wrap(self._rows, self._cols, [a / scalar for a in self._values], self._ops)

    def _multiply_matrix(self, other: 'Matrix') -> 'Matrix':
        self._check_domain(other)
        if self._cols != other._rows:
            raise DimensionMismatch(f"Cannot multiply {self._rows}x{self._cols} by {other._rows}x{other._cols}",
                                    expected=self._cols,
                                    found=other._rows)
        n, m, p = self._rows, self._cols, other._cols
        a, b = self._values, other._values
        zero = self._ops.zero()
        values = []
        for i in range(n):
            row = a[i * m:(i + 1) * m]
            for j in range(p):
                acc = zero
                for k in range(m):
                    acc = acc + row[k] * b[k * p + j]
                values.append(acc)
        return Matrix._wrap(n, p, values, self._ops)

    def _multiply_vector(self, vector):
        from .vector import Vector
        self._check_domain(vector)
        if self._cols != vector.dim:
            raise DimensionMismatch(f"Cannot multiply {self._rows}x{self._cols} matrix by vector of dimension "
                                    f"{vector.dim}",
                                    expected=self._cols,
                                    found=vector.dim)
        zero = self._ops.zero()
        x = vector.values
        values = []
        for i in range(self._rows):
            acc = zero
            for k, a in enumerate(self._values[i * self._cols:(i + 1) * self._cols]):
                acc = acc + a * x[k]
            values.append(acc)
        return Vector._wrap(values, self._ops)

    def __pow__(self, exponent):
        return self.pow(exponent)

    def pow(self, exponent: int) -> Optional['Matrix']:
        """
        Integer power by square-and-multiply.

        A negative exponent inverts first. Usable as Matrix.pow(base, exponent).

        Returns:
            The power, or None if the exponent is negative and the matrix singular

        Raises:
            DimensionMismatch: if the matrix is not square
        """
        exponent = operator.index(exponent)
        if not self.is_square:
            raise DimensionMismatch(f"Only square matrices have powers, got {self._rows}x{self._cols}",
                                    expected=(self._rows, self._rows),
                                    found=self.shape)
        base = self
        if exponent < 0:
            base = self.inverse()
            if base is None:
                return None
            exponent = -exponent

        result = Matrix.identity(self._rows, self._ops)
        while exponent > 0:
            if exponent % 2 == 1:
                result = result * base
            exponent //= 2
            if exponent:
                base = base * base
        return result

    def __eq__(self, other):
        if not isinstance(other, Matrix):
            return NotImplemented
        if self.shape != other.shape or not self._ops.same_domain(other._ops):
            return False
        equals = self._ops.equals
        return all(equals(a, b) for a, b in zip(self._values, other._values))

    __hash__ = None

    # -------------------------------------------------------------------------
    # Linear algebra
    # -------------------------------------------------------------------------

    def transposed(self) -> 'Matrix':
        values = [self._values[r * self._cols + c] for c in range(self._cols) for r in range(self._rows)]
        return Matrix._wrap(self._cols, self._rows, values, self._ops)

    def determinant(self):
        """Determinant of a square matrix, computed on a copy"""
        return Gauss.instance().determinant(self)

    def inverse(self) -> Optional['Matrix']:
        """Inverse of a square matrix, None if it is singular"""
        return Gauss.instance().invert(self)

    def rank(self) -> int:
        return Gauss.instance().rank(self)

    def row_reduce(self) -> RowReductionResult:
        """Reduce this matrix to reduced row echelon form in place"""
        return Gauss.instance().row_reduce(self)

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def convert(self, ops: Union[str, NumberOperations]) -> 'Matrix':
        """Copy of this matrix in another scalar domain"""
        target = get_number_operations(ops)
        return Matrix._wrap(self._rows, self._cols, [target.value_of(v) for v in self._values], target)

    def to_float(self) -> 'Matrix':
        """Float copy; complex entries lose their imaginary part"""
        return self.convert(FLOAT)

    def to_complex(self) -> 'Matrix':
        return self.convert(COMPLEX)

    def to_rational(self) -> 'Matrix':
        """Rational copy; floats are approximated by ExactRational.from_float"""
        return self.convert(RATIONAL)

    def try_to_rational(self) -> Optional['Matrix']:
        """Rational copy, or None if some entry cannot be represented within the domain tolerance"""
        converted = self.to_rational()
        for original, value in zip(self._values, converted._values):
            if not self._ops.equals(self._ops.value_of(value), original):
                return None
        return converted

    def to_numpy(self) -> np.ndarray:
        """Array of shape (rows, cols); rational matrices give an object array of ExactRational"""
        array = np.empty(len(self._values), dtype=self._ops.to_numpy_dtype())
        for i, value in enumerate(self._values):
            array[i] = self._ops.to_numpy_value(value)
        return array.reshape(self._rows, self._cols)

    @classmethod
    def from_numpy(cls, array, ops: Union[str, NumberOperations, None] = None) -> 'Matrix':
        """
        Build a matrix from a two dimensional array.

        Args:
            array: array-like of shape (rows, cols)
            ops: target domain; if omitted complex arrays give complex matrices,
                float arrays float matrices and integer or object arrays
                rational matrices
        """
        array = np.asarray(array)
        if array.ndim != 2:
            raise InvalidArgument(f"Expected a two dimensional array, got {array.ndim} dimensions")
        target = get_number_operations(ops if ops is not None else _infer_domain(array))
        rows, cols = array.shape
        return cls._wrap(_check_dimension('rows', rows), _check_dimension('cols', cols),
                         [target.value_of(v) for v in array.ravel()], target)

    def to_sympy(self) -> sympy.Matrix:
        """sympy Matrix, exact for rational matrices"""
        return sympy.Matrix(self._rows, self._cols, [self._ops.to_sympy(v) for v in self._values])

    def to_raw(self) -> Tuple[int, int, List]:
        """(rows, cols, values) for serialization"""
        return self._rows, self._cols, list(self._values)

    @classmethod
    def from_raw(cls, rows: int, cols: int, values: Optional[Sequence],
                 ops: Union[str, NumberOperations] = FLOAT) -> 'Matrix':
        """
        Rebuild a matrix from serialized state, repairing it if inconsistent.

        Non-positive dimensions become 1. If the number of values does not
        match rows * cols the overlapping prefix is kept and the rest is zero.
        """
        target = get_number_operations(ops)
        rows = rows if rows > 0 else 1
        cols = cols if cols > 0 else 1
        values = list(values) if values is not None else []
        size = rows * cols
        if len(values) != size:
            LOG.debug('Repairing raw matrix %dx%d with %d values.', rows, cols, len(values))
            values = values[:size] + [target.zero()] * max(size - len(values), 0)
        return cls._wrap(rows, cols, [target.value_of(v) for v in values], target)

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def to_string(self, format_spec: str = '') -> str:
        """Cells separated by tabs, rows by newlines"""
        fmt = self._ops.format_value
        return '\n'.join('\t'.join(fmt(v, format_spec) for v in self._values[r * self._cols:(r + 1) * self._cols])
                         for r in range(self._rows))

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec)

    def __repr__(self) -> str:
        return f"Matrix({self._rows}, {self._cols}, {self._values!r}, ops={self._ops.name!r})"

    @classmethod
    def parse(cls, text: str, ops: Union[str, NumberOperations] = FLOAT) -> 'Matrix':
        """
        Parse the tab separated form produced by str().

        Raises:
            FormatError: on empty text, ragged rows or unreadable cells
        """
        target = get_number_operations(ops)
        if not isinstance(text, str):
            raise FormatError(f"Expected text, got {type(text).__name__}")
        lines = text.splitlines()
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines:
            raise FormatError("Empty matrix text", text)
        cells = [line.split('\t') for line in lines]
        cols = len(cells[0])
        values = []
        for r, row in enumerate(cells):
            if len(row) != cols:
                raise FormatError(f"Row {r} has {len(row)} cells, expected {cols}", text)
            values.extend(target.parse_value(cell.strip()) for cell in row)
        return cls._wrap(len(cells), cols, values, target)

    @classmethod
    def try_parse(cls, text: str, ops: Union[str, NumberOperations] = FLOAT, default=None):
        try:
            return cls.parse(text, ops)
        except FormatError:
            return default


def _infer_domain(array: np.ndarray) -> str:
    if np.iscomplexobj(array):
        return COMPLEX
    if array.dtype.kind == 'f':
        return FLOAT
    return RATIONAL
