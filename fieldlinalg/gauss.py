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
Gauss-Jordan elimination over any scalar domain.

The reduction runs against the NumberOperations of the matrix, so the same
code serves float, complex and exact rational matrices. Zero pivots are
detected with the domain's zero test (exact for rationals, an absolute
tolerance for float and complex).
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .errors import DimensionMismatch

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowReductionResult:
    """
    Outcome of a row reduction.

    Attributes:
        determinant: product of the pivots, sign flipped once per row swap,
            exactly zero as soon as a pivot column is missing
        rank: number of pivots found
        echelon: one entry per column, the pivot row of that column or -1
            for a free column
    """
    determinant: object
    rank: int
    echelon: Tuple[int, ...]

    @property
    def free_columns(self) -> Tuple[int, ...]:
        return tuple(j for j, row in enumerate(self.echelon) if row == -1)

    @property
    def pivot_columns(self) -> Tuple[int, ...]:
        return tuple(j for j, row in enumerate(self.echelon) if row != -1)


class Gauss:
    """
    Matrix operations based on Gauss-Jordan elimination.

    Only row_reduce works in place. determinant, invert and rank reduce a
    copy and leave their argument untouched.
    """

    _instance = None

    @classmethod
    def instance(cls) -> 'Gauss':
        """Get the shared instance"""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def row_reduce(self, matrix) -> RowReductionResult:
        """
        Bring matrix into reduced row echelon form, in place.

        Walks (i, j) from the top left corner. A zero at (i, j) is replaced by
        swapping in the first non-zero row below it; if there is none column j
        is free. Otherwise row i is scaled so the pivot becomes one and column
        j is eliminated from every other row.

        Args:
            matrix: Matrix to reduce, modified in place

        Returns:
            RowReductionResult with determinant, rank and echelon
        """
        ops = matrix.ops
        rows, cols = matrix.rows, matrix.cols
        det = ops.one()
        echelon = [-1] * cols

        i = j = 0
        while i < rows and j < cols:
            while j < cols and ops.is_zero(matrix[i, j]):
                for k in range(i + 1, rows):
                    if not ops.is_zero(matrix[k, j]):
                        matrix.swap_rows(k, i)
                        det = -det
                        break
                else:
                    det = ops.zero()
                    echelon[j] = -1
                    j += 1
            if j >= cols:
                break

            pivot = matrix[i, j]
            matrix.scale_row(i, ops.one() / pivot)
            # 1/p * p is not always exactly one in floating point
            matrix[i, j] = ops.one()
            det = det * pivot

            for k in range(rows):
                if k == i:
                    continue
                factor = matrix[k, j]
                if factor == ops.zero():
                    continue
                matrix.add_row(k, -factor, i)

            echelon[j] = i
            i += 1
            j += 1

        result = RowReductionResult(det, i, tuple(echelon))
        LOG.debug('Row reduced %dx%d %s matrix: rank %d, free columns %s.', rows, cols, ops.name, result.rank,
                  list(result.free_columns))
        return result

    def determinant(self, matrix):
        """
        Determinant of a square matrix.

        Raises:
            DimensionMismatch: if the matrix is not square
        """
        _check_square(matrix)
        return self.row_reduce(matrix.clone()).determinant

    def invert(self, matrix) -> Optional[object]:
        """
        Inverse of a square matrix by reducing [A | I] to [I | A^-1].

        Returns:
            The inverse, or None if the determinant collapses to zero

        Raises:
            DimensionMismatch: if the matrix is not square
        """
        _check_square(matrix)
        n = matrix.rows
        augmented = type(matrix)(n, 2 * n, ops=matrix.ops)
        augmented.set_block(0, n, 0, n, matrix)
        augmented.set_block(0, n, n, n, type(matrix).identity(n, matrix.ops))

        result = self.row_reduce(augmented)
        if matrix.ops.is_zero(result.determinant):
            LOG.debug('Matrix of size %dx%d is singular, no inverse.', n, n)
            return None
        return augmented.get_block(0, n, n, n)

    def rank(self, matrix) -> int:
        """Number of pivots, counted on a copy with at least as many rows as columns"""
        working = matrix.clone() if matrix.rows >= matrix.cols else matrix.transposed()
        return self.row_reduce(working).rank

    def nullity(self, matrix) -> int:
        """Dimension of the nullspace, columns minus rank"""
        return matrix.cols - self.rank(matrix)


def _check_square(matrix):
    if matrix.rows != matrix.cols:
        raise DimensionMismatch(f"Matrix must be square, got {matrix.rows}x{matrix.cols}",
                                expected=(matrix.rows, matrix.rows),
                                found=(matrix.rows, matrix.cols))
