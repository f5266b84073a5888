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
Solution sets of linear systems A x = b.

The solution of a system is described completely by one particular solution
p and a basis v1..vk of the nullspace of A:

    X = p + k1 * v1 + ... + kk * vk

solve() obtains both from one Gauss-Jordan reduction of [A | b].
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .errors import DimensionMismatch
from .matrix import Matrix
from .names import EMPTY_SOLUTION
from .vector import Vector

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolutionSet:
    """
    Affine solution set of a linear system.

    Attributes:
        particular: one solution, None if the system is inconsistent
        basis: basis of the nullspace of A, empty if the solution is unique
    """
    particular: Optional[Vector]
    basis: Tuple[Vector, ...] = ()

    @classmethod
    def empty(cls) -> 'SolutionSet':
        return cls(None, ())

    @property
    def is_empty(self) -> bool:
        return self.particular is None

    @property
    def is_unique(self) -> bool:
        return not self.is_empty and not self.is_infinite

    @property
    def is_infinite(self) -> bool:
        return len(self.basis) > 0

    def to_string(self, format_spec: str = '') -> str:
        if self.is_empty:
            return f"X = {EMPTY_SOLUTION}"
        if self.is_unique:
            return f"X = {self.particular.to_string(format_spec)}"
        lines = [f"X \t= \t{self.particular.to_string(format_spec)}"]
        for i, vector in enumerate(self.basis):
            lines.append(f"\t+ k{i + 1} * \t{vector.to_string(format_spec)}")
        return '\n'.join(lines)

    def __str__(self) -> str:
        return self.to_string()

    def __format__(self, format_spec: str) -> str:
        return self.to_string(format_spec)

    def contains(self, x: Vector) -> bool:
        """Whether x lies in the set, checked against the particular solution and basis span"""
        if self.is_empty:
            return False
        if not self.basis:
            return x == self.particular
        # x - p must be a combination of the basis vectors
        span = Matrix(x.dim, len(self.basis), ops=x.ops)
        for k, vector in enumerate(self.basis):
            span.set_block(0, x.dim, k, 1, vector.to_matrix())
        return not solve(span, x - self.particular).is_empty


def solve(a: Matrix, b: Vector) -> SolutionSet:
    """
    Solve A x = b.

    Args:
        a: m x n coefficient matrix
        b: right hand side of dimension m, same domain as a

    Returns:
        SolutionSet with a particular solution and the nullspace basis of a,
        or the empty set if the system is inconsistent

    Raises:
        DimensionMismatch: if b.dim differs from a.rows
        TypeError: if a and b belong to different domains
    """
    if a.rows != b.dim:
        raise DimensionMismatch(f"Right hand side has dimension {b.dim}, expected {a.rows}",
                                expected=a.rows,
                                found=b.dim)
    if not a.ops.same_domain(b.ops):
        raise TypeError(f"Cannot solve a {a.ops.name} system with a {b.ops.name} right hand side")

    ops = a.ops
    rows, cols = a.rows, a.cols
    augmented = Matrix(rows, cols + 1, ops=ops)
    augmented.set_block(0, rows, 0, cols, a)
    augmented.set_block(0, rows, cols, 1, b.to_matrix())

    echelon = augmented.row_reduce().echelon
    rank = sum(1 for j in range(cols) if echelon[j] != -1)

    for i in range(rank, rows):
        if not ops.is_zero(augmented[i, cols]):
            LOG.debug('Linear system %dx%d is inconsistent, rank %d.', rows, cols, rank)
            return SolutionSet.empty()

    particular = Vector(cols, ops=ops)
    for j in range(cols):
        if echelon[j] != -1:
            particular[j] = augmented[echelon[j], cols]

    basis = []
    for j in range(cols):
        if echelon[j] != -1:
            continue
        vector = Vector(cols, ops=ops)
        for k in range(cols):
            if echelon[k] != -1:
                vector[k] = -augmented[echelon[k], j]
        vector[j] = ops.one()
        basis.append(vector)

    LOG.debug('Linear system %dx%d has rank %d, %d free variables.', rows, cols, rank, len(basis))
    return SolutionSet(particular, tuple(basis))


def nullspace(a: Matrix) -> List[Vector]:
    """Basis of the solutions of A x = 0"""
    return list(solve(a, Vector(a.rows, ops=a.ops)).basis)


def nullity(a: Matrix) -> int:
    """Dimension of the nullspace of a"""
    return len(nullspace(a))
