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
"""Exceptions and warnings raised by fieldlinalg

Structural problems (bad dimensions, mismatched shapes, unreadable text)
raise. Numerical degeneracy does not: singular matrices are reported by
returning None and lossy rational downscaling by a RationalOverflowWarning.
"""


class LinAlgError(Exception):
    """Base class of all fieldlinalg errors"""


class InvalidArgument(LinAlgError, ValueError):
    """A dimension, index range or block is not valid for the container"""


class DimensionMismatch(LinAlgError, ValueError):
    """Operands of a binary operation or block assignment have incompatible shapes"""

    def __init__(self, message: str, expected=None, found=None):
        super().__init__(message)
        self.expected = expected
        self.found = found


class FormatError(LinAlgError, ValueError):
    """Text could not be parsed into a scalar, vector or matrix"""

    def __init__(self, message: str, text: str = None):
        super().__init__(message)
        self.text = text


class RationalOverflowWarning(RuntimeWarning):
    """An ExactRational had to be scaled down to fit 32-bit components and lost accuracy"""
