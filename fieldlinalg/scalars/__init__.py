"""
Scalar domains of fieldlinalg

- ExactRational: reduced fraction with 32-bit components and NaN/Infinity sentinels
- ComplexNumber: immutable complex value with polar helpers
- NumberOperations: the per-domain operations the containers are written against
"""

from .exact_rational import ExactRational, set_overflow_handler
from .complex_number import ComplexNumber
from .number_operations import (NumberOperations, FloatOperations, ComplexOperations, RationalOperations,
                                get_number_operations)

__all__ = [
    'ExactRational',
    'set_overflow_handler',
    'ComplexNumber',
    'NumberOperations',
    'FloatOperations',
    'ComplexOperations',
    'RationalOperations',
    'get_number_operations',
]
