import pytest
from fieldlinalg.names import *
from fieldlinalg import Matrix, Vector, ExactRational


@pytest.fixture(params=[FLOAT, COMPLEX, RATIONAL], scope="session")
def domain(request: pytest.FixtureRequest) -> str:
    """Provide session-level fixture for parametrized scalar domains."""
    return request.param


@pytest.fixture(params=[FLOAT, COMPLEX], scope="session")
def inexact_domain(request: pytest.FixtureRequest) -> str:
    """Provide session-level fixture for the tolerance based domains."""
    return request.param


@pytest.fixture
def invertible_rows():
    """Integer matrix with determinant -1."""
    return [[2, 1, 1], [1, 3, 2], [1, 0, 0]]


@pytest.fixture
def singular_rows():
    """Integer matrix of rank 2."""
    return [[1, 2, 3], [2, 4, 6], [1, 0, 1]]


@pytest.fixture
def half():
    return ExactRational(1, 2)
