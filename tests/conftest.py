import pytest

from wirebox.infrastructure.di.container import Container, reset_container


@pytest.fixture
def container():
    """Fresh container for each test."""
    return Container()


@pytest.fixture(autouse=True)
def global_container():
    """Make sure no test leaks the global container into another."""
    yield
    reset_container()
