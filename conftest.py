import pytest  # type: ignore

from stepparse import shared
from stepparse.parser import Registry


@pytest.fixture
def registry() -> Registry:
    return Registry()


@pytest.fixture
def shared_registry() -> Registry:
    shared.registry.clear()
    yield shared.registry
    shared.registry.clear()
