import pytest

from logroute.config import RouterConfig
from logroute.logger import set_default_router
from logroute.router import LogRouter


@pytest.fixture
def router():
    """A quiet router with no console output and no guard thread"""
    instance = LogRouter(RouterConfig(print_to_native=False, sticky_install=False))
    yield instance
    instance.close()


@pytest.fixture(autouse=True)
def reset_default_router():
    yield
    set_default_router(None)
