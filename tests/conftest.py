import pytest

from helpers import FakeClock


def pytest_addoption(parser):
    parser.addoption("--run-e2e", action="store_true", default=False,
                     help="run tests against a live management cluster")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-e2e"):
        return
    skip = pytest.mark.skip(reason="needs --run-e2e")
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip)


@pytest.fixture
def clock():
    return FakeClock()
