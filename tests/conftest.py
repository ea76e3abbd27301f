import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pin the environment before any application module reads it."""
    os.environ["ENVIRONMENT"] = session.config.option.env
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("NOTIFICATION_GATEWAY", "fake")
    os.environ.setdefault("ORDER_STORE_URL", "memory")
    os.environ.setdefault("LOG_DIR", "")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)


def _reset_singletons():
    from notifications.gateway import reset_gateway
    from ordering.config import reset_settings
    from ordering.order import reset_order_store

    reset_gateway()
    reset_order_store()
    reset_settings()


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to reset process-wide singletons around every test"""
    _reset_singletons()
    yield
    _reset_singletons()


@pytest.fixture(scope="session")
def ordering_bed():
    from protean.integrations.pytest import DomainFixture

    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    """Every test starts with empty repositories."""
    with ordering_bed.domain_context():
        yield
