import os
import tempfile
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
    """Pytest hook to run before collecting tests.

    Points the catalogue at a throwaway SQLite file. A file rather than an
    in-memory database, so that concurrent reservations really contend for
    the writer lock.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ["IDENTITY_ADAPTER"] = "fake"
    catalogue_dir = Path(tempfile.mkdtemp(prefix="orderdesk-"))
    os.environ["CATALOGUE_DATABASE_URI"] = f"sqlite:///{catalogue_dir / 'catalogue.db'}"


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    from catalogue import get_store, reset_store

    store = get_store()
    store.create_schema()

    yield

    store.drop_schema()
    reset_store()


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from catalogue import get_store
    from ordering.identity import reset_identity

    get_store().truncate()
    reset_identity()


@pytest.fixture()
def store():
    from catalogue import get_store

    return get_store()


@pytest.fixture()
def add_product(store):
    """Factory: put a product in the catalogue and return it."""

    def _add(product_id, price=10000, stock=10, name=None, **kwargs):
        return store.add_product(product_id, name or f"Product {product_id}", price, stock=stock, **kwargs)

    return _add
