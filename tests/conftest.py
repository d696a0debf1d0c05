import os
from pathlib import Path

import mongomock
import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Pin the environment before any Storefront module reads its settings, then
    activate the identity domain so aggregates can be built outside a request.
    """
    os.environ["STOREFRONT_ENV"] = session.config.option.env
    os.environ["EMAIL_ADAPTER"] = "fake"
    os.environ.pop("ORDER_SOFT_DELETE_STRICT", None)
    os.environ.pop("EXPOSE_ERROR_DETAILS", None)

    from identity.domain import identity

    identity.init()
    identity.domain_context().push()


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
        elif "/bdd/" in str(test_path):
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def catalogue_bed():
    from catalogue.domain import catalogue

    bed = DomainFixture(catalogue)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def ordering_bed(catalogue_bed):
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture()
def database():
    """A fresh in-memory MongoDB database wired into ``shared.database``."""
    from shared.database import drop_collections, ensure_indexes, reset_database, use_database

    db = mongomock.MongoClient(tz_aware=True)["storefront_test"]
    ensure_indexes(db)
    use_database(db)

    yield db

    drop_collections(db)
    reset_database()


@pytest.fixture()
def email_channel():
    from notifications.channel import get_email_channel

    return get_email_channel()


@pytest.fixture(autouse=True)
def run_around_tests(database):
    """Fixture to automatically cleanup infrastructure after every test"""
    from notifications.channel import reset_channels
    from shared.config import reset_settings

    reset_settings()
    reset_channels()

    yield

    reset_channels()
    reset_settings()


# ---------------------------------------------------------------------------
# Shared builders
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_product(database):
    """Insert a product straight into the store and return it."""
    from catalogue.domain import catalogue
    from catalogue.product.product import Product

    def _make(**overrides):
        data = {
            "name": "Linen Shirt",
            "category": "Apparel",
            "gender": "Unisex",
            "price": 100,
            "discount": 0,
            "stock": 10,
            "sizes": ["S", "M", "L"],
            "colors": ["White", "Blue"],
            "images": ["https://cdn.example.com/linen.jpg"],
            "author": "seller-001",
        }
        data.update(overrides)
        return catalogue.repository_for(Product).add(Product.create(**data))

    return _make


@pytest.fixture()
def make_user(database):
    from identity.account.account import User
    from identity.domain import identity

    def _make(role="Customer", email=None, name="Test User"):
        user = User.register(email=email or f"{role.lower()}-{os.urandom(3).hex()}@example.com", name=name, role=role)
        return identity.repository_for(User).add(user)

    return _make


@pytest.fixture()
def stock_of():
    """Current stock of a product, read straight from the store."""
    from catalogue.domain import catalogue
    from catalogue.product.product import Product

    def _stock(product_id):
        return catalogue.repository_for(Product).stock_of(product_id)

    return _stock


@pytest.fixture()
def shipping_address():
    return {
        "full_name": "Asha Rao",
        "phone": "9876543210",
        "email": "asha@example.com",
        "address_line1": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "pincode": "560001",
    }
