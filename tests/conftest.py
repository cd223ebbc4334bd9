import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def commerce_bed(request):
    """Initialize the commerce domain and its schema once per session."""
    os.environ["PROTEAN_ENV"] = request.config.option.env

    from commerce.domain import commerce

    bed = DomainFixture(commerce)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session")
def _commerce_domain(commerce_bed):
    from commerce.domain import commerce

    return commerce


@pytest.fixture(autouse=True)
def _ctx(commerce_bed):
    """Run each test inside a domain context; data is reset on exit."""
    with commerce_bed.domain_context():
        yield


# ---------------------------------------------------------------------------
# Application wiring with in-memory adapters
# ---------------------------------------------------------------------------
@pytest.fixture
def settings():
    from commerce.config import Settings

    return Settings(
        _env_file=None,
        environment="test",
        payment_gateway="fake",
        image_store="fake",
        email_backend="fake",
        max_transaction_attempts=3,
    )


@pytest.fixture
def gateway():
    from commerce.payments.gateway import FakeGateway

    return FakeGateway()


@pytest.fixture
def image_store():
    from commerce.catalogue.media.fake_store import FakeImageStore

    return FakeImageStore()


@pytest.fixture
def email():
    from commerce.notifications.channel.fake_email import FakeEmailAdapter

    return FakeEmailAdapter()


@pytest.fixture
def notifier(email):
    from commerce.notifications.notifier import Notifier

    return Notifier(email=email)


@pytest.fixture
def services(_commerce_domain, settings, gateway, image_store, notifier):
    from commerce.container import build_services

    return build_services(_commerce_domain, settings, gateway=gateway, image_store=image_store, notifier=notifier)


@pytest.fixture
def client(_commerce_domain, settings, gateway, image_store, notifier):
    from fastapi.testclient import TestClient

    from commerce.api.app import create_app

    app = create_app(_commerce_domain, settings, gateway=gateway, image_store=image_store, notifier=notifier)
    return TestClient(app)


# ---------------------------------------------------------------------------
# Principals and catalogue seeding
# ---------------------------------------------------------------------------
@pytest.fixture
def seller():
    from commerce.principal import Principal

    return Principal(user_id="seller-001", role="seller")


@pytest.fixture
def customer():
    from commerce.principal import Principal

    return Principal(user_id="user-001", role="customer", email="user-001@example.com")


@pytest.fixture
def admin():
    from commerce.principal import Principal

    return Principal(user_id="admin-001", role="admin")


@pytest.fixture
def list_product(seller):
    """Factory: list a product through the command path and return its id."""
    from protean import current_domain

    from commerce.catalogue.listing import AddProduct

    def _list(name="Widget", price=100.0, stock=5, seller_id=None, **extra):
        seller_id = seller_id or seller.user_id
        return current_domain.process(
            AddProduct(
                actor_id=seller_id,
                actor_role="seller",
                seller_id=seller_id,
                name=name,
                price=price,
                stock=stock,
                **extra,
            ),
            asynchronous=False,
        )

    return _list
