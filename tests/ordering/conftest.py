import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def identity():
    from ordering.identity import get_identity

    fake = get_identity()
    fake.register("token-user", "user-001", role="USER", email="asha@example.com", name="Asha Rao")
    fake.register("token-admin", "admin-001", role="ADMIN")
    fake.register("token-seller", "seller-001", role="SELLER")
    return fake


@pytest.fixture()
def address():
    return {
        "street": "12 MG Road",
        "city": "Bengaluru",
        "state": "Karnataka",
        "postal_code": "560001",
        "country": "India",
    }

