import pytest
from protean.integrations.pytest import DomainFixture

from logistics.notification.gateway import reset_gateway, set_gateway
from logistics.notification.gateway.fake_gateway import FakeNotificationGateway


@pytest.fixture(scope="session")
def logistics_bed():
    from logistics.domain import logistics

    bed = DomainFixture(logistics)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(logistics_bed):
    with logistics_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def gateway():
    """Fresh fake notification gateway for every test."""
    fake = FakeNotificationGateway()
    set_gateway(fake)
    yield fake
    reset_gateway()
