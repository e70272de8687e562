import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


def _reset_stores(domain):
    for _, provider in domain.providers.items():
        provider._data_reset()
    domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    from notifications.channel import reset_channels
    from notifications.domain import notifications

    reset_channels()
    with notifications_bed.domain_context():
        yield
        _reset_stores(notifications)
    reset_channels()
