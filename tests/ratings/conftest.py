import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ratings_bed():
    from ratings.domain import ratings
    from ratings.utils.db import drop_db, setup_db

    bed = DomainFixture(ratings)
    bed.setup()
    setup_db(ratings)
    yield bed
    drop_db(ratings)
    bed.teardown()


def _reset_stores(domain):
    for _, provider in domain.providers.items():
        provider._data_reset()
    domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _ctx(ratings_bed):
    from ratings.domain import ratings

    with ratings_bed.domain_context():
        yield
        _reset_stores(ratings)
