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


@pytest.fixture(scope="session", autouse=True)
def setup_db(ordering_bed):
    from ordering.domain import ordering
    from ordering.utils.db import drop_db, setup_db

    setup_db(ordering)

    yield

    drop_db(ordering)


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def catalogue():
    """A fresh, empty in-memory catalogue for every test."""
    from ordering.catalogue import reset_catalogue, set_catalogue
    from ordering.catalogue.fake_adapter import InMemoryCatalogue

    catalogue = InMemoryCatalogue()
    set_catalogue(catalogue)
    yield catalogue
    reset_catalogue()


@pytest.fixture(autouse=True)
def _sequence_source():
    from ordering.numbering import reset_sequence_source

    reset_sequence_source()
    yield
    reset_sequence_source()


@pytest.fixture()
def customer():
    from ordering.shared.current_user import CurrentUser

    return CurrentUser(id="cust-001", approved=True)


@pytest.fixture()
def address_data():
    return {
        "first_name": "Rosa",
        "last_name": "Marquez",
        "company": "Marquez Events",
        "street1": "1200 Flower Market Ln",
        "city": "Los Angeles",
        "state": "CA",
        "zip": "90014",
        "email": "rosa@example.com",
        "phone": "213-555-0100",
    }
