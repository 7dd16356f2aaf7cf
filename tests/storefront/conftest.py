import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _token_secret(monkeypatch):
    monkeypatch.setenv("STOREFRONT_TOKEN_SECRET", "test-secret")
    monkeypatch.delenv("STOREFRONT_STRICT_STATUS_TRANSITIONS", raising=False)
