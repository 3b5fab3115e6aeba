import pytest

from databootstrap.testing.config import (
    TEST_AWS_ACCESS_KEY_ID,
    TEST_AWS_REGION_NAME,
    TEST_AWS_SECRET_ACCESS_KEY,
)
from databootstrap.testing.fakes import (
    FakeCatalogEngine,
    FakeClock,
    FakeKeyValueStore,
    FakeRelationalEngine,
    FakeScriptLoader,
    FakeSecretStore,
)


@pytest.fixture(autouse=True)
def set_boto_test_credentials_and_region(monkeypatch):
    """
    Automatically sets the default credentials and region for all unit tests.
    """
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", TEST_AWS_ACCESS_KEY_ID)
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", TEST_AWS_SECRET_ACCESS_KEY)
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_AWS_REGION_NAME)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def catalog_engine():
    return FakeCatalogEngine()


@pytest.fixture
def kv_store():
    return FakeKeyValueStore()


@pytest.fixture
def relational_engine():
    return FakeRelationalEngine()


@pytest.fixture
def secret_store():
    return FakeSecretStore(
        {
            "db-secret": {
                "username": "postgres",
                "password": "s3cr3t",
                "host": "db.example.internal",
                "port": 5432,
                "dbname": "pagila",
            }
        }
    )


@pytest.fixture
def script_loader():
    return FakeScriptLoader(
        {
            "https://example.com/schema.sql": "CREATE TABLE film (id int);",
            "https://example.com/data.sql": "INSERT INTO film VALUES (1);",
        }
    )
