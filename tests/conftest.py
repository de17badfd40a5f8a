import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from app.db.dynamo import DocumentStore, get_store
from app.main import app

REGION = "eu-west-1"


@pytest.fixture(autouse=True)
def aws_credentials(monkeypatch):
    """Keep boto3 away from any real account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def dynamodb():
    with mock_aws():
        yield boto3.resource("dynamodb", region_name=REGION)


@pytest.fixture
def store(dynamodb):
    document_store = DocumentStore(dynamodb, "test-transactions", "test-budgets")
    document_store.ensure_tables()
    return document_store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def api_client(store):
    """Client rooted at the API prefix, the way the finance store sees the API."""
    app.dependency_overrides[get_store] = lambda: store
    with TestClient(app, base_url="http://testserver/api") as test_client:
        yield test_client
    app.dependency_overrides.clear()
