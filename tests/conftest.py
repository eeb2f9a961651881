import os
import sys

import boto3
import pytest
from moto import mock_aws

from mailinglist.config import Settings
from mailinglist.errors import DownstreamError, ErrorKind
from mailinglist.store import Contact

# cdk/app.py imports "stacks.*" relative to the cdk directory
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "cdk"))

REGION = "us-east-1"


def downstream_error(operation="GetItem", code="InternalServerError", kind=ErrorKind.INTERNAL):
    return DownstreamError("dynamodb", operation, kind, code=code, message="boom")


class FakeContactStore:
    """In-memory ContactStore that records calls and can be told to fail."""

    def __init__(self, contacts=()):
        self.contacts = {c.email: c for c in contacts}
        self.calls = []
        self.failures = {}

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def called(self, name):
        return [c for c in self.calls if c[0] == name]

    def get(self, email):
        self._call("get", email)
        return self.contacts.get(email)

    def find_match(self, email, id):
        contact = self.get(email)
        return contact is not None and contact.email == email and contact.id == id

    def upsert(self, email, id, timestamp, confirm):
        self._call("upsert", email, id, timestamp, confirm)
        self.contacts[email] = Contact(email=email, id=id, confirm=confirm, timestamp=timestamp)

    def delete(self, email, id):
        self._call("delete", email, id)
        contact = self.contacts.get(email)
        if contact is None or contact.id != id:
            raise downstream_error("DeleteItem", "ConditionalCheckFailedException", ErrorKind.CONFLICT)
        del self.contacts[email]


class FakeSignupStore:
    def __init__(self):
        self.signups = {}
        self.calls = []
        self.failures = {}

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.failures:
            raise self.failures[name]

    def put(self, id, email, timestamp):
        self._call("put", id, email, timestamp)
        self.signups[id] = {"id": id, "email": email, "timestamp": timestamp}

    def delete(self, id):
        self._call("delete", id)
        self.signups.pop(id, None)


class FakeNotifier:
    def __init__(self):
        self.sent = []
        self.failure = None

    def send_verification_email(self, email, id):
        if self.failure is not None:
            raise self.failure
        self.sent.append((email, id))
        return "message-id"


@pytest.fixture
def settings():
    return Settings(
        table_name="contacts",
        base_url="https://example.com",
        error_page="/error",
        success_page="/success",
        confirm_subscribe_page="/confirm-subscribe",
        confirm_unsubscribe_page="/confirm-unsubscribe",
        subscribe_path="subscribe",
        verify_path="verify",
        unsubscribe_path="unsubscribe",
        sender_name="Mailing List",
        sender_email="no-reply@example.com",
        api_url="https://api.example.com/",
    )


@pytest.fixture
def aws_credentials(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)


@pytest.fixture
def mocked_aws(aws_credentials):
    with mock_aws():
        yield


def create_table(name, key):
    return boto3.resource("dynamodb", region_name=REGION).create_table(
        TableName=name,
        KeySchema=[{"AttributeName": key, "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": key, "AttributeType": "S"}],
        BillingMode="PAY_PER_REQUEST",
    )


@pytest.fixture
def contacts_table(mocked_aws):
    return create_table("contacts", "email")


@pytest.fixture
def signups_table(mocked_aws):
    return create_table("signups", "id")


@pytest.fixture
def ses_client(mocked_aws):
    client = boto3.client("ses", region_name=REGION)
    client.verify_domain_identity(Domain="example.com")
    return client


def event(path, **params):
    return {"rawPath": path, "rawQueryString": "", "queryStringParameters": params or None}
