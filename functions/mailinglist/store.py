import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from boto3.dynamodb.conditions import Attr
from botocore.exceptions import BotoCoreError, ClientError

from .errors import DownstreamError

logger = logging.getLogger(__name__)

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def new_id():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


@dataclass
class Contact:
    email: str
    id: str
    confirm: bool = False
    timestamp: str = ""

    @classmethod
    def from_item(cls, item):
        return cls(
            email=item.get("email", ""),
            id=item.get("id", ""),
            confirm=bool(item.get("confirm", False)),
            timestamp=item.get("timestamp", ""),
        )


def _failed(operation, err):
    error = DownstreamError.from_boto("dynamodb", operation, err)
    logger.error("%s (kind=%s, retryable=%s)", error, error.kind.value, error.retryable)
    return error


class ContactStore:
    """Contacts keyed by email address; one pending or confirmed record each."""

    def __init__(self, table):
        self.table = table

    def get(self, email: str) -> Optional[Contact]:
        try:
            resp = self.table.get_item(Key={"email": email})
        except (ClientError, BotoCoreError) as e:
            raise _failed("GetItem", e) from e
        item = resp.get("Item")
        return Contact.from_item(item) if item else None

    def find_match(self, email: str, id: str) -> bool:
        contact = self.get(email)
        if contact is None:
            return False
        if contact.email == email and contact.id == id:
            return True
        logger.info("No match for email %s with the given id", email)
        return False

    def upsert(self, email: str, id: str, timestamp: str, confirm: bool) -> None:
        # Keyed on email only: a repeated subscribe replaces the earlier id.
        # No ownership check here; callers verify the id first where it matters.
        try:
            self.table.update_item(
                Key={"email": email},
                UpdateExpression="SET #C = :confirmval, #T = :timeval, #ID = :idval",
                ExpressionAttributeNames={"#ID": "id", "#T": "timestamp", "#C": "confirm"},
                ExpressionAttributeValues={
                    ":idval": id,
                    ":timeval": timestamp,
                    ":confirmval": confirm,
                },
            )
        except (ClientError, BotoCoreError) as e:
            raise _failed("UpdateItem", e) from e

    def delete(self, email: str, id: str) -> None:
        try:
            self.table.delete_item(
                Key={"email": email},
                ConditionExpression=Attr("email").eq(email) & Attr("id").eq(id),
            )
        except (ClientError, BotoCoreError) as e:
            raise _failed("DeleteItem", e) from e


class SignupStore:
    """Single-step signups keyed by a generated id."""

    def __init__(self, table):
        self.table = table

    def put(self, id: str, email: str, timestamp: str) -> None:
        try:
            self.table.put_item(Item={"id": id, "email": email, "timestamp": timestamp})
        except (ClientError, BotoCoreError) as e:
            raise _failed("PutItem", e) from e

    def delete(self, id: str) -> None:
        try:
            self.table.delete_item(Key={"id": id})
        except (ClientError, BotoCoreError) as e:
            raise _failed("DeleteItem", e) from e
