"""Confirmed opt-in: subscribe, verify by emailed link, unsubscribe.

Every outcome is a 303 redirect. A bad email/id pair and a backend failure
land on the same error page, and subscribe answers the same way for known
and unknown addresses.
"""
import functools
import logging

import boto3

from .addresses import parse_address
from .config import Settings
from .errors import DownstreamError, InvalidAddress
from .gateway import query_params, raw_query, redirect, request_path
from .notifier import Notifier
from .store import TIMESTAMP_FORMAT, ContactStore, new_id, utcnow

logger = logging.getLogger()
logger.setLevel(logging.INFO)


class OptInHandler:
    def __init__(self, settings, store, notifier, new_id=new_id, now=utcnow):
        self.settings = settings
        self.store = store
        self.notifier = notifier
        self.new_id = new_id
        self.now = now
        self.routes = {
            settings.route_for(settings.subscribe_path): self.subscribe,
            settings.route_for(settings.verify_path): self.verify,
            settings.route_for(settings.unsubscribe_path): self.unsubscribe,
        }

    def __call__(self, event):
        """Route one API Gateway event. Returns ``(response, error)``."""
        path = request_path(event)
        action = self.routes.get(path)
        if action is None:
            logger.warning("No path match for path: %s", path)
            return redirect(self.settings.error_url), None
        return action(event)

    def _timestamp(self):
        return self.now().strftime(TIMESTAMP_FORMAT)

    def subscribe(self, event):
        try:
            email = parse_address(query_params(event).get("email"))
        except InvalidAddress as e:
            logger.warning("Could not get email: %s", e)
            return redirect(self.settings.error_url), e

        id = self.new_id()
        try:
            self.store.upsert(email, id, self._timestamp(), False)
        except DownstreamError as e:
            logger.error("Could not update database: %s", e)
            return redirect(self.settings.error_url), e

        try:
            self.notifier.send_verification_email(email, id)
        except DownstreamError as e:
            logger.error("Could not send confirmation email: %s", e)
            return redirect(self.settings.error_url), e

        # Same page for new and existing addresses.
        return redirect(self.settings.confirm_subscribe_url), None

    def _email_and_id(self, event):
        params = query_params(event)
        if "email" not in params or "id" not in params:
            logger.warning("Missing parameters in query string: %s", raw_query(event))
            return None
        return params["email"], params["id"]

    def verify(self, event):
        found = self._email_and_id(event)
        if found is None:
            return redirect(self.settings.error_url), None
        email, id = found

        try:
            match = self.store.find_match(email, id)
        except DownstreamError as e:
            logger.warning("Received a bad confirmation request: %s", raw_query(event))
            return redirect(self.settings.error_url), e
        if not match:
            logger.warning("Received a bad confirmation request: %s", raw_query(event))
            return redirect(self.settings.error_url), None

        try:
            self.store.upsert(email, id, self._timestamp(), True)
        except DownstreamError as e:
            logger.error("Could not update item in database: %s with query string: %s", e, raw_query(event))
            return redirect(self.settings.error_url), e
        logger.info("Confirmed subscription for %s", email)
        return redirect(self.settings.success_url), None

    def unsubscribe(self, event):
        found = self._email_and_id(event)
        if found is None:
            return redirect(self.settings.error_url), None
        email, id = found

        try:
            match = self.store.find_match(email, id)
        except DownstreamError as e:
            logger.warning("Received a bad deletion request: %s", raw_query(event))
            return redirect(self.settings.error_url), e
        if not match:
            logger.warning("Received a bad deletion request with no match: %s", raw_query(event))
            return redirect(self.settings.error_url), None

        # The delete is conditional on email and id again, in case a new
        # subscribe replaced the id since the lookup.
        try:
            self.store.delete(email, id)
        except DownstreamError as e:
            logger.error("Could not delete item: %s", e)
            return redirect(self.settings.error_url), e
        logger.info("Unsubscribed %s", email)
        return redirect(self.settings.confirm_unsubscribe_url), None


@functools.lru_cache(maxsize=None)
def default_handler():
    settings = Settings.from_env()
    table = boto3.resource("dynamodb").Table(settings.table_name)
    return OptInHandler(settings, ContactStore(table), Notifier(boto3.client("ses"), settings))


def handler(event, context):
    response, error = default_handler()(event)
    if error is not None:
        logger.info("Request finished with error: %s", error)
    return response
