"""Single-step signup: no confirmation email, records keyed by a fresh id.

The notbot/isbot query check only filters naive form spam; both values
come from the client and prove nothing.
"""
import functools
import logging

import boto3

from .addresses import parse_address
from .config import Settings
from .errors import DownstreamError, InvalidAddress
from .gateway import query_params, redirect, request_path
from .store import TIMESTAMP_FORMAT, SignupStore, new_id, utcnow

logger = logging.getLogger()
logger.setLevel(logging.INFO)

SUBSCRIBE_PATH = "/subscribe"
UNSUBSCRIBE_PATH = "/unsubscribe"


class SignupHandler:
    def __init__(self, settings, store, new_id=new_id, now=utcnow):
        self.settings = settings
        self.store = store
        self.new_id = new_id
        self.now = now

    def __call__(self, event):
        path = request_path(event)
        if path == SUBSCRIBE_PATH:
            return self.subscribe(event)
        if path == UNSUBSCRIBE_PATH:
            return self.unsubscribe(event)
        logger.warning("No path match for path: %s", path)
        return redirect(self.settings.error_url), None

    def _timestamp(self):
        return self.now().strftime(TIMESTAMP_FORMAT)

    def subscribe(self, event):
        params = query_params(event)
        if params.get("notbot") != "true" or params.get("isbot"):
            logger.warning("Rejected signup that failed the bot check")
            return redirect(self.settings.error_url), None
        try:
            email = parse_address(params.get("email"))
        except InvalidAddress as e:
            logger.warning("Could not get email: %s", e)
            return redirect(self.settings.error_url), e

        try:
            self.store.put(self.new_id(), email, self._timestamp())
        except DownstreamError as e:
            logger.error("Could not add signup: %s", e)
            return redirect(self.settings.error_url), e
        return redirect(self.settings.confirm_subscribe_url), None

    def unsubscribe(self, event):
        id = query_params(event).get("id")
        if not id:
            logger.warning("Missing id in unsubscribe request")
            return redirect(self.settings.error_url), None
        try:
            self.store.delete(id)
        except DownstreamError as e:
            logger.error("Could not delete signup: %s", e)
            return redirect(self.settings.error_url), e
        return redirect(self.settings.success_url), None


@functools.lru_cache(maxsize=None)
def default_handler():
    settings = Settings.from_env()
    return SignupHandler(settings, SignupStore(boto3.resource("dynamodb").Table(settings.table_name)))


def handler(event, context):
    response, error = default_handler()(event)
    if error is not None:
        logger.info("Request finished with error: %s", error)
    return response
