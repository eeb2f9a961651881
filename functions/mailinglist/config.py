import os
from dataclasses import dataclass

from .errors import ConfigurationError


@dataclass(frozen=True)
class Settings:
    table_name: str
    base_url: str = ""
    error_page: str = "/error"
    success_page: str = "/success"
    confirm_subscribe_page: str = "/confirm-subscribe"
    confirm_unsubscribe_page: str = "/confirm-unsubscribe"
    subscribe_path: str = "subscribe"
    verify_path: str = "verify"
    unsubscribe_path: str = "unsubscribe"
    sender_name: str = ""
    sender_email: str = ""
    api_url: str = ""

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        table_name = environ.get("TABLE_NAME")
        if not table_name:
            raise ConfigurationError("TABLE_NAME is not set")
        optional = {
            "base_url": "BASE_URL",
            "error_page": "ERROR_PAGE",
            "success_page": "SUCCESS_PAGE",
            "confirm_subscribe_page": "CONFIRM_SUBSCRIBE_PAGE",
            "confirm_unsubscribe_page": "CONFIRM_UNSUBSCRIBE_PAGE",
            "subscribe_path": "SUBSCRIBE_PATH",
            "verify_path": "VERIFY_PATH",
            "unsubscribe_path": "UNSUBSCRIBE_PATH",
            "sender_name": "SENDER_NAME",
            "sender_email": "SENDER_EMAIL",
            "api_url": "API_URL",
        }
        values = {field: environ[var] for field, var in optional.items() if var in environ}
        return cls(table_name=table_name, **values)

    @property
    def error_url(self):
        return self.base_url + self.error_page

    @property
    def success_url(self):
        return self.base_url + self.success_page

    @property
    def confirm_subscribe_url(self):
        return self.base_url + self.confirm_subscribe_page

    @property
    def confirm_unsubscribe_url(self):
        return self.base_url + self.confirm_unsubscribe_page

    @staticmethod
    def route_for(segment):
        # "subscribe", "/subscribe/" and "subscribe/" all name the same route
        return "/" + segment.strip("/")
