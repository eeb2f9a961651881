import pytest

from mailinglist.config import Settings
from mailinglist.errors import ConfigurationError


def test_from_env_defaults():
    settings = Settings.from_env({"TABLE_NAME": "contacts"})
    assert settings.table_name == "contacts"
    assert settings.subscribe_path == "subscribe"
    assert settings.error_url == "/error"


def test_from_env_overrides():
    settings = Settings.from_env({
        "TABLE_NAME": "contacts",
        "BASE_URL": "https://example.com",
        "ERROR_PAGE": "/oops",
        "SUCCESS_PAGE": "/yay",
        "CONFIRM_SUBSCRIBE_PAGE": "/check-inbox",
        "CONFIRM_UNSUBSCRIBE_PAGE": "/bye",
        "VERIFY_PATH": "confirm",
        "SENDER_NAME": "Me",
    })
    assert settings.error_url == "https://example.com/oops"
    assert settings.success_url == "https://example.com/yay"
    assert settings.confirm_subscribe_url == "https://example.com/check-inbox"
    assert settings.confirm_unsubscribe_url == "https://example.com/bye"
    assert settings.verify_path == "confirm"
    assert settings.sender_name == "Me"


def test_missing_table_name():
    with pytest.raises(ConfigurationError, match="TABLE_NAME"):
        Settings.from_env({})


@pytest.mark.parametrize("segment", ["subscribe", "/subscribe", "subscribe/", "/subscribe/"])
def test_route_for(segment):
    assert Settings.route_for(segment) == "/subscribe"
