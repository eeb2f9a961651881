import dataclasses

import pytest

from mailinglist.errors import DownstreamError, ErrorKind
from mailinglist.notifier import Notifier


@pytest.fixture
def notifier(settings, ses_client):
    return Notifier(ses_client, settings)


def test_link_embeds_email_and_id(settings):
    link = Notifier(None, settings).build_link("a+b@example.com", "123")
    assert link == "https://api.example.com/verify/?email=a%2Bb%40example.com&id=123"


def test_message_bodies(settings):
    message = Notifier(None, settings).build_message("test@example.com", "123")

    assert message["Subject"]["Data"] == "Confirm your subscription"
    html = message["Body"]["Html"]["Data"]
    text = message["Body"]["Text"]["Data"]
    assert 'href="https://api.example.com/verify/?email=test%40example.com&amp;id=123"' in html
    assert ">Confirm subscription</a>" in html
    assert "https://api.example.com/verify/?email=test%40example.com&id=123" in text
    assert "safely ignore it" in text
    assert message["Body"]["Text"]["Charset"] == "UTF-8"


def test_send(notifier, ses_client):
    message_id = notifier.send_verification_email("test@example.com", "123")

    assert message_id
    assert ses_client.get_send_quota()["SentLast24Hours"] == 1


def test_unverified_sender_is_rejected(settings, ses_client):
    unverified = dataclasses.replace(settings, sender_email="someone@unverified.org")

    with pytest.raises(DownstreamError) as excinfo:
        Notifier(ses_client, unverified).send_verification_email("test@example.com", "123")
    assert excinfo.value.service == "ses"
    assert excinfo.value.code == "MessageRejected"
    assert excinfo.value.kind is ErrorKind.REJECTED
