import logging
from email.utils import formataddr
from urllib.parse import urlencode

from botocore.exceptions import BotoCoreError, ClientError

from .errors import DownstreamError

logger = logging.getLogger(__name__)

SUBJECT = "Confirm your subscription"

HTML_TEMPLATE = (
    "<p>Hello! You're receiving this email because you requested a subscription to my list.</p>"
    "<p>To complete your subscription, please click this link to finish signing up:</p>"
    '<p><a class="ulink" href="{link}" target="_blank">Confirm subscription</a>.</p>'
    "<p>If you did not request this email, you can safely ignore it. "
    "Your email address has not yet been added to my list.</p>"
)

TEXT_TEMPLATE = (
    "Hello! You're receiving this email because you requested a subscription to my list.\n\n"
    "To complete your subscription, please visit this link to finish signing up.\n\n"
    "{link}\n\n"
    "If you did not request this email, you can safely ignore it. "
    "Your email address has not yet been added to my list."
)


class Notifier:
    def __init__(self, ses, settings):
        self.ses = ses
        self.settings = settings

    def build_link(self, email, id):
        query = urlencode({"email": email, "id": id})
        return f"{self.settings.api_url}{self.settings.verify_path}/?{query}"

    def build_message(self, email, id):
        link = self.build_link(email, id)
        html_link = link.replace("&", "&amp;")
        return {
            "Subject": {"Charset": "UTF-8", "Data": SUBJECT},
            "Body": {
                "Html": {"Charset": "UTF-8", "Data": HTML_TEMPLATE.format(link=html_link)},
                "Text": {"Charset": "UTF-8", "Data": TEXT_TEMPLATE.format(link=link)},
            },
        }

    def send_verification_email(self, email, id):
        """Send the confirmation link to ``email``. Returns the SES message id."""
        logger.info("Sending confirmation email to %s", email)
        try:
            resp = self.ses.send_email(
                Source=formataddr((self.settings.sender_name, self.settings.sender_email)),
                ReturnPath=self.settings.sender_email,
                Destination={"ToAddresses": [email]},
                Message=self.build_message(email, id),
            )
        except (ClientError, BotoCoreError) as e:
            error = DownstreamError.from_boto("ses", "SendEmail", e)
            logger.error("%s (kind=%s, retryable=%s)", error, error.kind.value, error.retryable)
            raise error from e
        logger.info("Confirmation email sent: %s", resp.get("MessageId"))
        return resp.get("MessageId")
