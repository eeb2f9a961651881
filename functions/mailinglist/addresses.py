import re

from email_validator import EmailNotValidError, validate_email

from .errors import InvalidAddress

# "Display Name <address>"; the whole input must match when it contains "<"
_NAME_ADDR = re.compile(r"^[^<>]*<([^<>]*)>$")


def parse_address(raw) -> str:
    """Validate a single mailbox and return its normalized address.

    Accepts ``user@example.com`` as well as ``Name <user@example.com>``.
    Deliverability (DNS) is not checked.
    """
    if not raw or not raw.strip():
        raise InvalidAddress("empty address")

    address = raw.strip()
    if "<" in address or ">" in address:
        match = _NAME_ADDR.match(address)
        if match is None:
            raise InvalidAddress(f"not a mailbox: {raw!r}")
        address = match.group(1).strip()

    try:
        validated = validate_email(
            address,
            check_deliverability=False,
            allow_quoted_local=True,
            allow_domain_literal=True,
        )
    except EmailNotValidError as e:
        raise InvalidAddress(f"not a mailbox: {raw!r}: {e}") from e
    return validated.normalized
