import enum

from botocore.exceptions import BotoCoreError, ClientError


class ErrorKind(enum.Enum):
    RESOURCE_LIMIT = "resource-limit"
    NOT_FOUND = "not-found"
    CONFLICT = "conflict"
    REJECTED = "rejected"
    INTERNAL = "internal"
    UNKNOWN = "unknown"

    @property
    def retryable(self) -> bool:
        return self in (ErrorKind.RESOURCE_LIMIT, ErrorKind.INTERNAL)


# DynamoDB and SES error codes, as reported in ClientError.response["Error"]["Code"]
ERROR_KINDS = {
    "ProvisionedThroughputExceededException": ErrorKind.RESOURCE_LIMIT,
    "RequestLimitExceeded": ErrorKind.RESOURCE_LIMIT,
    "ThrottlingException": ErrorKind.RESOURCE_LIMIT,
    "Throttling": ErrorKind.RESOURCE_LIMIT,
    "ItemCollectionSizeLimitExceededException": ErrorKind.RESOURCE_LIMIT,
    "ResourceNotFoundException": ErrorKind.NOT_FOUND,
    "ConfigurationSetDoesNotExist": ErrorKind.NOT_FOUND,
    "ConditionalCheckFailedException": ErrorKind.CONFLICT,
    "TransactionConflictException": ErrorKind.CONFLICT,
    "MessageRejected": ErrorKind.REJECTED,
    "MailFromDomainNotVerifiedException": ErrorKind.REJECTED,
    "ConfigurationSetSendingPausedException": ErrorKind.REJECTED,
    "AccountSendingPausedException": ErrorKind.REJECTED,
    "InternalServerError": ErrorKind.INTERNAL,
    "ServiceUnavailable": ErrorKind.INTERNAL,
}


class ConfigurationError(Exception):
    pass


class InvalidAddress(ValueError):
    pass


class DownstreamError(Exception):
    """A single failed call to DynamoDB or SES."""

    def __init__(self, service, operation, kind, code=None, message=""):
        self.service = service
        self.operation = operation
        self.kind = kind
        self.code = code
        self.message = message
        super().__init__(f"{service} {operation} failed [{code or kind.value}]: {message}")

    @property
    def retryable(self):
        return self.kind.retryable

    @classmethod
    def from_boto(cls, service, operation, err):
        if isinstance(err, ClientError):
            error = err.response.get("Error", {})
            code = error.get("Code")
            return cls(service, operation, ERROR_KINDS.get(code, ErrorKind.UNKNOWN),
                       code=code, message=error.get("Message", str(err)))
        if isinstance(err, BotoCoreError):
            return cls(service, operation, ErrorKind.UNKNOWN, message=str(err))
        raise TypeError(f"not a botocore error: {err!r}")
