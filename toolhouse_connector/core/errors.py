"""
Error taxonomy for the Toolhouse connector.

TransportFailure and ConfigurationError are raised. AuthorizationDenied is a
result value: the visibility resolver returns it and the router turns it into a
failure-lane record.
"""

from typing import Any, Optional

ACCESS_DENIED_STATUS = 403
ACCESS_DENIED_MESSAGE = "access denied"
MISSING_CREDENTIALS_MESSAGE = (
    "Unable to retrieve Toolhouse API credentials. Please check your configuration."
)


class TransportFailure(Exception):
    """Raised when an HTTP call fails (network error or non-2xx response)"""

    def __init__(
        self,
        message: str,
        http_status: Optional[int] = None,
        response_body: Optional[Any] = None,
    ):
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.response_body = response_body

    @property
    def is_forbidden(self) -> bool:
        return self.http_status == ACCESS_DENIED_STATUS

    def __repr__(self) -> str:
        return f"<TransportFailure(status={self.http_status}, message='{self.message}')>"


class ConfigurationError(Exception):
    """Raised when an operation needs configuration (e.g. a credential) that is missing"""

    pass


class AuthorizationDenied:
    """Access to a private agent was refused"""

    status = ACCESS_DENIED_STATUS
    message = ACCESS_DENIED_MESSAGE

    def __init__(self, details: Optional[Any] = None):
        self.details = details

    @classmethod
    def from_failure(cls, failure: TransportFailure) -> "AuthorizationDenied":
        return cls(details=failure.response_body)

    def __eq__(self, other) -> bool:
        return isinstance(other, AuthorizationDenied) and other.details == self.details

    def __repr__(self) -> str:
        return f"<AuthorizationDenied(details={self.details!r})>"
