# remediation_handler/core/exceptions.py
from typing import Optional


class RemediationError(Exception):
    """Base class for every failure that ends an invocation."""


class ConfigurationError(RemediationError):
    """Missing or invalid API location / credentials."""


class EventDecodeError(RemediationError):
    """The event document could not be read."""


class PolicyDecodeError(RemediationError):
    """The remediation actions annotation is not a valid JSON array of actions."""


class HTTPRequestError(RemediationError):
    """An API call failed. Carries the request URL and, when a response arrived, its status."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class AuthenticationError(HTTPRequestError):
    pass


class DispatchError(HTTPRequestError):
    def __init__(self, message: str, action: str, namespace: str, url: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message, url=url, status_code=status_code)
        self.action = action
        self.namespace = namespace


class NetworkError(HTTPRequestError):
    """Transport-level failure (connection refused, DNS, timeout)."""


class TLSError(HTTPRequestError):
    """The trusted CA file could not be loaded, or certificate verification failed."""
