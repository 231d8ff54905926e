"""
Error types raised by the verification client and the OGP engine.
"""

from typing import Optional


class VerificationError(Exception):
    """Base class for every failure of a verification call."""


class TransportError(VerificationError):
    """No reply was received (connection refused, DNS failure, timeout)."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(str(cause) or type(cause).__name__)


class RemoteError(VerificationError):
    """The endpoint answered with a non-success status."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}")


class MalformedResponse(VerificationError):
    """The endpoint answered with success but the body is not a valid result."""

    def __init__(self, reason: str, body: Optional[str] = None):
        self.body = body
        super().__init__(f"Malformed response: {reason}")


class OGPFetchError(Exception):
    """The target page could not be fetched."""


class InvalidTargetURL(OGPFetchError):
    """The target URL is malformed or points at a private host."""
