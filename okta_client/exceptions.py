"""Okta-specific exceptions for error handling."""
from __future__ import annotations
import json
from typing import Any, Optional


class OktaError(Exception):
    """Base exception for all Okta operations."""
    pass


class InvalidRequestError(OktaError):
    """Request descriptor could not be built (bad path or unencodable body)."""
    pass


class InvalidOptionsError(InvalidRequestError):
    """Query options value could not be serialized into query parameters."""
    pass


class AuthorizationError(OktaError):
    """No valid credential could be attached to the request."""
    pass


class TransportError(OktaError):
    """Network-level failure while talking to the Okta API.

    The underlying ``requests`` exception is available as ``__cause__``.
    """
    pass


class DecodeError(OktaError):
    """Response body does not match the expected shape.

    Attributes:
        response: Response metadata when the failure happened after a reply was received
    """

    def __init__(self, message: str, response: Any = None):
        self.response = response
        super().__init__(message)


class APIStatusError(OktaError):
    """Non-success HTTP status from the Okta API.

    Attributes:
        status_code: HTTP status code
        body: Raw response body text
        endpoint: API endpoint that failed
        error_code: Okta ``errorCode`` when the body is an Okta error object
        error_summary: Okta ``errorSummary`` when the body is an Okta error object
    """

    def __init__(self, status_code: int, body: str, endpoint: str):
        self.status_code = status_code
        self.body = body
        self.endpoint = endpoint
        self.error_code: Optional[str] = None
        self.error_summary: Optional[str] = None
        try:
            payload = json.loads(body) if body else None
        except ValueError:
            payload = None
        if isinstance(payload, dict):
            self.error_code = payload.get("errorCode")
            self.error_summary = payload.get("errorSummary")
        message = self.error_summary or body
        super().__init__(f"[{status_code}] {endpoint}: {message}")


class AuthenticationFailedError(OktaError):
    """Primary authentication did not return SUCCESS."""

    def __init__(self, status: str = ""):
        self.status = status
        super().__init__("authentication failed. Please check username/password.")


class ContextCancelledError(OktaError):
    """The operation's context was cancelled or its deadline passed."""
    pass
