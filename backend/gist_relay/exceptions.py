"""
Gist Relay — Custom Exception Hierarchy
========================================

What:  Application-specific exceptions for the relay's failure modes.
Why:   Each failure maps to one HTTP status. Services raise, the global
       handlers registered in main.py translate, and a failing request can
       never take the process down with it.
How:   Each exception class carries a message and optional context dict.
Who:   Raised by routes and the gist service; caught by global handlers.

Exception Hierarchy:
    GistRelayError (base)
    ├── ValidationError       → 400 Bad Request (missing id / body)
    ├── NotFoundError         → 404 Not Found (gist could not be fetched)
    ├── ConfigurationError    → 503 Service Unavailable (no GITHUB_TOKEN)
    ├── GistServiceError      → 502 Bad Gateway (gist creation failed)
    └── SerializationError    → 500 Internal Server Error (bad provider payload)
"""

from typing import Any, Dict, Optional


class GistRelayError(Exception):
    """
    Base exception for all relay errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, only some handlers return it)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(GistRelayError):
    """
    Raised when the client request is incomplete.

    When:    GET without an `id`, POST with an empty or non-UTF-8 body.
    HTTP:    400 Bad Request
    Always raised before any upstream call is made.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(GistRelayError):
    """
    Raised when a gist's raw content could not be fetched.

    HTTP:    404 Not Found

    Covers both an upstream non-200 status and a transport failure. The two
    are reported identically to the client; `context["reason"]` keeps the
    distinction for the server log.
    """

    def __init__(
        self,
        resource_id: str,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource_id"] = resource_id
        if reason:
            ctx["reason"] = reason
        super().__init__(message=f"Failed to fetch gist with ID {resource_id}", context=ctx)
        self.resource_id = resource_id


class ConfigurationError(GistRelayError):
    """
    Raised when a capability is requested that the server is not configured for.

    When:    POST while GITHUB_TOKEN is unset.
    HTTP:    503 Service Unavailable
    """

    def __init__(
        self,
        message: str = "This server is missing required configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class GistServiceError(GistRelayError):
    """
    Raised when GitHub rejects or fails a gist creation request.

    When:    Transport error, bad credential (401/403), validation (422),
             outage (5xx). No retry; every cause is handled the same way.
    HTTP:    502 Bad Gateway
    """

    def __init__(
        self,
        message: str = "Failed to create a gist",
        status_code: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["upstream_status"] = status_code
        super().__init__(message=message, context=ctx)
        self.status_code = status_code


class SerializationError(GistRelayError):
    """
    Raised when the created gist cannot be decoded or re-encoded.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Failed to serialize the created gist",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
