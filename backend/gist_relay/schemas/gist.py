"""
Gist Relay — Pydantic Wire Schemas
===================================

What:  Pydantic models for the gist objects exchanged with GitHub and the
       relay's own error/health responses.
Why:   The created gist is returned to the notebook unmodified except for
       serialization, so the models describe the fields we rely on and keep
       every other provider field as an extra.
Who:   GitHubGistService validates upstream payloads into these; routes
       serialize them back out.

Reference: https://docs.github.com/en/rest/gists/gists#create-a-gist
"""

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# ══════════════════════════════════════════════════════════════════════════
# Gist Models — GitHub's representation, relayed as-is
# ══════════════════════════════════════════════════════════════════════════


class GistOwner(BaseModel):
    """The account that owns a gist (always the publishing bot for ours)."""

    model_config = ConfigDict(extra="allow")

    login: str
    id: Optional[int] = None
    html_url: Optional[str] = None
    avatar_url: Optional[str] = None


class GistFile(BaseModel):
    """One named file inside a gist."""

    model_config = ConfigDict(extra="allow")

    filename: Optional[str] = None
    type: Optional[str] = None
    language: Optional[str] = None
    raw_url: Optional[str] = None
    size: Optional[int] = None
    truncated: Optional[bool] = None
    content: Optional[str] = None


class Gist(BaseModel):
    """
    What:  A created gist as returned by `POST /gists`.
    Who:   Returned by POST /api.

    Unknown fields (forks, history, node_id, ...) are preserved by
    `extra="allow"` and come back out of `model_dump()` untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Gist identifier, used as `id` for GET /api")
    url: Optional[str] = None
    html_url: Optional[str] = None
    git_pull_url: Optional[str] = None
    git_push_url: Optional[str] = None
    files: Dict[str, GistFile] = Field(default_factory=dict)
    public: bool = Field(description="Visibility flag (always false for shared notebooks)")
    description: Optional[str] = None
    owner: Optional[GistOwner] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    comments: Optional[int] = None


class GistFileContent(BaseModel):
    content: str


class GistCreateRequest(BaseModel):
    """Body of GitHub's `POST /gists`."""

    description: str
    public: bool
    files: Dict[str, GistFileContent]


class RawGist(BaseModel):
    """
    What:  Raw content of a gist as fetched from the raw-content endpoint.
    Why:   The body is relayed byte-for-byte, along with the upstream
           content type so the client sees what GitHub served.
    """

    content: bytes
    media_type: Optional[str] = None


# ══════════════════════════════════════════════════════════════════════════
# Relay Responses
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    What:  Standardized error body for every non-2xx response.

    Example:
        {
            "error": "not_found",
            "message": "Failed to fetch gist with ID doesnotexist",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health."""

    status: str = Field(description="Overall service status: healthy, degraded")
    version: str = Field(description="Application version")
    gist_sharing: str = Field(description="Gist creation: configured, unconfigured")
    uptime_seconds: float = Field(description="Seconds since service started")
