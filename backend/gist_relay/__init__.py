"""
Gist Relay — Application Package Initializer
=============================================

What: Marks the `gist_relay` directory as a Python package.
Why:  Enables module imports like `from gist_relay.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The relay is a thin pass-through in front of GitHub Gists:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Upstream Client)      │  ← GistService interface + GitHub impl
    ├─────────────────────────────────────┤
    │         Schemas (Wire Data)         │  ← Pydantic models of the gist object
    └─────────────────────────────────────┘

    There is no persistence layer: GitHub owns storage, retention and deletion.
"""

__version__ = "1.0.0"
