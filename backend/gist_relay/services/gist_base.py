"""
Gist Relay — Abstract Gist Service Interface
=============================================

What:  Abstract base class for the upstream gist provider.
Why:   The routes depend on this interface only, so tests can hand the app
       factory an in-memory fake and never touch the network.
How:   GitHubGistService implements it over httpx; the fixture in
       tests/conftest.py implements it over a dict.
Who:   Called by the /api route handlers.
"""

from abc import ABC, abstractmethod

from gist_relay.schemas.gist import Gist, RawGist


class GistService(ABC):
    """
    Abstract interface for storing and fetching shared notebooks.

    Contract:
        - fetch_raw() makes at most one upstream request and raises
          NotFoundError for every failure
        - create_gist() resolves the credential before any upstream request,
          then makes at most one request
        - Neither method retries
    """

    @abstractmethod
    async def fetch_raw(self, gist_id: str) -> RawGist:
        """
        Fetch the raw content of a gist owned by the publishing account.

        Args:
            gist_id: Caller-supplied identifier, non-empty. Not validated
                     beyond that; GitHub decides whether it exists.

        Returns:
            RawGist with the body bytes exactly as served upstream.

        Raises:
            NotFoundError: Transport failure or any non-200 upstream status.
        """
        ...

    @abstractmethod
    async def create_gist(self, content: str) -> Gist:
        """
        Create a non-public gist holding `content` as its only file.

        Raises:
            ConfigurationError: No credential configured (nothing sent).
            GistServiceError: GitHub failed or rejected the request.
            SerializationError: GitHub's response could not be decoded.
        """
        ...

    async def aclose(self) -> None:
        """Release upstream resources. Called once at application shutdown."""
        return None
