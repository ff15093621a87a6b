"""
Gist Relay — FastAPI Dependencies
==================================

What:  Accessors for the objects create_app() attaches to `app.state`.
Why:   Routes receive the configured gist service and settings through
       Depends() instead of importing module-level singletons, so every app
       instance (production or test) uses exactly what it was built with.
"""

from fastapi import Request

from gist_relay.config import Settings
from gist_relay.exceptions import ConfigurationError
from gist_relay.services.gist_base import GistService


def get_gist_service(request: Request) -> GistService:
    # None until the lifespan has built the default service
    service = request.app.state.gist_service
    if service is None:
        raise ConfigurationError(message="The gist service has not been started.")
    return service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings
