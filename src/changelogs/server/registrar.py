"""
Route Registrar
===============

Binds changelog endpoints onto a FastAPI application, at most once per route.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

logger = logging.getLogger(__name__)


def _changelog_endpoint(body: str):
    # The body is fixed when the route is bound; later cache changes do not reach it.
    async def serve_changelog() -> PlainTextResponse:
        return PlainTextResponse(body)

    return serve_changelog


class RouteRegistrar:
    """Idempotent GET route registration for plain-text bodies."""

    def __init__(self, app: FastAPI):
        self.app = app
        self._registered: set[str] = set()

    def __contains__(self, route: str) -> bool:
        return route in self._registered

    @property
    def routes(self) -> list[str]:
        return sorted(self._registered)

    def reserve(self, route: str) -> None:
        """Claim a route served by something else so no changelog is bound to it."""
        self._registered.add(route)

    def register(self, route: str, body: str) -> bool:
        """
        Bind ``GET route`` to always answer ``body`` as text/plain.

        Args:
            route: Endpoint path, e.g. ``/modA/1.2.3``
            body: Response body

        Returns:
            True if the route was bound, False if it already existed
        """
        if route in self._registered:
            return False
        self._registered.add(route)
        logger.info("Setting up endpoint: '%s'", route)

        self.app.add_api_route(
            route,
            _changelog_endpoint(body),
            methods=["GET"],
            response_class=PlainTextResponse,
            include_in_schema=False,
            name=f"changelog:{route}",
        )
        return True
