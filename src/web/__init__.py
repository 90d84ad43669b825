"""
Flask wiring for *flux-cf-deployer*.

    from web import create_app
    app = create_app()

Collaborators are injected through :func:`create_app` and stored under
``app.extensions["cf_deployer"]``; tests pass fakes for every one of them.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

import requests
from flask import Flask, request, session

from cloudfoundry import CloudFoundry
from config import Settings
from connections import ConnectionManager
from flux import flux_from_session
from interfaces import MessagingClient, PlatformSession

from .controller import bp


@dataclass
class DeployerContext:
    settings: Settings
    connections: ConnectionManager
    cf_factory: Callable[[], PlatformSession]
    flux_provider: Callable[[Any], Optional[MessagingClient]]
    identity_resolver: Callable[[], Any]


def _session_identity() -> Optional[str]:
    """The signed-in Flux user, or whatever the front server authenticated."""
    return session.get("flux_user") or request.remote_user


def create_app(
    settings: Settings | None = None,
    *,
    connections: ConnectionManager | None = None,
    cf_factory: Callable[[], Any] | None = None,
    flux_provider: Callable[[Any], Any] | None = None,
    identity_resolver: Callable[[], Any] | None = None,
) -> Flask:
    """Build the Flask app with the deploy controller mounted."""
    settings = settings if settings is not None else Settings()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.SECRET_KEY

    # One connection pool per app, shared by every per-request client.
    http = requests.Session()

    if connections is None:
        connections = ConnectionManager(settings.MAX_CF_CONNECTIONS)
    if cf_factory is None:
        cf_factory = lambda: CloudFoundry.from_settings(settings, http=http)  # noqa: E731
    if flux_provider is None:
        flux_provider = lambda identity: flux_from_session(  # noqa: E731
            session, settings.FLUX_URL, timeout=settings.HTTP_TIMEOUT, http=http
        )
    if identity_resolver is None:
        identity_resolver = _session_identity

    app.extensions["cf_deployer"] = DeployerContext(
        settings=settings,
        connections=connections,
        cf_factory=cf_factory,
        flux_provider=flux_provider,
        identity_resolver=identity_resolver,
    )
    app.register_blueprint(bp)

    @app.get("/health")
    def health() -> tuple[str, int]:
        """Liveness check for containers / k8s."""
        return "OK", 200

    return app


__all__: list[str] = ["DeployerContext", "create_app", "bp"]
