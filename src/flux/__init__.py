"""
Flux messaging client for *flux-cf-deployer*.

    from flux import Flux, flux_from_session

:func:`flux_from_session` is the default per-request provider: a user has a
Flux connection when the surrounding application's sign-in flow left
``flux_user`` and ``flux_token`` in the Flask session.
"""
from __future__ import annotations

from typing import Any, Mapping

import requests

from .client import Flux, FluxConfig, MessagingConnector, SocketIOConfig, UserProfile


def flux_from_session(
    session: Mapping[str, Any],
    base_url: str,
    timeout: float = 30.0,
    http: requests.Session | None = None,
) -> Flux | None:
    """
    Build a :class:`Flux` client from session data, or None if not signed in.

    Pass *http* to reuse one connection pool across requests.
    """
    user = session.get("flux_user")
    token = session.get("flux_token")
    if not user or not token:
        return None
    return Flux(base_url, user, token, http=http, timeout=timeout)


__all__: list[str] = [
    "Flux",
    "FluxConfig",
    "MessagingConnector",
    "SocketIOConfig",
    "UserProfile",
    "flux_from_session",
]
