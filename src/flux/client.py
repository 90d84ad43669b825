"""
flux/client.py
──────────────
A thin HTTP wrapper around the Flux project/messaging service.  Just enough
so the controller never needs to know about endpoints, bearer headers or
message envelopes.

Messages are request/response pairs posted to
``{base_url}/api/messages/<type>``; the browser talks to the same host over
socket.io, which is why :class:`FluxConfig` can describe that transport too.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from errors import FluxError

_LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class SocketIOConfig:
    host: str
    user: str
    token: str


@dataclass(frozen=True)
class FluxConfig:
    base_url: str
    user: str
    token: str

    def to_socket_io(self) -> SocketIOConfig:
        """Transport settings handed to the browser-side socket.io client."""
        return SocketIOConfig(host=self.base_url, user=self.user, token=self.token)


@dataclass(frozen=True)
class UserProfile:
    login: str
    name: Optional[str] = None
    email: Optional[str] = None


class MessagingConnector:
    """
    Request/response channel to the Flux message bus for a single user.
    A single instance can be shared across threads.
    """

    def __init__(
        self,
        config: FluxConfig,
        http: requests.Session | None = None,
        timeout: float = 30.0,
    ):
        self.config = config
        self._http = http or requests.Session()
        self._timeout = timeout

    def request(
        self,
        message_type: str,
        payload: Dict[str, Any],
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """
        Post *payload* as a ``message_type`` message and return the reply.

        Raises
        ------
        FluxError
            On transport failures, HTTP errors, or a reply carrying ``error``.
        """
        url = f"{self.config.base_url.rstrip('/')}/api/messages/{message_type}"
        body = {"username": self.config.user, **payload}
        _LOG.debug("flux -> %s", message_type)
        try:
            resp = self._http.post(
                url,
                json=body,
                headers=self._auth_headers(),
                timeout=timeout or self._timeout,
            )
            resp.raise_for_status()
            data = resp.json() if resp.content else {}
        except requests.RequestException as exc:
            raise FluxError(f"Flux request '{message_type}' failed: {exc}") from exc
        except ValueError as exc:
            raise FluxError(f"Flux reply to '{message_type}' was not JSON") from exc

        if isinstance(data, dict) and data.get("error"):
            raise FluxError(str(data.get("errorDetails") or data["error"]))
        return data if isinstance(data, dict) else {"result": data}

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.config.token}"}


class Flux:
    """Per-user Flux client; the messaging connector is created lazily."""

    def __init__(
        self,
        base_url: str,
        user: str,
        token: str,
        http: requests.Session | None = None,
        timeout: float = 30.0,
    ):
        self._config = FluxConfig(base_url=base_url, user=user, token=token)
        self._http = http or requests.Session()
        self._timeout = timeout
        self._connector: MessagingConnector | None = None

    # --------------------------------------------------------------------- #
    # Public API
    # --------------------------------------------------------------------- #
    def get_messaging_connector(self) -> MessagingConnector:
        if self._connector is None:
            self._connector = MessagingConnector(
                self._config, http=self._http, timeout=self._timeout
            )
        return self._connector

    def get_projects(self) -> List[str]:
        """Names of the projects the user has in Flux."""
        reply = self.get_messaging_connector().request("getProjectsRequest", {})
        projects = reply.get("projects") or []
        return [p["name"] if isinstance(p, dict) else str(p) for p in projects]

    def get_user_profile(self) -> UserProfile:
        url = f"{self._config.base_url.rstrip('/')}/api/users/{self._config.user}"
        try:
            resp = self._http.get(
                url,
                headers={"Authorization": f"Bearer {self._config.token}"},
                timeout=self._timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise FluxError(f"Could not fetch Flux profile: {exc}") from exc
        return UserProfile(
            login=data.get("login") or self._config.user,
            name=data.get("name"),
            email=data.get("email"),
        )

    def get_access_token(self) -> str:
        return self._config.token

    @property
    def user(self) -> str:
        return self._config.user

    def __repr__(self) -> str:
        return f"Flux(user={self._config.user!r}, host={self._config.base_url!r})"
