"""
cloudfoundry/client.py
──────────────────────
A paper-thin, retry-hardened session against Cloud Foundry.  The platform
work itself (listing spaces, reading and pushing apps) is done by the
cf-deployer service on the Flux message bus; this class only holds the
per-user login state and speaks to UAA when a password is supplied.

Messages sent over the connector
--------------------------------
cfLoginRequest              – hand the CF credentials/token to the deployer
getSpacesRequest            – list "org/space" names visible to the user
getDeploymentConfigRequest  – current deployment of one project
cfPushRequest               – deploy a project (slow, synchronous)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import backoff  # type: ignore
import requests

from config import Settings
from deployment import DeploymentConfig
from errors import CloudFoundryError
from interfaces import MessagingClient, MessagingConnector

_LOG = logging.getLogger(__name__)

# The `cf` CLI's public OAuth client; it has an empty secret.
CF_CLIENT_ID = "cf"
CF_CLIENT_SECRET = ""


def _backoff_hdlr(details):
    """backoff debug helper"""
    _LOG.warning(
        "retry %s in %.1fs after exception: %r",
        details["tries"],
        details["wait"],
        details.get("exception"),
    )


def _raise_for_status(resp: requests.Response) -> None:
    if resp.ok:
        return
    description = resp.reason or "HTTP error"
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        description = (
            body.get("description")
            or body.get("error_description")
            or body.get("error")
            or description
        )
    raise CloudFoundryError(
        f"{resp.status_code} {description}", status_code=resp.status_code
    )


class CloudFoundry:
    """
    One user's Cloud Foundry session.

    ``set_space`` is a plain attribute write; two concurrent requests for the
    same user race on it and the last one wins.
    """

    def __init__(
        self,
        api_url: str,
        http: requests.Session | None = None,
        timeout: float = 30.0,
        push_timeout: float = 600.0,
    ):
        self.api_url = api_url.rstrip("/")
        self._http = http or requests.Session()
        self._timeout = timeout
        self._push_timeout = push_timeout

        self._user: Optional[str] = None
        self._flux_user: Optional[str] = None
        self._token: Optional[str] = None
        self._space: Optional[str] = None
        self._logged_in = False

    # --------------------------------------------------------------------- #
    # Constructors
    # --------------------------------------------------------------------- #
    @classmethod
    def from_settings(
        cls, settings: Settings, http: requests.Session | None = None
    ) -> "CloudFoundry":
        """Create a session bound to the configured API base URL."""
        return cls(
            settings.CLOUDFOUNDRY_URL,
            http=http,
            timeout=settings.HTTP_TIMEOUT,
            push_timeout=settings.PUSH_TIMEOUT,
        )

    # --------------------------------------------------------------------- #
    # Authentication
    # --------------------------------------------------------------------- #
    def login(
        self,
        flux: MessagingClient,
        login: Optional[str],
        password: Optional[str],
        space: Optional[str] = None,
    ) -> None:
        """
        Log in for the Flux user behind *flux*.

        With a *password* a UAA token is obtained through the password grant.
        Without one, no token is fetched and the deployer service falls back
        to an implicit grant bound to the Flux user.

        Raises
        ------
        CloudFoundryError
            If UAA or the deployer service rejects the credentials.
        """
        connector = flux.get_messaging_connector()
        flux_user = connector.config.user

        token = None
        if password:
            token = self._fetch_token(login or flux_user, password)

        connector.request(
            "cfLoginRequest",
            {
                "cfUrl": self.api_url,
                "cfUser": login,
                "cfToken": token,
            },
            timeout=self._timeout,
        )

        self._flux_user = flux_user
        self._user = login or flux_user
        self._token = token
        self._space = space
        self._logged_in = True
        _LOG.info("Cloud Foundry login OK for %s at %s", self._user, self.api_url)

    def is_logged_in(self) -> bool:
        return self._logged_in

    def get_user(self) -> Optional[str]:
        return self._user

    # --------------------------------------------------------------------- #
    # Spaces
    # --------------------------------------------------------------------- #
    def get_space(self) -> Optional[str]:
        return self._space

    def set_space(self, space: str) -> None:
        self._space = space

    def get_spaces(self, connector: MessagingConnector) -> List[str]:
        reply = self._send(connector, "getSpacesRequest", {})
        return [str(s) for s in reply.get("spaces") or []]

    # --------------------------------------------------------------------- #
    # Deployments
    # --------------------------------------------------------------------- #
    def get_deployment_config(
        self, connector: MessagingConnector, project: str
    ) -> DeploymentConfig:
        reply = self._send(connector, "getDeploymentConfigRequest", {"project": project})
        raw = reply.get("config")
        if not raw:
            return DeploymentConfig(name=project)
        return DeploymentConfig.model_validate({"name": project, **raw})

    def push(self, connector: MessagingConnector, config: DeploymentConfig) -> None:
        """Deploy *config*; blocks until the deployer service answers."""
        _LOG.info("Pushing %s to %s", config.name, config.cf_org_space)
        self._send(
            connector,
            "cfPushRequest",
            {"project": config.name, "config": config.to_message()},
            timeout=self._push_timeout,
        )

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #
    def _send(
        self,
        connector: MessagingConnector,
        message_type: str,
        payload: Dict[str, Any],
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        return connector.request(message_type, payload, timeout=timeout or self._timeout)

    @backoff.on_exception(
        backoff.expo,
        (requests.ConnectionError, requests.Timeout),
        max_tries=3,
        max_time=30,
        on_backoff=_backoff_hdlr,
    )
    def _info(self) -> Dict[str, Any]:
        """``GET /v2/info``: idempotent, so transport errors are retried."""
        resp = self._http.get(f"{self.api_url}/v2/info", timeout=self._timeout)
        _raise_for_status(resp)
        return resp.json()

    def _fetch_token(self, username: str, password: str) -> str:
        info = self._info()
        uaa = info.get("token_endpoint") or info.get("authorization_endpoint")
        if not uaa:
            raise CloudFoundryError(f"{self.api_url} did not report a token endpoint")

        try:
            resp = self._http.post(
                f"{uaa.rstrip('/')}/oauth/token",
                data={
                    "grant_type": "password",
                    "username": username,
                    "password": password,
                },
                auth=(CF_CLIENT_ID, CF_CLIENT_SECRET),
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            raise CloudFoundryError(f"Could not reach UAA at {uaa}: {exc}") from exc
        _raise_for_status(resp)
        token = resp.json().get("access_token")
        if not token:
            raise CloudFoundryError("UAA response did not contain an access token")
        return token

    def __repr__(self) -> str:
        return (
            f"CloudFoundry(url={self.api_url!r}, user={self._user!r}, "
            f"space={self._space!r}, logged_in={self._logged_in})"
        )
