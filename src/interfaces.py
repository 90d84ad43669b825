"""
Capability contracts for the two external collaborators.

Structural ``Protocol``s rather than base classes: the controller only needs
these methods, and tests can hand in plain fakes.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from deployment import DeploymentConfig


@runtime_checkable
class MessagingConnector(Protocol):
    """Live connection used to address the per-user messaging channels."""

    config: Any

    def request(
        self,
        message_type: str,
        payload: Dict[str, Any],
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Send a request message and return the decoded response."""
        ...


@runtime_checkable
class MessagingClient(Protocol):
    """Per-user connection to the Flux project/messaging service."""

    def get_projects(self) -> List[str]: ...

    def get_messaging_connector(self) -> MessagingConnector: ...

    def get_user_profile(self) -> Any: ...

    def get_access_token(self) -> str: ...


@runtime_checkable
class PlatformSession(Protocol):
    """One authenticated session against the Cloud Foundry platform."""

    def login(
        self,
        flux: MessagingClient,
        login: Optional[str],
        password: Optional[str],
        space: Optional[str] = None,
    ) -> None: ...

    def get_spaces(self, connector: MessagingConnector) -> List[str]: ...

    def get_space(self) -> Optional[str]: ...

    def set_space(self, space: str) -> None: ...

    def get_deployment_config(
        self, connector: MessagingConnector, project: str
    ) -> DeploymentConfig: ...

    def push(self, connector: MessagingConnector, config: DeploymentConfig) -> None: ...

    def get_user(self) -> Optional[str]: ...

    def is_logged_in(self) -> bool: ...
