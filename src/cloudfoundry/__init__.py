"""
Cloud Foundry session helpers for *flux-cf-deployer*.

    from cloudfoundry import CloudFoundry

Every logged-in user owns one :class:`CloudFoundry`; the web layer keeps them
in a :class:`connections.ConnectionManager`.
"""
from __future__ import annotations

from .client import CloudFoundry

__all__: list[str] = ["CloudFoundry"]
