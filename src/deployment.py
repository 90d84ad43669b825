"""
deployment.py
────────────────────────────────────────────────────────────────────────────
`DeploymentConfig` describes how one Flux project maps onto a Cloud Foundry
app: the target ``org/space`` and, once deployed, its routes.

The model serialises with the camelCase aliases the cf-deployer service
speaks on the messaging bus (``cfOrgSpace``).
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from errors import MalformedInput


class DeploymentConfig(BaseModel):
    """One project's deployment target, created fresh per request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    cf_org_space: Optional[str] = Field(None, alias="cfOrgSpace")
    routes: List[str] = Field(default_factory=list)

    def set_cf_org_space(self, org_space: str) -> None:
        parse_org_space(org_space)
        self.cf_org_space = org_space

    @property
    def org(self) -> str | None:
        return parse_org_space(self.cf_org_space)[0] if self.cf_org_space else None

    @property
    def space(self) -> str | None:
        return parse_org_space(self.cf_org_space)[1] if self.cf_org_space else None

    def to_message(self) -> dict:
        """Payload form used on the messaging bus."""
        return self.model_dump(by_alias=True)


def parse_org_space(value: str | None) -> Tuple[str, str]:
    """
    Split ``"org/space"`` into ``(org, space)``.

    Raises
    ------
    MalformedInput
        Unless *value* is exactly two non-empty parts joined by one ``/``,
        with no whitespace around either part.
    """
    pieces = (value or "").split("/")
    if len(pieces) != 2 or not all(p and p == p.strip() for p in pieces):
        raise MalformedInput(
            f"Malformed space {value!r}: expected the form 'org/space'."
        )
    return pieces[0], pieces[1]
