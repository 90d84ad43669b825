"""
src/config.py
════════════════════════════════════════════════════════════════════════════
Centralised configuration for *flux-cf-deployer*.

All “knobs” come from environment variables **or** the optional `.env`
file in the project root (pydantic-settings reads it for us).

The only setting the controller truly needs is ``CLOUDFOUNDRY_URL``; it
falls back to the public Pivotal Web Services endpoint when unset.
"""

from __future__ import annotations

import os
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CLOUDFOUNDRY_URL = "https://api.run.pivotal.io/"


class Settings(BaseSettings):
    """
    All configuration values with type validation.

    Override any field by exporting an environment variable with the same
    name (case-insensitive), or by editing a local `.env` file.

    Examples
    --------
    ```bash
    export CLOUDFOUNDRY_URL="https://api.sys.example.com/"
    export PUSH_TIMEOUT="900"
    ```
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    # ──────────────────────────────────────────────────────────────────────
    # Remote services
    # ──────────────────────────────────────────────────────────────────────
    CLOUDFOUNDRY_URL: str = Field(
        DEFAULT_CLOUDFOUNDRY_URL,
        description="Base URL of the Cloud Foundry API (cloud controller).",
    )
    FLUX_URL: str = Field(
        "https://flux.cfapps.io",
        description="Base URL of the Flux messaging/project service.",
    )
    FLUX_SIGNIN_URL: str = Field(
        "/signin/flux",
        description="Where users without a Flux connection are sent.",
    )

    # ──────────────────────────────────────────────────────────────────────
    # Web layer
    # ──────────────────────────────────────────────────────────────────────
    SECRET_KEY: str = Field(
        default_factory=lambda: os.urandom(24).hex(),
        description="Flask session signing key; random per process if unset.",
    )

    # ──────────────────────────────────────────────────────────────────────
    # Timeouts & limits
    # ──────────────────────────────────────────────────────────────────────
    HTTP_TIMEOUT: float = Field(
        30.0,
        gt=0,
        description="Seconds to wait for ordinary HTTP / messaging calls.",
    )
    PUSH_TIMEOUT: float = Field(
        600.0,
        gt=0,
        description="Seconds to wait for a push; deployments are slow.",
    )
    MAX_CF_CONNECTIONS: int = Field(
        0,
        ge=0,
        description="Upper bound on stored CF sessions; 0 means unbounded.",
    )

    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO",
        description="Root log-level for the whole application.",
    )

    # ──────────────────────────────────────────────────────────────────────
    # Validators
    # ──────────────────────────────────────────────────────────────────────
    @field_validator("CLOUDFOUNDRY_URL", "FLUX_URL", "FLUX_SIGNIN_URL")
    @classmethod
    def _url_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("URL settings must not be empty.")
        return v.strip()

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v

    # ──────────────────────────────────────────────────────────────────────
    # Convenience dunder methods
    # ──────────────────────────────────────────────────────────────────────
    def __repr__(self) -> str:  # pragma: no cover
        """Short one-liner for debug sessions; masks secrets."""
        key_masked = self.SECRET_KEY[:4] + "…" if self.SECRET_KEY else "NOT-SET"
        return (
            f"Settings(cf='{self.CLOUDFOUNDRY_URL}', "
            f"flux='{self.FLUX_URL}', "
            f"secret_key='{key_masked}')"
        )
