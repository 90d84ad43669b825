"""
errors.py
────────────────────────────────────────────────────────────────────────────
Error taxonomy shared by the controller and its collaborators.

Everything that derives from :class:`DeployerError` is *recoverable*: the web
layer turns it into a redirect instead of a 500.  Two subclasses are plain
navigational signals (``NotAuthenticated`` and ``MessagingUnavailable``);
the rest carry a human-readable message that ends up in ``login?error=``.
"""

from __future__ import annotations


class DeployerError(Exception):
    """Base class for recoverable errors."""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class NotAuthenticated(DeployerError):
    """No Cloud Foundry session, or the session is no longer logged in."""


class MessagingUnavailable(DeployerError):
    """The Flux messaging client is not connected for this user."""


class MalformedInput(DeployerError):
    """A request parameter failed validation (e.g. a bad ``org/space``)."""


class CloudFoundryError(DeployerError):
    """The platform (or the cf-deployer service) rejected a call."""

    def __init__(self, message: str = "", status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FluxError(DeployerError):
    """The Flux service rejected a call or returned an error message."""


def error_message(exc: BaseException) -> str:
    """
    Extract a human-readable, never-empty message from *exc*.

    Walks the ``__cause__`` / ``__context__`` chain and returns the first
    non-blank message; falls back to the outermost exception's class name.
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        text = getattr(current, "message", None) or str(current)
        if isinstance(text, str) and text.strip():
            return text.strip()
        current = current.__cause__ or current.__context__
    return type(exc).__name__
