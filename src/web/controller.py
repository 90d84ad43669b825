"""
web/controller.py
────────────────────────────────────────────────────────────────────────────
Deploy controller: the `/cloudfoundry/*` routes.

Every handler follows the same contract:

  1. resolve the caller and their Cloud Foundry session; no session, or a
     session that is no longer logged in → ``/cloudfoundry/login``
  2. resolve the caller's Flux client; none → the Flux sign-in page
  3. call out to the collaborators and render a view, or redirect
  4. anything else that goes wrong → ``/cloudfoundry/login?error=<msg>``

Step 4 happens once, in :func:`redirect_on_error`.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Tuple
from urllib.parse import urlencode

from flask import Blueprint, current_app, redirect, render_template, request, url_for
from werkzeug.exceptions import HTTPException

from deployment import DeploymentConfig, parse_org_space
from errors import (
    MalformedInput,
    MessagingUnavailable,
    NotAuthenticated,
    error_message,
)

_LOG = logging.getLogger(__name__)

bp = Blueprint(
    "cloudfoundry",
    __name__,
    url_prefix="/cloudfoundry",
    template_folder="templates",
)

NOTHING_TO_DEPLOY = "Nothing to deploy: You don't have any Flux projects!"


# ──────────────────────────────────────────────────────────────────────────
# Helpers
# ──────────────────────────────────────────────────────────────────────────
def _ctx():
    return current_app.extensions["cf_deployer"]


def _with_query(path: str, **params: str) -> str:
    """Append *params* percent-encoded (UTF-8, ``quote_plus``) to *path*."""
    return f"{path}?{urlencode(params)}" if params else path


def _login_url(error: str | None = None) -> str:
    path = url_for("cloudfoundry.login")
    return _with_query(path, error=error) if error else path


def _require_session(ctx) -> Tuple[Any, Any]:
    identity = ctx.identity_resolver()
    cf = ctx.connections.get(identity)
    if cf is None or not cf.is_logged_in():
        raise NotAuthenticated()
    return identity, cf


def _require_flux(ctx, identity):
    flux = ctx.flux_provider(identity) if identity is not None else None
    if flux is None:
        raise MessagingUnavailable()
    return flux


def redirect_on_error(view: Callable[..., Any]) -> Callable[..., Any]:
    """Map every failure of *view* to a navigational redirect."""

    @wraps(view)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        try:
            return view(*args, **kwargs)
        except HTTPException:
            raise
        except NotAuthenticated:
            return redirect(_login_url())
        except MessagingUnavailable:
            return redirect(_ctx().settings.FLUX_SIGNIN_URL)
        except Exception as exc:  # noqa: BLE001
            # A restarted cf-deployer service forgets its logins while we still
            # hold a session; logging in again fixes that.
            _LOG.exception("%s failed", request.path)
            return redirect(_login_url(error_message(exc)))

    return wrapped


# ──────────────────────────────────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────────────────────────────────
@bp.get("/deploy")
@redirect_on_error
def deploy() -> Any:
    """List the user's Flux projects with their current deployment."""
    ctx = _ctx()
    identity, cf = _require_session(ctx)
    flux = _require_flux(ctx, identity)
    connector = flux.get_messaging_connector()

    default_space = cf.get_space()
    projects = flux.get_projects()
    spaces = cf.get_spaces(connector)
    _LOG.debug("deploy: space=%s projects=%s spaces=%s", default_space, projects, spaces)

    model: dict[str, Any] = {
        "user": cf.get_user(),
        "projects": projects,
        "spaces": spaces,
        "defaultSpace": default_space,
        "deployments": [cf.get_deployment_config(connector, p) for p in projects],
    }
    if not projects:
        model["error_message"] = NOTHING_TO_DEPLOY
    return render_template("cloudfoundry/deploy.html", **model)


@bp.post("/deploy.do")
@redirect_on_error
def deploy_do() -> Any:
    """Push one project into ``space`` and go watch its logs."""
    project = request.form["project"]
    space = request.form["space"]

    ctx = _ctx()
    identity, cf = _require_session(ctx)
    flux = _require_flux(ctx, identity)

    if not project.strip():
        raise MalformedInput("No project selected.")
    dep = DeploymentConfig(name=project)
    dep.set_cf_org_space(space)
    if project not in flux.get_projects():
        raise MalformedInput(f"Unknown Flux project {project!r}.")

    cf.set_space(space)  # default space from now on
    cf.push(flux.get_messaging_connector(), dep)
    _LOG.info("Deployed %s to %s for %s", project, space, identity)
    return redirect(_with_query(url_for("cloudfoundry.app_log"), space=space, project=project))


@bp.get("")
@redirect_on_error
def profile() -> Any:
    ctx = _ctx()
    identity, cf = _require_session(ctx)
    flux = _require_flux(ctx, identity)
    return render_template(
        "cloudfoundry.html",
        space=cf.get_space(),
        user=cf.get_user(),
        spaces=cf.get_spaces(flux.get_messaging_connector()),
    )


@bp.route("/processLogin", methods=["GET", "POST"])
@redirect_on_error
def process_login() -> Any:
    """
    Log the caller into Cloud Foundry and remember the session.

    ``cf_password`` may be omitted, in which case the deployer service is
    left to use an implicit grant for the Flux user.
    """
    ctx = _ctx()
    identity = ctx.identity_resolver()
    flux = _require_flux(ctx, identity)

    login = request.values.get("cf_login") or None
    password = request.values.get("cf_password") or None

    cf = ctx.cf_factory()
    cf.login(flux, login, password)
    ctx.connections.put(identity, cf)
    return redirect(url_for("cloudfoundry.deploy"))


@bp.get("/login")
def login() -> Any:
    return render_template("cloudfoundry/login.html", error=request.args.get("error"))


@bp.get("/app-log")
@redirect_on_error
def app_log() -> Any:
    """Routes of a deployed app plus what the browser needs to tail its logs."""
    org_space = request.args["space"]
    project = request.args["project"]

    ctx = _ctx()
    identity, cf = _require_session(ctx)
    flux = _require_flux(ctx, identity)

    org, space = parse_org_space(org_space)
    connector = flux.get_messaging_connector()
    return render_template(
        "cloudfoundry/app-log.html",
        org=org,
        space=space,
        app=project,
        routes=cf.get_deployment_config(connector, project).routes,
        fluxUser=flux.get_user_profile().login,
        fluxHost=connector.config.to_socket_io().host,
        fluxToken=flux.get_access_token(),
    )
