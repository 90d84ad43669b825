"""
src/main.py
════════════════════════════════════════════════════════════════════════════
Command-line entry point for *flux-cf-deployer*.

* Accepts*:  --host, --port : where to listen
            --cf-url       : Cloud Foundry API base URL (overrides env)
            --debug        : Flask debug mode + DEBUG logging
            --print-settings: print the effective settings and exit

Example
-------
flux-cf-deployer --port 8080 --cf-url https://api.sys.example.com/
"""
from __future__ import annotations

import argparse
import logging
import sys
import textwrap

from flask_cors import CORS

from config import Settings
from web import create_app


# ────────────────────────────────────────────────────────────────────────────
# CLI Argument Parser
# ────────────────────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="flux-cf-deployer",
        formatter_class=argparse.RawTextHelpFormatter,
        description=textwrap.dedent(
            """
            Deploy Flux projects to Cloud Foundry from the browser.

            Optional:
              --host H          Interface to bind (default 127.0.0.1)
              --port N          Port to listen on (default 9000)
              --cf-url URL      Cloud Foundry API base URL
              --debug           Flask debug mode
              --print-settings  Show the effective settings and exit
            """
        ),
    )
    p.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    p.add_argument("--port", type=int, default=9000, help="Port to listen on.")
    p.add_argument("--cf-url", default=None, help="Cloud Foundry API base URL.")
    p.add_argument("--debug", action="store_true", help="Enable Flask debug mode.")
    p.add_argument(
        "--print-settings",
        action="store_true",
        help="Print the effective settings and exit.",
    )
    return p


def load_settings(args: argparse.Namespace) -> Settings:
    """Settings from env/.env, with CLI flags taking precedence."""
    overrides = {}
    if args.cf_url:
        overrides["CLOUDFOUNDRY_URL"] = args.cf_url
    if args.debug:
        overrides["LOG_LEVEL"] = "DEBUG"
    return Settings(**overrides)


# ────────────────────────────────────────────────────────────────────────────
# Main driver
# ────────────────────────────────────────────────────────────────────────────
def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, build the app and serve it."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_settings(args)
    except ValueError as exc:  # pydantic.ValidationError is a ValueError
        print(f"\n❌  Invalid configuration:\n{exc}", file=sys.stderr)
        sys.exit(1)

    if args.print_settings:
        print(repr(settings))
        sys.exit(0)

    logging.basicConfig(
        level=settings.LOG_LEVEL, format="%(levelname)s %(name)s %(message)s"
    )
    app = create_app(settings)
    CORS(app)
    app.run(host=args.host, port=args.port, debug=args.debug)


# ────────────────────────────────────────────────────────────────────────────
# `python src/main.py` entry-point behaviour
# ────────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    main()
