"""
app.py
────────────────────────────────────────────────────────────────────────────
Flask façade for *flux-cf-deployer*.

Endpoints
─────────
GET  /health                      → "OK"          (liveness probe)
GET  /cloudfoundry                → profile view
GET  /cloudfoundry/login          → CF login form
GET  /cloudfoundry/processLogin   → log in, then → /cloudfoundry/deploy
GET  /cloudfoundry/deploy         → deployable Flux projects
POST /cloudfoundry/deploy.do      → push, then → /cloudfoundry/app-log
GET  /cloudfoundry/app-log        → routes + log-tail parameters

Anything that fails inside a handler ends up as a redirect to
``/cloudfoundry/login?error=<message>``; nothing surfaces as a raw 500.

Run locally:

    export FLASK_APP=app.py
    python app.py          # or `flask run`

Behind a reverse proxy you can use `PORT=8080` to rebind.
"""

from __future__ import annotations

import logging
import os

from flask_cors import CORS

from config import Settings
from web import create_app

# ──────────────────────────────────────────────────────────────────────────
# Flask setup
# ──────────────────────────────────────────────────────────────────────────
settings = Settings()
logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s %(name)s %(message)s")
_LOG = logging.getLogger("api")

app = create_app(settings)
CORS(app)  # allow all origins; tighten in production as needed
_LOG.info("Cloud Foundry API: %s", settings.CLOUDFOUNDRY_URL)


# ──────────────────────────────────────────────────────────────────────────
# Entry-point
# ──────────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    port = int(os.getenv("PORT", 9000))
    app.run(host="0.0.0.0", port=port)
