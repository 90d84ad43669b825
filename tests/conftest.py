# tests/conftest.py

from __future__ import annotations

import pytest
from flask import template_rendered

from config import Settings
from connections import ConnectionManager
from web import create_app

from fakes import FakeCF, FakeFlux


class World:
    """Everything the app sees from the outside, for one test."""

    def __init__(self):
        self.identity = "U1"
        self.flux: FakeFlux | None = FakeFlux()
        self.store = ConnectionManager()
        self.created: list[FakeCF] = []
        self.login_error: Exception | None = None

    def cf_factory(self) -> FakeCF:
        cf = FakeCF(login_error=self.login_error)
        self.created.append(cf)
        return cf

    def flux_provider(self, identity):
        return self.flux

    def identity_resolver(self):
        return self.identity


@pytest.fixture
def settings() -> Settings:
    return Settings(SECRET_KEY="test-secret", _env_file=None)


@pytest.fixture
def world() -> World:
    return World()


@pytest.fixture
def app(settings, world):
    app = create_app(
        settings,
        connections=world.store,
        cf_factory=world.cf_factory,
        flux_provider=world.flux_provider,
        identity_resolver=world.identity_resolver,
    )
    app.testing = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def cf(world) -> FakeCF:
    """A logged-in session already stored for U1."""
    session = FakeCF(logged_in=True, user="bob", space="org1/space2")
    world.store.put("U1", session)
    return session


@pytest.fixture
def rendered(app):
    """Collect (template name, context) for every template rendered."""
    recorded: list[tuple[str, dict]] = []

    def record(sender, template, context, **extra):
        recorded.append((template.name, context))

    template_rendered.connect(record, app)
    try:
        yield recorded
    finally:
        template_rendered.disconnect(record, app)
