# tests/test_cloudfoundry_client.py

import pytest
import requests

from cloudfoundry import CloudFoundry
from config import Settings
from deployment import DeploymentConfig
from errors import CloudFoundryError

from fakes import FakeFlux, RecordingConnector, StubHttp, StubResponse

API = "https://api.example.com/"
INFO = {"token_endpoint": "https://uaa.example.com"}


@pytest.fixture
def http():
    return StubHttp()


@pytest.fixture
def flux():
    return FakeFlux(user="U1")


def test_login_with_password_uses_uaa_token(http, flux):
    http.queue("get", StubResponse(200, INFO))
    http.queue("post", StubResponse(200, {"access_token": "cf-token"}))
    cf = CloudFoundry(API, http=http)

    cf.login(flux, "bob", "pw")

    assert cf.is_logged_in()
    assert cf.get_user() == "bob"
    method, url, kwargs = http.sent[1]
    assert url == "https://uaa.example.com/oauth/token"
    assert kwargs["data"] == {"grant_type": "password", "username": "bob", "password": "pw"}
    assert kwargs["auth"] == ("cf", "")

    message_type, payload, _ = flux.connector.requests[0]
    assert message_type == "cfLoginRequest"
    assert payload == {"cfUrl": "https://api.example.com", "cfUser": "bob", "cfToken": "cf-token"}


def test_login_without_password_skips_uaa(http, flux):
    cf = CloudFoundry(API, http=http)
    cf.login(flux, None, None)

    assert http.sent == []
    assert cf.get_user() == "U1"
    assert flux.connector.requests[0][1]["cfToken"] is None


def test_bad_credentials_raise_and_stay_logged_out(http, flux):
    http.queue("get", StubResponse(200, INFO))
    http.queue("post", StubResponse(401, {"error": "unauthorized", "error_description": "Bad credentials"}))
    cf = CloudFoundry(API, http=http)

    with pytest.raises(CloudFoundryError, match="Bad credentials") as info:
        cf.login(flux, "bob", "wrong")
    assert info.value.status_code == 401
    assert not cf.is_logged_in()
    assert flux.connector.requests == []


def test_deployer_rejecting_login_keeps_session_logged_out(http, flux):
    flux.connector.replies["cfLoginRequest"] = CloudFoundryError("deployer says no")
    cf = CloudFoundry(API, http=http)
    with pytest.raises(CloudFoundryError):
        cf.login(flux, None, None)
    assert not cf.is_logged_in()


def test_info_is_retried_on_connection_errors(http, flux, monkeypatch):
    monkeypatch.setattr("time.sleep", lambda _: None)
    http.queue("get", requests.ConnectionError("reset"))
    http.queue("get", StubResponse(200, INFO))
    http.queue("post", StubResponse(200, {"access_token": "t"}))
    cf = CloudFoundry(API, http=http)

    cf.login(flux, "bob", "pw")
    assert [m for m, _, _ in http.sent] == ["get", "get", "post"]


def test_missing_token_endpoint(http, flux):
    http.queue("get", StubResponse(200, {}))
    cf = CloudFoundry(API, http=http)
    with pytest.raises(CloudFoundryError, match="token endpoint"):
        cf.login(flux, "bob", "pw")


def test_spaces_and_default_space():
    connector = RecordingConnector(replies={"getSpacesRequest": {"spaces": ["o/a", "o/b"]}})
    cf = CloudFoundry(API, http=StubHttp())

    assert cf.get_spaces(connector) == ["o/a", "o/b"]
    assert cf.get_space() is None
    cf.set_space("o/b")
    assert cf.get_space() == "o/b"


def test_deployment_config_from_reply():
    connector = RecordingConnector(
        replies={
            "getDeploymentConfigRequest": {
                "config": {"cfOrgSpace": "o/a", "routes": ["app1.example.com"]}
            }
        }
    )
    cfg = CloudFoundry(API, http=StubHttp()).get_deployment_config(connector, "app1")
    assert cfg == DeploymentConfig(name="app1", cfOrgSpace="o/a", routes=["app1.example.com"])
    assert connector.requests[0][1] == {"project": "app1"}


def test_deployment_config_defaults_when_undeployed():
    cfg = CloudFoundry(API, http=StubHttp()).get_deployment_config(RecordingConnector(), "app1")
    assert cfg.name == "app1"
    assert cfg.cf_org_space is None
    assert cfg.routes == []


def test_push_uses_push_timeout():
    settings = Settings(PUSH_TIMEOUT=1234, _env_file=None)
    cf = CloudFoundry.from_settings(settings, http=StubHttp())
    connector = RecordingConnector()
    config = DeploymentConfig(name="app1", cfOrgSpace="o/a")

    cf.push(connector, config)

    message_type, payload, timeout = connector.requests[0]
    assert message_type == "cfPushRequest"
    assert payload == {"project": "app1", "config": config.to_message()}
    assert timeout == 1234
