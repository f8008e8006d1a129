from fastapi.testclient import TestClient

from btcchecker.app import create_app
from btcchecker.errors import UpstreamError
from btcchecker.observability import REQUEST_ID_HEADER


def _register(client, email="a@b.com", password="secret1"):
    return client.post("/user/create", json={"email": email, "password": password})


def _login(client, email="a@b.com", password="secret1"):
    return client.post("/user/login", json={"email": email, "password": password})


def test_create_user(client, store):
    r = _register(client)
    assert r.status_code == 201
    assert r.json() == "Success"
    assert "a@b.com" in store


def test_create_duplicate_is_unprocessable(client):
    _register(client)
    r = _register(client, password="another1")
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "CONFLICT"
    assert r.json()["error"]["message"] == "incorrect email or password"


def test_create_invalid_email_is_unprocessable(client):
    r = _register(client, email="not-an-email")
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_malformed_body_is_bad_request(client):
    r = client.post("/user/create", content=b"{not json", headers={"content-type": "application/json"})
    assert r.status_code == 400
    r = client.post("/user/login", json={"email": "a@b.com"})
    assert r.status_code == 400


def test_login_sets_session_cookie(client, config):
    _register(client)
    r = _login(client)
    assert r.status_code == 200
    assert config.session_cookie_name in r.cookies


def test_login_failures_look_the_same(client):
    _register(client)
    unknown = _login(client, email="nobody@b.com")
    wrong = _login(client, password="secret2")
    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json()
    assert unknown.json()["error"]["code"] == "AUTH_FAILED"


def test_btc_rate_requires_login(client, fake_rates):
    r = client.get("/btcRate")
    assert r.status_code == 401
    assert r.json()["error"]["code"] == "UNAUTHENTICATED"
    assert fake_rates.calls == 0


def test_btc_rate_after_login(client, fake_rates):
    _register(client)
    _login(client)
    r = client.get("/btcRate")
    assert r.status_code == 200
    body = r.json()
    assert body["currency"] == "UAH"
    assert body["rate"] == fake_rates.rate
    assert body["email"] == "a@b.com"


def test_logout_ends_session(client):
    _register(client)
    _login(client)
    r = client.post("/user/logout")
    assert r.status_code == 200
    assert "Max-Age=0" in r.headers["set-cookie"]
    assert client.get("/btcRate").status_code == 401


def test_stale_session_is_rejected(config, store, fake_rates, tmp_path):
    store.add_user("a@b.com", "secret1")
    first = TestClient(create_app(config, store=store, rates=fake_rates))
    token = _login(first).cookies[config.session_cookie_name]

    # Same signing key, but a store that has never seen the account.
    config.database_path = str(tmp_path / "other.csv")
    second = TestClient(create_app(config, rates=fake_rates))
    r = second.get("/btcRate", headers={"cookie": f"{config.session_cookie_name}={token}"})
    assert r.status_code == 401


def test_upstream_failure_is_bad_gateway(client, fake_rates, monkeypatch):
    def fail():
        raise UpstreamError("rate provider unavailable")

    monkeypatch.setattr(fake_rates, "current", fail)
    _register(client)
    _login(client)
    r = client.get("/btcRate")
    assert r.status_code == 502
    assert r.json()["error"]["code"] == "UPSTREAM_ERROR"


def test_every_response_has_request_id(client):
    ok = _register(client)
    failed = client.get("/btcRate")
    assert ok.headers[REQUEST_ID_HEADER]
    assert failed.headers[REQUEST_ID_HEADER]
    assert ok.headers[REQUEST_ID_HEADER] != failed.headers[REQUEST_ID_HEADER]


def test_injected_empty_store_and_rates_are_used(config, store, fake_rates):
    assert len(store) == 0
    app = create_app(config, store=store, rates=fake_rates)
    assert app.state.store is store
    assert app.state.gate.store is store
    assert app.state.rates is fake_rates

    client = TestClient(app)
    _register(client)
    assert "a@b.com" in store
