import json

import pytest

from gastos.ui.web import create_app


def _signup(client, email="ana@example.com", password="pw-ana"):
    return client.post("/api/signup", json={"email": email, "password": password})


def test_api_requires_session(client) -> None:
    for method, path in [("get", "/api/data"), ("put", "/api/months/2024-01"), ("get", "/api/export"), ("get", "/api/template")]:
        response = getattr(client, method)(path)
        assert response.status_code == 401
        assert response.get_json() == {"error": "unauthorized"}


def test_me_reports_session(client) -> None:
    assert client.get("/api/me").get_json() == {"ok": False}

    client.post("/api/login", json={"password": "shared-secret"})

    assert client.get("/api/me").get_json() == {"ok": True, "uid": 0}


def test_legacy_password_login(client) -> None:
    bad = client.post("/api/login", json={"password": "nope"})
    assert bad.status_code == 401
    assert bad.get_json() == {"error": "invalid_password"}

    good = client.post("/api/login", json={"password": "shared-secret"})
    assert good.get_json() == {"ok": True, "legacy": True}


def test_legacy_login_disabled_without_app_password(tmp_path) -> None:
    app = create_app(
        {
            "TESTING": True,
            "SECRET_KEY": "test-secret",
            "APP_PASSWORD": "",
            "LEDGER_DATA_PATH": str(tmp_path / "ledger.json"),
            "BEST_SCORE_PATH": str(tmp_path / "best.json"),
        }
    )

    response = app.test_client().post("/api/login", json={"password": "anything"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "missing_credentials"}


def test_signup_and_account_login(client) -> None:
    assert client.post("/api/signup", json={"email": "ana@example.com"}).status_code == 400

    assert _signup(client).get_json() == {"ok": True}
    assert client.get("/api/me").get_json() == {"ok": True, "uid": 1}

    duplicate = _signup(client)
    assert duplicate.status_code == 409
    assert duplicate.get_json() == {"error": "email_taken"}

    client.post("/api/logout")
    assert client.get("/api/me").get_json() == {"ok": False}

    wrong = client.post("/api/login", json={"email": "ana@example.com", "password": "wrong"})
    assert wrong.status_code == 401
    assert wrong.get_json() == {"error": "invalid_credentials"}

    unknown = client.post("/api/login", json={"email": "zed@example.com", "password": "pw-ana"})
    assert unknown.status_code == 401

    right = client.post("/api/login", json={"email": "ana@example.com", "password": "pw-ana"})
    assert right.get_json() == {"ok": True}
    assert client.get("/api/me").get_json()["uid"] == 1


@pytest.mark.parametrize("password", [123, None, ["shared-secret"], {"value": "shared-secret"}])
def test_legacy_login_rejects_non_string_password(client, password) -> None:
    response = client.post("/api/login", json={"password": password})

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_password"}


@pytest.mark.parametrize(
    "body",
    [
        {"email": "ana@example.com", "password": 5},
        {"email": "ana@example.com", "password": ["pw-ana"]},
        {"email": ["ana@example.com"], "password": "pw-ana"},
        {"email": 7, "password": "pw-ana"},
    ],
)
def test_account_login_rejects_non_string_fields(client, body) -> None:
    _signup(client)
    client.post("/api/logout")

    response = client.post("/api/login", json=body)

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


@pytest.mark.parametrize("email, password", [("ana@example.com", 5), (5, "pw-ana"), (["a"], "pw-ana"), ("ana@example.com", "")])
def test_signup_rejects_non_string_fields(client, email, password) -> None:
    response = _signup(client, email=email, password=password)

    assert response.status_code == 400
    assert response.get_json() == {"error": "missing_fields"}
    assert client.get("/api/me").get_json() == {"ok": False}


def test_login_with_malformed_users_file(app) -> None:
    with open(app.config["LEDGER_DATA_PATH"], "w", encoding="utf-8") as f:
        json.dump({"__users": {"ana@example.com": "pw-ana"}}, f)

    response = app.test_client().post("/api/login", json={"email": "ana@example.com", "password": "pw-ana"})

    assert response.status_code == 401
    assert response.get_json() == {"error": "invalid_credentials"}


def test_session_cookie_settings(client) -> None:
    response = _signup(client)
    cookie = response.headers["Set-Cookie"]
    assert cookie.startswith("gastos_auth=")
    assert "HttpOnly" in cookie
    assert "SameSite=Lax" in cookie


def test_month_crud(client) -> None:
    _signup(client)

    saved = client.put("/api/months/2024-01", json={"building_fee": "100", "water": 50, "internet": "20.5", "income_admin": 1000})
    assert saved.status_code == 200
    body = saved.get_json()
    assert body["entry"]["building_fee"] == 100
    assert body["totals"] == {"housing": 150, "other": 20.5, "income": 1000, "expenses": 170.5, "balance": 829.5}

    client.put("/api/months/2023-12", json={"gas": 3})
    data = client.get("/api/data").get_json()
    assert list(data) == ["2023-12", "2024-01"]
    assert data["2023-12"]["gas"] == 3

    fetched = client.get("/api/months/2024-01").get_json()
    assert fetched["totals"]["balance"] == 829.5
    assert client.get("/api/months/2020-05").get_json()["entry"] is None

    assert client.delete("/api/months/2024-01").get_json() == {"ok": True, "deleted": True}
    assert client.delete("/api/months/2024-01").get_json() == {"ok": True, "deleted": False}
    assert list(client.get("/api/data").get_json()) == ["2023-12"]


def test_invalid_month_key(client) -> None:
    _signup(client)

    response = client.put("/api/months/january", json={"water": 1})

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_month"}


def test_months_are_private_per_user(app) -> None:
    ana = app.test_client()
    _signup(ana)
    ana.put("/api/months/2024-01", json={"water": 10})

    legacy = app.test_client()
    legacy.post("/api/login", json={"password": "shared-secret"})

    assert legacy.get("/api/data").get_json() == {}
    assert ana.get("/api/data").get_json()["2024-01"]["water"] == 10


def test_export_csv(client) -> None:
    _signup(client)
    client.put("/api/months/2024-01", json={"gas": 10, "income_admin": 25})

    response = client.get("/api/export")

    assert response.status_code == 200
    assert response.headers["Content-Type"] == "text/csv; charset=utf-8"
    assert 'filename="gastos.csv"' in response.headers["Content-Disposition"]
    lines = response.get_data(as_text=True).split("\n")
    assert lines[0].startswith('"Month"')
    assert lines[1] == '"2024-01",0,0,0,10,0,0,0,0,0,25,10,0,25,10,15'


@pytest.mark.parametrize("body", [{}, {"template": "water=5"}, {"template": [1, 2]}])
def test_template_must_be_an_object(client, body) -> None:
    _signup(client)

    response = client.put("/api/template", json=body)

    assert response.status_code == 400
    assert response.get_json() == {"error": "invalid_template"}


def test_template_round_trip(client) -> None:
    _signup(client)
    assert client.get("/api/template").get_json() == {"template": None}

    assert client.put("/api/template", json={"template": {"internet": 30}}).get_json() == {"ok": True}

    assert client.get("/api/template").get_json() == {"template": {"internet": 30}}


def test_pages(client) -> None:
    assert "Log in" in client.get("/").get_data(as_text=True)
    assert client.get("/game").status_code == 200
    assert client.get("/api/game/best").get_json() == {"best_score": 0}

    _signup(client)
    assert "Monthly expenses" in client.get("/").get_data(as_text=True)
