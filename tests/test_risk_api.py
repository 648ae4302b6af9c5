"""
HTTP tests for /risk: strength preview, generation, score and duplicates.
"""

import pytest

from risk.generator import SYMBOLS


def _create(client, name, password, **extra):
    body = {"name": name, "username": f"{name.lower()}-user", "password": password}
    body.update(extra)
    resp = client.post("/vault/items", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ─── Strength ─────────────────────────────────────────────────────────


def test_strength_preview(client):
    resp = client.post("/risk/strength", json={"password": "Password1"})
    assert resp.status_code == 200
    assert resp.json() == {
        "score": 65,
        "label": "Moderate",
        "suggestions": ["Add special characters (!@#$%^&*)"],
    }


def test_strength_preview_stores_nothing(client):
    client.post("/risk/strength", json={"password": "Password1"})
    assert client.get("/vault/items").json()["items"] == []


# ─── Generate ─────────────────────────────────────────────────────────


def test_generate_random(client):
    body = client.get("/risk/generate", params={"mode": "random", "length": 24}).json()
    password = body["password"]
    assert len(password) == 24
    assert any(c in SYMBOLS for c in password)
    assert body["strength"]["label"] == "Strong"


def test_generate_passphrase_default(client):
    body = client.get("/risk/generate").json()
    tokens = body["password"].split("-")
    assert len(tokens) == 5
    assert tokens[-1].isdigit()


def test_generate_passphrase_space_separator(client):
    params = {"mode": "passphrase", "word_count": 6, "separator": " ", "include_number": "false"}
    body = client.get("/risk/generate", params=params).json()
    assert len(body["password"].split(" ")) == 6


@pytest.mark.parametrize(
    "params",
    [
        {"mode": "random", "length": 7},
        {"mode": "random", "length": 65},
        {"mode": "passphrase", "word_count": 2},
        {"mode": "passphrase", "separator": "+"},
        {"mode": "pin"},
    ],
)
def test_generate_rejects_bad_input(client, params):
    assert client.get("/risk/generate", params=params).status_code == 400


# ─── Score ────────────────────────────────────────────────────────────


def test_score_empty_vault(client):
    body = client.get("/risk/score").json()
    assert body["overall"] == 100
    assert body["grade"] == "Excellent"
    assert body["total"] == 0


def test_score_reflects_vault(client, corpus):
    corpus.add("password", 3)
    _create(client, "Mail", "password")
    _create(client, "Bank", "Tr0ub4dor&3XyZ9!")

    body = client.get("/risk/score").json()
    assert body["total"] == 2
    assert body["weak"] == 1
    assert body["strong"] == 1
    assert body["compromised"] == 1
    assert body["reused"] == 0
    # 100 - 15 - 20
    assert body["overall"] == 65
    assert body["grade"] == "Good"


# ─── Duplicates ───────────────────────────────────────────────────────


def test_duplicates_never_echo_password(client):
    a = _create(client, "Mail", "shared-Secret-9")
    b = _create(client, "Shop", "shared-Secret-9")
    _create(client, "Bank", "unique-Secret-7")

    resp = client.get("/risk/duplicates")
    assert resp.status_code == 200
    groups = resp.json()["groups"]

    assert len(groups) == 1
    assert groups[0]["size"] == 2
    assert {i["id"] for i in groups[0]["items"]} == {a["id"], b["id"]}
    assert set(groups[0]["items"][0]) == {"id", "name", "username"}
    assert "shared-Secret-9" not in resp.text


def test_duplicates_empty(client):
    _create(client, "Mail", "one-Secret-1")
    assert client.get("/risk/duplicates").json() == {"groups": []}
