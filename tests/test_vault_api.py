"""
HTTP tests for /vault: CRUD, reveal, recheck, Excel export / import.
"""

import io

from openpyxl import Workbook, load_workbook

XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _create(client, **overrides):
    body = {
        "name": "GitHub",
        "username": "octocat",
        "password": "Tr0ub4dor&3XyZ9!",
        "url": "https://github.com",
        "category": "work",
    }
    body.update(overrides)
    resp = client.post("/vault/items", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def _workbook(rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


# ─── CRUD ─────────────────────────────────────────────────────────────


def test_create_returns_annotations_not_password(client, corpus):
    corpus.add("password", 12)
    item = _create(client, password="password")

    assert item["strength"] == 30
    assert item["strength_label"] == "Weak"
    assert item["breach_count"] == 12
    assert item["breach_status"] == "compromised"
    assert item["is_compromised"] is True
    assert "password" not in item
    assert "secret" not in item


def test_create_validates_body(client):
    assert client.post("/vault/items", json={"name": "x", "username": "y"}).status_code == 422
    assert client.post("/vault/items", json={"name": "x", "username": "y", "password": ""}).status_code == 422


def test_create_rejects_unknown_category(client):
    resp = client.post(
        "/vault/items",
        json={"name": "x", "username": "y", "password": "z", "category": "banking"},
    )
    assert resp.status_code == 400


def test_get_and_reveal(client):
    item = _create(client)

    got = client.get(f"/vault/items/{item['id']}")
    assert got.status_code == 200
    assert got.json()["name"] == "GitHub"

    revealed = client.get(f"/vault/items/{item['id']}/reveal")
    assert revealed.json() == {"password": "Tr0ub4dor&3XyZ9!"}


def test_missing_item_is_404(client):
    assert client.get("/vault/items/nope").status_code == 404
    assert client.get("/vault/items/nope/reveal").status_code == 404
    assert client.put("/vault/items/nope", json={"name": "x"}).status_code == 404
    assert client.delete("/vault/items/nope").status_code == 404


def test_list_filters(client):
    _create(client)
    _create(client, name="Bank", username="me", url=None, category="finance")

    assert len(client.get("/vault/items").json()["items"]) == 2
    assert [i["name"] for i in client.get("/vault/items", params={"search": "bank"}).json()["items"]] == ["Bank"]
    assert [i["name"] for i in client.get("/vault/items", params={"category": "work"}).json()["items"]] == ["GitHub"]
    assert client.get("/vault/items", params={"category": "bogus"}).status_code == 400


def test_update_password_rescoring(client, corpus):
    item = _create(client)
    assert item["strength"] == 100

    corpus.add("12345678", 1)
    resp = client.put(f"/vault/items/{item['id']}", json={"password": "12345678"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["strength"] == 25
    assert body["breach_status"] == "compromised"
    assert client.get(f"/vault/items/{item['id']}/reveal").json()["password"] == "12345678"


def test_update_partial(client):
    item = _create(client, notes="keep me")
    body = client.put(f"/vault/items/{item['id']}", json={"name": "GitHub Enterprise"}).json()
    assert body["name"] == "GitHub Enterprise"
    assert body["notes"] == "keep me"
    assert body["strength"] == item["strength"]


def test_update_null_clears_url_and_notes(client):
    item = _create(client, notes="keep me")
    body = client.put(f"/vault/items/{item['id']}", json={"url": None, "notes": None}).json()
    assert body["url"] is None
    assert body["notes"] is None
    assert body["name"] == "GitHub"


def test_delete(client):
    item = _create(client)
    assert client.delete(f"/vault/items/{item['id']}").status_code == 204
    assert client.get(f"/vault/items/{item['id']}").status_code == 404


# ─── Recheck ──────────────────────────────────────────────────────────


def test_check_all(client, corpus):
    item = _create(client)
    corpus.add("Tr0ub4dor&3XyZ9!", 4)

    resp = client.post("/vault/check")
    assert resp.json() == {"total": 1, "clean": 0, "compromised": 1, "unknown": 0}
    assert client.get(f"/vault/items/{item['id']}").json()["breach_count"] == 4


def test_check_all_with_corpus_down_keeps_results(client, corpus):
    _create(client)
    corpus.status = 502
    assert client.post("/vault/check").json() == {"total": 1, "clean": 1, "compromised": 0, "unknown": 0}


# ─── Export / import ──────────────────────────────────────────────────


def test_export_workbook(client, corpus):
    corpus.add("password", 2)
    _create(client, name="zeta", password="password", notes="pin 0000")
    _create(client, name="Alpha", url=None)

    resp = client.get("/vault/export")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == XLSX
    assert "passwords.xlsx" in resp.headers["content-disposition"]

    ws = load_workbook(io.BytesIO(resp.content)).active
    rows = list(ws.iter_rows(values_only=True))
    assert ws.title == "Passwords"
    assert rows[0] == (
        "Category", "Name", "Username", "Password", "URL", "Notes",
        "Strength", "Breach Status", "Breach Count",
    )
    assert [r[1] for r in rows[1:]] == ["Alpha", "zeta"]
    assert rows[2][3] == "password"
    assert rows[2][5] == "pin 0000"
    assert rows[2][6:] == ("Weak", "compromised", 2)


def test_import_workbook(client, corpus):
    corpus.add("password", 8)
    data = _workbook([
        ["Category", "Name", "Username", "Password", "URL", "Notes", "Strength"],
        ["work", "GitHub", "octocat", "password", "https://github.com", None, "Strong"],
        [None, "Forum", "lurker", "Tr0ub4dor&3XyZ9!", None, "old account", None],
        ["work", "NoPassword", "someone", None, None, None, None],
        ["banking", "Bank", "me", "secret-1", None, None, None],
    ])

    resp = client.post("/vault/import", files={"file": ("vault.xlsx", data, XLSX)})
    assert resp.status_code == 200, resp.text
    assert resp.json() == {"imported": 2, "skipped_invalid": 2}

    items = {i["name"]: i for i in client.get("/vault/items").json()["items"]}
    assert set(items) == {"GitHub", "Forum"}
    # Annotation columns in the file are ignored and recomputed
    assert items["GitHub"]["strength_label"] == "Weak"
    assert items["GitHub"]["breach_count"] == 8
    assert items["Forum"]["category"] == "other"
    assert items["Forum"]["notes"] == "old account"


def test_import_requires_xlsx(client):
    resp = client.post("/vault/import", files={"file": ("vault.csv", b"name,username,password", "text/csv")})
    assert resp.status_code == 400


def test_import_rejects_garbage(client):
    resp = client.post("/vault/import", files={"file": ("vault.xlsx", b"not a zip", XLSX)})
    assert resp.status_code == 400


def test_import_requires_columns(client):
    data = _workbook([["Name", "Username"], ["a", "b"]])
    resp = client.post("/vault/import", files={"file": ("vault.xlsx", data, XLSX)})
    assert resp.status_code == 400
    assert "password" in resp.json()["detail"]


# ─── Health ───────────────────────────────────────────────────────────


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
