import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from mock_api.app import create_app
from mock_api.db import SEED_DATA, next_id


def test_login_with_seeded_admin(api_client: TestClient):
    res = api_client.post("/login", json={"email": "admin@test.com", "password": "123"})
    assert res.status_code == 200, res.text
    assert res.json() == {"token": "admin-provider-token", "role": "admin"}


@pytest.mark.parametrize(
    "email,password",
    [
        ("admin@test.com", "wrong-password"),
        ("nobody@test.com", "123"),
        ("tenant@test.com", "1234"),
    ],
)
def test_invalid_credentials(api_client: TestClient, email, password):
    res = api_client.post("/login", json={"email": email, "password": password})
    assert res.status_code == 401
    assert res.json() == {"message": "Credenciais inválidas."}


def test_login_requires_both_fields(api_client: TestClient):
    res = api_client.post("/login", json={"email": "admin@test.com"})
    assert res.status_code == 400
    assert "required" in res.json()["message"]


def test_admin_products_are_the_seed_fixtures(api_client: TestClient):
    res = api_client.get("/admin/products")
    assert res.status_code == 200
    assert res.json() == SEED_DATA["admin"]["products"]


def test_unknown_role_is_not_found(api_client: TestClient):
    for method, path in [
        ("GET", "/guest/products"),
        ("POST", "/Admin/products"),
        ("GET", "/root/products/1"),
        ("DELETE", "/owner/products/1"),
    ]:
        res = api_client.request(method, path, json={"name": "x", "price": 1})
        assert res.status_code == 404, (method, path)
        assert res.json() == {"message": "Role not found."}


def test_unknown_product_is_not_found(api_client: TestClient):
    assert api_client.get("/admin/products/999").status_code == 404
    assert api_client.get("/admin/products/abc").json() == {"message": "Product not found."}
    assert api_client.put("/admin/products/999", json={"name": "x"}).status_code == 404
    assert api_client.patch("/admin/products/999", json={"status": "disabled"}).status_code == 404
    assert api_client.delete("/admin/products/999").status_code == 404


def test_create_assigns_max_plus_one_and_defaults_status(api_client: TestClient):
    res = api_client.post(
        "/admin/products",
        json={
            "name": "Cadeira Gamer",
            "price": 1999,
            "image": "https://example.com/cadeira.png",
            "description": "Cadeira ergonômica para escritório",
        },
    )
    assert res.status_code == 201, res.text
    created = res.json()
    assert created["id"] == 3
    assert created["status"] == "activated"
    assert created["name"] == "Cadeira Gamer"


def test_ids_are_not_reused_after_deleting_a_lower_id(api_client: TestClient):
    assert api_client.delete("/tenant/products/1").status_code == 204
    created = api_client.post("/tenant/products", json={"name": "Webcam", "price": 300}).json()
    assert created["id"] == 3


def test_first_product_in_empty_collection_gets_id_one(api_client: TestClient):
    for product in api_client.get("/tenant/products").json():
        api_client.delete(f"/tenant/products/{product['id']}")
    created = api_client.post("/tenant/products", json={"name": "Webcam", "price": 300}).json()
    assert created["id"] == 1


def test_collections_are_partitioned_by_role(api_client: TestClient):
    api_client.post("/tenant/products", json={"name": "Headset", "price": 400})
    admin_names = {p["name"] for p in api_client.get("/admin/products").json()}
    assert "Headset" not in admin_names


def test_patch_changes_only_status(api_client: TestClient):
    before = api_client.get("/admin/products/1").json()
    res = api_client.patch("/admin/products/1", json={"status": "disabled"})
    assert res.status_code == 200
    after = res.json()
    assert after["status"] == "disabled"
    assert {k: v for k, v in after.items() if k != "status"} == {
        k: v for k, v in before.items() if k != "status"
    }
    assert api_client.get("/admin/products/1").json() == after


def test_put_merges_and_keeps_id(api_client: TestClient):
    res = api_client.put("/admin/products/2", json={"id": 42, "name": "Monitor Ultrawide", "price": 2100})
    assert res.status_code == 200
    updated = res.json()
    assert updated["id"] == 2
    assert updated["name"] == "Monitor Ultrawide"
    assert updated["description"] == "Monitor 4K com HDR"


def test_delete_removes_exactly_one(api_client: TestClient):
    before = api_client.get("/admin/products").json()
    res = api_client.delete("/admin/products/1")
    assert res.status_code == 204
    after = api_client.get("/admin/products").json()
    assert len(after) == len(before) - 1
    assert all(p["id"] != 1 for p in after)


def test_invalid_product_body_is_rejected(api_client: TestClient):
    res = api_client.post("/admin/products", json={"name": "x", "price": -1})
    assert res.status_code == 422
    assert "message" in res.json()


def test_changes_are_written_to_the_json_file(api_client: TestClient, db_path: Path):
    api_client.post("/admin/products", json={"name": "Cadeira", "price": 10})
    data = json.loads(db_path.read_text(encoding="utf-8"))
    assert [p["name"] for p in data["admin"]["products"]][-1] == "Cadeira"

    # A new app over the same file sees the same data
    other = TestClient(create_app(db_path))
    assert len(other.get("/admin/products").json()) == 3


@pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
def test_corrupt_database_file_returns_message_body(api_client: TestClient, db_path: Path, content):
    db_path.write_text(content, encoding="utf-8")

    res = api_client.get("/admin/products")
    assert res.status_code == 500
    assert res.json() == {"message": "Mock database is unreadable."}

    res = api_client.post("/login", json={"email": "admin@test.com", "password": "123"})
    assert res.status_code == 500


def test_register_then_login(api_client: TestClient):
    res = api_client.post(
        "/register",
        json={"name": "Maria", "email": "maria@test.com", "password": "abc", "role": "tenant"},
    )
    assert res.status_code == 201, res.text
    body = res.json()
    assert body["email"] == "maria@test.com"
    assert "password" not in body

    login = api_client.post("/login", json={"email": "maria@test.com", "password": "abc"})
    assert login.status_code == 200
    assert login.json()["role"] == "tenant"


def test_register_rejects_duplicates_and_missing_fields(api_client: TestClient):
    dup = api_client.post(
        "/register", json={"name": "Admin", "email": "admin@test.com", "password": "abc"}
    )
    assert dup.status_code == 409
    assert dup.json() == {"message": "E-mail já cadastrado."}

    missing = api_client.post("/register", json={"email": "x@test.com"})
    assert missing.status_code == 400


def test_logout_always_succeeds(api_client: TestClient):
    assert api_client.post("/logout").status_code == 204


def test_next_id():
    assert next_id([]) == 1
    assert next_id([{"id": 4}, {"id": 2}]) == 5
