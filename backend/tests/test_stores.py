"""Store registry endpoint tests."""

import pytest


class TestCreateStore:

    def test_create_returns_record_with_id(self, client, auth_headers):
        resp = client.post("/api/stores", headers=auth_headers, json={
            "name": "Corner Cafe", "location": "12 Main St", "contact": "555-0100",
        })
        assert resp.status_code == 201
        body = resp.json
        assert isinstance(body["id"], int)
        assert body == {
            "id": body["id"],
            "name": "Corner Cafe",
            "location": "12 Main St",
            "contact": "555-0100",
        }

    def test_optional_fields_default_to_null(self, client, auth_headers):
        resp = client.post("/api/stores", headers=auth_headers, json={"name": "Harbor Deli"})
        assert resp.status_code == 201
        assert resp.json["location"] is None
        assert resp.json["contact"] is None

    @pytest.mark.parametrize("body", [{}, {"name": ""}, {"name": "   "}, {"name": None}, {"name": 42}])
    def test_name_required(self, client, auth_headers, body):
        resp = client.post("/api/stores", headers=auth_headers, json=body)
        assert resp.status_code == 400
        assert "name" in resp.json["error"]

    def test_body_must_be_object(self, client, auth_headers):
        resp = client.post("/api/stores", headers=auth_headers, json=["Corner Cafe"])
        assert resp.status_code == 400


class TestListStores:

    def test_empty(self, client, auth_headers):
        resp = client.get("/api/stores", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json == []

    def test_lists_in_insertion_order(self, client, auth_headers):
        for name in ("Corner Cafe", "Harbor Deli", "Bakery Row"):
            client.post("/api/stores", headers=auth_headers, json={"name": name})

        resp = client.get("/api/stores", headers=auth_headers)
        assert [s["name"] for s in resp.json] == ["Corner Cafe", "Harbor Deli", "Bakery Row"]
        assert set(resp.json[0]) == {"id", "name", "location", "contact"}

    def test_get_single_store(self, client, auth_headers, store):
        resp = client.get(f"/api/stores/{store.id}", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json["name"] == "Corner Cafe"

    def test_get_missing_store(self, client, auth_headers):
        resp = client.get("/api/stores/999", headers=auth_headers)
        assert resp.status_code == 404
