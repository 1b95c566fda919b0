# server/tests/test_category_routes.py
"""Category and location management"""
import pytest

from utils.validators import validate_category_code


class TestCategoryCodeValidation:
    @pytest.mark.parametrize("code, expected", [("elec", "ELEC"), (" Plmb ", "PLMB"), ("A", "A")])
    def test_valid(self, code, expected):
        assert validate_category_code(code) == expected

    @pytest.mark.parametrize("code", ["EL3C", "EL-EC", "", "ELEC 2"])
    def test_invalid(self, code):
        with pytest.raises(ValueError):
            validate_category_code(code)


class TestCategoryEndpoints:
    def test_create_normalizes_code(self, client):
        response = client.post("/api/categories", json={"name": "Electrical", "code": "elec"})

        assert response.status_code == 201
        assert response.json()["code"] == "ELEC"
        assert response.json()["createdAt"]

    def test_code_must_be_letters(self, client):
        response = client.post("/api/categories", json={"name": "Electrical", "code": "EL3C"})

        assert response.status_code == 400
        assert response.json()["fields"] == ["code"]

    def test_required_fields(self, client):
        response = client.post("/api/categories", json={})
        assert response.status_code == 400
        assert response.json()["fields"] == ["name", "code"]

    def test_duplicate_code(self, client, category):
        response = client.post("/api/categories", json={"name": "Electric", "code": "Elec"})
        assert response.status_code == 409
        assert response.json()["error"] == "CONFLICT"

    def test_list_and_get(self, client, category, other_category):
        codes = [c["code"] for c in client.get("/api/categories").json()]
        assert codes == ["ELEC", "PLMB"]

        assert client.get(f"/api/categories/{category.id}").json()["name"] == "Electrical"
        assert client.get("/api/categories/9999").status_code == 404

    def test_update(self, client, category, other_category):
        response = client.put(f"/api/categories/{category.id}", json={"name": "Electrical Works", "code": "elx"})
        assert response.json()["name"] == "Electrical Works"
        assert response.json()["code"] == "ELX"

        clash = client.put(f"/api/categories/{category.id}", json={"code": "PLMB"})
        assert clash.status_code == 409

    def test_code_change_does_not_touch_issued_numbers(self, client, category):
        ticket = client.post(
            "/api/tickets",
            data={"description": "x", "location": "y", "reportedBy": "z", "item": str(category.id)},
        ).json()["ticket"]

        client.put(f"/api/categories/{category.id}", json={"code": "ELX"})

        reloaded = client.get(f"/api/tickets/{ticket['id']}").json()
        assert reloaded["controlNumber"] == ticket["controlNumber"]
        assert reloaded["categoryCode"] == "ELX"

    def test_delete_in_use_category(self, client, category):
        client.post(
            "/api/tickets",
            data={"description": "x", "location": "y", "reportedBy": "z", "item": str(category.id)},
        )
        response = client.delete(f"/api/categories/{category.id}")
        assert response.status_code == 409

    def test_delete_unused_category(self, client, other_category):
        response = client.delete(f"/api/categories/{other_category.id}")
        assert response.status_code == 200
        assert client.get(f"/api/categories/{other_category.id}").status_code == 404


class TestLocationEndpoints:
    def test_crud(self, client):
        created = client.post("/api/locations", json={"name": "Science Building"})
        assert created.status_code == 201
        location_id = created.json()["id"]

        renamed = client.put(f"/api/locations/{location_id}", json={"name": "Science Bldg."})
        assert renamed.json()["name"] == "Science Bldg."

        assert [l["name"] for l in client.get("/api/locations").json()] == ["Science Bldg."]

        assert client.delete(f"/api/locations/{location_id}").status_code == 200
        assert client.get("/api/locations").json() == []

    def test_duplicate_and_blank_names(self, client):
        client.post("/api/locations", json={"name": "Gym"})

        assert client.post("/api/locations", json={"name": "Gym"}).status_code == 409
        assert client.post("/api/locations", json={"name": " "}).status_code == 400

    def test_location_id_on_intake(self, client, category):
        location = client.post("/api/locations", json={"name": "Cafeteria"}).json()

        ticket = client.post(
            "/api/tickets",
            data={"description": "x", "location": str(location["id"]), "reportedBy": "z", "item": str(category.id)},
        ).json()["ticket"]
        assert ticket["location"] == "Cafeteria"

    def test_missing_location(self, client):
        assert client.put("/api/locations/9999", json={"name": "Nowhere"}).status_code == 404
        assert client.delete("/api/locations/9999").status_code == 404
