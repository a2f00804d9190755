"""
API tests for customer endpoints.
"""

NEW_CUSTOMER = {
    "name": "Ravi Kumar",
    "phone": "+91 91234 56780",
    "email": "ravi@example.com",
    "address": "7 Civil Lines, Kanpur",
}


class TestCustomerEndpoints:
    async def test_create(self, api_client):
        response = await api_client.post("/api/customers", json=NEW_CUSTOMER)

        assert response.status_code == 201
        data = response.json()
        assert data["id"]
        assert data["name"] == "Ravi Kumar"
        assert data["created_at"]

    async def test_create_rejects_short_name(self, api_client):
        response = await api_client.post("/api/customers", json={**NEW_CUSTOMER, "name": "R"})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "VALIDATION_ERROR"
        assert "name" in data["message"]

    async def test_create_rejects_bad_phone(self, api_client):
        response = await api_client.post("/api/customers", json={**NEW_CUSTOMER, "phone": "12345"})
        assert response.status_code == 400

    async def test_create_rejects_bad_email(self, api_client):
        response = await api_client.post("/api/customers", json={**NEW_CUSTOMER, "email": "not-an-email"})
        assert response.status_code == 400

    async def test_missing_fields_are_schema_errors(self, api_client):
        response = await api_client.post("/api/customers", json={"name": "Ravi"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert "phone" in response.json()["detail"]

    async def test_list_and_search(self, api_client):
        await api_client.post("/api/customers", json=NEW_CUSTOMER)
        await api_client.post("/api/customers", json={**NEW_CUSTOMER, "name": "Asha Verma", "phone": "9876543210"})

        assert len((await api_client.get("/api/customers")).json()) == 2
        found = (await api_client.get("/api/customers", params={"q": "asha"})).json()
        assert [c["name"] for c in found] == ["Asha Verma"]

    async def test_update_keeps_created_at(self, api_client):
        created = (await api_client.post("/api/customers", json=NEW_CUSTOMER)).json()

        response = await api_client.put(
            f"/api/customers/{created['id']}",
            json={**NEW_CUSTOMER, "address": "9 Mall Road, Kanpur"},
        )

        assert response.status_code == 200
        assert response.json()["address"] == "9 Mall Road, Kanpur"
        assert response.json()["created_at"] == created["created_at"]

    async def test_update_unknown(self, api_client):
        response = await api_client.put("/api/customers/missing", json=NEW_CUSTOMER)

        assert response.status_code == 404
        data = response.json()
        assert data["error_code"] == "CUSTOMER_NOT_FOUND"
        assert data["hint"]
        assert data["path"] == "/api/customers/missing"

    async def test_delete(self, api_client):
        created = (await api_client.post("/api/customers", json=NEW_CUSTOMER)).json()

        assert (await api_client.delete(f"/api/customers/{created['id']}")).status_code == 204
        assert (await api_client.delete(f"/api/customers/{created['id']}")).status_code == 404
