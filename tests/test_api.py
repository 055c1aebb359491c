"""End-to-end tests of the HTTP API against an in-memory database."""
from __future__ import annotations

from fastapi.testclient import TestClient


def _register(client: TestClient, email: str = "asha@example.com") -> dict:
    response = client.post(
        "/auth/register",
        json={"name": "Asha Rao", "email": email, "password": "secret1"},
    )
    assert response.status_code == 201, response.text
    return response.json()


def _add_employee(client: TestClient, name: str = "Meena", position: str = "Cook") -> dict:
    response = client.post("/employees", json={"name": name, "position": position})
    assert response.status_code == 201, response.text
    return response.json()


def test_health_is_public(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_protected_routes_require_login(client: TestClient) -> None:
    assert client.get("/employees").status_code == 401
    response = client.get("/salary-records")
    assert response.status_code == 401
    assert response.json() == {"detail": "Login required"}


def test_register_sets_session_cookie(client: TestClient) -> None:
    profile = _register(client)

    me = client.get("/auth/me")

    assert me.status_code == 200
    assert me.json() == profile
    assert "password" not in profile


def test_duplicate_registration_conflicts(client: TestClient) -> None:
    _register(client)

    response = client.post(
        "/auth/register",
        json={"name": "Other", "email": "asha@example.com", "password": "secret2"},
    )

    assert response.status_code == 409
    assert response.json() == {"detail": "Email already registered"}


def test_login_logout_cycle(client: TestClient) -> None:
    _register(client)
    assert client.post("/auth/logout").status_code == 204
    assert client.get("/auth/me").status_code == 401

    bad = client.post("/auth/login", json={"email": "asha@example.com", "password": "wrong-one"})
    assert bad.status_code == 401
    assert bad.json() == {"detail": "Invalid email or password"}

    good = client.post("/auth/login", json={"email": "asha@example.com", "password": "secret1"})
    assert good.status_code == 200
    assert client.get("/auth/me").status_code == 200


def test_tampered_cookie_is_rejected(client: TestClient) -> None:
    client.cookies.set("access_token", "not-a-jwt")

    assert client.get("/employees").status_code == 401


def test_validation_errors_use_detail_message(client: TestClient) -> None:
    response = client.post(
        "/auth/register",
        json={"name": "Asha", "email": "asha@example.com", "password": "123"},
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Password must be at least 6 characters"}


def test_employee_crud(client: TestClient) -> None:
    _register(client)
    employee = _add_employee(client)

    updated = client.put(f"/employees/{employee['id']}", json={"name": "Meena K", "position": "Chef"})
    assert updated.status_code == 200
    assert updated.json()["position"] == "Chef"

    listed = client.get("/employees").json()
    assert [item["name"] for item in listed] == ["Meena K"]

    missing = client.put("/employees/unknown", json={"name": "X", "position": "Y"})
    assert missing.status_code == 404


def test_salary_record_upsert_and_listing(client: TestClient) -> None:
    _register(client)
    employee = _add_employee(client)
    payload = {
        "employee_id": employee["id"],
        "month": 2,
        "year": 2024,
        "salary": "50000",
        "expenses": [
            {"category": "Travel", "amount": "1200", "expense_day": 4, "expense_month": 2, "expense_year": 2024},
            {"category": "Food", "amount": "800", "expense_day": 9, "expense_month": 2, "expense_year": 2024},
        ],
    }
    first = client.put("/salary-records", json=payload)
    assert first.status_code == 200, first.text
    assert first.json()["grand_total"] == "52000.00"

    payload["salary"] = "52000"
    payload["expenses"] = []
    second = client.put("/salary-records", json=payload)
    assert second.json()["id"] == first.json()["id"]

    client.put("/salary-records", json={**payload, "month": 11, "year": 2023, "salary": "100"})

    records = client.get("/salary-records").json()
    assert [record["period_label"] for record in records] == ["March 2024", "December 2023"]
    assert records[0]["expenses"] == []
    assert records[0]["expenses_total"] == "0.00"
    assert records[0]["grand_total"] == "52000.00"


def test_deleting_employee_reports_removed_records(client: TestClient) -> None:
    _register(client)
    employee = _add_employee(client)
    client.put(
        "/salary-records",
        json={"employee_id": employee["id"], "month": 0, "year": 2024, "salary": "10"},
    )

    response = client.delete(f"/employees/{employee['id']}")

    assert response.status_code == 200
    assert response.json() == {"id": employee["id"], "salary_records_removed": 1}
    assert client.get("/salary-records").json() == []


def test_users_only_see_their_own_data(client: TestClient) -> None:
    _register(client)
    _add_employee(client)
    client.post("/auth/logout")

    _register(client, email="vikram@example.com")

    assert client.get("/employees").json() == []
