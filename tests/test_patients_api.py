from datetime import datetime, timedelta, timezone
from uuid import uuid4


def test_create_patient_returns_full_record(client, patient_payload):
    response = client.post(
        "/api/patients",
        json=patient_payload(
            middleName="Anne",
            address={
                "street": "12 Oak Street",
                "city": "Springfield",
                "state": "IL",
                "zipCode": "62701-1234",
                "latitude": 39.78172,
                "longitude": -89.65015,
            },
        ),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["id"]
    assert body["firstName"] == "Jane"
    assert body["middleName"] == "Anne"
    assert body["lastName"] == "Smith"
    assert body["dateOfBirth"] == "1985-03-14"
    assert body["status"] == "Active"
    assert body["address"]["country"] == "USA"
    assert body["address"]["zipCode"] == "62701-1234"
    assert body["address"]["latitude"] == 39.78172
    assert body["address"]["longitude"] == -89.65015
    assert body["createdAt"] == body["updatedAt"]


def test_created_patient_can_be_fetched(client, create_patient):
    created = create_patient()

    response = client.get(f"/api/patients/{created['id']}")

    assert response.status_code == 200
    assert response.json() == created


def test_blank_optional_fields_are_omitted(client, patient_payload):
    response = client.post(
        "/api/patients", json=patient_payload(middleName="", email="", phone="  ")
    )

    assert response.status_code == 201
    body = response.json()
    assert "middleName" not in body
    assert "email" not in body
    assert "phone" not in body
    assert "latitude" not in body["address"]


def test_create_rejects_missing_required_field(client, patient_payload):
    payload = patient_payload()
    del payload["firstName"]

    response = client.post("/api/patients", json=payload)

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "Validation failed"
    assert body["code"] == "VALIDATION_ERROR"
    assert any(detail["path"] == "firstName" for detail in body["details"])


def test_create_rejects_bad_formats(client, patient_payload):
    cases = [
        {"dateOfBirth": "03/14/1985"},
        {"email": "not-an-email"},
        {"status": "Discharged"},
        {
            "address": {
                "street": "1 Main St",
                "city": "Springfield",
                "state": "IL",
                "zipCode": "6270",
            }
        },
        {
            "address": {
                "street": "1 Main St",
                "city": "Springfield",
                "state": "IL",
                "zipCode": "62701",
                "latitude": 91,
            }
        },
    ]
    for overrides in cases:
        response = client.post("/api/patients", json=patient_payload(**overrides))
        assert response.status_code == 400, overrides
        assert response.json()["code"] == "VALIDATION_ERROR"


def test_get_unknown_patient_returns_404(client):
    response = client.get(f"/api/patients/{uuid4()}")

    assert response.status_code == 404
    assert response.json() == {"error": "Patient not found", "code": "NOT_FOUND"}


def test_malformed_patient_id_is_a_validation_error(client):
    response = client.get("/api/patients/not-a-uuid")

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_unsupported_method_returns_405(client):
    response = client.put(f"/api/patients/{uuid4()}", json={})

    assert response.status_code == 405
    assert response.json()["code"] == "METHOD_NOT_ALLOWED"


def test_patch_updates_only_supplied_fields(client, create_patient):
    created = create_patient(middleName="Anne")

    response = client.patch(
        f"/api/patients/{created['id']}",
        json={"status": "Churned", "address": {"city": "Chicago"}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Churned"
    assert body["address"]["city"] == "Chicago"
    assert body["address"]["street"] == created["address"]["street"]
    assert body["middleName"] == "Anne"
    assert body["firstName"] == created["firstName"]
    assert body["createdAt"] == created["createdAt"]
    assert body["updatedAt"] >= created["updatedAt"]


def test_patch_with_empty_string_clears_optional_field(client, create_patient):
    created = create_patient(middleName="Anne")

    response = client.patch(f"/api/patients/{created['id']}", json={"middleName": ""})

    assert response.status_code == 200
    assert "middleName" not in response.json()


def test_patch_rejects_null_required_field(client, create_patient):
    created = create_patient()

    response = client.patch(f"/api/patients/{created['id']}", json={"firstName": None})

    assert response.status_code == 400


def test_patch_unknown_patient_returns_404(client):
    response = client.patch(f"/api/patients/{uuid4()}", json={"status": "Active"})

    assert response.status_code == 404


def test_delete_patient(client, create_patient):
    created = create_patient()

    response = client.delete(f"/api/patients/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    assert client.get(f"/api/patients/{created['id']}").status_code == 404
    assert client.delete(f"/api/patients/{created['id']}").status_code == 404


def test_list_defaults_and_pagination(client, create_patient):
    for index in range(12):
        create_patient(firstName=f"Patient{index:02d}", lastName="Doe")

    first_page = client.get("/api/patients").json()
    second_page = client.get("/api/patients", params={"page": 2}).json()

    assert first_page["pagination"] == {"page": 1, "pageSize": 10, "totalCount": 12}
    assert len(first_page["patients"]) == 10
    assert len(second_page["patients"]) == 2
    ids = {p["id"] for p in first_page["patients"]} | {
        p["id"] for p in second_page["patients"]
    }
    assert len(ids) == 12


def test_list_page_beyond_end_is_empty(client, create_patient):
    create_patient()

    body = client.get("/api/patients", params={"page": 5}).json()

    assert body["patients"] == []
    assert body["pagination"]["totalCount"] == 1


def test_list_filters_by_status(client, create_patient):
    for index in range(3):
        create_patient(firstName=f"Active{index}", status="Active")
    create_patient(firstName="Lead", status="Inquiry")

    body = client.get(
        "/api/patients", params={"status": "Active", "pageSize": 2}
    ).json()

    assert body["pagination"] == {"page": 1, "pageSize": 2, "totalCount": 3}
    assert len(body["patients"]) == 2
    assert all(p["status"] == "Active" for p in body["patients"])


def test_list_sorts_by_name_descending(client, create_patient):
    create_patient(firstName="Amy", lastName="Adams")
    create_patient(firstName="Zed", lastName="Young")
    create_patient(firstName="Bob", lastName="Young")

    body = client.get(
        "/api/patients", params={"sortField": "name", "sortDirection": "desc"}
    ).json()

    names = [(p["lastName"], p["firstName"]) for p in body["patients"]]
    assert names == [("Young", "Zed"), ("Young", "Bob"), ("Adams", "Amy")]


def test_list_sorts_by_date_of_birth(client, create_patient):
    create_patient(firstName="Old", dateOfBirth="1950-01-01")
    create_patient(firstName="Young", dateOfBirth="2001-06-30")
    create_patient(firstName="Mid", dateOfBirth="1980-12-31")

    body = client.get("/api/patients", params={"sortField": "dateOfBirth"}).json()

    assert [p["firstName"] for p in body["patients"]] == ["Old", "Mid", "Young"]


def test_search_matches_names_case_insensitively(client, create_patient):
    create_patient(firstName="Jane", lastName="Smith", email="jane@example.com")
    create_patient(firstName="Smithson", lastName="Lee", email="lee@example.com")
    create_patient(
        firstName="Ann", lastName="Brown", email="ann@example.com", phone="555-9999"
    )

    body = client.get("/api/patients", params={"search": "smith"}).json()

    found = {p["firstName"] for p in body["patients"]}
    assert found == {"Jane", "Smithson"}
    assert body["pagination"]["totalCount"] == 2


def test_search_matches_email_and_phone(client, create_patient):
    create_patient(firstName="Ann", email="ann.b@clinic.org", phone="555-9999")
    create_patient(firstName="Bea", email="bea@example.com", phone="555-0000")

    by_email = client.get("/api/patients", params={"search": "CLINIC"}).json()
    by_phone = client.get("/api/patients", params={"search": "9999"}).json()

    assert [p["firstName"] for p in by_email["patients"]] == ["Ann"]
    assert [p["firstName"] for p in by_phone["patients"]] == ["Ann"]


def test_list_filters_by_created_at_range(client, create_patient):
    create_patient()
    now = datetime.now(timezone.utc)

    inside = client.get(
        "/api/patients",
        params={
            "dateFrom": (now - timedelta(hours=1)).isoformat(),
            "dateTo": (now + timedelta(hours=1)).isoformat(),
        },
    ).json()
    after = client.get(
        "/api/patients", params={"dateFrom": (now + timedelta(hours=1)).isoformat()}
    ).json()

    assert inside["pagination"]["totalCount"] == 1
    assert after["pagination"]["totalCount"] == 0


def test_list_rejects_invalid_query_parameters(client):
    for params in (
        {"pageSize": 101},
        {"page": 0},
        {"sortField": "email"},
        {"sortDirection": "sideways"},
        {"status": "Unknown"},
    ):
        response = client.get("/api/patients", params=params)
        assert response.status_code == 400, params
        assert response.json()["code"] == "VALIDATION_ERROR"


def test_init_endpoint_is_idempotent(client):
    first = client.post("/api/init")
    second = client.post("/api/init")

    assert first.status_code == 200
    assert second.status_code == 200
    body = second.json()
    assert body["success"] is True
    assert body["message"] == "Database initialized successfully"
    assert set(body["tables"]) == {"audit_logs", "patient_deletions", "patients"}


def test_email_is_returned_exactly_as_submitted(client, create_patient):
    created = create_patient(email="Jane.Smith@Example.COM")

    fetched = client.get(f"/api/patients/{created['id']}").json()

    assert created["email"] == "Jane.Smith@Example.COM"
    assert fetched["email"] == "Jane.Smith@Example.COM"


def test_patch_keeps_submitted_email_spelling(client, create_patient):
    created = create_patient()

    response = client.patch(
        f"/api/patients/{created['id']}", json={"email": "J.Smith@Clinic.ORG"}
    )

    assert response.json()["email"] == "J.Smith@Clinic.ORG"


def test_search_matches_email_substring(client, create_patient):
    create_patient(firstName="Alice", lastName="Jones", email="asmith@example.com")
    create_patient(firstName="Bob", lastName="Brown", email="bob@example.com")

    body = client.get("/api/patients", params={"search": "smith"}).json()

    assert [p["firstName"] for p in body["patients"]] == ["Alice"]
    assert body["pagination"]["totalCount"] == 1


def test_status_filter_total_is_independent_of_page(client, create_patient):
    for index in range(12):
        create_patient(firstName=f"Active{index:02d}", status="Active")
    for index in range(3):
        create_patient(firstName=f"Lead{index}", status="Inquiry")

    params = {"status": "Active", "pageSize": 10}
    first = client.get("/api/patients", params={**params, "page": 1}).json()
    second = client.get("/api/patients", params={**params, "page": 2}).json()

    assert first["pagination"]["totalCount"] == 12
    assert second["pagination"] == {"page": 2, "pageSize": 10, "totalCount": 12}
    assert len(second["patients"]) == 2
    assert all(p["status"] == "Active" for p in second["patients"])
    first_ids = {p["id"] for p in first["patients"]}
    assert first_ids.isdisjoint(p["id"] for p in second["patients"])


def test_search_wildcards_match_literally(client, create_patient):
    create_patient(firstName="Plain", lastName="Name", email="plain@example.com")
    create_patient(firstName="Under_Score", lastName="Name", email="u@example.com")
    create_patient(firstName="Hundred%", lastName="Name", email="h@example.com")

    underscore = client.get("/api/patients", params={"search": "_"}).json()
    percent = client.get("/api/patients", params={"search": "%"}).json()

    assert [p["firstName"] for p in underscore["patients"]] == ["Under_Score"]
    assert [p["firstName"] for p in percent["patients"]] == ["Hundred%"]
