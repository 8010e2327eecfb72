import uuid
from datetime import datetime

import pytest
from sqlmodel import select

from app.db.schema import Quotation, QuotationStatus, AuditLog, AuditAction
from conftest import QUOTATION_PAYLOAD

BASE = "/api/v1/quotations"


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------

def test_submit_creates_pending_quotation(client, session):
    response = client.post(f"{BASE}/", json=QUOTATION_PAYLOAD)

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Quotation submitted successfully"
    assert body["quotation"]["status"] == "PENDING"
    assert body["quotation"]["approved_at"] is None
    assert len(session.exec(select(Quotation)).all()) == 1


def test_submit_trims_fields_and_lowercases_email(client):
    payload = {**QUOTATION_PAYLOAD, "name": "  Alice  ",
               "email": "Alice@X.com"}
    response = client.post(f"{BASE}/", json=payload)

    assert response.status_code == 201
    quotation = response.json()["quotation"]
    assert quotation["name"] == "Alice"
    assert quotation["email"] == "alice@x.com"


@pytest.mark.parametrize("field", list(QUOTATION_PAYLOAD))
@pytest.mark.parametrize("value", ["", "   "])
def test_submit_rejects_blank_field(client, session, field, value):
    payload = {**QUOTATION_PAYLOAD, field: value}
    response = client.post(f"{BASE}/", json=payload)

    assert response.status_code == 400
    assert field in response.json()["detail"]
    assert session.exec(select(Quotation)).first() is None


def test_submit_rejects_missing_field(client, session):
    payload = dict(QUOTATION_PAYLOAD)
    payload.pop("qualification")
    response = client.post(f"{BASE}/", json=payload)

    assert response.status_code == 400
    assert "qualification" in response.json()["detail"]
    assert session.exec(select(Quotation)).first() is None


@pytest.mark.parametrize("email", ["alice", "alice@", "alice@x", "@x.com", "a b@x.com"])
def test_submit_rejects_malformed_email(client, session, email):
    response = client.post(
        f"{BASE}/", json={**QUOTATION_PAYLOAD, "email": email})

    assert response.status_code == 400
    assert session.exec(select(Quotation)).first() is None


# ---------------------------------------------------------------------------
# Access gate
# ---------------------------------------------------------------------------

def test_admin_routes_require_token(client):
    assert client.get(f"{BASE}/").status_code == 401


def test_admin_routes_forbid_customers(client, customer_headers, submit_quotation):
    quotation = submit_quotation()

    assert client.get(f"{BASE}/", headers=customer_headers).status_code == 403
    response = client.put(
        f"{BASE}/{quotation['id']}/approve", headers=customer_headers)
    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied. Admin only."


# ---------------------------------------------------------------------------
# List / Get
# ---------------------------------------------------------------------------

def test_list_hides_rejected_by_default(client, admin_headers, submit_quotation):
    pending = submit_quotation(company_name="Pending Co")
    approved = submit_quotation(company_name="Approved Co")
    rejected = submit_quotation(company_name="Rejected Co")
    client.put(f"{BASE}/{approved['id']}/approve", headers=admin_headers)
    client.put(f"{BASE}/{rejected['id']}/reject", headers=admin_headers)

    response = client.get(f"{BASE}/", headers=admin_headers)
    assert response.status_code == 200
    ids = [q["id"] for q in response.json()]
    assert set(ids) == {pending["id"], approved["id"]}
    assert all(q["status"] != "REJECTED" for q in response.json())

    response = client.get(
        f"{BASE}/", params={"include_rejected": "true"}, headers=admin_headers)
    assert {q["id"] for q in response.json()} == {
        pending["id"], approved["id"], rejected["id"]}


def test_list_is_newest_first(client, admin_headers, submit_quotation):
    first = submit_quotation(company_name="First")
    second = submit_quotation(company_name="Second")

    response = client.get(f"{BASE}/", headers=admin_headers)
    assert [q["id"] for q in response.json()] == [second["id"], first["id"]]


def test_get_quotation(client, admin_headers, submit_quotation):
    quotation = submit_quotation()

    response = client.get(f"{BASE}/{quotation['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["company_name"] == "Acme"


@pytest.mark.parametrize("method, suffix", [
    ("get", ""),
    ("put", "/approve"),
    ("put", "/reject"),
    ("delete", ""),
])
def test_unknown_id_is_not_found(client, admin_headers, method, suffix):
    url = f"{BASE}/{uuid.uuid4()}{suffix}"
    response = getattr(client, method)(url, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"] == "Quotation not found."


def test_update_unknown_id_is_not_found(client, admin_headers):
    response = client.put(
        f"{BASE}/{uuid.uuid4()}", json={"admin_notes": "x"}, headers=admin_headers)
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Approve / Reject
# ---------------------------------------------------------------------------

def test_approve_pending_quotation(client, session, admin_user, admin_headers, submit_quotation):
    quotation = submit_quotation()

    response = client.put(
        f"{BASE}/{quotation['id']}/approve", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Quotation approved successfully"
    assert body["quotation"]["status"] == "APPROVED"
    assert body["quotation"]["approved_at"] is not None
    assert body["quotation"]["approved_by"] == admin_user.email
    assert body["quotation"]["rejected_at"] is None

    # Background audit entry
    log = session.exec(select(AuditLog)).one()
    assert log.action == AuditAction.APPROVE
    assert log.entity_id == uuid.UUID(quotation["id"])
    assert log.actor_user_id == admin_user.id


def test_reject_pending_quotation(client, admin_headers, submit_quotation):
    quotation = submit_quotation()

    response = client.put(
        f"{BASE}/{quotation['id']}/reject", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Quotation rejected successfully"
    assert body["quotation"]["status"] == "REJECTED"
    assert body["quotation"]["rejected_at"] is not None
    assert body["quotation"]["approved_at"] is None


def test_decided_quotation_cannot_be_decided_again(client, session, admin_headers, submit_quotation):
    quotation = submit_quotation()
    approved = client.put(
        f"{BASE}/{quotation['id']}/approve", headers=admin_headers).json()["quotation"]

    for action in ("approve", "reject"):
        response = client.put(
            f"{BASE}/{quotation['id']}/{action}", headers=admin_headers)
        assert response.status_code == 400
        assert "already approved" in response.json()["detail"]

    session.expire_all()
    stored = session.get(Quotation, uuid.UUID(quotation["id"]))
    assert stored.status == QuotationStatus.APPROVED
    assert stored.rejected_at is None
    assert stored.approved_at == datetime.fromisoformat(approved["approved_at"])


def test_rejected_quotation_cannot_be_approved(client, admin_headers, submit_quotation):
    quotation = submit_quotation()
    client.put(f"{BASE}/{quotation['id']}/reject", headers=admin_headers)

    response = client.put(
        f"{BASE}/{quotation['id']}/approve", headers=admin_headers)
    assert response.status_code == 400
    assert "already rejected" in response.json()["detail"]


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------

def test_update_applies_only_present_fields(client, admin_headers, submit_quotation):
    quotation = submit_quotation()

    response = client.put(
        f"{BASE}/{quotation['id']}",
        json={"admin_notes": "Call back on Monday", "company_name": "Acme Ltd"},
        headers=admin_headers
    )

    assert response.status_code == 200
    updated = response.json()["quotation"]
    assert updated["admin_notes"] == "Call back on Monday"
    assert updated["company_name"] == "Acme Ltd"
    assert updated["name"] == quotation["name"]
    assert updated["product_details"] == quotation["product_details"]
    assert updated["status"] == "PENDING"


def test_update_null_clears_admin_notes(client, admin_headers, submit_quotation):
    quotation = submit_quotation()
    client.patch(f"{BASE}/{quotation['id']}",
                 json={"admin_notes": "temp"}, headers=admin_headers)

    response = client.patch(
        f"{BASE}/{quotation['id']}", json={"admin_notes": None}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["quotation"]["admin_notes"] is None


def test_update_cannot_clear_required_field(client, admin_headers, submit_quotation):
    quotation = submit_quotation()

    response = client.put(
        f"{BASE}/{quotation['id']}", json={"name": None}, headers=admin_headers)

    assert response.status_code == 400
    assert "cannot be cleared" in response.json()["detail"]


def test_update_rejects_blank_and_bad_email(client, admin_headers, submit_quotation):
    quotation = submit_quotation()
    url = f"{BASE}/{quotation['id']}"

    assert client.put(url, json={"name": "  "},
                      headers=admin_headers).status_code == 400
    assert client.put(url, json={"email": "nope"},
                      headers=admin_headers).status_code == 400


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

def test_delete_quotation(client, session, admin_headers, submit_quotation):
    quotation = submit_quotation()

    response = client.delete(f"{BASE}/{quotation['id']}", headers=admin_headers)

    assert response.status_code == 200
    assert session.exec(select(Quotation)).first() is None


def test_delete_quotation_with_suppliers_is_refused(client, admin_headers, approved_quotation, supplier_payload):
    client.post("/api/v1/suppliers/", json=supplier_payload,
                headers=admin_headers)

    response = client.delete(
        f"{BASE}/{approved_quotation['id']}", headers=admin_headers)

    assert response.status_code == 400
    assert client.get(f"{BASE}/{approved_quotation['id']}",
                      headers=admin_headers).status_code == 200


def test_update_trims_admin_notes(client, admin_headers, submit_quotation):
    quotation = submit_quotation()

    response = client.patch(
        f"{BASE}/{quotation['id']}", json={"admin_notes": "  follow up  "}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["quotation"]["admin_notes"] == "follow up"
