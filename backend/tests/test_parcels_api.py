"""
Integration tests for the parcel routes.

Covers booking, listing, guard failures and the admin / rider transitions.
"""

import pytest
from fastapi import Depends

from backend.app.main import app
from backend.app.core.dependencies import get_lifecycle
from backend.app.db.gateway import DocumentStore, get_store
from backend.app.models.enums import PaymentStatus, WorkStatus
from backend.app.services.parcel_lifecycle import ParcelLifecycle
from backend.tests.helpers import break_collection


async def book_parcel(client, caller, **fields):
    response = await client.post(
        "/parcels",
        json={"created_by": caller.email, **fields},
        params=caller.params(),
        headers=caller.headers,
    )
    assert response.status_code == 200
    return response.json()


# TEST 1: Book and list
@pytest.mark.asyncio
async def test_book_and_list_own_parcels(client, customer):
    """POST /parcels then GET /parcels?email= returns the new parcel."""
    created = await book_parcel(client, customer, title="Passport", type="document", cost=60)

    assert created["id"]
    assert created["payment_status"] == "unpaid"
    assert created["delivery_status"] == "pending"
    assert created["cashout_status"] == "not_cashed_out"
    assert created["parcel_type"] == "document"

    response = await client.get(
        "/parcels",
        params=customer.params(email=customer.email),
        headers=customer.headers,
    )

    assert response.status_code == 200
    assert [p["id"] for p in response.json()] == [created["id"]]


# TEST 2: uid mismatch
@pytest.mark.asyncio
async def test_list_with_foreign_uid_is_forbidden(client, customer):
    response = await client.get(
        "/parcels",
        params={"uid": "somebody-else", "email": customer.email},
        headers=customer.headers,
    )

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


# TEST 3: No credential
@pytest.mark.asyncio
async def test_missing_credential_is_unauthorized(client, customer):
    response = await client.get("/parcels", params=customer.params())

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


@pytest.mark.asyncio
async def test_list_filters_by_statuses(client, customer, store):
    first = await book_parcel(client, customer)
    await book_parcel(client, customer)
    await store.parcels.update_one({"id": first["id"]}, {"payment_status": PaymentStatus.PAID})

    response = await client.get(
        "/parcels",
        params=customer.params(email=customer.email, payment_status="paid", delivery_status="pending"),
        headers=customer.headers,
    )

    assert [p["id"] for p in response.json()] == [first["id"]]


@pytest.mark.asyncio
async def test_get_parcel_and_not_found(client, customer):
    created = await book_parcel(client, customer)

    found = await client.get(f"/parcels/{created['id']}", params=customer.params(), headers=customer.headers)
    missing = await client.get("/parcels/9999", params=customer.params(), headers=customer.headers)

    assert found.json()["tracking_id"] == created["tracking_id"]
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_create_requires_creator(client, customer):
    response = await client.post("/parcels", json={"title": "No owner"}, params=customer.params(), headers=customer.headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "ERR_VALIDATION"


# Assignment
@pytest.mark.asyncio
async def test_admin_assigns_rider(client, customer, admin, rider, store):
    parcel = await book_parcel(client, customer)

    response = await client.patch(
        f"/parcels/{parcel['id']}/assign",
        json={"riderId": rider.id, "riderName": rider.name, "riderEmail": rider.email},
        params=admin.params(),
        headers=admin.headers,
    )

    assert response.status_code == 200
    assert response.json()["delivery_status"] == "rider_assigned"
    assert response.json()["assigned_rider_email"] == rider.email
    assert (await store.riders.find_one({"id": rider.id})).work_status == WorkStatus.IN_DELIVERY


@pytest.mark.asyncio
async def test_customer_cannot_assign(client, customer, rider):
    parcel = await book_parcel(client, customer)

    response = await client.patch(
        f"/parcels/{parcel['id']}/assign",
        json={"riderId": rider.id, "riderName": rider.name, "riderEmail": rider.email},
        params=customer.params(),
        headers=customer.headers,
    )

    assert response.status_code == 403


# Rider transitions
@pytest.mark.asyncio
async def test_rider_delivers_and_becomes_available(client, customer, admin, rider, rider_user, store):
    parcel = await book_parcel(client, customer)
    await client.patch(
        f"/parcels/{parcel['id']}/assign",
        json={"riderId": rider.id, "riderName": rider.name, "riderEmail": rider.email},
        params=admin.params(),
        headers=admin.headers,
    )

    picked = await client.patch(
        f"/parcels/{parcel['id']}/status",
        json={"status": "in_transit"},
        params=rider_user.params(),
        headers=rider_user.headers,
    )
    assert picked.status_code == 200
    assert picked.json()["picked_at"] is not None

    active = await client.get("/rider/parcels", params=rider_user.params(), headers=rider_user.headers)
    assert [p["id"] for p in active.json()] == [parcel["id"]]

    delivered = await client.patch(
        f"/parcels/{parcel['id']}/status",
        json={"status": "delivered"},
        params=rider_user.params(),
        headers=rider_user.headers,
    )
    assert delivered.json()["delivered_at"] is not None
    assert (await store.riders.find_one({"id": rider.id})).work_status == WorkStatus.AVAILABLE

    completed = await client.get("/rider/completed-parcels", params=rider_user.params(), headers=rider_user.headers)
    assert [p["id"] for p in completed.json()] == [parcel["id"]]

    cashed = await client.patch(
        f"/parcels/{parcel['id']}/cashout",
        params=rider_user.params(),
        headers=rider_user.headers,
    )
    assert cashed.json()["cashout_status"] == "cashed_out"


@pytest.mark.asyncio
async def test_status_update_rejects_unknown_status(client, customer, rider_user):
    parcel = await book_parcel(client, customer)

    response = await client.patch(
        f"/parcels/{parcel['id']}/status",
        json={"status": "lost"},
        params=rider_user.params(),
        headers=rider_user.headers,
    )

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_admin_cannot_cash_out(client, customer, admin):
    parcel = await book_parcel(client, customer)

    response = await client.patch(f"/parcels/{parcel['id']}/cashout", params=admin.params(), headers=admin.headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_status_count_histogram(client, customer, admin):
    await book_parcel(client, customer)
    await book_parcel(client, customer)

    response = await client.get("/parcels/delivery/status-count", params=admin.params(), headers=admin.headers)

    assert response.status_code == 200
    assert response.json() == [{"status": "pending", "count": 2}]


@pytest.mark.asyncio
async def test_delete_parcel(client, customer):
    parcel = await book_parcel(client, customer)

    deleted = await client.delete(f"/parcels/{parcel['id']}", params=customer.params(), headers=customer.headers)
    again = await client.delete(f"/parcels/{parcel['id']}", params=customer.params(), headers=customer.headers)

    assert deleted.json() == {"deleted_count": 1}
    assert again.json() == {"deleted_count": 0}


@pytest.mark.asyncio
async def test_duplicate_tracking_id_is_bad_request(client, customer):
    await book_parcel(client, customer, tracking_id="DUP-1")

    response = await client.post(
        "/parcels",
        json={"created_by": customer.email, "tracking_id": "DUP-1"},
        params=customer.params(),
        headers=customer.headers,
    )

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_BAD_REQUEST_001"
    assert response.json()["details"]["fields"] == ["tracking_id"]


@pytest.mark.asyncio
async def test_assign_with_failing_rider_write(client, customer, admin, rider, store):
    parcel = await book_parcel(client, customer)

    def lifecycle_with_broken_riders(request_store: DocumentStore = Depends(get_store)):
        break_collection(request_store.riders, "update_one")
        return ParcelLifecycle(request_store)

    app.dependency_overrides[get_lifecycle] = lifecycle_with_broken_riders
    try:
        response = await client.patch(
            f"/parcels/{parcel['id']}/assign",
            json={"riderId": rider.id, "riderName": rider.name, "riderEmail": rider.email},
            params=admin.params(),
            headers=admin.headers,
        )
    finally:
        del app.dependency_overrides[get_lifecycle]

    assert response.status_code == 502
    assert response.json()["error_code"] == "ERR_UPSTREAM_001"

    stored = await store.parcels.find_one({"id": parcel["id"]})
    assert stored.delivery_status.value == "rider_assigned"
    assert (await store.riders.find_one({"id": rider.id})).work_status == WorkStatus.AVAILABLE
