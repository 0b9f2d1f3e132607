"""
Integration tests for the tracking log routes.
"""

import pytest


async def post_event(client, caller, **body):
    return await client.post("/trackings", json=body, params=caller.params(), headers=caller.headers)


@pytest.mark.asyncio
async def test_append_and_read_history_in_order(client, customer):
    for status in ("created", "picked_up", "in_transit", "delivered"):
        response = await post_event(client, customer, tracking_id="PCL-20260101-ABC123", status=status)
        assert response.status_code == 200

    response = await client.get("/trackings/PCL-20260101-ABC123", params=customer.params(), headers=customer.headers)

    assert response.status_code == 200
    assert [e["status"] for e in response.json()] == ["created", "picked_up", "in_transit", "delivered"]


@pytest.mark.asyncio
async def test_event_gets_server_timestamp_and_author(client, customer):
    response = await post_event(
        client, customer, tracking_id="T-1", status="created", message="Booked", timestamp="1999-01-01T00:00:00Z"
    )

    data = response.json()
    assert not data["timestamp"].startswith("1999")
    assert data["message"] == "Booked"
    assert data["updated_by"] == customer.email


@pytest.mark.asyncio
async def test_explicit_author_is_kept(client, customer):
    response = await post_event(client, customer, tracking_id="T-1", status="created", updated_by="hub-7")

    assert response.json()["updated_by"] == "hub-7"


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"status": "created"},
    {"tracking_id": "T-1"},
    {"tracking_id": "  ", "status": "created"},
])
async def test_missing_fields_are_rejected(client, customer, body):
    response = await post_event(client, customer, **body)

    assert response.status_code == 400
    assert response.json()["error_code"] == "ERR_BAD_REQUEST_001"

    history = await client.get("/trackings/T-1", params=customer.params(), headers=customer.headers)
    assert history.json() == []


@pytest.mark.asyncio
async def test_histories_are_separate(client, customer):
    await post_event(client, customer, tracking_id="T-1", status="created")
    await post_event(client, customer, tracking_id="T-2", status="created")
    await post_event(client, customer, tracking_id="T-2", status="delivered")

    response = await client.get("/trackings/T-1", params=customer.params(), headers=customer.headers)

    assert len(response.json()) == 1


@pytest.mark.asyncio
async def test_tracking_requires_matching_uid(client, customer):
    response = await client.get("/trackings/T-1", params={"uid": "other"}, headers=customer.headers)

    assert response.status_code == 403
