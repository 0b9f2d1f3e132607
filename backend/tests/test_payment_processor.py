"""
Tests for the payment gateway client against a mocked transport.
"""

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from backend.app.core.exceptions import UpstreamFailure
from backend.app.services.payment_processor import PaymentProcessor


@pytest.mark.asyncio
async def test_create_intent_posts_form_with_basic_auth():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["authorization"]
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(200, json={"id": "pi_1", "client_secret": "pi_1_secret"})

    processor = PaymentProcessor(api_key="sk_test_123", base_url="https://gateway.test/", transport=httpx.MockTransport(handler))

    secret = await processor.create_intent(2500, "usd")

    assert secret == "pi_1_secret"
    assert seen["url"] == "https://gateway.test/v1/payment_intents"
    assert seen["auth"] == "Basic " + base64.b64encode(b"sk_test_123:").decode()
    assert seen["form"] == {
        "amount": ["2500"],
        "currency": ["usd"],
        "payment_method_types[]": ["card"],
    }


@pytest.mark.asyncio
async def test_gateway_error_message_is_surfaced():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(400, json={"error": {"message": "Amount must be at least 50 cents"}})
    )
    processor = PaymentProcessor(api_key="sk", transport=transport)

    with pytest.raises(UpstreamFailure) as exc_info:
        await processor.create_intent(10, "usd")

    assert exc_info.value.message == "Amount must be at least 50 cents"
    assert exc_info.value.details == {"service": "payment_gateway"}


@pytest.mark.asyncio
async def test_gateway_error_without_body():
    processor = PaymentProcessor(api_key="sk", transport=httpx.MockTransport(lambda request: httpx.Response(500)))

    with pytest.raises(UpstreamFailure) as exc_info:
        await processor.create_intent(1000, "usd")

    assert "500" in exc_info.value.message


@pytest.mark.asyncio
async def test_unreachable_gateway():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    processor = PaymentProcessor(api_key="sk", transport=httpx.MockTransport(handler))

    with pytest.raises(UpstreamFailure):
        await processor.create_intent(1000, "usd")


@pytest.mark.asyncio
async def test_missing_client_secret():
    processor = PaymentProcessor(
        api_key="sk", transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"id": "pi_2"}))
    )

    with pytest.raises(UpstreamFailure):
        await processor.create_intent(1000, "usd")
