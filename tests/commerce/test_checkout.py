"""
Tests for POST /api/v1/stripe/create-checkout-session.
"""

import pytest
from httpx import AsyncClient

from newsgate.adapters.payments import CheckoutSession, PaymentsAPIError
from newsgate.config import settings
from newsgate.dependencies import get_stripe_adapter
from newsgate.main import app


class FakeStripe:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sessions = []

    async def create_checkout_session(self, price_id: str, user_id: str) -> CheckoutSession:
        if self.fail:
            raise PaymentsAPIError("card network unavailable")
        self.sessions.append((price_id, user_id))
        return CheckoutSession(id="cs_test_123", url="https://checkout.stripe.com/c/cs_test_123")


@pytest.fixture
def prices(monkeypatch):
    monkeypatch.setattr(settings, "stripe_price_monthly", "price_monthly_test")
    monkeypatch.setattr(settings, "stripe_price_yearly", "price_yearly_test")


@pytest.fixture
def fake_stripe():
    fake = FakeStripe()
    app.dependency_overrides[get_stripe_adapter] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_stripe_adapter, None)


class TestCreateCheckoutSession:
    """POST /api/v1/stripe/create-checkout-session tests."""

    async def test_signed_in_user_gets_session(
        self, async_client: AsyncClient, test_user: dict, auth_headers, prices, fake_stripe,
    ):
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session",
            json={"plan": "monthly"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 200
        assert response.json() == {
            "url": "https://checkout.stripe.com/c/cs_test_123",
            "session_id": "cs_test_123",
        }
        assert fake_stripe.sessions == [("price_monthly_test", test_user["user_id"])]

    async def test_plan_is_case_insensitive(
        self, async_client: AsyncClient, test_user: dict, prices, fake_stripe,
    ):
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session",
            json={"plan": "Yearly", "user_id": test_user["user_id"]},
        )
        assert response.status_code == 200
        assert fake_stripe.sessions[0][0] == "price_yearly_test"

    async def test_unknown_plan_returns_400(
        self, async_client: AsyncClient, test_user: dict, auth_headers, prices, fake_stripe,
    ):
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session",
            json={"plan": "weekly"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 400
        assert fake_stripe.sessions == []

    async def test_anonymous_without_user_id_returns_400(
        self, async_client: AsyncClient, prices, fake_stripe,
    ):
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session", json={"plan": "monthly"}
        )
        assert response.status_code == 400

    async def test_anonymous_malformed_user_id_returns_400(
        self, async_client: AsyncClient, prices, fake_stripe,
    ):
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session",
            json={"plan": "monthly", "user_id": "not-a-uuid"},
        )
        assert response.status_code == 400
        assert fake_stripe.sessions == []

    async def test_anonymous_unknown_user_returns_404(
        self, async_client: AsyncClient, prices, fake_stripe,
    ):
        """No payment is started for a buyer the webhook could never credit."""
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session",
            json={"plan": "monthly", "user_id": "0b6a3f2e-0000-4000-8000-000000000001"},
        )
        assert response.status_code == 404
        assert fake_stripe.sessions == []

    async def test_misconfigured_price_returns_500(
        self, async_client: AsyncClient, test_user: dict, auth_headers, monkeypatch,
    ):
        """A price id without the price_ prefix never reaches Stripe."""
        monkeypatch.setattr(settings, "stripe_price_monthly", "monthly")
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session",
            json={"plan": "monthly"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 500
        assert "Configuration error" in response.json()["detail"]["error"]["message"]

    async def test_stripe_failure_returns_500(
        self, async_client: AsyncClient, test_user: dict, auth_headers, prices,
    ):
        app.dependency_overrides[get_stripe_adapter] = lambda: FakeStripe(fail=True)
        response = await async_client.post(
            "/api/v1/stripe/create-checkout-session",
            json={"plan": "monthly"},
            headers=auth_headers(test_user),
        )
        assert response.status_code == 500
