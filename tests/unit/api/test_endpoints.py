"""Unit tests for the pool HTTP API."""

import pytest
from fastapi.testclient import TestClient

from stableswap.api.endpoints import get_pool
from stableswap.api.main import app
from tests.helpers import (
    ALICE,
    BOB,
    OWNER,
    START_TIME,
    FakeClock,
    balances_of,
    fund,
    make_pool,
    units,
)

DEADLINE = START_TIME + 3600


@pytest.fixture
def pool_fixture():
    """Seeded pool served by the API for the duration of a test."""
    clock = FakeClock()
    pool, assets, shares = make_pool(clock=clock)
    seed = units([1000, 1000, 1000])
    fund(assets, ALICE, seed)
    pool.add_liquidity(ALICE, seed, 0, DEADLINE)
    app.dependency_overrides[get_pool] = lambda: pool
    yield pool, assets, shares
    app.dependency_overrides.clear()


@pytest.fixture
def client(pool_fixture):
    """Create a test client for the API."""
    return TestClient(app)


class TestPoolState:
    """Tests for GET /pool."""

    def test_state(self, client):
        response = client.get("/pool")

        assert response.status_code == 200
        data = response.json()
        assert data["balances"] == [str(b) for b in units([1000, 1000, 1000])]
        assert data["totalSupply"] == str(3000 * 10**18)
        assert data["invariant"] == str(3000 * 10**18)
        assert data["virtualPrice"] == str(10**18)
        assert data["amplification"] == 10_000
        assert data["swapFee"] == 4_000_000
        assert data["decimals"] == [18, 6, 6]
        assert data["paused"] is False

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestExchange:
    """Tests for the exchange endpoints."""

    def test_quote_then_exchange(self, client, pool_fixture):
        _, assets, _ = pool_fixture
        fund(assets, BOB, [10**20, 0, 0])

        quote = client.post("/pool/quote/exchange", json={"i": 0, "j": 1, "dx": str(10**20)})
        assert quote.status_code == 200

        response = client.post(
            "/pool/exchange",
            json={
                "caller": BOB,
                "i": 0,
                "j": 1,
                "dx": str(10**20),
                "minDy": quote.json()["dy"],
                "deadline": DEADLINE,
            },
        )

        assert response.status_code == 200
        assert response.json()["dy"] == quote.json()["dy"]
        assert balances_of(assets, BOB)[1] == int(response.json()["dy"])

    def test_slippage_rejected(self, client, pool_fixture):
        _, assets, _ = pool_fixture
        fund(assets, BOB, [10**20, 0, 0])
        response = client.post(
            "/pool/exchange",
            json={
                "caller": BOB,
                "i": 0,
                "j": 1,
                "dx": str(10**20),
                "minDy": str(10**12),
                "deadline": DEADLINE,
            },
        )

        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientOutput"

    def test_same_asset_rejected(self, client):
        response = client.post("/pool/quote/exchange", json={"i": 1, "j": 1, "dx": "1"})
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidAssetIndex"

    def test_unfunded_caller(self, client):
        response = client.post(
            "/pool/exchange",
            json={"caller": BOB, "i": 0, "j": 1, "dx": "1000", "minDy": "0", "deadline": DEADLINE},
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InsufficientBalance"

    def test_paused_pool_returns_conflict(self, client, pool_fixture):
        pool, _, _ = pool_fixture
        pool.pause(OWNER)
        response = client.post(
            "/pool/exchange",
            json={"caller": BOB, "i": 0, "j": 1, "dx": "1", "minDy": "0", "deadline": DEADLINE},
        )
        assert response.status_code == 409
        assert response.json()["error"] == "OperationsSuspended"


class TestLiquidity:
    """Tests for the liquidity endpoints."""

    def test_add_liquidity(self, client, pool_fixture):
        _, assets, shares = pool_fixture
        amounts = units([10, 10, 10])
        fund(assets, BOB, amounts)

        response = client.post(
            "/pool/add_liquidity",
            json={
                "caller": BOB,
                "amounts": [str(a) for a in amounts],
                "minShares": "0",
                "deadline": DEADLINE,
            },
        )

        assert response.status_code == 200
        assert response.json()["shares"] == str(30 * 10**18)
        assert shares.balance_of(BOB) == 30 * 10**18

    def test_remove_liquidity(self, client):
        response = client.post(
            "/pool/remove_liquidity",
            json={
                "caller": ALICE,
                "shareAmount": str(300 * 10**18),
                "minAmounts": ["0", "0", "0"],
                "deadline": DEADLINE,
            },
        )
        assert response.status_code == 200
        assert response.json()["amounts"] == [str(a) for a in units([100, 100, 100])]

    def test_remove_liquidity_one_held_asset_rejected(self, client):
        response = client.post(
            "/pool/remove_liquidity_one",
            json={
                "caller": ALICE,
                "shareAmount": str(10**18),
                "index": 0,
                "minAmount": "0",
                "deadline": DEADLINE,
            },
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidAssetIndex"

    def test_remove_liquidity_one(self, client):
        response = client.post(
            "/pool/remove_liquidity_one",
            json={
                "caller": ALICE,
                "shareAmount": str(30 * 10**18),
                "index": 2,
                "minAmount": "29000000",
                "deadline": DEADLINE,
            },
        )
        assert response.status_code == 200
        assert 29_000_000 < int(response.json()["amount"]) < 30_000_000


class TestRequestValidation:
    """Malformed requests are rejected before reaching the pool."""

    def test_invalid_caller_address(self, client):
        response = client.post(
            "/pool/exchange",
            json={"caller": "0x1234", "i": 0, "j": 1, "dx": "1", "minDy": "0", "deadline": 0},
        )
        assert response.status_code == 422

    def test_negative_amount(self, client):
        response = client.post("/pool/quote/exchange", json={"i": 0, "j": 1, "dx": "-1"})
        assert response.status_code == 422

    def test_non_numeric_amount(self, client):
        response = client.post("/pool/quote/exchange", json={"i": 0, "j": 1, "dx": "abc"})
        assert response.status_code == 422
