"""HTTP API tests using an in-memory registry chain."""

import pytest
from eth_account import Account
from eth_account.messages import encode_defunct
from fastapi.testclient import TestClient

from api.main import app
from api.routes.registry import get_public_client
from erc8004_agent.database import LinkNonce, SessionLocal, WalletLink
from erc8004_agent.linking import build_link_message
from erc8004_agent.models import to_hex


def _clear_links():
    session = SessionLocal()
    try:
        session.query(LinkNonce).delete()
        session.query(WalletLink).delete()
        session.commit()
    finally:
        session.close()


@pytest.fixture
def client(chain):
    _clear_links()
    app.dependency_overrides[get_public_client] = lambda: chain
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_registration_for_unregistered_owner(client: TestClient):
    owner = Account.create().address

    response = client.get(f"/api/registry/arbitrum-sepolia/owners/{owner}")

    assert response.status_code == 200
    data = response.json()
    assert data["isRegistered"] is False
    assert data["agentInfo"] is None
    assert data["error"] is None


def test_registration_for_registered_owner(client: TestClient, chain, account):
    agent_id = chain.seed_agent(account.address, stake=10**20)

    response = client.get(f"/api/registry/arbitrum-sepolia/owners/{account.address.lower()}")

    data = response.json()
    assert data["owner"] == account.address
    assert data["isRegistered"] is True
    assert data["agentInfo"]["agentId"] == agent_id
    assert data["agentInfo"]["stake"] == str(10**20)


def test_registration_reports_absorbed_fault(client: TestClient, chain, account):
    chain.read_error = ConnectionError("rpc down")

    data = client.get(f"/api/registry/arbitrum-sepolia/owners/{account.address}").json()

    assert data["isRegistered"] is False
    assert "rpc down" in data["error"]


def test_registration_on_undeployed_network(client: TestClient, chain, account):
    chain.seed_agent(account.address)

    data = client.get(f"/api/registry/arbitrum/owners/{account.address}").json()

    assert data["isRegistered"] is False
    assert chain.reads == []


def test_unknown_network_and_bad_owner(client: TestClient, account):
    assert client.get(f"/api/registry/mainnet/owners/{account.address}").status_code == 404
    assert client.get("/api/registry/arbitrum-sepolia/owners/0x1234").status_code == 400


def test_stake_endpoint(client: TestClient, chain, account):
    agent_id = chain.seed_agent(account.address, stake=777)

    response = client.get(f"/api/registry/arbitrum-sepolia/agents/{agent_id}/stake")

    assert response.status_code == 200
    assert response.json() == {"network": "arbitrum-sepolia", "agentId": agent_id, "stake": 777}


def test_stake_endpoint_validation_and_transport_fault(client: TestClient, chain):
    assert client.get("/api/registry/arbitrum-sepolia/agents/0x12/stake").status_code == 400

    chain.read_error = ConnectionError("rpc down")
    response = client.get(f"/api/registry/arbitrum-sepolia/agents/0x{'11' * 32}/stake")
    assert response.status_code == 502


def test_link_telegram_profile(client: TestClient, account):
    nonce = "nonce-1"
    signature = to_hex(
        account.sign_message(encode_defunct(text=build_link_message("777", nonce))).signature
    )
    payload = {"telegramId": "777", "address": account.address, "signature": signature, "nonce": nonce}

    response = client.post("/api/telegram/link", json=payload)

    assert response.status_code == 200
    assert response.json() == {"success": True, "address": account.address}
    assert client.get("/api/telegram/777").json()["address"] == account.address

    replay = client.post("/api/telegram/link", json=payload)
    assert replay.status_code == 401


def test_link_with_invalid_signature_is_unauthorized(client: TestClient, account):
    signature = to_hex(
        account.sign_message(encode_defunct(text=build_link_message("777", "n"))).signature
    )
    payload = {
        "telegramId": "777",
        "address": Account.create().address,
        "signature": signature,
        "nonce": "n",
    }

    response = client.post("/api/telegram/link", json=payload)

    assert response.status_code == 401
    assert client.get("/api/telegram/777").status_code == 404
