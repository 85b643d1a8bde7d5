"""JSON API endpoints with the contract behind a MockTransport."""

import pytest
from conftest import ALICE, CONTRACT, REST_URL, bet_json, market_json
from fastapi.testclient import TestClient

from predictx.api.main import app, get_app_settings, get_contract_client
from predictx.config import Settings
from predictx.contract.client import ContractClient


@pytest.fixture
def client(contract, settings):
    async def contract_client():
        async with ContractClient(REST_URL, CONTRACT, transport=contract.transport) as c:
            yield c

    app.dependency_overrides[get_app_settings] = lambda: settings
    app.dependency_overrides[get_contract_client] = contract_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_markets_list_filters_and_pages(client, contract):
    for i in range(1, 6):
        contract.markets[i] = market_json(i, question=f"Question {i}")
    contract.markets[6] = market_json(6, status="Closed", question="Closed question")

    r = client.get("/api/markets")
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 6
    assert [m["id"] for m in body["markets"]] == [1, 2, 3, 4, 5, 6]
    assert body["markets"][5]["next_action"] == "propose"

    r = client.get("/api/markets", params={"status": "Active", "limit": 2, "offset": 1})
    assert [m["id"] for m in r.json()["markets"]] == [2, 3]
    assert r.json()["total"] == 5

    r = client.get("/api/markets", params={"search": "CLOSED"})
    assert [m["id"] for m in r.json()["markets"]] == [6]


def test_market_detail_and_missing(client, contract):
    contract.markets[1] = market_json(1)
    r = client.get("/api/market/1")
    assert r.status_code == 200
    body = r.json()
    assert body["resolution_bond"] == 5_000_000
    assert body["options"] == ["Yes", "No"]
    assert body["time_remaining"]

    r = client.get("/api/market/99")
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"
    assert "market not found" in r.json()["detail"]


def test_orderbook(client, contract):
    contract.books[(1, 0)] = {
        "buy_bets": [["300", {"total_unmatched_volume": "10"}], ["120", {"total_unmatched_volume": "5"}]],
        "sell_bets": [["150", {"total_unmatched_volume": "1"}], ["500", {"total_unmatched_volume": "2"}]],
    }
    r = client.get("/api/market/1/orderbook/0")
    assert r.status_code == 200
    body = r.json()
    assert [lev["odds"] for lev in body["back"]] == [120, 300]
    assert [lev["odds"] for lev in body["lay"]] == [500, 150]
    assert body["best_back"] == 120
    assert body["back_volume"] == 15


def test_config_and_whitelist(client, contract):
    contract.whitelist = ["comdex1creator"]
    assert client.get("/api/config").json()["coin_denom"] == "ucmdx"
    assert client.get("/api/whitelisted-addresses").json() == {"addresses": ["comdex1creator"]}


def test_stats(client, contract):
    contract.markets[1] = market_json(1)
    contract.markets[2] = market_json(2, status="Settled", collateral_amount="2500000")
    body = client.get("/api/stats").json()
    assert body == {
        "total_markets": 2,
        "active_markets": 1,
        "total_volume": 7_500_000,
        "total_volume_display": "7.50 CMDX",
    }


def test_user_bets_and_orders(client, contract):
    contract.bets = [
        bet_json(1, redeemed=True),
        bet_json(2),
        bet_json(3, market_id=2),
        bet_json(4, bettor="comdex1bob"),
    ]
    body = client.get(f"/api/user-bets/{ALICE}").json()
    assert [b["id"] for b in body["bets"]] == [1, 2, 3]
    assert body["summary"]["won_bets"] == 1
    assert body["summary"]["active_bets"] == 2

    r = client.get(f"/api/user-orders/{ALICE}", params={"market_id": 2})
    assert [o["id"] for o in r.json()] == [3]


def test_resolution_queue(client, contract):
    contract.markets[1] = market_json(1)
    contract.markets[2] = market_json(2, status="ReadyToResolve", end_time="1700000900")
    contract.markets[3] = market_json(3, status="ResultProposed", end_time="1700000100")
    body = client.get("/api/resolution-queue").json()
    assert [(m["id"], m["next_action"]) for m in body] == [(3, "challenge"), (2, "resolve")]


def test_network_error_is_502(client, contract):
    contract.fail_network = True
    r = client.get("/api/config")
    assert r.status_code == 502
    assert r.json()["code"] == "network_error"


def test_missing_configuration_is_503():
    app.dependency_overrides[get_app_settings] = lambda: Settings()
    try:
        r = TestClient(app).get("/api/config")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 503
    assert r.json()["code"] == "config_missing"


def test_run_api_settings_follow_config_dir(tmp_path, monkeypatch):
    import predictx.api.main as api_main

    (tmp_path / "default.toml").write_text(f'[chain]\nrest_url = "{REST_URL}"\ncontract_address = "comdex1other"\n')
    monkeypatch.setattr(api_main, "_config_profile", None)
    monkeypatch.setattr(api_main, "_config_dir", None)
    served = []
    monkeypatch.setattr("uvicorn.run", lambda target, **kw: served.append((target, kw)))

    api_main.run_api(host="0.0.0.0", port=4000, config_dir=tmp_path)
    assert served == [("predictx.api.main:app", {"host": "0.0.0.0", "port": 4000, "reload": False})]
    assert get_app_settings().contract_address == "comdex1other"
