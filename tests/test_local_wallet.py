"""LocalKeyWallet without a chain: settings wiring, chain checks and the approval step."""

import asyncio
import threading

import pytest
from conftest import ALICE, CONTRACT, REST_URL

from predictx.config import Settings
from predictx.errors import ConfigurationError, SignatureRejected, WalletUnavailable
from predictx.models import MsgExecuteContract, TxResult
from predictx.wallet.local import LocalKeyWallet, _network_url

MNEMONIC = "abandon " * 23 + "art"


def _settings(**wallet):
    return Settings(
        chain={"rest_url": REST_URL + "/", "contract_address": CONTRACT, "chain_id": "comdex-1", "coin_denom": "ucmdx"},
        wallet={"mnemonic": MNEMONIC, "bech32_prefix": "comdex", **wallet},
    )


def _msg():
    return MsgExecuteContract(sender=ALICE, contract=CONTRACT, msg="e30=")


def _enabled(approve):
    wallet = LocalKeyWallet(MNEMONIC, chain_id="comdex-1", node_url=REST_URL, fee_denom="ucmdx", approve=approve)
    # stand-ins for the cosmpy wallet and ledger client
    wallet._wallet = object()
    wallet._client = object()
    return wallet


def test_network_url_prefixes_lcd_endpoint():
    assert _network_url("https://rest.comdex.one") == "rest+https://rest.comdex.one"
    assert _network_url("grpc+https://grpc.comdex.one:443") == "grpc+https://grpc.comdex.one:443"
    assert _network_url("rest+http://localhost:1317") == "rest+http://localhost:1317"


def test_from_settings_signs_through_rest_endpoint():
    wallet = LocalKeyWallet.from_settings(_settings(wait_for_inclusion=False))
    assert wallet.node_url == REST_URL
    assert _network_url(wallet.node_url) == "rest+" + REST_URL
    assert wallet.chain_id == "comdex-1"
    assert wallet.fee_denom == "ucmdx"
    assert wallet.prefix == "comdex"
    assert wallet.wait_for_inclusion is False


def test_from_settings_requires_mnemonic():
    settings = Settings(chain={"rest_url": REST_URL, "contract_address": CONTRACT, "chain_id": "comdex-1"})
    with pytest.raises(ConfigurationError) as exc:
        LocalKeyWallet.from_settings(settings)
    assert "PREDICTX_WALLET_MNEMONIC" in str(exc.value)


def test_enable_rejects_other_chain():
    wallet = LocalKeyWallet(MNEMONIC, chain_id="comdex-1", node_url=REST_URL, fee_denom="ucmdx")
    with pytest.raises(WalletUnavailable) as exc:
        asyncio.run(wallet.enable("osmo-test-5"))
    assert "comdex-1" in str(exc.value)
    assert wallet._wallet is None


def test_sign_before_enable_is_unavailable():
    wallet = LocalKeyWallet(MNEMONIC, chain_id="comdex-1", node_url=REST_URL, fee_denom="ucmdx")
    assert asyncio.run(wallet.get_accounts("comdex-1")) == []
    with pytest.raises(WalletUnavailable):
        asyncio.run(wallet.sign_and_broadcast("comdex-1", _msg()))


def test_declined_approval_raises_signature_rejected(monkeypatch):
    wallet = _enabled(lambda msg: False)
    broadcasts = []
    monkeypatch.setattr(wallet, "_broadcast", lambda msg, memo: broadcasts.append(msg))
    with pytest.raises(SignatureRejected):
        asyncio.run(wallet.sign_and_broadcast("comdex-1", _msg()))
    assert broadcasts == []


def test_approval_runs_off_the_event_loop_thread(monkeypatch):
    seen = []

    def approve(msg):
        seen.append((msg, threading.current_thread()))
        return True

    wallet = _enabled(approve)
    monkeypatch.setattr(wallet, "_broadcast", lambda msg, memo: TxResult(tx_hash="ABC", height=7))
    msg = _msg()
    result = asyncio.run(wallet.sign_and_broadcast("comdex-1", msg, memo="hi"))
    assert result.tx_hash == "ABC"
    assert seen[0][0] == msg
    assert seen[0][1] is not threading.main_thread()
