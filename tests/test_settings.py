"""Config loading, profile merge, environment overrides."""

import pytest

from predictx.config import Settings, get_settings, load_config
from predictx.errors import ConfigurationError


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "default.toml").write_text(
        '[chain]\nrest_url = "http://lcd.default"\ncoin_denom = "ucmdx"\npage_limit = 30\n'
        '[logging]\nlevel = "INFO"\n'
    )
    (tmp_path / "testnet.toml").write_text('[chain]\ncoin_denom = "uosmo"\n[wallet]\nbech32_prefix = "osmo"\n')
    return tmp_path


def test_profile_overlays_default(config_dir):
    raw = load_config("testnet", config_dir)
    assert raw["chain"] == {"rest_url": "http://lcd.default", "coin_denom": "uosmo", "page_limit": 30}
    assert raw["wallet"]["bech32_prefix"] == "osmo"


def test_missing_profile(config_dir):
    with pytest.raises(ConfigurationError):
        load_config("mainnet", config_dir)


def test_env_overrides_toml(config_dir, monkeypatch):
    monkeypatch.setenv("PREDICTX_REST_URL", "http://lcd.env/")
    monkeypatch.setenv("PREDICTX_CONTRACT_ADDRESS", "comdex1contract")
    monkeypatch.setenv("PREDICTX_LOG_LEVEL", "debug")
    settings = get_settings(config_dir=config_dir)
    assert settings.rest_url == "http://lcd.env"
    assert settings.contract_address == "comdex1contract"
    assert settings.coin_denom == "ucmdx"
    assert settings.logging_level == "DEBUG"
    settings.require_chain()


def test_defaults():
    settings = Settings()
    assert settings.coin_denom == "ucmdx"
    assert settings.display_denom == "CMDX"
    assert settings.gas_price == 0.025
    assert settings.api_port == 3001
    assert settings.mnemonic is None


def test_require_chain_lists_everything_missing():
    with pytest.raises(ConfigurationError) as exc:
        Settings().require_chain()
    assert "rest_url" in str(exc.value)
    assert "contract_address" in str(exc.value)

    settings = Settings(chain={"rest_url": "http://x", "contract_address": "c", "chain_id": "comdex-1"})
    settings.require_chain()
    with pytest.raises(ConfigurationError) as exc:
        settings.require_chain(signing=True)
    assert "PREDICTX_WALLET_MNEMONIC" in str(exc.value)
    assert "chain_id" not in str(exc.value)
