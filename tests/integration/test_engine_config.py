# [TESTER] v1

from __future__ import annotations

import pytest

from pairamm.core.errors import InvalidAmount
from pairamm.integration.config import PairEngineConfig, load_config


def test_defaults_without_file_or_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "PAIRAMM_OWNER",
        "PAIRAMM_ASSET_A",
        "PAIRAMM_ASSET_B",
        "PAIRAMM_LP_FEE_BPS",
        "PAIRAMM_PLATFORM_FEE_BPS",
        "PAIRAMM_PLATFORM_FEE_RECEIVER",
        "PAIRAMM_WRAP_SC_ADDRESS",
    ):
        monkeypatch.delenv(name, raising=False)
    cfg = load_config()
    assert cfg == PairEngineConfig()
    assert cfg.fee_config().total_fee_bps == 0


def test_yaml_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAIRAMM_LP_FEE_BPS", raising=False)
    path = tmp_path / "pair.yaml"
    path.write_text(
        "owner: erd1owner\n"
        "asset_a: WEGLD-abcdef\n"
        "asset_b: USDC-123456\n"
        "lp_fee_bps: 30\n"
        "platform_fee_bps: 10\n"
        "platform_fee_receiver: erd1treasury\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.asset_a == "WEGLD-abcdef"
    assert cfg.fee_config().total_fee_bps == 40


def test_env_overrides_yaml(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "pair.yaml"
    path.write_text("lp_fee_bps: 30\n", encoding="utf-8")
    monkeypatch.setenv("PAIRAMM_LP_FEE_BPS", "25")
    monkeypatch.setenv("PAIRAMM_OWNER", "erd1ops")
    cfg = load_config(path)
    assert cfg.lp_fee_bps == 25
    assert cfg.owner == "erd1ops"


def test_env_is_bounds_checked(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PAIRAMM_LP_FEE_BPS", "10000")
    with pytest.raises(ValueError, match="PAIRAMM_LP_FEE_BPS"):
        load_config()
    monkeypatch.setenv("PAIRAMM_LP_FEE_BPS", "abc")
    with pytest.raises(ValueError, match="integer"):
        load_config()


def test_empty_yaml_is_defaults(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAIRAMM_OWNER", raising=False)
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path).owner == "owner"


def test_yaml_must_be_a_mapping(tmp_path) -> None:
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(TypeError, match="mapping"):
        load_config(path)


def test_unknown_keys_rejected() -> None:
    with pytest.raises(ValueError, match="unknown config keys"):
        PairEngineConfig.from_mapping({"fee_bps": 30})


def test_assets_configured_together() -> None:
    with pytest.raises(ValueError, match="together"):
        PairEngineConfig(asset_a="WEGLD-abcdef")
    with pytest.raises(ValueError, match="differ"):
        PairEngineConfig(asset_a="X", asset_b="X")


def test_fee_bounds_enforced_by_fee_config() -> None:
    with pytest.raises(InvalidAmount):
        PairEngineConfig(platform_fee_bps=10)


def test_wrap_sc_address_from_yaml_and_env(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("PAIRAMM_WRAP_SC_ADDRESS", raising=False)
    path = tmp_path / "pair.yaml"
    path.write_text("wrap_sc_address: erd1wrapper\n", encoding="utf-8")
    assert load_config(path).wrap_sc_address == "erd1wrapper"

    monkeypatch.setenv("PAIRAMM_WRAP_SC_ADDRESS", "erd1wrapper2")
    assert load_config(path).wrap_sc_address == "erd1wrapper2"

    with pytest.raises(ValueError, match="wrap_sc_address"):
        PairEngineConfig(wrap_sc_address="")
