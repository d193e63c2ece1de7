# [TESTER] v1

from __future__ import annotations

import pytest

from pairamm.core.errors import InvalidAmount
from pairamm.core.fees import FeeConfig, split_fee


def test_split_fee_scenario() -> None:
    split = split_fee(10_000, 30, 10)
    assert split.platform_fee_amount == 10
    assert split.net_amount == 9990
    # 9990 * 9960 // 10_000 = 9950, so 40 units stay in the reserves unpriced.
    assert split.lp_fee_amount == 40


def test_split_fee_without_fees_is_identity() -> None:
    split = split_fee(12345, 0, 0)
    assert (split.lp_fee_amount, split.platform_fee_amount, split.net_amount) == (0, 0, 12345)


def test_split_fee_rejects_total_of_100_percent() -> None:
    with pytest.raises(InvalidAmount):
        split_fee(100, 9000, 1000)


def test_fee_config_requires_receiver_for_platform_fee() -> None:
    with pytest.raises(InvalidAmount, match="platform_fee_receiver"):
        FeeConfig(lp_fee_bps=30, platform_fee_bps=10)


def test_fee_config_bounds() -> None:
    with pytest.raises(InvalidAmount):
        FeeConfig(lp_fee_bps=-1)
    with pytest.raises(InvalidAmount):
        FeeConfig(lp_fee_bps=5000, platform_fee_bps=5000, platform_fee_receiver="erd1treasury")
    assert FeeConfig(lp_fee_bps=9999).total_fee_bps == 9999


def test_fee_config_dict_round_trip() -> None:
    fees = FeeConfig(lp_fee_bps=30, platform_fee_bps=10, platform_fee_receiver="erd1treasury")
    assert FeeConfig.from_dict(fees.to_dict()) == fees
