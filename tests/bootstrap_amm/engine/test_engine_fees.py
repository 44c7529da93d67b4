import pytest

from bootstrap_amm.common.errors import ConfigError
from bootstrap_amm.engine.fees import BASIS_POINTS, FeeModule


@pytest.mark.parametrize(
    "amount, bps, expected_fee, expected_effective",
    [
        (1000, 0, 0, 1000),
        (1000, 10_000, 1000, 0),
        (1000, 250, 25, 975),
        # 7 * 1 / 10000 rounds down to zero
        (7, 1, 0, 7),
        (10 ** 24, 5000, 5 * 10 ** 23, 5 * 10 ** 23),
    ],
)
def test_split_fee(amount, bps, expected_fee, expected_effective):
    fee, effective = FeeModule.split_fee(amount, bps)
    assert fee == expected_fee
    assert effective == expected_effective
    assert fee + effective == amount


@pytest.mark.parametrize("bps", [0, 1, 9999, BASIS_POINTS])
def test_validate_fee_accepts_range(bps):
    FeeModule.validate_fee(bps)


@pytest.mark.parametrize("bps", [-1, BASIS_POINTS + 1, 2.5, "100", True])
def test_validate_fee_rejects(bps):
    with pytest.raises(ConfigError):
        FeeModule.validate_fee(bps)
