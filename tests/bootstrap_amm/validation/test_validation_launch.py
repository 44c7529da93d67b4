from bootstrap_amm.common.math import MAX_UINT256
from bootstrap_amm.config.loader import build_launch
from bootstrap_amm.config.schema import LaunchConfig
from bootstrap_amm.engine.launch import TokenLaunch
from bootstrap_amm.engine.memory import InMemoryBondingToken, InMemoryInputToken, InMemoryVault
from bootstrap_amm.validation.launch_validator import LaunchValidator


def _make_launch(fee=0) -> TokenLaunch:
    config = LaunchConfig(
        funding_goal=1_000_000 * 10 ** 18,
        desired_average_price=9 * 10 ** 17,
        withdrawal_fee_basis_points=fee,
    )
    launch = build_launch(config)
    launch.input_token.mint("alice", 10 ** 24)
    launch.input_token.approve(launch.address, MAX_UINT256, sender="alice")
    return launch


def test_fresh_launch_is_valid():
    launch = _make_launch()
    results = LaunchValidator.run_all_validations(launch)
    assert results["errors"] == []
    assert results["warnings"] == []
    assert results["info"]["prices"]["initial"] == str(81 * 10 ** 16)
    assert results["info"]["prices"]["final"] == str(10 ** 18)


def test_launch_after_trading_is_valid():
    launch = _make_launch()
    launch.add_liquidity("alice", 400_000 * 10 ** 18, 0)
    launch.remove_liquidity("alice", 10 ** 22, 0)
    results = LaunchValidator.run_all_validations(launch)
    assert results["errors"] == []
    assert results["info"]["state_summary"]["virtual_input_tokens"] == str(launch.virtual_input_tokens)


def test_unconfigured_launch():
    launch = TokenLaunch("owner", InMemoryInputToken(), InMemoryBondingToken(), InMemoryVault())
    results = LaunchValidator.run_all_validations(launch)
    assert results["errors"] == ["Launch: goals have not been set."]


def test_locked_launch_warns():
    launch = _make_launch()
    launch.lock("owner")
    results = LaunchValidator.validate_state(launch)
    assert results["errors"] == []
    assert any("locked" in w for w in results["warnings"])


def test_fee_drift_is_a_warning():
    launch = _make_launch(fee=10_000)
    launch.add_liquidity("alice", 10 ** 23, 0)
    launch.remove_liquidity("alice", launch.bonding_token.balance_of("alice"), 0)
    results = LaunchValidator.validate_state(launch)
    assert results["errors"] == []
    assert any("off the curve" in w for w in results["warnings"])


def test_supply_drift_warns():
    launch = _make_launch()
    launch.add_liquidity("alice", 10 ** 21, 0)
    launch.bonding_token.set_minter("treasury")
    launch.bonding_token.mint("mallory", 10 ** 20, sender="treasury")
    results = LaunchValidator.supply_checks(launch)
    assert results["errors"] == []
    assert any("proportional" in w for w in results["warnings"])
