"""Configuration loader from YAML, and wiring of a configured launch."""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from bootstrap_amm.engine.interfaces import LaunchHook
from bootstrap_amm.engine.launch import TokenLaunch
from bootstrap_amm.engine.memory import InMemoryBondingToken, InMemoryInputToken, InMemoryVault
from .schema import LaunchConfig


def load_config(yaml_path: str = None) -> LaunchConfig:
    """
    Load configuration from YAML file.

    Args:
        yaml_path: Path to YAML file (defaults to defaults.yaml)

    Returns:
        LaunchConfig object
    """
    if yaml_path is None:
        yaml_path = Path(__file__).parent / "defaults.yaml"

    with open(yaml_path, 'r') as f:
        data = yaml.safe_load(f)

    return LaunchConfig.from_dict(data)


def config_from_dict(data: Dict[str, Any]) -> LaunchConfig:
    """
    Create config from dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        LaunchConfig object
    """
    return LaunchConfig.from_dict(data)


def build_launch(
    config: LaunchConfig,
    input_token: Optional[InMemoryInputToken] = None,
    bonding_token: Optional[InMemoryBondingToken] = None,
    vault: Optional[InMemoryVault] = None,
    hook: Optional[LaunchHook] = None,
    address: str = "token-launch",
) -> TokenLaunch:
    """
    Wire a ready-to-trade launch on in-memory collaborators: the launch is registered
    as vault client and bonding token minter, goals and fee are applied and the vault
    approval is initialized.
    """
    input_token = input_token or InMemoryInputToken()
    bonding_token = bonding_token or InMemoryBondingToken()
    vault = vault or InMemoryVault()

    launch = TokenLaunch(config.owner, input_token, bonding_token, vault, hook=hook, address=address)
    vault.set_client(launch.address)
    bonding_token.set_minter(launch.address)

    launch.set_goals(config.owner, config.funding_goal, config.desired_average_price)
    launch.set_withdrawal_fee(config.owner, config.withdrawal_fee_basis_points)
    launch.set_auto_lock(config.owner, config.auto_lock)
    launch.initialize_vault_approval(config.owner)
    return launch
