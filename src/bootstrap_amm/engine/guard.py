import logging

from bootstrap_amm.common.math import mul_div

logger = logging.getLogger(__name__)


class AntiCantillonGuard:
    """
    Detects bonding tokens issued outside the launch and switches redemptions to a
    linear share of the vault while that supply is unaccounted for.

    The only memory is the launch's last known supply; the next add or remove resets
    it, after which the extra tokens price on the curve like any others.
    """

    @staticmethod
    def is_triggered(current_supply: int, last_known_supply: int) -> bool:
        return current_supply > last_known_supply

    @staticmethod
    def proportional_redemption(bonding_amount: int, vault_balance: int, current_supply: int) -> int:
        """amount * vault_balance / supply, so no redeemer can claim more than their share."""
        out = mul_div(bonding_amount, vault_balance, current_supply)
        logger.warning(
            "Supply drift detected, redeeming %s of %s bonding tokens proportionally for %s",
            bonding_amount, current_supply, out,
        )
        return out
