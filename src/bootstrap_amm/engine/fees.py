from typing import Tuple

from bootstrap_amm.common.errors import ConfigError

BASIS_POINTS = 10000


class FeeModule:
    """Withdrawal fee charged in bonding tokens on the curve redemption path."""

    @staticmethod
    def validate_fee(fee_basis_points: int):
        if isinstance(fee_basis_points, bool) or not isinstance(fee_basis_points, int):
            raise ConfigError("Withdrawal fee must be an integer number of basis points.")
        if fee_basis_points < 0 or fee_basis_points > BASIS_POINTS:
            raise ConfigError(
                f"Withdrawal fee must be between 0 and {BASIS_POINTS} basis points, got {fee_basis_points}."
            )

    @staticmethod
    def split_fee(bonding_amount: int, fee_basis_points: int) -> Tuple[int, int]:
        """
        Returns (fee_amount, effective_amount). The fee rounds down, so the redeemer
        keeps any remainder.
        """
        fee_amount = bonding_amount * fee_basis_points // BASIS_POINTS
        return fee_amount, bonding_amount - fee_amount
