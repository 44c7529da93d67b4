from typing import Optional

from bootstrap_amm.common.enums import CurveFormula
from bootstrap_amm.common.errors import StateError
from bootstrap_amm.common.model import CurveGoals, VirtualPairState
from bootstrap_amm.curves.single.base import BondingCurve
from bootstrap_amm.curves.utils.offset_curve_helper import OffsetCurveHelper as helper


class OffsetBondingCurve(BondingCurve):
    """
        Offset constant-product bonding curve with a virtual counter-asset.

        The invariant is:
          (x + alpha) * (y + beta) = k

        where x is the collateral routed through the curve and y the remaining virtual
        liquidity. Shifting x and y by alpha and beta gives a non-zero starting price
        without any seed capital:
          initial price = alpha^2 / k
          price at x    = (x + alpha)^2 / k

        Adding collateral moves along the curve:
          newY = k / (x + alpha + input) - beta,   out = y - newY
        and returning bonding tokens moves back:
          newX = k / (y + amount + beta) - alpha,  out = x - newX
    """

    def __init__(self, state: Optional[VirtualPairState] = None, formula: Optional[CurveFormula] = None):
        super().__init__(state)
        self._forced_formula = formula

    @classmethod
    def from_goals(cls, goals: CurveGoals, raised: int = 0) -> "OffsetBondingCurve":
        """
        Builds a curve positioned where it would be after 'raised' collateral went through it.
        """
        state = VirtualPairState()
        state.apply_goals(goals)
        state.virtual_input_tokens = goals.seed_input + raised
        state.virtual_l = helper.virtual_l_at(goals, raised)
        return cls(state)

    @property
    def formula(self) -> CurveFormula:
        if self._forced_formula is not None:
            return self._forced_formula
        return helper.select_formula(self._state.seed_input, self._state.alpha, self._state.beta)

    def _require_configured(self):
        if not self._state.goals_set or self._state.virtual_k == 0:
            raise StateError("Curve goals have not been set.")

    def get_spot_price(self) -> int:
        self._require_configured()
        s = self._state
        return helper.marginal_price(s.virtual_input_tokens, s.alpha, s.virtual_k)

    def get_initial_price(self) -> int:
        self._require_configured()
        s = self._state
        return helper.marginal_price(s.seed_input, s.alpha, s.virtual_k)

    def get_final_price(self) -> int:
        self._require_configured()
        s = self._state
        return helper.marginal_price(s.seed_input + s.funding_goal, s.alpha, s.virtual_k)

    def get_average_price(self) -> int:
        self._require_configured()
        s = self._state
        return helper.average_price(s.virtual_input_tokens - s.seed_input, s.virtual_l, s.initial_virtual_l)

    def quote_add(self, input_amount: int) -> int:
        """
        Bonding tokens bought by 'input_amount'. Zero quotes zero.
        """
        self._require_configured()
        if input_amount == 0:
            return 0
        s = self._state
        if self.formula == CurveFormula.SIMPLIFIED:
            return helper.bonding_out_simplified(
                s.virtual_input_tokens, s.virtual_l, s.alpha, s.virtual_k, input_amount
            )
        return helper.bonding_out_general(
            s.virtual_input_tokens, s.virtual_l, s.alpha, s.beta, s.virtual_k, input_amount
        )

    def quote_remove(self, bonding_amount: int) -> int:
        """
        Collateral released by 'bonding_amount'. Zero quotes zero.
        """
        self._require_configured()
        if bonding_amount == 0:
            return 0
        s = self._state
        if self.formula == CurveFormula.SIMPLIFIED:
            return helper.input_out_simplified(
                s.virtual_input_tokens, s.virtual_l, s.alpha, s.virtual_k, bonding_amount
            )
        return helper.input_out_general(
            s.virtual_input_tokens, s.virtual_l, s.alpha, s.beta, s.virtual_k, bonding_amount
        )
