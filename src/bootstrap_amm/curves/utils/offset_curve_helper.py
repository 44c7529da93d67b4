from bootstrap_amm.common.enums import CurveFormula
from bootstrap_amm.common.errors import GoalError, InputError, PriceTooHighError, PriceTooLowError
from bootstrap_amm.common.math import (
    MAX_UINT256,
    ONE,
    checked,
    checked_add,
    checked_div,
    checked_sub,
    mul_div,
)
from bootstrap_amm.common.model import CurveGoals


class OffsetCurveHelper:
    """
    Integer math for the offset constant-product curve (x + alpha) * (y + beta) = k.

    All quantities are ints in the smallest token unit, prices are 1e18 fixed point
    and every division truncates toward zero.
    """

    @staticmethod
    def validate_funding_goal(funding_goal: int):
        if isinstance(funding_goal, bool) or not isinstance(funding_goal, int):
            raise GoalError(f"Funding goal must be an integer, got {type(funding_goal).__name__}.")
        if funding_goal <= 0 or funding_goal > MAX_UINT256:
            raise GoalError(f"Funding goal must be a positive uint256, got {funding_goal}.")

    @staticmethod
    def validate_average_price(desired_average_price: int):
        """
        sqrt(0.75) <= price < 1, compared on squares so no rounded constant is involved.
        """
        if isinstance(desired_average_price, bool) or not isinstance(desired_average_price, int):
            raise PriceTooLowError("Desired average price must be an integer in 1e18 fixed point.")
        if desired_average_price >= ONE:
            raise PriceTooHighError(
                f"Desired average price {desired_average_price} must be below 1e18."
            )
        if desired_average_price <= 0 or 4 * desired_average_price * desired_average_price < 3 * ONE * ONE:
            raise PriceTooLowError(
                f"Desired average price {desired_average_price} must be at least sqrt(0.75) * 1e18."
            )

    @staticmethod
    def derive_goals(funding_goal: int, desired_average_price: int) -> CurveGoals:
        """
        Derives the curve constants from the funding goal G and the average price P:
            alpha = P * G / (1 - P)
            beta = alpha
            k = (G + alpha)^2
            L = k / alpha - alpha
        The seed input is always zero.
        """
        OffsetCurveHelper.validate_funding_goal(funding_goal)
        OffsetCurveHelper.validate_average_price(desired_average_price)

        alpha = mul_div(desired_average_price, funding_goal, ONE - desired_average_price)
        virtual_k = checked(checked_add(funding_goal, alpha) ** 2)
        initial_virtual_l = checked_sub(virtual_k // alpha, alpha)
        return CurveGoals(
            funding_goal=funding_goal,
            desired_average_price=desired_average_price,
            alpha=alpha,
            beta=alpha,
            virtual_k=virtual_k,
            initial_virtual_l=initial_virtual_l,
            seed_input=0,
        )

    @staticmethod
    def select_formula(seed_input: int, alpha: int, beta: int) -> CurveFormula:
        if seed_input == 0 and alpha == beta:
            return CurveFormula.SIMPLIFIED
        return CurveFormula.GENERAL

    @staticmethod
    def bonding_out_simplified(x: int, y: int, alpha: int, k: int, amount: int) -> int:
        """
        With beta == alpha and no seed, y + beta is subtracted in one step:
            out = (y + alpha) - k / (x + alpha + amount)
        """
        denominator = checked_add(checked_add(x, alpha), amount)
        shifted_new_y = checked_div(k, denominator)
        # newY = shifted_new_y - alpha must stay non-negative
        checked_sub(shifted_new_y, alpha)
        return checked_sub(checked_add(y, alpha), shifted_new_y)

    @staticmethod
    def bonding_out_general(x: int, y: int, alpha: int, beta: int, k: int, amount: int) -> int:
        """
        newY = k / (x + alpha + amount) - beta
        out = y - newY
        """
        denominator = checked_add(checked_add(x, alpha), amount)
        new_y = checked_sub(checked_div(k, denominator), beta)
        return checked_sub(y, new_y)

    @staticmethod
    def input_out_simplified(x: int, y: int, alpha: int, k: int, amount: int) -> int:
        """
        out = (x + alpha) - k / (y + amount + alpha)
        """
        denominator = checked_add(checked_add(y, amount), alpha)
        shifted_new_x = checked_div(k, denominator)
        # newX = shifted_new_x - alpha must stay non-negative
        checked_sub(shifted_new_x, alpha)
        return checked_sub(checked_add(x, alpha), shifted_new_x)

    @staticmethod
    def input_out_general(x: int, y: int, alpha: int, beta: int, k: int, amount: int) -> int:
        """
        newY = y + amount
        newX = k / (newY + beta) - alpha
        out = x - newX
        """
        new_y = checked_add(y, amount)
        new_x = checked_sub(checked_div(k, checked_add(new_y, beta)), alpha)
        return checked_sub(x, new_x)

    @staticmethod
    def marginal_price(x: int, alpha: int, k: int) -> int:
        """
        Input tokens paid per bonding token at the margin, (x + alpha)^2 / k in 1e18 fixed point.
        """
        shifted = x + alpha
        return mul_div(shifted * shifted, ONE, k)

    @staticmethod
    def average_price(x: int, y: int, initial_virtual_l: int) -> int:
        issued = initial_virtual_l - y
        if issued <= 0:
            return 0
        return mul_div(x, ONE, issued)

    @staticmethod
    def virtual_l_at(goals: CurveGoals, raised: int) -> int:
        """Curve position y reached once 'raised' input tokens went through the curve."""
        if raised < 0:
            raise InputError(f"Raised amount cannot be negative, got {raised}.")
        return checked_sub(goals.virtual_k // (goals.seed_input + raised + goals.alpha), goals.beta)
