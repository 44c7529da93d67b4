import pytest

from bootstrap_amm.common.enums import CurveFormula
from bootstrap_amm.common.errors import LaunchArithmeticError, StateError
from bootstrap_amm.common.math import ONE, relative_approx_equal
from bootstrap_amm.common.model import VirtualPairState
from bootstrap_amm.curves.single.base import BondingCurve
from bootstrap_amm.curves.single.offset import OffsetBondingCurve
from bootstrap_amm.curves.utils.offset_curve_helper import OffsetCurveHelper

FUNDING_GOAL = 1_000_000 * 10 ** 18
PRICE = 9 * 10 ** 17


@pytest.fixture
def goals():
    return OffsetCurveHelper.derive_goals(FUNDING_GOAL, PRICE)


def _make_offset_curve(raised=0, formula=None) -> OffsetBondingCurve:
    """
    Small helper to create an OffsetBondingCurve positioned after 'raised' collateral.
    """
    goals = OffsetCurveHelper.derive_goals(FUNDING_GOAL, PRICE)
    curve = OffsetBondingCurve.from_goals(goals, raised)
    if formula is not None:
        curve = OffsetBondingCurve(curve.state, formula=formula)
    return curve


def test_is_bonding_curve():
    assert isinstance(_make_offset_curve(), BondingCurve)


def test_unconfigured_curve_raises():
    curve = OffsetBondingCurve()
    with pytest.raises(StateError):
        curve.quote_add(10)
    with pytest.raises(StateError):
        curve.get_spot_price()


def test_from_goals_position(goals):
    curve = OffsetBondingCurve.from_goals(goals, 0)
    assert curve.state.virtual_input_tokens == 0
    assert curve.state.virtual_l == goals.initial_virtual_l
    assert curve.formula == CurveFormula.SIMPLIFIED

    at_goal = OffsetBondingCurve.from_goals(goals, FUNDING_GOAL)
    assert at_goal.state.virtual_input_tokens == FUNDING_GOAL
    assert at_goal.get_spot_price() == ONE


def test_prices_reference_configuration():
    """P = 0.9 gives an initial marginal price of P^2 = 0.81 and a final price of 1."""
    curve = _make_offset_curve()
    assert curve.get_initial_price() == 81 * 10 ** 16
    assert curve.get_spot_price() == 81 * 10 ** 16
    assert curve.get_final_price() == ONE
    assert curve.get_average_price() == 0


def test_average_price_at_goal_matches_target():
    curve = _make_offset_curve(raised=FUNDING_GOAL)
    assert curve.get_average_price() == PRICE


@pytest.mark.parametrize("raised", [0, 10 ** 18, 400_000 * 10 ** 18])
def test_zero_amount_quotes_zero(raised):
    curve = _make_offset_curve(raised)
    assert curve.quote_add(0) == 0
    assert curve.quote_remove(0) == 0


@pytest.mark.parametrize("amount", [1, 10 ** 9, 10 ** 18, 5000 * 10 ** 18, 10 ** 24])
@pytest.mark.parametrize("raised", [0, 10 ** 21, 500_000 * 10 ** 18])
def test_formulas_agree_through_dispatch(amount, raised):
    simplified = _make_offset_curve(raised, CurveFormula.SIMPLIFIED).quote_add(amount)
    general = _make_offset_curve(raised, CurveFormula.GENERAL).quote_add(amount)
    assert relative_approx_equal(simplified, general)


def test_general_formula_with_distinct_offsets():
    """When beta != alpha only the general formula keeps the invariant."""
    alpha, beta, k = 9 * 10 ** 24, 8 * 10 ** 24, 10 ** 50
    state = VirtualPairState(
        virtual_l=k // alpha - beta, alpha=alpha, beta=beta, virtual_k=k, goals_set=True,
        initial_virtual_l=k // alpha - beta, funding_goal=FUNDING_GOAL,
    )
    curve = OffsetBondingCurve(state)
    assert curve.formula == CurveFormula.GENERAL

    amount = 10 ** 21
    out = curve.quote_add(amount)
    new_y = state.virtual_l - out
    assert relative_approx_equal((amount + alpha) * (new_y + beta), k)


def test_quote_add_decreases_per_unit_as_price_rises():
    amount = 10_000 * 10 ** 18
    quotes = [_make_offset_curve(raised).quote_add(amount) for raised in (0, 10 ** 23, 5 * 10 ** 23, 10 ** 24)]
    assert quotes == sorted(quotes, reverse=True)
    assert len(set(quotes)) == len(quotes)


def test_quote_remove_inverts_quote_add():
    curve = _make_offset_curve()
    amount = 1000 * 10 ** 18
    out = curve.quote_add(amount)
    after = _make_offset_curve(raised=amount)
    returned = after.quote_remove(out)
    assert returned <= amount
    assert amount - returned < amount // 10_000


@pytest.mark.parametrize("formula", [None, CurveFormula.SIMPLIFIED, CurveFormula.GENERAL])
def test_quotes_past_curve_bounds_raise(formula):
    """Both formulas refuse to pay out more than the curve holds on either side."""
    curve = _make_offset_curve(0, formula)
    with pytest.raises(LaunchArithmeticError, match="subtraction would underflow"):
        curve.quote_add(3 * 10 ** 24)
    with pytest.raises(LaunchArithmeticError, match="subtraction would underflow"):
        curve.quote_remove(10 ** 24)
