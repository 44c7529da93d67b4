import logging
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from flask import jsonify
from flask_openapi3 import Info, Tag
from flask_openapi3 import OpenAPI

from bootstrap_amm.common.enums import CurveFormula, LiquidityAction
from bootstrap_amm.common.errors import LaunchError
from bootstrap_amm.config.schema import parse_base_units
from bootstrap_amm.curves.single.offset import OffsetBondingCurve
from bootstrap_amm.curves.utils.offset_curve_helper import OffsetCurveHelper
from bootstrap_amm.engine.fees import FeeModule

logger = logging.getLogger(__name__)

info = Info(title="Bootstrap AMM API", version="1.0.0")
app = OpenAPI(__name__, info=info)


class LaunchQuoteAction(Enum):
    add = "add"
    remove = "remove"


class CurvePosition(BaseModel):
    funding_goal: int = Field(description="Target raise in input token base units")
    desired_average_price: int = Field(description="Target average price, 1e18 fixed point")
    total_raised: int = Field(0, ge=0, description="Collateral already routed through the curve")

    @field_validator("funding_goal", "desired_average_price", "total_raised", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return parse_base_units(v)


class LaunchQuoteRequest(CurvePosition):
    action: LaunchQuoteAction = Field(description="Quote an add or a remove")
    amount: int = Field(ge=0, description="Input tokens to add, or bonding tokens to remove")
    withdrawal_fee_basis_points: int = Field(0, ge=0, le=10000, description="Fee applied on remove")
    formula: Optional[str] = Field(None, description="Force the SIMPLIFIED or GENERAL formula")

    @field_validator("amount", mode="before")
    @classmethod
    def parse_quote_amount(cls, v):
        return parse_base_units(v)

    @field_validator("formula")
    @classmethod
    def validate_formula(cls, v):
        if v is None:
            return v
        try:
            CurveFormula.from_str(v)
        except NotImplementedError as e:
            raise ValueError(str(e))
        return v


class LaunchStatusRequest(CurvePosition):
    pass


launch_quote_tag = Tag(
    name="Launch Quote",
    description="Quote an add or remove against a curve position without changing anything",
)

launch_status_tag = Tag(
    name="Launch Status",
    description="Curve constants and marginal prices at a given raise",
)


def _curve_for(position: CurvePosition) -> OffsetBondingCurve:
    goals = OffsetCurveHelper.derive_goals(position.funding_goal, position.desired_average_price)
    return OffsetBondingCurve.from_goals(goals, position.total_raised)


def _error_response(e: LaunchError):
    logger.info("Rejected request: %s", e)
    return jsonify({"error": {"code": type(e).__name__, "message": str(e)}}), 400


@app.post("/launch/quote", summary="Launch Quote", tags=[launch_quote_tag])
def quote(body: LaunchQuoteRequest):
    """
    Quotes bonding tokens out for an add, or input tokens out for a remove
    """
    try:
        curve = _curve_for(body)
        if body.formula is not None:
            curve = OffsetBondingCurve(curve.state, formula=CurveFormula.from_str(body.formula))
        action = LiquidityAction.from_str(body.action.value)
        fee_amount = 0
        if action == LiquidityAction.ADD:
            amount_out = curve.quote_add(body.amount)
        else:
            fee_amount, effective = FeeModule.split_fee(body.amount, body.withdrawal_fee_basis_points)
            amount_out = curve.quote_remove(effective)
    except LaunchError as e:
        return _error_response(e)

    return jsonify({
        "action": str(action),
        "amount_in": str(body.amount),
        "amount_out": str(amount_out),
        "fee_amount": str(fee_amount),
        "formula": str(curve.formula),
    })


@app.get("/launch/status", summary="Launch Status", tags=[launch_status_tag])
def status(query: LaunchStatusRequest):
    """
    Return the curve constants and the marginal, initial, final and average prices
    at the raise specified by the caller.
    """
    try:
        curve = _curve_for(query)
        state = curve.state
        payload = {
            "virtual_input_tokens": str(state.virtual_input_tokens),
            "virtual_l": str(state.virtual_l),
            "alpha": str(state.alpha),
            "beta": str(state.beta),
            "virtual_k": str(state.virtual_k),
            "marginal_price": str(curve.get_spot_price()),
            "initial_marginal_price": str(curve.get_initial_price()),
            "final_marginal_price": str(curve.get_final_price()),
            "average_price": str(curve.get_average_price()),
        }
    except LaunchError as e:
        return _error_response(e)
    return jsonify(payload)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s [%(levelname)s] %(message)s')
    app.run(debug=True)
