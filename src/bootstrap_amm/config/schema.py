"""Pydantic schema for launch configuration."""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from bootstrap_amm.common.math import MAX_UINT256, ONE


def parse_base_units(value: Any) -> Any:
    """Accepts ints and exact decimal strings such as '1000000e18' or '0.9e18'."""
    if isinstance(value, str):
        try:
            parsed = Decimal(value.replace("_", ""))
        except InvalidOperation:
            raise ValueError(f"'{value}' is not a number")
        if parsed != parsed.to_integral_value():
            raise ValueError(f"'{value}' is not a whole number of base units")
        return int(parsed)
    return value


class LaunchConfig(BaseModel):
    """Business parameters of a launch."""
    owner: str = Field(default="owner", min_length=1, description="Account allowed to administer the launch")
    funding_goal: int = Field(gt=0, le=MAX_UINT256, description="Target raise in input token base units")
    desired_average_price: int = Field(
        gt=0, lt=ONE, description="Target average price across the sale, 1e18 fixed point"
    )
    withdrawal_fee_basis_points: int = Field(default=0, ge=0, le=10000, description="Withdrawal fee")
    auto_lock: bool = Field(default=False, description="Stored auto-lock flag")

    @field_validator("funding_goal", "desired_average_price", mode="before")
    @classmethod
    def parse_amount(cls, v):
        return parse_base_units(v)

    @field_validator("desired_average_price")
    @classmethod
    def validate_price_floor(cls, v):
        """Average price must be at least sqrt(0.75)."""
        if 4 * v * v < 3 * ONE * ONE:
            raise ValueError("desired_average_price must be at least sqrt(0.75) * 1e18")
        return v

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LaunchConfig":
        return cls.model_validate(data)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()
