from dataclasses import asdict, dataclass, fields, replace
from typing import Any, ClassVar, Dict, Optional

from bootstrap_amm.common.enums import EventType


@dataclass
class Token:
    """Describes a token taking part in the launch."""
    name: str
    symbol: str
    decimals: int = 18


@dataclass(frozen=True)
class CurveGoals:
    """Shape constants derived once from the business parameters of a launch."""
    funding_goal: int
    desired_average_price: int
    alpha: int
    beta: int
    virtual_k: int
    initial_virtual_l: int
    seed_input: int = 0


@dataclass
class VirtualPairState:
    """
    Persistent position of the launch on its offset bonding curve.

    virtual_input_tokens (x) is the collateral routed through the curve, virtual_l (y)
    is the remaining virtual counter-liquidity. After configuration
    (x + alpha) * (y + beta) == virtual_k up to integer rounding.
    """
    virtual_input_tokens: int = 0
    virtual_l: int = 0
    alpha: int = 0
    beta: int = 0
    virtual_k: int = 0
    seed_input: int = 0
    initial_virtual_l: int = 0
    last_known_supply: int = 0
    funding_goal: int = 0
    desired_average_price: int = 0
    withdrawal_fee_basis_points: int = 0
    locked: bool = False
    auto_lock: bool = False
    vault_approval_initialized: bool = False
    goals_set: bool = False
    trading_started: bool = False

    def apply_goals(self, goals: CurveGoals):
        self.funding_goal = goals.funding_goal
        self.desired_average_price = goals.desired_average_price
        self.alpha = goals.alpha
        self.beta = goals.beta
        self.virtual_k = goals.virtual_k
        self.seed_input = goals.seed_input
        self.initial_virtual_l = goals.initial_virtual_l
        self.virtual_l = goals.initial_virtual_l
        self.virtual_input_tokens = goals.seed_input
        self.goals_set = True

    def snapshot(self) -> "VirtualPairState":
        return replace(self)

    def restore(self, snapshot: "VirtualPairState"):
        for f in fields(self):
            setattr(self, f.name, getattr(snapshot, f.name))


@dataclass(frozen=True)
class LaunchEvent:
    """Base class of every notification a launch publishes after a successful call."""
    event_type: ClassVar[EventType]

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["event"] = self.event_type.value
        return data


@dataclass(frozen=True)
class GoalsSet(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.GOALS_SET
    funding_goal: int
    desired_average_price: int
    alpha: int
    virtual_k: int


@dataclass(frozen=True)
class LiquidityAdded(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.LIQUIDITY_ADDED
    caller: str
    input_amount: int
    bonding_out: int


@dataclass(frozen=True)
class LiquidityRemoved(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.LIQUIDITY_REMOVED
    caller: str
    bonding_amount: int
    input_out: int


@dataclass(frozen=True)
class FeeCollected(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.FEE_COLLECTED
    caller: str
    bonding_amount: int
    fee_amount: int


@dataclass(frozen=True)
class WithdrawalFeeUpdated(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.WITHDRAWAL_FEE_UPDATED
    old_fee_basis_points: int
    new_fee_basis_points: int


@dataclass(frozen=True)
class ContractLocked(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.CONTRACT_LOCKED


@dataclass(frozen=True)
class ContractUnlocked(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.CONTRACT_UNLOCKED


@dataclass(frozen=True)
class VaultChanged(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.VAULT_CHANGED
    old_vault: Optional[str]
    new_vault: Optional[str]


@dataclass(frozen=True)
class HookChanged(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.HOOK_CHANGED
    old_hook: Optional[str]
    new_hook: Optional[str]


@dataclass(frozen=True)
class OwnershipTransferred(LaunchEvent):
    event_type: ClassVar[EventType] = EventType.OWNERSHIP_TRANSFERRED
    previous_owner: str
    new_owner: str

