import logging
from contextlib import contextmanager
from typing import Callable, List, Optional, Tuple

from bootstrap_amm.common.enums import RedemptionMode
from bootstrap_amm.common.errors import (
    AuthorizationError,
    BalanceError,
    ExternalCallFailure,
    InputError,
    LaunchError,
    SlippageError,
    StateError,
)
from bootstrap_amm.common.math import MAX_UINT256, checked_add, checked_sub
from bootstrap_amm.common.model import (
    ContractLocked,
    ContractUnlocked,
    FeeCollected,
    GoalsSet,
    HookChanged,
    LaunchEvent,
    LiquidityAdded,
    LiquidityRemoved,
    OwnershipTransferred,
    VaultChanged,
    VirtualPairState,
    WithdrawalFeeUpdated,
)
from bootstrap_amm.curves.single.offset import OffsetBondingCurve
from bootstrap_amm.curves.utils.offset_curve_helper import OffsetCurveHelper
from bootstrap_amm.engine.access import Ownable, non_reentrant
from bootstrap_amm.engine.fees import FeeModule
from bootstrap_amm.engine.guard import AntiCantillonGuard
from bootstrap_amm.engine.interfaces import BondingToken, Checkpointable, InputToken, LaunchHook, Vault

logger = logging.getLogger(__name__)


class TokenLaunch(Ownable):
    """
        Bootstrap AMM selling a bonding token against an input token along an offset
        constant-product curve.

        Every public mutator is non-reentrant and atomic: state, collaborators and
        queued notifications are all put back if any step raises. Notifications are
        published to 'events' and subscribers only once a call has succeeded.

        Add path:
          validate -> quote -> slippage check -> update (x, y) -> pull collateral,
          mint, deposit to vault -> resync supply -> on_buy hook -> LiquidityAdded
        Remove path:
          validate -> guard or fee-adjusted quote -> slippage check -> burn full
          amount -> update (x, y) -> withdraw from vault -> resync supply ->
          on_sell hook -> LiquidityRemoved (+ FeeCollected)
    """

    def __init__(
        self,
        owner: str,
        input_token: InputToken,
        bonding_token: BondingToken,
        vault: Vault,
        hook: Optional[LaunchHook] = None,
        address: str = "token-launch",
    ):
        super().__init__(owner)
        self.address = address
        self.input_token = input_token
        self.bonding_token = bonding_token
        self._vault = vault
        self._hook = hook
        self._state = VirtualPairState()
        self._curve = OffsetBondingCurve(self._state)
        self.events: List[LaunchEvent] = []
        self._pending: List[LaunchEvent] = []
        self._subscribers: List[Callable[[LaunchEvent], None]] = []

    # ---------------------------------------------------------------- plumbing

    def subscribe(self, callback: Callable[[LaunchEvent], None]):
        self._subscribers.append(callback)

    def _emit(self, event: LaunchEvent):
        self._pending.append(event)

    def _publish(self):
        pending, self._pending = self._pending, []
        for event in pending:
            logger.info("%s %s", event.event_type, event.to_dict())
            self.events.append(event)
            for callback in self._subscribers:
                callback(event)

    def _participants(self) -> List[Checkpointable]:
        candidates = (self.input_token, self.bonding_token, self._vault, self._hook)
        return [c for c in candidates if isinstance(c, Checkpointable)]

    @contextmanager
    def _atomic(self):
        state_snapshot = self._state.snapshot()
        references = (self._owner, self._vault, self._hook)
        saved = [(participant, participant.checkpoint()) for participant in self._participants()]
        try:
            yield
        except Exception as e:
            self._state.restore(state_snapshot)
            self._owner, self._vault, self._hook = references
            for participant, checkpoint in saved:
                participant.rollback(checkpoint)
            self._pending = []
            logger.warning("Call rolled back: %s", e)
            raise
        self._publish()

    @staticmethod
    def _external(target: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except LaunchError:
            raise
        except Exception as e:
            raise ExternalCallFailure(target, e) from e

    def _require_configured(self):
        if not self._state.goals_set:
            raise StateError("goals have not been set")

    def _require_operational(self):
        self._require_configured()
        if self._state.locked:
            raise StateError("locked")
        if not self._state.vault_approval_initialized:
            raise StateError("vault approval not initialized")

    def _sync_supply(self):
        self._state.last_known_supply = self._external("bonding token", self.bonding_token.total_supply)

    # ------------------------------------------------------------------- views

    @property
    def state(self) -> VirtualPairState:
        return self._curve.state

    @property
    def vault(self) -> Vault:
        return self._vault

    @property
    def hook(self) -> Optional[LaunchHook]:
        return self._hook

    @property
    def alpha(self) -> int:
        return self._state.alpha

    @property
    def beta(self) -> int:
        return self._state.beta

    @property
    def virtual_k(self) -> int:
        return self._state.virtual_k

    @property
    def virtual_input_tokens(self) -> int:
        return self._state.virtual_input_tokens

    @property
    def virtual_l(self) -> int:
        return self._state.virtual_l

    @property
    def funding_goal(self) -> int:
        return self._state.funding_goal

    @property
    def desired_average_price(self) -> int:
        return self._state.desired_average_price

    @property
    def withdrawal_fee_basis_points(self) -> int:
        return self._state.withdrawal_fee_basis_points

    @property
    def locked(self) -> bool:
        return self._state.locked

    @property
    def auto_lock(self) -> bool:
        return self._state.auto_lock

    @property
    def vault_approval_initialized(self) -> bool:
        return self._state.vault_approval_initialized

    @property
    def last_known_supply(self) -> int:
        return self._state.last_known_supply

    def get_virtual_pair(self) -> Tuple[int, int, int]:
        """
        Returns (x, y, x * y). The product is kept for callers of the older pair
        interface and is not the curve invariant, see 'virtual_k'.
        """
        x, y = self._state.virtual_input_tokens, self._state.virtual_l
        return x, y, x * y

    def get_total_raised(self) -> int:
        return self._state.virtual_input_tokens

    def get_current_marginal_price(self) -> int:
        return self._curve.get_spot_price()

    def get_initial_marginal_price(self) -> int:
        return self._curve.get_initial_price()

    def get_final_marginal_price(self) -> int:
        return self._curve.get_final_price()

    def get_average_price(self) -> int:
        return self._curve.get_average_price()

    def quote_add_liquidity(self, input_amount: int) -> int:
        self._require_configured()
        if input_amount < 0:
            raise InputError(f"Input amount cannot be negative, got {input_amount}.")
        return self._curve.quote_add(input_amount)

    def quote_remove_liquidity(self, bonding_amount: int) -> int:
        """Collateral 'bonding_amount' would redeem right now, fee and supply drift included."""
        self._require_configured()
        if bonding_amount < 0:
            raise InputError(f"Bonding amount cannot be negative, got {bonding_amount}.")
        if bonding_amount == 0:
            return 0
        input_out, _, _ = self._quote_remove(bonding_amount)
        return input_out

    def _quote_remove(self, bonding_amount: int) -> Tuple[int, int, RedemptionMode]:
        current_supply = self._external("bonding token", self.bonding_token.total_supply)
        if AntiCantillonGuard.is_triggered(current_supply, self._state.last_known_supply):
            vault_balance = self._external(
                "vault", self._vault.balance_of, self.input_token, self.address
            )
            input_out = AntiCantillonGuard.proportional_redemption(
                bonding_amount, vault_balance, current_supply
            )
            return input_out, 0, RedemptionMode.PROPORTIONAL

        fee_amount, effective_amount = FeeModule.split_fee(
            bonding_amount, self._state.withdrawal_fee_basis_points
        )
        return self._curve.quote_remove(effective_amount), fee_amount, RedemptionMode.CURVE

    # --------------------------------------------------------------- liquidity

    @non_reentrant
    def add_liquidity(self, caller: str, input_amount: int, min_bonding_out: int = 0) -> int:
        """
        Deposits 'input_amount' collateral and mints the curve's bonding tokens to 'caller'.
        The caller must have approved the launch for 'input_amount' on the input token.
        """
        with self._atomic():
            return self._add_liquidity(caller, input_amount, min_bonding_out)

    @non_reentrant
    def add_liquidity_with_permit(
        self,
        caller: str,
        input_amount: int,
        min_bonding_out: int,
        deadline: int,
        signature: str,
    ) -> int:
        """
        Same as add_liquidity, granting the allowance from a signed permit first. When
        the permit is rejected (already used, front-run) an existing allowance is accepted.
        """
        with self._atomic():
            try:
                self.input_token.permit(caller, self.address, input_amount, deadline, signature)
            except Exception as e:
                allowance = self._external("input token", self.input_token.allowance, caller, self.address)
                if allowance < input_amount:
                    raise AuthorizationError(
                        f"permit failed and allowance {allowance} is below {input_amount}"
                    ) from e
                logger.info("Permit for %s failed (%s), using existing allowance", caller, e)
            return self._add_liquidity(caller, input_amount, min_bonding_out)

    def _add_liquidity(self, caller: str, input_amount: int, min_bonding_out: int) -> int:
        self._require_operational()
        if input_amount <= 0:
            raise InputError(f"Input amount must be positive, got {input_amount}.")

        bonding_out = self._curve.quote_add(input_amount)
        if bonding_out < min_bonding_out:
            raise SlippageError(f"bonding out {bonding_out} is below minimum {min_bonding_out}")

        state = self._state
        state.virtual_input_tokens = checked_add(state.virtual_input_tokens, input_amount)
        state.virtual_l = checked_sub(state.virtual_l, bonding_out)
        state.trading_started = True

        self._external(
            "input token", self.input_token.transfer_from,
            caller, self.address, input_amount, sender=self.address,
        )
        self._external("bonding token", self.bonding_token.mint, caller, bonding_out, sender=self.address)
        self._external(
            "vault", self._vault.deposit,
            self.input_token, input_amount, self.address, sender=self.address,
        )
        self._sync_supply()

        if self._hook is not None:
            self._external("hook", self._hook.on_buy, caller, input_amount, bonding_out)

        self._emit(LiquidityAdded(caller=caller, input_amount=input_amount, bonding_out=bonding_out))
        return bonding_out

    @non_reentrant
    def remove_liquidity(self, caller: str, bonding_amount: int, min_input_out: int = 0) -> int:
        """
        Burns 'bonding_amount' from 'caller' and pays out collateral from the vault.
        The full amount is burned and returned to the virtual pool, the withdrawal fee
        only reduces what the curve pays for it.
        """
        with self._atomic():
            self._require_operational()
            if bonding_amount <= 0:
                raise InputError(f"Bonding amount must be positive, got {bonding_amount}.")
            balance = self._external("bonding token", self.bonding_token.balance_of, caller)
            if balance < bonding_amount:
                raise BalanceError(f"{caller} holds {balance}, cannot redeem {bonding_amount}")

            input_out, fee_amount, mode = self._quote_remove(bonding_amount)
            if input_out < min_input_out:
                raise SlippageError(f"input out {input_out} is below minimum {min_input_out}")

            self._external("bonding token", self.bonding_token.burn, caller, bonding_amount, sender=self.address)

            state = self._state
            state.virtual_l = checked_add(state.virtual_l, bonding_amount)
            state.virtual_input_tokens = checked_sub(state.virtual_input_tokens, input_out)
            state.trading_started = True

            if input_out > 0:
                self._external(
                    "vault", self._vault.withdraw,
                    self.input_token, input_out, caller, sender=self.address,
                )
            self._sync_supply()

            if self._hook is not None:
                self._external("hook", self._hook.on_sell, caller, bonding_amount, input_out)

            self._emit(LiquidityRemoved(caller=caller, bonding_amount=bonding_amount, input_out=input_out))
            if fee_amount > 0:
                self._emit(FeeCollected(caller=caller, bonding_amount=bonding_amount, fee_amount=fee_amount))
            logger.debug("Redeemed %s via %s", bonding_amount, mode)
            return input_out

    # ------------------------------------------------------------------- admin

    @non_reentrant
    def set_goals(self, caller: str, funding_goal: int, desired_average_price: int):
        """
        Derives the curve from the funding goal and the desired average price (1e18 fixed
        point, sqrt(0.75) <= price < 1). Allowed until the first trade.
        """
        with self._atomic():
            self._only_owner(caller)
            if self._state.trading_started:
                raise StateError("goals cannot change after trading has started")
            goals = OffsetCurveHelper.derive_goals(funding_goal, desired_average_price)
            self._state.apply_goals(goals)
            self._emit(GoalsSet(
                funding_goal=goals.funding_goal,
                desired_average_price=goals.desired_average_price,
                alpha=goals.alpha,
                virtual_k=goals.virtual_k,
            ))

    @non_reentrant
    def set_withdrawal_fee(self, caller: str, fee_basis_points: int):
        with self._atomic():
            self._only_owner(caller)
            FeeModule.validate_fee(fee_basis_points)
            old = self._state.withdrawal_fee_basis_points
            self._state.withdrawal_fee_basis_points = fee_basis_points
            self._emit(WithdrawalFeeUpdated(old_fee_basis_points=old, new_fee_basis_points=fee_basis_points))

    @non_reentrant
    def lock(self, caller: str):
        with self._atomic():
            self._only_owner(caller)
            self._state.locked = True
            self._emit(ContractLocked())

    @non_reentrant
    def unlock(self, caller: str):
        with self._atomic():
            self._only_owner(caller)
            self._state.locked = False
            self._emit(ContractUnlocked())

    @non_reentrant
    def set_auto_lock(self, caller: str, enabled: bool):
        with self._atomic():
            self._only_owner(caller)
            self._state.auto_lock = bool(enabled)

    @non_reentrant
    def set_vault(self, caller: str, new_vault: Vault):
        """Swaps the custodian. Liquidity calls fail until initialize_vault_approval runs again."""
        with self._atomic():
            self._only_owner(caller)
            old_vault = self._vault
            self._vault = new_vault
            self._state.vault_approval_initialized = False
            self._emit(VaultChanged(
                old_vault=getattr(old_vault, "address", None),
                new_vault=getattr(new_vault, "address", None),
            ))

    @non_reentrant
    def initialize_vault_approval(self, caller: str):
        with self._atomic():
            self._only_owner(caller)
            if self._state.vault_approval_initialized:
                raise StateError("vault approval already initialized")
            self._external(
                "input token", self.input_token.approve,
                self._vault.address, MAX_UINT256, sender=self.address,
            )
            self._state.vault_approval_initialized = True

    @non_reentrant
    def set_hook(self, caller: str, hook: Optional[LaunchHook]):
        with self._atomic():
            self._only_owner(caller)
            old_hook = self._hook
            self._hook = hook
            self._emit(HookChanged(
                old_hook=getattr(old_hook, "address", None),
                new_hook=getattr(hook, "address", None),
            ))

    @non_reentrant
    def transfer_ownership(self, caller: str, new_owner: str):
        with self._atomic():
            self._only_owner(caller)
            if not new_owner:
                raise InputError("New owner cannot be empty.")
            previous = self._owner
            self._owner = new_owner
            self._emit(OwnershipTransferred(previous_owner=previous, new_owner=new_owner))
