from decimal import Decimal
from typing import Any, Dict, List

from bootstrap_amm.common.errors import LaunchError
from bootstrap_amm.common.math import ONE, relative_approx_equal
from bootstrap_amm.engine.fees import BASIS_POINTS
from bootstrap_amm.engine.guard import AntiCantillonGuard
from bootstrap_amm.engine.launch import TokenLaunch


class LaunchValidator:
    """
    Health checks for a running TokenLaunch.
    Performs:
      1) State checks (curve invariant, fee bounds, offsets)
      2) Boundary tests (tiny and large quotes, zero amounts)
      3) Supply checks (drift between bonding token supply and the launch's view)

    Each step returns a dict with:
      {
        "errors": [str...],
        "warnings": [str...],
        "info": {...}
      }
    and 'run_all_validations' aggregates them into a single result.
    """

    @staticmethod
    def validate_state(launch: 'TokenLaunch', tol: Decimal = Decimal("1e-12")) -> Dict[str, Any]:
        """
        Checks that:
          - goals are set
          - (x + alpha) * (y + beta) == k within 'tol'
          - alpha == beta and both are positive
          - the withdrawal fee is within [0, 10000]
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        state = launch.state
        if not state.goals_set:
            errors.append("Launch: goals have not been set.")
            return {"errors": errors, "warnings": warnings, "info": info}

        product = (state.virtual_input_tokens + state.alpha) * (state.virtual_l + state.beta)
        if not relative_approx_equal(product, state.virtual_k, tol):
            if state.withdrawal_fee_basis_points > 0:
                # Fees return the full burned amount to y, lifting the pair above the curve.
                warnings.append(f"Launch: pair product {product} is off the curve constant {state.virtual_k}.")
            else:
                errors.append(f"Launch: invariant broken, {product} != {state.virtual_k}.")

        if state.alpha <= 0 or state.beta <= 0:
            errors.append("Launch: 'alpha' and 'beta' must be > 0.")
        if state.alpha != state.beta:
            warnings.append("Launch: 'alpha' != 'beta', the general curve formula is in use.")

        fee = state.withdrawal_fee_basis_points
        if fee < 0 or fee > BASIS_POINTS:
            errors.append(f"Launch: withdrawal fee {fee} outside [0, {BASIS_POINTS}].")

        if state.locked:
            warnings.append("Launch: locked, liquidity calls will fail.")
        if not state.vault_approval_initialized:
            warnings.append("Launch: vault approval not initialized.")

        info["state_summary"] = {
            "virtual_input_tokens": str(state.virtual_input_tokens),
            "virtual_l": str(state.virtual_l),
            "alpha": str(state.alpha),
            "virtual_k": str(state.virtual_k),
            "withdrawal_fee_basis_points": str(fee),
        }

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def boundary_tests(launch: 'TokenLaunch') -> Dict[str, Any]:
        """
        Calls a few boundary conditions on the launch:
          - quote_add_liquidity(0) and quote_remove_liquidity(0)
          - quote for a single base unit
          - marginal prices at start, now and at the goal
        """
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        # 1) Zero quotes => zero
        try:
            if launch.quote_add_liquidity(0) != 0:
                errors.append("Quote for 0 input is not zero.")
            if launch.quote_remove_liquidity(0) != 0:
                errors.append("Quote for 0 bonding tokens is not zero.")
        except LaunchError as e:
            errors.append(f"Exception quoting zero amounts: {e}")

        # 2) One base unit should buy something while below the goal
        try:
            one_unit = launch.quote_add_liquidity(1)
            if one_unit == 0 and launch.virtual_input_tokens < launch.funding_goal:
                warnings.append("One base unit of input buys no bonding tokens.")
            info["one_unit_quote"] = str(one_unit)
        except LaunchError as e:
            errors.append(f"Exception calling quote_add_liquidity(1): {e}")

        # 3) Prices must rise from initial to final
        try:
            initial = launch.get_initial_marginal_price()
            current = launch.get_current_marginal_price()
            final = launch.get_final_marginal_price()
            if not initial <= final:
                errors.append(f"Initial price {initial} above final price {final}.")
            if final != ONE:
                warnings.append(f"Final marginal price {final} differs from 1e18.")
            info["prices"] = {"initial": str(initial), "current": str(current), "final": str(final)}
        except LaunchError as e:
            errors.append(f"Exception reading marginal prices: {e}")

        return {
            "errors": errors,
            "warnings": warnings,
            "info": info
        }

    @staticmethod
    def supply_checks(launch: 'TokenLaunch') -> Dict[str, Any]:
        errors: List[str] = []
        warnings: List[str] = []
        info: Dict[str, Any] = {}

        supply = launch.bonding_token.total_supply()
        if AntiCantillonGuard.is_triggered(supply, launch.last_known_supply):
            warnings.append(
                f"Bonding supply {supply} exceeds last known supply {launch.last_known_supply}; "
                "redemptions are proportional until the next liquidity call."
            )
        vault_balance = launch.vault.balance_of(launch.input_token, launch.address)
        if vault_balance < launch.virtual_input_tokens:
            errors.append(
                f"Vault holds {vault_balance}, less than the {launch.virtual_input_tokens} routed through the curve."
            )
        info["supply"] = {
            "total_supply": str(supply),
            "last_known_supply": str(launch.last_known_supply),
            "vault_balance": str(vault_balance),
        }
        return {"errors": errors, "warnings": warnings, "info": info}

    @staticmethod
    def run_all_validations(launch: 'TokenLaunch') -> Dict[str, Any]:
        """
        Aggregates:
          - state checks
          - boundary tests
          - supply checks
        Returns a dict with keys: errors, warnings, info
        """
        results = {
            "errors": [],
            "warnings": [],
            "info": {}
        }

        state_check = LaunchValidator.validate_state(launch)
        results["errors"].extend(state_check["errors"])
        results["warnings"].extend(state_check["warnings"])
        results["info"].update(state_check["info"])
        if state_check["errors"] and not launch.state.goals_set:
            return results

        for check in (LaunchValidator.boundary_tests, LaunchValidator.supply_checks):
            outcome = check(launch)
            results["errors"].extend(outcome["errors"])
            results["warnings"].extend(outcome["warnings"])
            results["info"].update(outcome["info"])

        return results
