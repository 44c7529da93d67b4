from enum import Enum


class CurveFormula(Enum):
    SIMPLIFIED = "SIMPLIFIED"
    GENERAL = "GENERAL"

    @classmethod
    def from_str(cls, formula_str: str) -> "CurveFormula":
        """
        Convert a string to a CurveFormula enum.
        :param formula_str: str
        :return: CurveFormula or NotImplementedError
        """
        if formula_str.upper() == CurveFormula.SIMPLIFIED.name:
            return CurveFormula.SIMPLIFIED
        elif formula_str.upper() == CurveFormula.GENERAL.name:
            return CurveFormula.GENERAL
        else:
            raise NotImplementedError(f"No curve formula enum for {formula_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class LiquidityAction(Enum):
    ADD = "ADD"
    REMOVE = "REMOVE"

    @classmethod
    def from_str(cls, action_str):
        if action_str.upper() == LiquidityAction.ADD.name:
            return LiquidityAction.ADD
        elif action_str.upper() == LiquidityAction.REMOVE.name:
            return LiquidityAction.REMOVE
        else:
            raise NotImplementedError(f"No liquidity action enum for {action_str}")

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class RedemptionMode(Enum):
    CURVE = "CURVE"
    PROPORTIONAL = "PROPORTIONAL"

    def __str__(self):
        return self.name

    def __repr__(self):
        return self.__str__()


class EventType(Enum):
    GOALS_SET = "GoalsSet"
    LIQUIDITY_ADDED = "LiquidityAdded"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    FEE_COLLECTED = "FeeCollected"
    WITHDRAWAL_FEE_UPDATED = "WithdrawalFeeUpdated"
    CONTRACT_LOCKED = "ContractLocked"
    CONTRACT_UNLOCKED = "ContractUnlocked"
    VAULT_CHANGED = "VaultChanged"
    HOOK_CHANGED = "HookChanged"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"

    def __str__(self):
        return self.value

    def __repr__(self):
        return self.__str__()
