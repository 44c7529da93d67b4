from abc import ABC, abstractmethod
from typing import Any


class Checkpointable(ABC):
    """
    Collaborator whose state can be captured and put back, so a failed launch call
    leaves it exactly as it was.
    """

    @abstractmethod
    def checkpoint(self) -> Any:
        pass

    @abstractmethod
    def rollback(self, checkpoint: Any):
        pass


class InputToken(ABC):
    """Collateral token accepted by the launch."""

    address: str

    @abstractmethod
    def balance_of(self, account: str) -> int:
        pass

    @abstractmethod
    def allowance(self, owner: str, spender: str) -> int:
        pass

    @abstractmethod
    def approve(self, spender: str, amount: int, *, sender: str) -> bool:
        pass

    @abstractmethod
    def transfer(self, to: str, amount: int, *, sender: str) -> bool:
        pass

    @abstractmethod
    def transfer_from(self, owner: str, to: str, amount: int, *, sender: str) -> bool:
        pass

    @abstractmethod
    def permit(self, owner: str, spender: str, value: int, deadline: int, signature: str):
        """Grants 'spender' an allowance of 'value' on behalf of 'owner' from a signed message."""
        pass


class BondingToken(ABC):
    """Token issued by the launch. Only its minters may mint or burn."""

    address: str

    @abstractmethod
    def mint(self, to: str, amount: int, *, sender: str):
        pass

    @abstractmethod
    def burn(self, account: str, amount: int, *, sender: str):
        pass

    @abstractmethod
    def total_supply(self) -> int:
        pass

    @abstractmethod
    def balance_of(self, account: str) -> int:
        pass


class Vault(ABC):
    """Custodian of the collateral. Clients must be authorized and approved before depositing."""

    address: str

    @abstractmethod
    def deposit(self, token: InputToken, amount: int, recipient: str, *, sender: str):
        pass

    @abstractmethod
    def withdraw(self, token: InputToken, amount: int, recipient: str, *, sender: str):
        pass

    @abstractmethod
    def balance_of(self, token: InputToken, account: str) -> int:
        pass


class LaunchHook(ABC):
    """
    Policy callbacks run after a launch commits an add or remove. Raising from a
    callback vetoes the whole operation.
    """

    address: str = "hook"

    @abstractmethod
    def on_buy(self, caller: str, input_amount: int, bonding_out: int):
        pass

    @abstractmethod
    def on_sell(self, caller: str, bonding_amount: int, input_out: int):
        pass
