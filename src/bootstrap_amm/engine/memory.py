import copy
import hashlib
import hmac
import time
from typing import Dict, Optional, Set, Tuple

from bootstrap_amm.common.errors import CollaboratorError
from bootstrap_amm.common.math import MAX_UINT256
from bootstrap_amm.common.model import Token
from bootstrap_amm.engine.interfaces import BondingToken, Checkpointable, InputToken, Vault


class _BalanceBook(Checkpointable):
    """Shared balance bookkeeping for the in-memory tokens."""

    def __init__(self, token: Token, address: str):
        self.token = token
        self.address = address
        self._balances: Dict[str, int] = {}
        self._supply = 0

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def total_supply(self) -> int:
        return self._supply

    def _credit(self, account: str, amount: int):
        self._balances[account] = self.balance_of(account) + amount

    def _debit(self, account: str, amount: int):
        balance = self.balance_of(account)
        if amount > balance:
            raise CollaboratorError(
                f"{self.token.symbol}: {account} holds {balance}, cannot move {amount}"
            )
        self._balances[account] = balance - amount

    def _move(self, owner: str, to: str, amount: int):
        if amount < 0:
            raise CollaboratorError(f"{self.token.symbol}: negative amount {amount}")
        self._debit(owner, amount)
        self._credit(to, amount)

    def checkpoint(self):
        return copy.deepcopy(self.__dict__)

    def rollback(self, checkpoint):
        self.__dict__.update(copy.deepcopy(checkpoint))


class InMemoryInputToken(_BalanceBook, InputToken):
    """
    ERC20-style collateral token with allowances and HMAC-signed permits.
    Owners register a signing secret, permits are bound to the owner's current nonce.
    """

    def __init__(self, token: Optional[Token] = None, address: str = "input-token"):
        super().__init__(token or Token(name="Input Token", symbol="INPUT"), address)
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._nonces: Dict[str, int] = {}
        self._signers: Dict[str, bytes] = {}

    def mint(self, to: str, amount: int):
        """Faucet used to fund accounts in simulations and tests."""
        self._credit(to, amount)
        self._supply += amount

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def approve(self, spender: str, amount: int, *, sender: str) -> bool:
        self._allowances[(sender, spender)] = amount
        return True

    def transfer(self, to: str, amount: int, *, sender: str) -> bool:
        self._move(sender, to, amount)
        return True

    def transfer_from(self, owner: str, to: str, amount: int, *, sender: str) -> bool:
        allowed = self.allowance(owner, sender)
        if amount > allowed:
            raise CollaboratorError(
                f"{self.token.symbol}: allowance {allowed} of {sender} over {owner} is below {amount}"
            )
        self._move(owner, to, amount)
        if allowed != MAX_UINT256:
            self._allowances[(owner, sender)] = allowed - amount
        return True

    def nonces(self, owner: str) -> int:
        return self._nonces.get(owner, 0)

    def register_signer(self, owner: str, secret: bytes):
        self._signers[owner] = secret

    def _digest(self, owner: str, spender: str, value: int, deadline: int, nonce: int) -> str:
        secret = self._signers.get(owner)
        if secret is None:
            raise CollaboratorError(f"{self.token.symbol}: no signer registered for {owner}")
        message = f"{self.address}:{owner}:{spender}:{value}:{nonce}:{deadline}".encode()
        return hmac.new(secret, message, hashlib.sha256).hexdigest()

    def sign_permit(self, owner: str, spender: str, value: int, deadline: int) -> str:
        return self._digest(owner, spender, value, deadline, self.nonces(owner))

    def permit(self, owner: str, spender: str, value: int, deadline: int, signature: str):
        if deadline < int(time.time()):
            raise CollaboratorError(f"{self.token.symbol}: permit expired")
        expected = self._digest(owner, spender, value, deadline, self.nonces(owner))
        if not hmac.compare_digest(expected, signature):
            raise CollaboratorError(f"{self.token.symbol}: invalid permit signature")
        self._nonces[owner] = self.nonces(owner) + 1
        self._allowances[(owner, spender)] = value


class InMemoryBondingToken(_BalanceBook, BondingToken):
    """Bonding token whose minters may mint to and burn from any account."""

    def __init__(self, token: Optional[Token] = None, address: str = "bonding-token"):
        super().__init__(token or Token(name="Bonding Token", symbol="BOND"), address)
        self._minters: Set[str] = set()

    def set_minter(self, account: str, allowed: bool = True):
        if allowed:
            self._minters.add(account)
        else:
            self._minters.discard(account)

    def _require_minter(self, sender: str):
        if sender not in self._minters:
            raise CollaboratorError(f"{self.token.symbol}: {sender} is not a minter")

    def mint(self, to: str, amount: int, *, sender: str):
        self._require_minter(sender)
        if amount < 0:
            raise CollaboratorError(f"{self.token.symbol}: negative amount {amount}")
        self._credit(to, amount)
        self._supply += amount

    def burn(self, account: str, amount: int, *, sender: str):
        self._require_minter(sender)
        self._debit(account, amount)
        self._supply -= amount


class InMemoryVault(Vault, Checkpointable):
    """
    Custodian keeping one balance per (token, account). Deposits pull tokens from the
    sending client, which needs an allowance towards the vault.
    """

    def __init__(self, address: str = "vault"):
        self.address = address
        self._clients: Set[str] = set()
        self._balances: Dict[Tuple[str, str], int] = {}

    def set_client(self, client: str, authorized: bool = True):
        if authorized:
            self._clients.add(client)
        else:
            self._clients.discard(client)

    def _require_client(self, sender: str):
        if sender not in self._clients:
            raise CollaboratorError(f"vault: {sender} is not an authorized client")

    def balance_of(self, token: InputToken, account: str) -> int:
        return self._balances.get((token.address, account), 0)

    def deposit(self, token: InputToken, amount: int, recipient: str, *, sender: str):
        self._require_client(sender)
        token.transfer_from(sender, self.address, amount, sender=self.address)
        key = (token.address, recipient)
        self._balances[key] = self._balances.get(key, 0) + amount

    def withdraw(self, token: InputToken, amount: int, recipient: str, *, sender: str):
        self._require_client(sender)
        key = (token.address, sender)
        balance = self._balances.get(key, 0)
        if amount > balance:
            raise CollaboratorError(f"vault: {sender} holds {balance}, cannot withdraw {amount}")
        self._balances[key] = balance - amount
        token.transfer(recipient, amount, sender=self.address)

    def checkpoint(self):
        return copy.deepcopy(self._balances), set(self._clients)

    def rollback(self, checkpoint):
        balances, clients = checkpoint
        self._balances = copy.deepcopy(balances)
        self._clients = set(clients)
