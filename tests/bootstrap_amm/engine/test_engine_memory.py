import pytest

from bootstrap_amm.common.errors import CollaboratorError
from bootstrap_amm.common.math import MAX_UINT256
from bootstrap_amm.engine.interfaces import Checkpointable
from bootstrap_amm.engine.memory import InMemoryBondingToken, InMemoryInputToken, InMemoryVault


@pytest.fixture
def token():
    token = InMemoryInputToken()
    token.mint("alice", 1000)
    return token


class TestInMemoryInputToken:
    def test_transfer(self, token):
        token.transfer("bob", 400, sender="alice")
        assert token.balance_of("alice") == 600
        assert token.balance_of("bob") == 400
        assert token.total_supply() == 1000

    def test_transfer_more_than_balance(self, token):
        with pytest.raises(CollaboratorError):
            token.transfer("bob", 1001, sender="alice")

    def test_transfer_from_spends_allowance(self, token):
        token.approve("spender", 500, sender="alice")
        token.transfer_from("alice", "bob", 200, sender="spender")
        assert token.allowance("alice", "spender") == 300
        with pytest.raises(CollaboratorError):
            token.transfer_from("alice", "bob", 301, sender="spender")

    def test_unlimited_allowance_is_not_spent(self, token):
        token.approve("spender", MAX_UINT256, sender="alice")
        token.transfer_from("alice", "bob", 200, sender="spender")
        assert token.allowance("alice", "spender") == MAX_UINT256

    def test_permit(self, token):
        token.register_signer("alice", b"secret")
        signature = token.sign_permit("alice", "spender", 50, 2 ** 40)
        token.permit("alice", "spender", 50, 2 ** 40, signature)
        assert token.allowance("alice", "spender") == 50
        assert token.nonces("alice") == 1

        # replaying the same signature fails because the nonce moved on
        with pytest.raises(CollaboratorError):
            token.permit("alice", "spender", 50, 2 ** 40, signature)

    def test_expired_permit(self, token):
        token.register_signer("alice", b"secret")
        signature = token.sign_permit("alice", "spender", 50, 1)
        with pytest.raises(CollaboratorError, match="expired"):
            token.permit("alice", "spender", 50, 1, signature)

    def test_checkpoint_and_rollback(self, token):
        assert isinstance(token, Checkpointable)
        checkpoint = token.checkpoint()
        token.transfer("bob", 1000, sender="alice")
        token.approve("spender", 5, sender="alice")
        token.rollback(checkpoint)
        assert token.balance_of("alice") == 1000
        assert token.balance_of("bob") == 0
        assert token.allowance("alice", "spender") == 0


class TestInMemoryBondingToken:
    def test_only_minters(self):
        bonding = InMemoryBondingToken()
        with pytest.raises(CollaboratorError):
            bonding.mint("alice", 10, sender="alice")
        bonding.set_minter("launch")
        bonding.mint("alice", 10, sender="launch")
        bonding.burn("alice", 4, sender="launch")
        assert bonding.balance_of("alice") == 6
        assert bonding.total_supply() == 6

        bonding.set_minter("launch", False)
        with pytest.raises(CollaboratorError):
            bonding.burn("alice", 1, sender="launch")

    def test_burn_more_than_balance(self):
        bonding = InMemoryBondingToken()
        bonding.set_minter("launch")
        bonding.mint("alice", 3, sender="launch")
        with pytest.raises(CollaboratorError):
            bonding.burn("alice", 4, sender="launch")


class TestInMemoryVault:
    def test_deposit_and_withdraw(self, token):
        vault = InMemoryVault()
        vault.set_client("alice")
        token.approve(vault.address, 1000, sender="alice")

        vault.deposit(token, 700, "alice", sender="alice")
        assert vault.balance_of(token, "alice") == 700
        assert token.balance_of(vault.address) == 700

        vault.withdraw(token, 200, "bob", sender="alice")
        assert vault.balance_of(token, "alice") == 500
        assert token.balance_of("bob") == 200

        with pytest.raises(CollaboratorError):
            vault.withdraw(token, 501, "bob", sender="alice")

    def test_unauthorized_client(self, token):
        vault = InMemoryVault()
        token.approve(vault.address, 1000, sender="alice")
        with pytest.raises(CollaboratorError, match="not an authorized client"):
            vault.deposit(token, 1, "alice", sender="alice")

    def test_checkpoint_and_rollback(self, token):
        vault = InMemoryVault()
        vault.set_client("alice")
        token.approve(vault.address, 1000, sender="alice")
        checkpoint = vault.checkpoint()
        vault.deposit(token, 100, "alice", sender="alice")
        vault.set_client("alice", False)
        vault.rollback(checkpoint)
        assert vault.balance_of(token, "alice") == 0
        vault.deposit(token, 100, "alice", sender="alice")
        assert vault.balance_of(token, "alice") == 100
