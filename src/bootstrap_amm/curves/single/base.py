from abc import ABC, abstractmethod
from typing import Optional

from bootstrap_amm.common.model import VirtualPairState


class BondingCurve(ABC):
    """Abstract base class defining the pricing interface of a virtual-pair bonding curve."""
    def __init__(self, state: Optional['VirtualPairState'] = None):
        """
        Initializes the bonding curve over an existing state.

        :param state: VirtualPairState - the curve position to price against
        """
        self._state = state or VirtualPairState()

    @property
    def state(self) -> 'VirtualPairState':
        """Returns the curve position being priced."""
        return self._state

    @abstractmethod
    def get_spot_price(self) -> int:
        """
        Returns the marginal price of one bonding token at the current position.

        :return: int - price in 1e18 fixed point.
        """
        pass

    @abstractmethod
    def quote_add(self, input_amount: int) -> int:
        """
        Calculates how many bonding tokens 'input_amount' of collateral buys from the current position.

        :param input_amount: int - collateral deposited, smallest unit.
        :return: Bonding tokens received.
        """
        pass

    @abstractmethod
    def quote_remove(self, bonding_amount: int) -> int:
        """
        Calculates how much collateral is returned when 'bonding_amount' tokens go back into the curve.

        :param bonding_amount: int - bonding tokens returned, smallest unit.
        :return: Collateral received.
        """
        pass
