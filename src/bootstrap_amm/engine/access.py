import functools
import logging

from bootstrap_amm.common.errors import AuthorizationError, ReentrancyError

logger = logging.getLogger(__name__)


def non_reentrant(func):
    """
    Rejects a call into any guarded method while another guarded method of the same
    object is still running. The flag is cleared on every exit path.
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        if self._entered:
            raise ReentrancyError(f"{func.__name__}: reentrant call rejected")
        self._entered = True
        try:
            return func(self, *args, **kwargs)
        finally:
            self._entered = False
    return wrapper


class Ownable:
    """Single-owner access control for administrative operations."""

    def __init__(self, owner: str):
        self._owner = owner
        self._entered = False

    @property
    def owner(self) -> str:
        return self._owner

    def _only_owner(self, caller: str):
        if caller != self._owner:
            logger.debug("Rejected admin call from %s", caller)
            raise AuthorizationError(f"{caller} is not the owner")
