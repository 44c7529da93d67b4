class LaunchError(Exception):
    """Base class for every failure raised by a token launch."""


class InputError(LaunchError):
    """Zero or otherwise degenerate amounts."""


class ConfigError(LaunchError):
    """Configuration parameter outside its allowed range."""


class GoalError(ConfigError):
    """Funding goal is not a positive 256-bit integer."""


class PriceTooLowError(ConfigError):
    """Desired average price is below sqrt(0.75)."""


class PriceTooHighError(ConfigError):
    """Desired average price is at or above 1.0."""


class AuthorizationError(LaunchError):
    """Caller is not allowed to perform the operation."""


class StateError(LaunchError):
    """Operation not allowed in the current state (locked, vault not approved, ...)."""


class ReentrancyError(StateError):
    """A guarded entry point was entered while another one was still running."""


class SlippageError(LaunchError):
    """Computed output is below the caller's minimum."""


class LaunchArithmeticError(LaunchError, ArithmeticError):
    """Integer underflow or overflow that would otherwise wrap silently."""


class BalanceError(LaunchError):
    """Caller does not hold enough tokens."""


class ExternalCallFailure(LaunchError):
    """A vault, token or hook call failed."""

    def __init__(self, target: str, reason: Exception):
        self.target = target
        self.reason = reason
        super().__init__(f"{target} call failed: {reason}")


class CollaboratorError(Exception):
    """Raised by the in-memory collaborators when they reject a call."""
