"""Exceptions raised while deploying and wiring the ENS DAO contracts."""

from typing import Dict, Optional

from ape.contracts import ContractInstance


class DeploymentError(Exception):
    """Base exception for deployment-related errors."""


class DeploymentConfigError(DeploymentError, ValueError):
    """Raised when a deployment input is missing or malformed."""


class InvalidArguments(DeploymentError, ValueError):
    """Raised when arguments do not match a constructor or method ABI."""


class TransactionFailed(DeploymentError):
    """Raised when a confirmed transaction receipt reports a failure."""


class IncompleteSetupError(DeploymentError):
    """
    Raised when a deployment sequence stops after some contracts were already deployed.

    The deployed contracts stay on-chain; ``deployed`` maps their names to instances
    and ``step`` names the step that failed.
    """

    def __init__(
        self,
        step: str,
        deployed: Optional[Dict[str, ContractInstance]] = None,
        message: Optional[str] = None,
    ):
        self.step = step
        self.deployed = dict(deployed or {})
        if message is None:
            names = ", ".join(self.deployed) or "none"
            message = f"Setup incomplete: '{step}' failed (already deployed: {names})"
        super().__init__(message)


class DeploymentAborted(DeploymentError):
    """Raised when the user declines a confirmation prompt."""
