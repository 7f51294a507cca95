"""
Errors raised by the reconciliation engine.

Each error carries an optional recovery hint that the CLI shows under the
message.
"""

from typing import Optional


class ReconciliationError(Exception):
    """Base exception for reconciliation failures with user-facing messages."""

    def __init__(self, message: str, recovery_hint: Optional[str] = None):
        """
        Initialize the error.

        Args:
            message: Error message to display
            recovery_hint: Optional hint for recovering from the error
        """
        self.message = message
        self.recovery_hint = recovery_hint
        super().__init__(message)


class NotFoundError(ReconciliationError):
    """A referenced client, contract or company does not exist."""

    pass


class NoUnbilledWorkError(ReconciliationError):
    """The selection holds no unbilled entries; nothing to invoice."""

    pass


class NoRateConfiguredError(ReconciliationError):
    """The contract lacks the rate or price its pricing model requires."""

    pass


class StoreError(ReconciliationError):
    """A read or write against the database failed."""

    pass
