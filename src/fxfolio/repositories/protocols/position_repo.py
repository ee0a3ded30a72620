"""Position repository protocol."""

from typing import Protocol, Optional

from fxfolio.domain.models import Position, PositionTransaction


class PositionRepository(Protocol):
    """
    Interface for position and transaction data access.

    Implementations raise PersistenceError on storage failures.
    """

    def create(self, position: Position) -> Position:
        """Persist a new position."""
        ...

    def create_with_transaction(
        self, position: Position, transaction: PositionTransaction
    ) -> tuple[Position, PositionTransaction]:
        """Persist a new position and its opening transaction atomically."""
        ...

    def get_by_id(self, position_id: str) -> Optional[Position]:
        """Retrieve position by ID."""
        ...

    def get_by_symbol(self, symbol: str) -> Optional[Position]:
        """Retrieve position by (uppercase) symbol."""
        ...

    def list_positions(self, active_only: bool = False) -> list[Position]:
        """List positions ordered by symbol."""
        ...

    def save_metrics(self, position: Position) -> Position:
        """Overwrite the derived metric fields of a position."""
        ...

    def delete(self, position_id: str) -> bool:
        """Hard-delete a position and all its transactions. Returns False if absent."""
        ...

    def add_transaction(self, transaction: PositionTransaction) -> PositionTransaction:
        """Append a transaction to a position's history."""
        ...

    def list_transactions(self, position_id: str) -> list[PositionTransaction]:
        """List a position's transactions in chronological order."""
        ...
