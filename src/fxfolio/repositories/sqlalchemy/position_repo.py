"""SQLAlchemy implementation of PositionRepository."""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fxfolio.core.exceptions import PersistenceError
from fxfolio.domain.models import Position, PositionTransaction
from fxfolio.repositories.sqlalchemy.orm_models import PositionORM, PositionTransactionORM

logger = logging.getLogger(__name__)


def _dec(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class SqlAlchemyPositionRepository:
    """SQLAlchemy-backed repository for positions and their transactions."""

    def __init__(self, db: Session):
        self._db = db

    # Position operations

    def create(self, position: Position) -> Position:
        """Persist a new position."""
        orm_pos = self._new_position_orm(position)
        self._db.add(orm_pos)
        self._commit("create position")
        self._db.refresh(orm_pos)
        return self._position_to_domain(orm_pos)

    def create_with_transaction(
        self, position: Position, transaction: PositionTransaction
    ) -> tuple[Position, PositionTransaction]:
        """Persist a new position and its opening transaction in one commit."""
        orm_pos = self._new_position_orm(position)
        orm_txn = self._new_txn_orm(transaction)
        orm_txn.position_id = orm_pos.position_id

        def _stage():
            self._db.add(orm_pos)
            self._db.flush()
            self._db.add(orm_txn)

        try:
            self._run("stage position", _stage)
        except PersistenceError:
            self._db.rollback()
            raise
        self._commit("create position")
        self._db.refresh(orm_pos)
        self._db.refresh(orm_txn)
        return self._position_to_domain(orm_pos), self._txn_to_domain(orm_txn)

    def get_by_id(self, position_id: str) -> Optional[Position]:
        """Retrieve position by ID."""
        orm_pos = self._run(
            "get position",
            lambda: self._db.query(PositionORM)
            .filter(PositionORM.position_id == position_id)
            .first(),
        )
        return self._position_to_domain(orm_pos) if orm_pos else None

    def get_by_symbol(self, symbol: str) -> Optional[Position]:
        """Retrieve position by symbol."""
        orm_pos = self._run(
            "get position by symbol",
            lambda: self._db.query(PositionORM)
            .filter(PositionORM.symbol == symbol.upper())
            .first(),
        )
        return self._position_to_domain(orm_pos) if orm_pos else None

    def list_positions(self, active_only: bool = False) -> list[Position]:
        """List positions ordered by symbol."""

        def _query():
            query = self._db.query(PositionORM)
            if active_only:
                query = query.filter(PositionORM.is_active == True)  # noqa: E712
            return query.order_by(PositionORM.symbol).all()

        return [self._position_to_domain(p) for p in self._run("list positions", _query)]

    def save_metrics(self, position: Position) -> Position:
        """Overwrite the derived metric fields of a position."""
        orm_pos = self._run(
            "load position",
            lambda: self._db.query(PositionORM)
            .filter(PositionORM.position_id == position.position_id)
            .first(),
        )
        if not orm_pos:
            raise PersistenceError(f"Position not found: {position.position_id}")

        self._apply_metrics(orm_pos, position)
        self._commit("save metrics")
        self._db.refresh(orm_pos)
        return self._position_to_domain(orm_pos)

    def delete(self, position_id: str) -> bool:
        """Hard-delete a position and all of its transactions."""
        orm_pos = self._run(
            "load position",
            lambda: self._db.query(PositionORM)
            .filter(PositionORM.position_id == position_id)
            .first(),
        )
        if not orm_pos:
            return False
        self._db.delete(orm_pos)
        self._commit("delete position")
        return True

    # Transaction operations

    def add_transaction(self, transaction: PositionTransaction) -> PositionTransaction:
        """Append a transaction to a position's history."""
        orm_txn = self._new_txn_orm(transaction)
        self._db.add(orm_txn)
        self._commit("add transaction")
        self._db.refresh(orm_txn)
        return self._txn_to_domain(orm_txn)

    def list_transactions(self, position_id: str) -> list[PositionTransaction]:
        """List transactions ordered by date, then insertion order."""
        orm_txns = self._run(
            "list transactions",
            lambda: self._db.query(PositionTransactionORM)
            .filter(PositionTransactionORM.position_id == position_id)
            .order_by(PositionTransactionORM.txn_date, PositionTransactionORM.id)
            .all(),
        )
        return [self._txn_to_domain(t) for t in orm_txns]

    # Helpers

    def _run(self, action: str, fn):
        try:
            return fn()
        except SQLAlchemyError as exc:
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def _commit(self, action: str) -> None:
        try:
            self._db.commit()
        except SQLAlchemyError as exc:
            self._db.rollback()
            logger.error("Database error during %s: %s", action, exc)
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def _new_position_orm(self, position: Position) -> PositionORM:
        orm_pos = PositionORM(
            position_id=position.position_id,
            symbol=position.symbol,
            name=position.name,
            native_currency=position.native_currency,
            is_active=position.is_active,
        )
        if position.created_at is not None:
            orm_pos.created_at = position.created_at
        self._apply_metrics(orm_pos, position)
        return orm_pos

    @staticmethod
    def _new_txn_orm(transaction: PositionTransaction) -> PositionTransactionORM:
        orm_txn = PositionTransactionORM(
            position_id=transaction.position_id,
            kind=transaction.kind,
            quantity=transaction.quantity,
            price=transaction.price,
            fees=transaction.fees,
            taxes=transaction.taxes,
            currency=transaction.currency,
            txn_date=transaction.txn_date,
            note=transaction.note,
        )
        if transaction.created_at is not None:
            orm_txn.created_at = transaction.created_at
        return orm_txn

    @staticmethod
    def _apply_metrics(orm: PositionORM, position: Position) -> None:
        orm.quantity = position.quantity
        orm.average_price = position.average_price
        orm.total_invested = position.total_invested
        orm.current_price = position.current_price
        orm.current_value = position.current_value
        orm.total_gain_loss = position.total_gain_loss
        orm.total_gain_loss_percent = position.total_gain_loss_percent
        orm.day_gain_loss = position.day_gain_loss
        orm.is_active = position.is_active
        orm.last_updated = position.last_updated

    @staticmethod
    def _position_to_domain(orm: PositionORM) -> Position:
        """Convert ORM position to domain model."""
        return Position(
            position_id=orm.position_id,
            symbol=orm.symbol,
            native_currency=orm.native_currency,
            name=orm.name,
            quantity=_dec(orm.quantity),
            average_price=_dec(orm.average_price),
            total_invested=_dec(orm.total_invested),
            current_price=_dec(orm.current_price),
            current_value=_dec(orm.current_value),
            total_gain_loss=_dec(orm.total_gain_loss),
            total_gain_loss_percent=_dec(orm.total_gain_loss_percent),
            day_gain_loss=_dec(orm.day_gain_loss),
            is_active=bool(orm.is_active),
            last_updated=orm.last_updated,
            created_at=orm.created_at,
        )

    @staticmethod
    def _txn_to_domain(orm: PositionTransactionORM) -> PositionTransaction:
        """Convert ORM transaction to domain model."""
        return PositionTransaction(
            txn_id=orm.id,
            position_id=orm.position_id,
            kind=orm.kind,
            quantity=_dec(orm.quantity),
            price=_dec(orm.price),
            fees=_dec(orm.fees),
            taxes=_dec(orm.taxes),
            currency=orm.currency,
            txn_date=orm.txn_date,
            note=orm.note,
            created_at=orm.created_at,
        )
