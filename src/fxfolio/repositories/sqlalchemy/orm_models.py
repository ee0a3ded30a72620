"""SQLAlchemy ORM model definitions."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import (
    Column,
    Integer,
    String,
    Date,
    DateTime,
    Boolean,
    Text,
    ForeignKey,
    Numeric,
    Enum as SqlEnum,
)
from sqlalchemy.orm import relationship

from fxfolio.repositories.sqlalchemy.database import Base
from fxfolio.domain.models.enums import TransactionKind


class PositionORM(Base):
    """SQLAlchemy model for Position (holding plus derived metrics)."""

    __tablename__ = "positions"

    position_id = Column(String(36), primary_key=True)
    symbol = Column(String(20), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    native_currency = Column(String(3), nullable=False)
    quantity = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    average_price = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    total_invested = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    current_price = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    current_value = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    total_gain_loss = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    total_gain_loss_percent = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    day_gain_loss = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    is_active = Column(Boolean, default=True, nullable=False)
    last_updated = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    transactions = relationship(
        "PositionTransactionORM",
        back_populates="position",
        cascade="all, delete-orphan",
    )


class PositionTransactionORM(Base):
    """SQLAlchemy model for a buy/sell against a position (append-only)."""

    __tablename__ = "position_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    position_id = Column(
        String(36),
        ForeignKey("positions.position_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    kind = Column(SqlEnum(TransactionKind), nullable=False)
    quantity = Column(Numeric(precision=28, scale=10), nullable=False)
    price = Column(Numeric(precision=28, scale=10), nullable=False)
    fees = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    taxes = Column(Numeric(precision=28, scale=10), default=Decimal("0"))
    currency = Column(String(3), nullable=False)
    txn_date = Column(Date, nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    position = relationship("PositionORM", back_populates="transactions")
