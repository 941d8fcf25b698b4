from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Index, Numeric, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class WeightObservationORM(Base):
    __tablename__ = "weight_observations"
    __table_args__ = (
        Index("idx_weight_observations_animal_date", "animal_id", "observed_on"),
        Index("idx_weight_observations_updated", "updated_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    animal_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("animals.id"), nullable=False
    )
    tag: Mapped[str] = mapped_column(String(128), nullable=False)
    observed_on: Mapped[date] = mapped_column(Date, nullable=False)
    weight_kg: Mapped[Decimal] = mapped_column(Numeric(8, 2), nullable=False)
    kind: Mapped[str] = mapped_column(String(16), nullable=False, server_default="routine")

    # Economic fields
    purchase_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    sale_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    purchase_price_per_kg: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    sale_price_per_kg: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)

    # Derived fields
    weight_gain: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    partial_weight_gain: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
    value_gain: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    months_elapsed: Mapped[Decimal | None] = mapped_column(Numeric(6, 2), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
