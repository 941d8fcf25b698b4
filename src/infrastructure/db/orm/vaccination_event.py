from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, String, Text, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.db.base import Base


class VaccinationEventORM(Base):
    __tablename__ = "vaccination_events"
    __table_args__ = (
        Index("idx_vaccination_events_animal_date", "animal_id", "administered_on"),
        Index("idx_vaccination_events_updated", "updated_at"),
    )

    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True)
    animal_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("animals.id"), nullable=False
    )
    administered_on: Mapped[date] = mapped_column(Date, nullable=False)
    vaccine_type_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("vaccine_types.id"), nullable=False
    )
    vaccine_name_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("vaccine_names.id"), nullable=False
    )
    dose: Mapped[str | None] = mapped_column(String(64), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
