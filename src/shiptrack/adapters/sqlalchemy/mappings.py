"""SQLAlchemy table metadata for shipments, their events and owners."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    TypeDecorator,
)

from shiptrack.domain.model import Carrier, ShipmentStatus, UserRole

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect, Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def _enum_column_type(enum_cls: type[StrEnum]) -> Enum:
    # persist values ("in_transit"), not member names
    return Enum(
        enum_cls,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
        validate_strings=True,
    )


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

user_table = Table(
    "user_account",
    metadata,
    Column("uid", String, primary_key=True),
    Column("email", String, nullable=True),
    Column("role", _enum_column_type(UserRole), nullable=False, default=UserRole.USER),
)

shipment_table = Table(
    "shipment",
    metadata,
    Column("id", String, primary_key=True),
    Column("owner_uid", String, nullable=False, index=True),
    Column("carrier", _enum_column_type(Carrier), nullable=False),
    Column("tracking_number", String, nullable=False),
    Column("status", _enum_column_type(ShipmentStatus), nullable=False),
    Column("archived", Boolean, nullable=False, default=False, index=True),
    Column("created_at", UTCDateTime, nullable=True),
    Column("last_updated_at", UTCDateTime, nullable=True),
    Column("vessel_name", String, nullable=True),
    Column("eta", String, nullable=True),
    Column("departure_date", String, nullable=True),
    Column("arrival_date", String, nullable=True),
    Column("port_of_loading", String, nullable=True),
    Column("port_of_discharge", String, nullable=True),
    Column("price", Float, nullable=True),
    Column("weight", Float, nullable=True),
)

tracking_event_table = Table(
    "tracking_event",
    metadata,
    Column(
        "shipment_id",
        String,
        ForeignKey("shipment.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("id", String, nullable=False),
    Column("status", String, nullable=False),
    Column("description", String, nullable=True),
    Column("location", String, nullable=True),
    Column("timestamp", String, nullable=True),
    PrimaryKeyConstraint("shipment_id", "id"),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the store metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
