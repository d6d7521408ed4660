# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Table definitions shared by every repository and by schema bootstrap.
NO business rules here: storage shape only.
"""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    text,
)

metadata = MetaData()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


teams = Table(
    "teams",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("area", String(255), nullable=False),
    Column("phone", String(64), nullable=False, default=""),
    Column("address", String(255), nullable=False, default=""),
    Column("apartment_number", String(64), nullable=True),
    Column("member_ids", JSON, nullable=False, default=list),
    Column("days_of_week", JSON, nullable=False, default=list),
    Column("notes", Text, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=_utcnow),
)

members = Table(
    "members",
    metadata,
    Column("id", String(64), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("email", String(255), nullable=True),
    Column("dinner_preferences", JSON, nullable=False, default=list),
    Column("allergies", JSON, nullable=False, default=list),
    Column("notes", Text, nullable=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=_utcnow),
)

commitments = Table(
    "commitments",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(128), nullable=False, index=True),
    Column("user_name", String(255), nullable=False),
    Column("user_email", String(255), nullable=False, default=""),
    Column("user_phone", String(64), nullable=False, default=""),
    Column("team_id", String(64), nullable=False),
    Column("meal_date", Date, nullable=False),
    Column("day_of_week", String(16), nullable=False),
    Column("guest_count", Integer, nullable=False),
    Column("status", String(16), nullable=False, default="confirmed"),
    Column("contact_preference", String(16), nullable=False, default="email"),
    Column("notes", Text, nullable=False, default=""),
    Column("created_at", DateTime(timezone=True), nullable=False, default=_utcnow),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=_utcnow),
)

# At most one non-cancelled commitment per (team, date).
Index(
    "uq_commitments_active_slot",
    commitments.c.team_id,
    commitments.c.meal_date,
    unique=True,
    sqlite_where=text("status <> 'cancelled'"),
    postgresql_where=text("status <> 'cancelled'"),
)
Index("ix_commitments_meal_date", commitments.c.meal_date)
