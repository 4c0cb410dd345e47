from sqlmodel import SQLModel, Field
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp, the form every column stores."""
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # SQLite peut relire les dates sans fuseau
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class Device(SQLModel, table=True):
    __tablename__ = "devices"

    id: int | None = Field(default=None, primary_key=True)
    hostname: str
    os: str | None = None
    arch: str | None = None
    cpu: str | None = None
    mac_address: str | None = Field(default=None, index=True)
    disk_serial: str | None = None
    system_uuid: str | None = Field(default=None, unique=True)
    motherboard_serial: str | None = None
    cpu_id: str | None = None
    is_blocked: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    last_signin: datetime = Field(default_factory=utcnow)


class AdminSession(SQLModel, table=True):
    __tablename__ = "admin_sessions"

    id: int | None = Field(default=None, primary_key=True)
    session_token: str = Field(unique=True, index=True)
    created_at: datetime = Field(default_factory=utcnow)
    expires_at: datetime
