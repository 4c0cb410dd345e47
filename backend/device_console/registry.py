import logging

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select, col

from .errors import ErrorKind, Result
from .models import Device, utcnow

logger = logging.getLogger(__name__)

IDENTITY_FIELDS = (
    "hostname",
    "os",
    "arch",
    "cpu",
    "mac_address",
    "disk_serial",
    "system_uuid",
    "motherboard_serial",
    "cpu_id",
)

STATUS_FILTERS = ("all", "active", "blocked")


def clean_identity(identity: dict) -> dict:
    """Keep the known fields as sent, store missing or blank values as None."""
    cleaned = {}
    for field in IDENTITY_FIELDS:
        value = identity.get(field)
        if isinstance(value, str) and not value.strip():
            value = None
        cleaned[field] = value
    return cleaned


class DeviceRegistry:
    def __init__(self, session: Session, clock=utcnow):
        self.session = session
        self.clock = clock

    def find_device(self, system_uuid: str | None, mac_address: str | None) -> Device | None:
        """UUID first, MAC address only when the UUID is absent or unknown."""
        device = None
        if system_uuid:
            device = self.session.exec(
                select(Device).where(Device.system_uuid == system_uuid)
            ).first()
        if device is None and mac_address:
            device = self.session.exec(
                select(Device).where(Device.mac_address == mac_address).order_by(col(Device.id))
            ).first()
        return device

    def resolve_or_create(self, identity: dict) -> Result:
        """Return ``Result((device, created))`` for a signin identity."""
        fields = clean_identity(identity)
        if not fields["hostname"]:
            return Result.failure(ErrorKind.INVALID_REQUEST, "Hostname is required")

        try:
            device = self.find_device(fields["system_uuid"], fields["mac_address"])
            if device is not None:
                return self._sign_in(device)

            now = self.clock()
            device = Device(**fields, is_blocked=False, created_at=now, last_signin=now)
            self.session.add(device)
            try:
                self.session.commit()
            except IntegrityError:
                # Un autre signin a créé ce system_uuid entre-temps
                self.session.rollback()
                device = self.find_device(fields["system_uuid"], fields["mac_address"])
                if device is None:
                    raise
                return self._sign_in(device)
            self.session.refresh(device)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Device resolution failed for hostname %s", fields["hostname"])
            return Result.failure(ErrorKind.INTERNAL_FAILURE)

        logger.info("Registered new device %s (%s)", device.id, device.hostname)
        return Result.success((device, True))

    def _sign_in(self, device: Device) -> Result:
        if device.is_blocked:
            logger.warning("Refused signin from blocked device %s", device.id)
            return Result.failure(ErrorKind.FORBIDDEN, "Device is blocked")
        device.last_signin = self.clock()
        self.session.add(device)
        self.session.commit()
        self.session.refresh(device)
        logger.info("Device %s signed in", device.id)
        return Result.success((device, False))

    def list_devices(self, search: str | None = None, status: str = "all") -> Result:
        """All devices, most recently registered first."""
        if status not in STATUS_FILTERS:
            return Result.failure(ErrorKind.INVALID_REQUEST, "Unknown status filter")

        query = select(Device)
        if status == "active":
            query = query.where(col(Device.is_blocked).is_(False))
        elif status == "blocked":
            query = query.where(col(Device.is_blocked).is_(True))
        if search and search.strip():
            term = search.strip().lower()
            query = query.where(or_(
                func.lower(col(Device.hostname)).contains(term, autoescape=True),
                func.lower(col(Device.os)).contains(term, autoescape=True),
                func.lower(col(Device.mac_address)).contains(term, autoescape=True),
            ))
        query = query.order_by(col(Device.created_at).desc(), col(Device.id).desc())

        try:
            devices = self.session.exec(query).all()
        except SQLAlchemyError:
            logger.exception("Failed to list devices")
            return Result.failure(ErrorKind.INTERNAL_FAILURE)
        return Result.success(list(devices))

    def set_blocked(self, device_id: int, blocked: bool) -> Result:
        try:
            device = self.session.get(Device, device_id)
            if device is None:
                return Result.failure(ErrorKind.NOT_FOUND, "Device not found")
            if device.is_blocked != blocked:
                device.is_blocked = blocked
                self.session.add(device)
                self.session.commit()
                logger.info("Device %s %s", device_id, "blocked" if blocked else "unblocked")
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to update block state of device %s", device_id)
            return Result.failure(ErrorKind.INTERNAL_FAILURE)
        return Result.success(device)

    def stats(self) -> Result:
        try:
            total = self.session.exec(select(func.count()).select_from(Device)).one()
            blocked = self.session.exec(
                select(func.count()).select_from(Device).where(col(Device.is_blocked).is_(True))
            ).one()
        except SQLAlchemyError:
            logger.exception("Failed to count devices")
            return Result.failure(ErrorKind.INTERNAL_FAILURE)
        return Result.success({"total": total, "active": total - blocked, "blocked": blocked})
