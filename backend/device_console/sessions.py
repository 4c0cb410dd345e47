import logging
import secrets

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from .errors import ErrorKind, Result
from .models import AdminSession, as_utc, utcnow

logger = logging.getLogger(__name__)


class SessionManager:
    """Issues and checks admin bearer tokens.

    Sessions expire passively: nothing deletes or renews them, a token is
    simply refused once ``now`` reaches ``expires_at``.
    """

    def __init__(self, session: Session, config, clock=utcnow):
        self.session = session
        self.lifetime = config.session_lifetime
        self.clock = clock

    def create_session(self) -> Result:
        now = self.clock()
        record = AdminSession(
            session_token=secrets.token_urlsafe(32),
            created_at=now,
            expires_at=now + self.lifetime,
        )
        try:
            self.session.add(record)
            self.session.commit()
            self.session.refresh(record)
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("Failed to store admin session")
            return Result.failure(ErrorKind.INTERNAL_FAILURE)
        return Result.success(record)

    def validate_session(self, token: str | None) -> Result:
        # Absent ou expiré: même réponse pour l'appelant
        if not token:
            return Result.failure(ErrorKind.UNAUTHORIZED, "Invalid or expired token")
        try:
            record = self.session.exec(
                select(AdminSession).where(AdminSession.session_token == token)
            ).first()
        except SQLAlchemyError:
            logger.exception("Failed to look up admin session")
            return Result.failure(ErrorKind.INTERNAL_FAILURE)
        if record is None or not as_utc(record.expires_at) > as_utc(self.clock()):
            return Result.failure(ErrorKind.UNAUTHORIZED, "Invalid or expired token")
        return Result.success(record)
