import logging
import secrets

from fastapi import Depends, Header, Request
from sqlmodel import Session

from .database import get_session
from .errors import ApiError, ErrorKind, Result
from .registry import DeviceRegistry
from .sessions import SessionManager

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


def passwords_match(supplied, expected: str) -> bool:
    # Comparaison exacte, mots de passe en clair
    if not isinstance(supplied, str):
        return False
    return secrets.compare_digest(supplied.encode("utf-8"), expected.encode("utf-8"))


def parse_bearer(authorization: str | None) -> str | None:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


class AccessGateway:
    """Request-level checks for devices, admin logins and admin tokens."""

    def __init__(self, config, sessions: SessionManager):
        self.config = config
        self.sessions = sessions

    def authorize_device(self, password) -> Result:
        if not passwords_match(password, self.config.api_password):
            logger.warning("Device signin refused: invalid API password")
            return Result.failure(ErrorKind.UNAUTHORIZED, "Invalid API password")
        return Result.success()

    def authorize_admin(self, authorization: str | None) -> Result:
        token = parse_bearer(authorization)
        if token is None:
            return Result.failure(ErrorKind.UNAUTHORIZED, "Unauthorized")
        return self.sessions.validate_session(token)

    def authorize_login(self, password) -> Result:
        if not passwords_match(password, self.config.admin_password):
            logger.warning("Admin login refused: invalid password")
            return Result.failure(ErrorKind.UNAUTHORIZED, "Invalid password")
        result = self.sessions.create_session()
        if result.ok:
            logger.info("Admin session issued, expires at %s", result.value.expires_at.isoformat())
        return result


def get_session_manager(request: Request, session: Session = Depends(get_session)):
    return SessionManager(session, request.app.state.config, clock=request.app.state.clock)


def get_registry(request: Request, session: Session = Depends(get_session)):
    return DeviceRegistry(session, clock=request.app.state.clock)


def get_gateway(request: Request, sessions: SessionManager = Depends(get_session_manager)):
    return AccessGateway(request.app.state.config, sessions)


def require_admin(authorization: str | None = Header(default=None),
                  gateway: AccessGateway = Depends(get_gateway)):
    result = gateway.authorize_admin(authorization)
    if not result.ok:
        raise ApiError(result)
    return result.value
