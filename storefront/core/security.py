"""
Security
JWT bearer tokens carrying the user id and role, plus FastAPI role dependencies.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.requests import HTTPConnection

from ..config.settings import Settings
from .exceptions import PermissionDeniedError, UnauthenticatedError


class Role(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"


@dataclass(frozen=True)
class CurrentUser:
    uid: str
    role: Role

    @property
    def is_staff(self) -> bool:
        return self.role in (Role.STAFF, Role.ADMIN)

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


class SecurityManager:
    """Issues and verifies JWT access tokens"""

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret_key
        self.algorithm = settings.jwt_algorithm
        self.expire_hours = settings.jwt_expire_hours

    def create_jwt_token(self, uid: str, role: Role = Role.CUSTOMER,
                         additional_claims: Optional[Dict[str, Any]] = None) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "uid": uid,
            "role": Role(role).value,
            "exp": now + timedelta(hours=self.expire_hours),
            "iat": now,
        }
        if additional_claims:
            payload.update(additional_claims)

        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise UnauthenticatedError("Token has expired")
        except jwt.InvalidTokenError as e:
            raise UnauthenticatedError(f"Invalid token: {e}")

    def get_user_from_token(self, token: str) -> CurrentUser:
        payload = self.decode_jwt_token(token)
        uid = payload.get("uid")
        if not uid:
            raise UnauthenticatedError("Token missing uid")
        try:
            role = Role(payload.get("role", Role.CUSTOMER.value))
        except ValueError:
            raise UnauthenticatedError("Token carries an unknown role")
        return CurrentUser(uid=uid, role=role)


bearer_scheme = HTTPBearer(auto_error=False)


def _security_manager(conn: HTTPConnection) -> SecurityManager:
    return conn.app.state.context.security


async def get_current_user(
    conn: HTTPConnection,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """Resolve the signed-in user from the Authorization header"""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError()
    return _security_manager(conn).get_user_from_token(credentials.credentials)


async def require_staff(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_staff:
        raise PermissionDeniedError("Staff access required")
    return user


async def require_admin(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    if not user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return user


def user_from_query_token(conn: HTTPConnection, token: Optional[str]) -> CurrentUser:
    """WebSocket clients pass the bearer token as a query parameter"""
    if not token:
        raise UnauthenticatedError()
    return _security_manager(conn).get_user_from_token(token)
