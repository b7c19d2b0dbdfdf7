import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from jobtrack_backend.config.models import AuthSettingsModel
from jobtrack_backend.modules.errors import UnauthorizedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, settings: AuthSettingsModel,
                        expires_minutes: Optional[int] = None) -> str:
    """Sign a token the way the identity provider does. Used by tooling and tests."""
    minutes = settings.access_token_expire_minutes if expires_minutes is None else expires_minutes
    payload = {
        "sub": user_id,
        "exp": datetime.now(timezone.utc) + timedelta(minutes=minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: AuthSettingsModel) -> str:
    """Verify a bearer token and return the user id it was issued to"""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError as e:
        logger.info(f"Rejected access token: {e}")
        raise UnauthorizedError()

    user_id = payload.get("sub")
    if not user_id:
        raise UnauthorizedError()
    return user_id


class CurrentUser:
    """FastAPI dependency resolving the authenticated user id of a request"""

    def __init__(self, settings: AuthSettingsModel):
        self.settings = settings

    async def __call__(self, credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
        credentials_exception = HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
        if credentials is None or credentials.scheme.lower() != "bearer":
            raise credentials_exception
        try:
            return decode_access_token(credentials.credentials, self.settings)
        except UnauthorizedError:
            raise credentials_exception
