from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
import jwt

from .exceptions import NotAuthenticated
from .schemas import Identity
from .security import decode_session_token
from .services import get_user

security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    if credentials is None:
        raise NotAuthenticated()
    try:
        payload = decode_session_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (jwt.PyJWTError, ValueError):
        raise NotAuthenticated("Invalid token")

    user = get_user(user_id)
    if user is None:
        raise NotAuthenticated("User not found")
    return Identity.model_validate(user)
