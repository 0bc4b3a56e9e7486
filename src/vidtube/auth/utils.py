from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from vidtube.config import settings
from vidtube.db.session import get_store
from vidtube.errors import AuthError
from vidtube.store.adapter import Document, DocumentStore
from vidtube.utils import is_valid_id

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/users/login", auto_error=False)

ACCESS = "access"
REFRESH = "refresh"


def _require_secret_key(token_type: str) -> str:
    secret = settings.REFRESH_SECRET_KEY if token_type == REFRESH else settings.SECRET_KEY
    if not secret:
        raise RuntimeError(
            "SECRET_KEY must be set via environment variable for JWT operations"
        )
    return secret


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _create_token(user: Document, token_type: str, minutes: int) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": user["_id"],
        "type": token_type,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    if token_type == ACCESS:
        to_encode.update(username=user["username"], email=user["email"], fullName=user["fullName"])
    if settings.JWT_ISSUER:
        to_encode["iss"] = settings.JWT_ISSUER
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(to_encode, _require_secret_key(token_type), algorithm=settings.JWT_ALGORITHM)


def create_access_token(user: Document) -> str:
    return _create_token(user, ACCESS, settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def create_refresh_token(user: Document) -> str:
    return _create_token(user, REFRESH, settings.REFRESH_TOKEN_EXPIRE_MINUTES)


def decode_token(token: str, token_type: str = ACCESS) -> dict:
    """Decode and check a token; raises AuthError on any problem."""
    try:
        payload = jwt.decode(
            token,
            _require_secret_key(token_type),
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE if settings.JWT_AUDIENCE else None,
            issuer=settings.JWT_ISSUER,
            options={"verify_aud": bool(settings.JWT_AUDIENCE)},
        )
    except JWTError:
        raise AuthError("Invalid or expired token")
    if payload.get("type") != token_type or not is_valid_id(payload.get("sub")):
        raise AuthError("Invalid or expired token")
    return payload


def get_current_user(
    request: Request,
    bearer: Optional[str] = Depends(oauth2_scheme),
    store: DocumentStore = Depends(get_store),
) -> Document:
    """Resolve the caller from the ``accessToken`` cookie or a Bearer header."""
    token = request.cookies.get("accessToken") or bearer
    if not token:
        raise AuthError("Unauthorized request")
    payload = decode_token(token, ACCESS)
    user = store.find_by_id("users", payload["sub"])
    if user is None:
        raise AuthError("Invalid access token")
    return user
