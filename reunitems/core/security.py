# file: reunitems/core/security.py
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from passlib.context import CryptContext

from reunitems.core import config, store

# ---------------------------
# Logging
# ---------------------------
logger = logging.getLogger("core.security")

# ---------------------------
# Password Hashing (bcrypt 72-byte safe)
# ---------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
BCRYPT_BYTE_LIMIT = 72


def _normalize_and_truncate_password(password: str) -> str:
    """
    Ensure password is a str, remove control characters, then truncate
    safely to BCRYPT_BYTE_LIMIT bytes (not characters).
    """
    if password is None:
        raise ValueError("Password cannot be None")

    if not isinstance(password, str):
        password = str(password)

    # Remove non-printable/control characters (keeps spaces)
    cleaned = "".join(ch for ch in password if ord(ch) >= 32)

    b = cleaned.encode("utf-8")
    if len(b) > BCRYPT_BYTE_LIMIT:
        logger.debug("Password bytes exceeded bcrypt limit; truncating from %d bytes", len(b))
        b = b[:BCRYPT_BYTE_LIMIT]

    # Decode back to string, ignoring partial UTF-8 byte sequences if present.
    return b.decode("utf-8", "ignore")


def get_password_hash(password: str) -> str:
    """Hash the provided password using bcrypt, after safely truncating it."""
    return pwd_context.hash(_normalize_and_truncate_password(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plaintext password against stored bcrypt hash."""
    if not hashed_password:
        return False
    return pwd_context.verify(_normalize_and_truncate_password(plain_password), hashed_password)


# ---------------------------
# JWT Configuration
# ---------------------------
_secret_key: Optional[str] = config.SECRET_KEY


async def get_secret_key() -> str:
    """Lazy-load stable JWT secret key from Firestore CONFIG/jwt when not set in env."""
    global _secret_key
    if not _secret_key:
        data = await store.get_document(store.build_path(store.CONFIG, "jwt"))
        if data is None:
            raise RuntimeError("Missing CONFIG/jwt document in Firestore")

        key = data.get("SECRET_KEY")
        if not key or len(key) < 32:
            raise RuntimeError("Invalid or missing SECRET_KEY in Firestore CONFIG/jwt")

        _secret_key = key
        logger.info("Loaded SECRET_KEY from Firestore")
    return _secret_key


security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


# ---------------------------
# Token Creation
# ---------------------------
async def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire, "type": "access", "jti": str(uuid.uuid4())})
    return jwt.encode(to_encode, await get_secret_key(), algorithm=config.ALGORITHM)


async def decode_token(token: str, expected_type: str) -> dict:
    """Decode and verify a JWT; raises JWTError on a bad signature, expiry or type."""
    payload = jwt.decode(token, await get_secret_key(), algorithms=[config.ALGORITHM])
    if payload.get("type") != expected_type:
        raise JWTError(f"Expected a {expected_type} token")
    return payload


# ---------------------------
# Dependency: Current User (JWT only)
# ---------------------------
async def _user_from_token(request: Request, token: str) -> dict:
    try:
        payload = await decode_token(token, "access")
    except JWTError as e:
        logger.warning("JWT error: %s", str(e))
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Invalid JWT payload: %s", payload)
        raise HTTPException(status_code=401, detail="Invalid token payload")

    data = await store.get_document(store.user_path(user_id))
    if data is None:
        logger.warning("User not found in Firestore: %s", user_id)
        raise HTTPException(status_code=401, detail="User not found")

    user = {
        "user_id": user_id,
        "email": data.get("UserEmail"),
        "display_name": data.get("UserName"),
    }
    request.scope["user"] = user
    logger.debug("Authenticated user context: %s", user)
    return user


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> dict:
    return await _user_from_token(request, credentials.credentials)


async def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[dict]:
    """Current user when a valid bearer token is sent, otherwise None."""
    if credentials is None:
        return None
    try:
        return await _user_from_token(request, credentials.credentials)
    except HTTPException:
        return None
