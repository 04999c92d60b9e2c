# file: reunitems/core/tokens.py
import uuid
from datetime import datetime, timedelta, timezone

from jose import jwt

from reunitems.core import config, store
from reunitems.core.security import create_access_token, get_secret_key


def _token_path(jti: str) -> str:
    return store.build_path(store.REFRESH_TOKENS, jti)


async def create_refresh_token(user_id: str, ip: str = None, user_agent: str = None) -> str:
    """
    Create a refresh token with unique ID (jti).
    The jti is stored in Firestore so it can be rotated and revoked.
    """
    jti = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    expire = now + timedelta(days=config.REFRESH_TOKEN_EXPIRE_DAYS)

    payload = {
        "sub": user_id,
        "jti": jti,
        "type": "refresh",
        "exp": expire,
    }
    encoded = jwt.encode(payload, await get_secret_key(), algorithm=config.ALGORITHM)

    await store.set_document(_token_path(jti), {
        "uid": user_id,
        "ip": ip,
        "user_agent": user_agent,
        "revoked": False,
        "expires_at": expire.isoformat(),
        "created_at": now.isoformat(),
    })

    return encoded


async def issue_token_pair(user_id: str, email: str, ip: str = None, user_agent: str = None) -> dict:
    return {
        "access_token": await create_access_token({"sub": user_id, "email": email}),
        "refresh_token": await create_refresh_token(user_id, ip, user_agent),
        "token_type": "bearer",
    }


async def revoke_refresh_token(jti: str) -> None:
    """Mark a refresh token as revoked in Firestore."""
    await store.set_document(_token_path(jti), {"revoked": True}, merge=True)


async def is_refresh_token_valid(jti: str) -> bool:
    """Check if a refresh token is still valid (not revoked, not expired)."""
    if not jti:
        return False
    data = await store.get_document(_token_path(jti))
    if data is None:
        return False
    if data.get("revoked"):
        return False
    if datetime.fromisoformat(data["expires_at"]) < datetime.now(timezone.utc):
        return False
    return True


async def rotate_refresh_token(old_jti: str, user_id: str, ip: str = None, user_agent: str = None) -> str:
    """Invalidate the old refresh token and issue a new one."""
    await revoke_refresh_token(old_jti)
    return await create_refresh_token(user_id, ip, user_agent)
