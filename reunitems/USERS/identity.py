# file: reunitems/USERS/identity.py
"""
Identity provider: email/password accounts, Google sign-in through Firebase ID
tokens, and the JWT pair the API authenticates with.

Password accounts get a random uid; federated accounts keep their Firebase
uid so they line up with the web client's Users documents.
"""

import asyncio
import logging
import uuid
from typing import Optional

from firebase_admin import auth as firebase_auth
from jose import JWTError

from reunitems.core import tokens
from reunitems.core.audit import log_auth_failure, log_event, log_token_reuse
from reunitems.core.errors import AuthenticationError, ConflictError, InputError
from reunitems.core.firebase import get_app
from reunitems.core.security import create_access_token, decode_token, get_password_hash, verify_password
from reunitems.USERS import users
from reunitems.USERS.models import User

logger = logging.getLogger("users.identity")

PASSWORD_PROVIDER = "password"


def _normalize_email(email: str) -> str:
    email = (email or "").strip().lower()
    if not email:
        raise InputError("Email is required")
    return email


async def _session(user_id: str, ip: Optional[str], user_agent: Optional[str]) -> dict:
    user = await users.get_user(user_id)
    pair = await tokens.issue_token_pair(user_id, user.email if user else None, ip, user_agent)
    return {**pair, "user": user}


# ---------------------------
# Password accounts
# ---------------------------
async def sign_up(
    email: str,
    password: str,
    display_name: Optional[str] = None,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> dict:
    email = _normalize_email(email)
    if not password:
        raise InputError("Password is required")
    if await users.get_user_record_by_email(email) is not None:
        raise ConflictError("An account with this email already exists")

    user_id = uuid.uuid4().hex
    await users.create_or_update_user(user_id, {
        "UserEmail": email,
        "UserName": display_name or email.split("@")[0],
        "AuthProvider": PASSWORD_PROVIDER,
        "PasswordHash": get_password_hash(password),
    })
    logger.info("sign_up: created Users/%s", user_id)
    return await _session(user_id, ip, user_agent)


async def sign_in(email: str, password: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> dict:
    email = _normalize_email(email)
    record = await users.get_user_record_by_email(email)
    if record is None or not verify_password(password, record.get("PasswordHash")):
        await log_auth_failure(actor=email, ip=ip, user_agent=user_agent, reason="invalid_credentials")
        raise AuthenticationError("Invalid email or password")

    await log_event(actor=record["id"], action="sign_in", category="auth", ip=ip, user_agent=user_agent)
    return await _session(record["id"], ip, user_agent)


# ---------------------------
# Federated (Google through Firebase Auth)
# ---------------------------
async def verify_federated_token(id_token: str) -> dict:
    """Verify a Firebase ID token and return its claims."""
    app = get_app()
    try:
        return await asyncio.to_thread(firebase_auth.verify_id_token, id_token, app)
    except (firebase_auth.InvalidIdTokenError, firebase_auth.ExpiredIdTokenError, ValueError) as e:
        logger.warning("Firebase ID token rejected: %s", e)
        raise AuthenticationError("Invalid or expired identity token") from e


async def sign_in_with_federated_provider(
    id_token: str,
    ip: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> dict:
    if not id_token:
        raise InputError("id_token is required")
    claims = await verify_federated_token(id_token)

    user_id = claims.get("uid") or claims.get("sub")
    email = (claims.get("email") or "").lower() or None
    if not user_id:
        raise AuthenticationError("Identity token carries no user id")

    provider = (claims.get("firebase") or {}).get("sign_in_provider", "google.com")
    fields = {"AuthProvider": provider}
    if email:
        fields["UserEmail"] = email
    existing = await users.get_user(user_id)
    if existing is None or not existing.display_name:
        fields["UserName"] = claims.get("name") or (email.split("@")[0] if email else user_id)

    await users.create_or_update_user(user_id, fields)
    await log_event(actor=user_id, action="federated_sign_in", category="auth", ip=ip, user_agent=user_agent,
                    metadata={"provider": provider})
    return await _session(user_id, ip, user_agent)


# ---------------------------
# Session tokens
# ---------------------------
async def _decode_refresh(refresh_token: str, ip: Optional[str], user_agent: Optional[str]) -> dict:
    try:
        return await decode_token(refresh_token, "refresh")
    except JWTError:
        await log_auth_failure(actor="unknown", ip=ip, user_agent=user_agent, reason="invalid_refresh_token")
        raise AuthenticationError("Invalid refresh token")


async def refresh_session(refresh_token: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> dict:
    """Rotate the refresh token; presenting a revoked one is logged as reuse."""
    payload = await _decode_refresh(refresh_token, ip, user_agent)
    jti = payload.get("jti")
    user_id = payload.get("sub")

    if not await tokens.is_refresh_token_valid(jti):
        await log_token_reuse(actor=user_id, jti=jti, ip=ip, user_agent=user_agent)
        raise AuthenticationError("Invalid or revoked refresh token")

    user = await users.get_user(user_id)
    if user is None:
        raise AuthenticationError("User not found")

    return {
        "access_token": await create_access_token({"sub": user_id, "email": user.email}),
        "refresh_token": await tokens.rotate_refresh_token(jti, user_id, ip, user_agent),
        "token_type": "bearer",
    }


async def sign_out(refresh_token: str, ip: Optional[str] = None, user_agent: Optional[str] = None) -> None:
    payload = await _decode_refresh(refresh_token, ip, user_agent)
    await tokens.revoke_refresh_token(payload["jti"])
    logger.info("sign_out: revoked refresh token of %s", payload.get("sub"))


async def current_user(user_id: Optional[str]) -> Optional[User]:
    """The signed-in user, or None when nobody is signed in."""
    if not user_id:
        return None
    return await users.get_user(user_id)
