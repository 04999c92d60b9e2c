# USERS/routes_auth.py
from fastapi import APIRouter, Depends, Request

from reunitems.core.rate_limit import auth_limit
from reunitems.core.security import get_optional_user
from reunitems.USERS import identity
from reunitems.USERS.models import FederatedSignIn, RefreshRequest, SignIn, SignUp

router = APIRouter(prefix="/auth", tags=["AUTH"])


def _client(request: Request):
    ip = request.client.host if request.client else None
    return ip, request.headers.get("user-agent")


# -------------------------
# SIGN UP / SIGN IN
# -------------------------
@router.post("/signup", status_code=201)
@auth_limit
async def signup(request: Request, body: SignUp):
    ip, ua = _client(request)
    return await identity.sign_up(body.email, body.password, body.display_name, ip, ua)


@router.post("/signin")
@auth_limit
async def signin(request: Request, body: SignIn):
    ip, ua = _client(request)
    return await identity.sign_in(body.email, body.password, ip, ua)


@router.post("/federated")
@auth_limit
async def federated_signin(request: Request, body: FederatedSignIn):
    ip, ua = _client(request)
    return await identity.sign_in_with_federated_provider(body.id_token, ip, ua)


# -------------------------
# SESSION
# -------------------------
@router.post("/refresh")
@auth_limit
async def refresh(request: Request, body: RefreshRequest):
    ip, ua = _client(request)
    return await identity.refresh_session(body.refresh_token, ip, ua)


@router.post("/signout")
async def signout(request: Request, body: RefreshRequest):
    ip, ua = _client(request)
    await identity.sign_out(body.refresh_token, ip, ua)
    return {"message": "Signed out"}


@router.get("/me")
async def me(current_user=Depends(get_optional_user)):
    """The signed-in user, or null."""
    return await identity.current_user(current_user["user_id"] if current_user else None)
