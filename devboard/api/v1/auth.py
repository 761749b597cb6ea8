# devboard/api/v1/auth.py
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from devboard.api.v1.schemas import AuthOut, LoginIn, RegisterIn, user_out
from devboard.core.errors import Forbidden, Unauthorized
from devboard.core.security import TokenClaims, decode_token
from devboard.repositories import users

router = APIRouter()

# Dependency to get current user (claims from the bearer token)
security = HTTPBearer(auto_error=False)

async def get_current_user(credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)) -> TokenClaims:
    if credentials is None or not credentials.credentials:
        raise Unauthorized("Access token required")
    return decode_token(credentials.credentials)

async def require_admin(current_user: TokenClaims = Depends(get_current_user)) -> TokenClaims:
    if not current_user.is_admin:
        raise Forbidden("Admin access required")
    return current_user


@router.post("/register", status_code=201, response_model=AuthOut)
async def register(payload: RegisterIn):
    user, token = await users.register(payload.name, payload.email, payload.password, payload.role)
    return AuthOut(token=token, user=user_out(user))

@router.post("/login", response_model=AuthOut)
async def login(payload: LoginIn):
    user, token = await users.login(payload.email, payload.password)
    return AuthOut(token=token, user=user_out(user))

@router.get("/verify")
async def verify(current_user: TokenClaims = Depends(get_current_user)):
    """Profile of the token's owner, used by clients to restore a session."""
    user = await users.get_user(current_user.user_id)
    if not user:
        raise Unauthorized("User not found")
    return {"user": user_out(user)}
