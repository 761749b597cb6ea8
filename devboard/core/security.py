# devboard/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from pydantic import BaseModel

from devboard.core.config import settings
from devboard.core.errors import Unauthorized

# bcrypt with a work factor of 12
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)

ALGORITHM = "HS256"


class TokenClaims(BaseModel):
    """Identity carried by a signed access token."""
    user_id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        # malformed stored hash
        return False

def create_access_token(claims: TokenClaims, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "userId": claims.user_id,
        "email": claims.email,
        "role": claims.role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)

def decode_token(token: str) -> TokenClaims:
    """
    Verify signature and expiry. Expiry is reported separately so clients
    can prompt for a fresh login.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError as exc:
        raise Unauthorized("Token has expired") from exc
    except JWTError as exc:
        raise Unauthorized("Invalid token") from exc

    user_id, email, role = payload.get("userId"), payload.get("email"), payload.get("role")
    if not user_id or not email or role not in ("user", "admin"):
        raise Unauthorized("Invalid token")
    return TokenClaims(user_id=user_id, email=email, role=role)
