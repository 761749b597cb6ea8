# devboard/repositories/users.py
import logging
from typing import Optional, Tuple

from fastapi.concurrency import run_in_threadpool
from pymongo.errors import DuplicateKeyError

from devboard.core.errors import Conflict, Unauthorized
from devboard.core.security import TokenClaims, create_access_token, hash_password, verify_password
from devboard.db.documents import User, parse_object_id

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL = "User with this email already exists"
INVALID_CREDENTIALS = "Invalid email or password"


def normalize_email(email: str) -> str:
    return email.strip().lower()

def claims_for(user: User) -> TokenClaims:
    return TokenClaims(user_id=str(user.id), email=user.email, role=user.role)

def issue_token(user: User) -> str:
    return create_access_token(claims_for(user))

async def get_user(user_id: str) -> Optional[User]:
    oid = parse_object_id(user_id)
    if oid is None:
        return None
    return await User.get(oid)

async def get_user_by_email(email: str) -> Optional[User]:
    return await User.find_one(User.email == normalize_email(email))

async def register(name: str, email: str, password: str, role: str = "user") -> Tuple[User, str]:
    """Create an account and return it along with a fresh access token."""
    email = normalize_email(email)
    if await get_user_by_email(email):
        raise Conflict(DUPLICATE_EMAIL)

    # hashing runs off the event loop
    password_hash = await run_in_threadpool(hash_password, password)
    user = User(name=name.strip(), email=email, password_hash=password_hash, role=role)
    try:
        await user.insert()
    except DuplicateKeyError as exc:
        # lost a race with a concurrent registration
        raise Conflict(DUPLICATE_EMAIL) from exc

    logger.info("Registered %s account %s", user.role, user.id)
    return user, issue_token(user)

async def login(email: str, password: str) -> Tuple[User, str]:
    user = await get_user_by_email(email)
    if not user or not await run_in_threadpool(verify_password, password, user.password_hash):
        raise Unauthorized(INVALID_CREDENTIALS)
    return user, issue_token(user)
