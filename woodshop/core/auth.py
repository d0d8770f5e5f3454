# woodshop/core/auth.py
import uuid
from typing import Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlmodel import SQLModel

from woodshop.core.config import Settings
from woodshop.dependencies import get_app_settings, get_object_store
from woodshop.store.base import ObjectStore

# HTTP Bearer scheme:
# - auto_error=False => missing Authorization header will NOT raise immediately
#   so we can support guest checkout.
bearer_scheme = HTTPBearer(auto_error=False)


class CurrentUser(SQLModel):
    """
    Identity taken from a verified Supabase access token.

    id matches Supabase auth.users.id and is stored as orders.user_id.
    """

    id: uuid.UUID
    email: str | None = None


def decode_access_token(token: str, settings: Settings) -> dict[str, Any]:
    """
    Decode and verify a Supabase access token (JWT).

    Verification:
      - signature (HS256 using SUPABASE_JWT_SECRET)
      - expiration time (exp)
      - audience is NOT verified (Supabase 'aud' may vary)

    Raises:
        HTTPException(401): if token is invalid/expired or no secret is set.
    """
    if not settings.SUPABASE_JWT_SECRET:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification is not configured",
        )
    try:
        return jwt.decode(
            token,
            settings.SUPABASE_JWT_SECRET,
            algorithms=[settings.SUPABASE_JWT_ALG],
            options={"verify_aud": False},
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> CurrentUser | None:
    """
    Resolve the current user from a Supabase JWT.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Decode JWT => extract 'sub' (auth user id) and 'email'.
      3. Convert 'sub' to UUID.

    Raises:
        HTTPException(401): if token is malformed or missing 'sub'.
    """
    if credentials is None:
        return None  # guest mode

    payload = decode_access_token(credentials.credentials, settings)
    sub = payload.get("sub")
    if not sub:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token missing sub",
        )

    try:
        sub_uuid = uuid.UUID(sub)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid sub in token",
        )

    return CurrentUser(id=sub_uuid, email=payload.get("email"))


def require_auth(user: CurrentUser | None = Depends(get_current_user)) -> CurrentUser:
    """
    Enforce authentication.

    Raises:
        HTTPException(401): if user is None.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def has_role(store: ObjectStore, user_id: uuid.UUID, role: str) -> bool:
    rows = store.select("user_roles", {"user_id": str(user_id), "role": role}, limit=1)
    return bool(rows)


def require_admin(
    user: CurrentUser = Depends(require_auth),
    store: ObjectStore = Depends(get_object_store),
) -> CurrentUser:
    """
    Enforce admin role: the user needs a user_roles row with role 'admin'.

    Raises:
        HTTPException(403): if the user is not an admin.
    """
    if not has_role(store, user.id, "admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return user
