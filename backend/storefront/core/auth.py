"""
Authentication dependencies for the DAZMerch backend
Validates Supabase Auth access tokens and provides user context
"""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from pydantic import BaseModel

from storefront.core.config import settings
from storefront.domain.profile import ROLE_ADMIN, ROLE_USER
from storefront.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

# Security scheme for bearer tokens
security = HTTPBearer(auto_error=False)

# Supabase signs user sessions for this audience
SUPABASE_AUDIENCE = "authenticated"


class TokenUser(BaseModel):
    """User data extracted from the access token plus the resolved app role"""
    id: str
    email: str
    name: Optional[str] = None
    role: str = ROLE_USER

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def can_purchase(self) -> bool:
        """Admin accounts manage the catalog and never buy"""
        return not self.is_admin


class AuthConfig:
    """Authentication configuration"""

    @staticmethod
    def get_jwt_secret() -> str:
        secret = settings.SUPABASE_JWT_SECRET
        if not secret:
            raise ValueError("SUPABASE_JWT_SECRET is not configured")
        return secret

    @staticmethod
    def get_jwt_algorithm() -> str:
        """Supabase project JWTs are HS256"""
        return "HS256"


def decode_supabase_token(token: str) -> dict:
    """
    Decode and validate a Supabase access token.

    Supabase JWT structure:
    {
        "sub": "user uuid",
        "email": "budi@example.com",
        "aud": "authenticated",
        "role": "authenticated",
        "user_metadata": {"full_name": "Budi"},
        "iat": 1234567890,
        "exp": 1234567890
    }
    """
    try:
        return jwt.decode(
            token,
            AuthConfig.get_jwt_secret(),
            algorithms=[AuthConfig.get_jwt_algorithm()],
            audience=SUPABASE_AUDIENCE,
        )
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"}
        )
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"}
        )


def _user_from_payload(payload: dict) -> TokenUser:
    user_id = payload.get("sub")
    email = payload.get("email")

    if not user_id or not email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload: missing user id or email",
            headers={"WWW-Authenticate": "Bearer"}
        )

    metadata = payload.get("user_metadata") or {}

    return TokenUser(
        id=user_id,
        email=email,
        name=metadata.get("full_name") or metadata.get("name"),
        role=ProfileRepository().get_role(user_id),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenUser:
    """
    Dependency that extracts and validates the current user.

    Usage:
        @router.get("/protected")
        async def protected_route(user: TokenUser = Depends(get_current_user)):
            return {"message": f"Hello {user.email}"}
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"}
        )

    payload = decode_supabase_token(credentials.credentials)
    return _user_from_payload(payload)


async def require_admin(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """Only accounts with the admin role"""
    if not user.is_admin:
        logger.warning(f"Non-admin user {user.id} attempted an admin operation")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


async def require_customer(user: TokenUser = Depends(get_current_user)) -> TokenUser:
    """Authenticated non-admin accounts (cart and checkout)"""
    if not user.can_purchase:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admins cannot make purchases"
        )
    return user
