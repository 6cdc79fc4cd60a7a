"""
Authentication API endpoints
- Registration, login and logout through Supabase Auth
- Current user and role-based capabilities
"""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials

from storefront.core.auth import TokenUser, get_current_user, security
from storefront.core.rate_limit import rate_limit
from storefront.services.auth_service import (
    AuthService,
    EmailAlreadyRegistered,
    InvalidCredentials,
    LoginRequest,
    RegisterRequest,
    RegistrationError,
)

router = APIRouter(prefix="/api/v1/auth", tags=["Authentication"])

# Login and sign-up attempts per IP per minute
AUTH_RATE_LIMIT = 10


def get_auth_service() -> AuthService:
    return AuthService()


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(rate_limit(AUTH_RATE_LIMIT))]
)
async def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Create a customer account"""
    try:
        result = service.register(request)

        return {
            "status": "success",
            "message": "Account created! Welcome to DAZMerch!",
            "data": result
        }

    except EmailAlreadyRegistered as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except RegistrationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to register: {str(e)}"
        )


@router.post("/login", dependencies=[Depends(rate_limit(AUTH_RATE_LIMIT))])
async def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Exchange email and password for a Supabase session"""
    try:
        return {
            "status": "success",
            "data": service.login(request)
        }

    except InvalidCredentials as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"}
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to log in: {str(e)}"
        )


@router.post("/logout")
async def logout(
    user: TokenUser = Depends(get_current_user),
    credentials: HTTPAuthorizationCredentials = Depends(security),
    service: AuthService = Depends(get_auth_service)
):
    try:
        service.logout(credentials.credentials)

        return {
            "status": "success",
            "message": "You have been successfully logged out."
        }

    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to log out: {str(e)}"
        )


@router.get("/me")
async def get_me(user: TokenUser = Depends(get_current_user)):
    """
    Who is calling and what the UI should let them do

    Admins manage the catalog and never see cart or checkout.
    """
    return {
        "status": "success",
        "data": {
            "id": user.id,
            "email": user.email,
            "name": user.name,
            "role": user.role,
            "is_admin": user.is_admin,
            "capabilities": {
                "can_purchase": user.can_purchase,
                "can_manage_catalog": user.is_admin,
            }
        }
    }
