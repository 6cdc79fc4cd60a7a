"""
Auth Service - Supabase Auth pass-through

Registration, login and logout are delegated to Supabase Auth. This service
adds the storefront's form rules and keeps the profiles table in step.
"""
import logging
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, EmailStr, Field
from supabase import AuthError, Client

from storefront.core.database import create_supabase_client, get_supabase
from storefront.domain.profile import ProfileUpdate
from storefront.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str
    confirm_password: str


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegistrationError(ValueError):
    """Form rules not met (maps to 400)"""


class EmailAlreadyRegistered(RegistrationError):
    """Supabase already has an account for this email (maps to 409)"""


class InvalidCredentials(Exception):
    """Login rejected by Supabase (maps to 401)"""


def _user_to_dict(user: Any) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    metadata = getattr(user, "user_metadata", None) or {}
    return {
        'id': str(user.id),
        'email': user.email,
        'full_name': metadata.get("full_name"),
    }


class AuthService:
    """
    Service for account operations

    Args:
        client_factory: Builds a fresh Supabase client per call (sessions are
            stored on the client)
        admin_client: Service-role client used for logout
        profile_repository: Where the profile row is written after sign-up
    """

    def __init__(
        self,
        client_factory: Optional[Callable[[], Client]] = None,
        admin_client: Optional[Client] = None,
        profile_repository: Optional[ProfileRepository] = None
    ):
        self.client_factory = client_factory or create_supabase_client
        self._admin_client = admin_client
        self.profile_repository = profile_repository or ProfileRepository()

    @property
    def admin_client(self) -> Client:
        if self._admin_client is None:
            self._admin_client = get_supabase()
        return self._admin_client

    @staticmethod
    def validate_registration(request: RegisterRequest) -> None:
        if request.password != request.confirm_password:
            raise RegistrationError("Passwords do not match")
        if len(request.password) < MIN_PASSWORD_LENGTH:
            raise RegistrationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    def register(self, request: RegisterRequest) -> Dict[str, Any]:
        """
        Create the account in Supabase Auth and its profile row

        Raises:
            RegistrationError: password rules
            EmailAlreadyRegistered: duplicate email
        """
        self.validate_registration(request)

        client = self.client_factory()
        try:
            response = client.auth.sign_up({
                "email": request.email,
                "password": request.password,
                "options": {"data": {"full_name": request.full_name}},
            })
        except AuthError as e:
            if "already registered" in str(e).lower():
                raise EmailAlreadyRegistered(
                    "Email is already registered. Sign in or use another email."
                )
            logger.warning(f"Sign-up rejected for {request.email}: {e}")
            raise RegistrationError(str(e))

        user = response.user
        if user is not None:
            self.profile_repository.upsert(
                str(user.id), ProfileUpdate(full_name=request.full_name)
            )
            logger.info(f"Registered user {user.id}")

        return {
            'user': _user_to_dict(user),
            'session': self._session_to_dict(response.session),
        }

    def login(self, request: LoginRequest) -> Dict[str, Any]:
        client = self.client_factory()
        try:
            response = client.auth.sign_in_with_password({
                "email": request.email,
                "password": request.password,
            })
        except AuthError as e:
            logger.info(f"Login failed for {request.email}: {e}")
            raise InvalidCredentials("Invalid email or password")

        return {
            'user': _user_to_dict(response.user),
            'session': self._session_to_dict(response.session),
        }

    def logout(self, access_token: str) -> None:
        """Revoke the session behind the access token"""
        self.admin_client.auth.admin.sign_out(access_token)

    @staticmethod
    def _session_to_dict(session: Any) -> Optional[Dict[str, Any]]:
        # No session until the email is confirmed, when confirmation is on
        if session is None:
            return None
        return {
            'access_token': session.access_token,
            'refresh_token': session.refresh_token,
            'expires_in': session.expires_in,
            'expires_at': session.expires_at,
            'token_type': session.token_type,
        }
