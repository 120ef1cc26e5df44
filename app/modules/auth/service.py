import hashlib
import logging
import time
from datetime import datetime
from supabase import Client
from app.modules.auth.schemas import (
    LoginRequest, RegisterRequest, PasswordResetRequest,
    AuthUser, SessionInfo, AuthResponse
)
from app.config.settings import settings
from app.core.errors import ApiError, ErrorCode
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500


def _session_info(session) -> Optional[SessionInfo]:
    if not session:
        return None
    return SessionInfo(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_in=getattr(session, "expires_in", None),
        token_type=getattr(session, "token_type", None) or "bearer",
    )


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> AuthResponse:
        """Register a new user, create their profile row, and sign them in"""
        try:
            user_metadata = {}
            if register_data.full_name:
                user_metadata["full_name"] = register_data.full_name

            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {
                    "data": user_metadata
                }
            })

            if not auth_response.user:
                raise HTTPException(status_code=400, detail="Failed to register user")
            user = auth_response.user
        except HTTPException:
            raise
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="User already exists")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

        # A missing profile row must not fail the signup
        try:
            self.supabase.table("profiles").upsert({
                "id": user.id,
                "email": user.email or register_data.email,
                "full_name": register_data.full_name,
                "updated_at": datetime.utcnow().isoformat(),
            }).execute()
        except Exception as e:
            logger.error(f"Error creating profile for {user.id}: {e}")

        session = auth_response.session
        message = None
        if session is None:
            try:
                sign_in = self.supabase.auth.sign_in_with_password({
                    "email": register_data.email,
                    "password": register_data.password
                })
                session = sign_in.session
            except Exception as e:
                # Typically "Email not confirmed" when the project requires confirmation
                logger.info(f"Post-registration sign in skipped for {user.id}: {e}")
                message = "Registration successful. Please confirm your email before signing in."

        return AuthResponse(
            user=AuthUser(
                id=user.id,
                email=user.email or register_data.email,
                full_name=(user.user_metadata or {}).get("full_name"),
                avatar_url=(user.user_metadata or {}).get("avatar_url"),
            ),
            session=_session_info(session),
            message=message or "User registered successfully",
        )

    def login(self, login_data: LoginRequest) -> AuthResponse:
        """Authenticate user and merge in their profile"""
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })

            if not auth_response.user or not auth_response.session:
                raise ApiError("Invalid email or password", ErrorCode.AUTH_ERROR)
        except ApiError:
            raise
        except Exception as e:
            error_message = str(e)
            if "invalid" in error_message.lower() or "credentials" in error_message.lower():
                raise ApiError("Invalid email or password", ErrorCode.AUTH_ERROR)
            raise HTTPException(status_code=500, detail=f"Login failed: {error_message}")

        user = auth_response.user
        profile = {}
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user.id)\
                .maybe_single()\
                .execute()
            if result and result.data:
                profile = result.data
        except Exception as e:
            logger.error(f"Error fetching profile for {user.id}: {e}")

        metadata = user.user_metadata or {}
        return AuthResponse(
            user=AuthUser(
                id=user.id,
                email=user.email or login_data.email,
                full_name=profile.get("full_name") or metadata.get("full_name"),
                avatar_url=profile.get("avatar_url") or metadata.get("avatar_url"),
            ),
            session=_session_info(auth_response.session),
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise ApiError("Invalid or expired token", ErrorCode.AUTH_ERROR)
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
                "created_at": user.created_at,
                "updated_at": user.updated_at
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except ApiError:
            raise
        except Exception as e:
            error_msg = str(e)
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise ApiError("Invalid or expired token", ErrorCode.AUTH_ERROR)
            raise ApiError("Authentication failed", ErrorCode.AUTH_ERROR)

    def logout(self, token: str) -> bool:
        """Logout user using Supabase Auth"""
        _AUTH_USER_CACHE.pop(hashlib.sha256(token.encode()).hexdigest(), None)
        try:
            # Supabase Auth tokens are stateless JWTs, so logout is mainly client-side
            self.supabase.auth.sign_out()
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False

    def reset_password(self, reset_data: PasswordResetRequest) -> None:
        """Send a password reset email"""
        redirect_to = reset_data.redirect_to or f"{settings.site_url.rstrip('/')}/auth/reset-password"
        try:
            self.supabase.auth.reset_password_for_email(
                reset_data.email,
                {"redirect_to": redirect_to}
            )
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Password reset failed: {str(e)}")
