"""
Core dependencies for route protection
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, get_user_supabase
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Dict, Any

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> Dict[str, Any]:
    """Resolve the bearer token to the signed-in user"""
    return auth_service.get_current_user(token)


def get_user_db(
    token: str = Depends(get_current_token),
    user_data: Dict[str, Any] = Depends(get_current_user)
) -> Client:
    """Table client acting as the signed-in user (row level security applies)"""
    return get_user_supabase(token)
