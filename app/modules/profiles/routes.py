from fastapi import APIRouter, Depends
from app.database.supabase_client import SupabaseClient
from app.modules.profiles.schemas import ProfileUpdate, PasswordChange, ProfileResponse
from app.modules.profiles.service import ProfileService
from app.modules.auth.schemas import MessageResponse
from app.core.dependencies import get_current_user, get_user_db
from app.core.errors import ApiError, ErrorCode
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/profile", tags=["profile"])


def get_admin_client() -> Client:
    return SupabaseClient.get_service_client()


def get_profile_service(
    supabase: Client = Depends(get_user_db),
    admin: Client = Depends(get_admin_client)
) -> ProfileService:
    return ProfileService(supabase, admin)


@router.get("", response_model=ProfileResponse)
async def get_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the signed-in user's profile"""
    return service.get_profile(user_data)


@router.put("", response_model=ProfileResponse)
async def update_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update name, avatar or email"""
    return service.update_profile(user_data, profile_data)


@router.post("/password", response_model=MessageResponse)
async def change_password(
    password_data: PasswordChange,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Change the signed-in user's password"""
    service.change_password(user_data["id"], password_data)
    return {"message": "Your password has been changed successfully."}


@router.delete("")
async def delete_account(user_data: Dict = Depends(get_current_user)):
    """Self-service account deletion is not offered"""
    raise ApiError("Please contact support to delete your account.", ErrorCode.INVALID_INPUT)
