from supabase import Client
from app.modules.profiles.schemas import ProfileUpdate, PasswordChange, ProfileResponse
from app.config import settings
from app.core.errors import ApiError, ErrorCode
from typing import Dict, Any
from fastapi import HTTPException
from datetime import datetime
import logging

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, supabase: Client, admin: Client):
        self.supabase = supabase
        self.admin = admin

    def _require_admin(self):
        if not settings.supabase_service_role_key:
            raise ApiError(
                "Service role key not configured. Cannot update auth users.",
                ErrorCode.MISSING_CONFIG
            )

    def get_profile(self, user_data: Dict[str, Any]) -> ProfileResponse:
        """Profile row for the signed-in user, synthesized from auth metadata when the row is missing"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_data["id"])\
                .maybe_single()\
                .execute()
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if result and result.data:
            return ProfileResponse(**result.data)

        metadata = user_data.get("user_metadata") or {}
        return ProfileResponse(
            id=user_data["id"],
            email=user_data.get("email"),
            full_name=metadata.get("full_name"),
            avatar_url=metadata.get("avatar_url"),
            created_at=user_data.get("created_at"),
            updated_at=user_data.get("updated_at"),
        )

    def update_profile(self, user_data: Dict[str, Any], profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the auth user metadata and the profiles row"""
        self._require_admin()
        user_id = user_data["id"]
        metadata = dict(user_data.get("user_metadata") or {})
        if profile_data.full_name is not None:
            metadata["full_name"] = profile_data.full_name
        if profile_data.avatar_url is not None:
            metadata["avatar_url"] = profile_data.avatar_url

        attributes: Dict[str, Any] = {"user_metadata": metadata}
        if profile_data.email is not None:
            attributes["email"] = profile_data.email

        try:
            response = self.admin.auth.admin.update_user_by_id(user_id, attributes)
            if not response.user:
                raise HTTPException(status_code=404, detail="User not found")

            update_data = {"updated_at": datetime.utcnow().isoformat()}
            if profile_data.full_name is not None:
                update_data["full_name"] = profile_data.full_name
            if profile_data.avatar_url is not None:
                update_data["avatar_url"] = profile_data.avatar_url
            if profile_data.email is not None:
                update_data["email"] = profile_data.email

            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if result.data:
            return ProfileResponse(**result.data[0])
        logger.warning(f"No profiles row for {user_id}; returning auth data")
        return ProfileResponse(
            id=user_id,
            email=profile_data.email or user_data.get("email"),
            full_name=metadata.get("full_name"),
            avatar_url=metadata.get("avatar_url"),
        )

    def change_password(self, user_id: str, password_data: PasswordChange) -> None:
        """Set a new password for the signed-in user"""
        self._require_admin()
        try:
            response = self.admin.auth.admin.update_user_by_id(
                user_id,
                {"password": password_data.new_password}
            )
            if not response.user:
                raise HTTPException(status_code=404, detail="User not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Password update failed: {str(e)}")
