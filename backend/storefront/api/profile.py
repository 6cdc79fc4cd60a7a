"""
Profile API Endpoints
"""
from fastapi import APIRouter, Depends, HTTPException

from storefront.core.auth import TokenUser, get_current_user
from storefront.domain.profile import ProfileUpdate
from storefront.repositories.profile_repository import ProfileRepository

router = APIRouter()


@router.get("/")
async def get_my_profile(user: TokenUser = Depends(get_current_user)):
    try:
        profile = ProfileRepository().find_by_user_id(user.id)

        if not profile:
            raise HTTPException(status_code=404, detail="Profile not found")

        data = profile.to_dict()
        data['email'] = user.email

        return {
            "status": "success",
            "data": data
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching profile: {str(e)}")


@router.put("/")
async def update_my_profile(
    update: ProfileUpdate,
    user: TokenUser = Depends(get_current_user)
):
    """Save name, phone and address. Omitted fields are left unchanged."""
    try:
        profile = ProfileRepository().upsert(user.id, update)

        data = profile.to_dict()
        data['email'] = user.email

        return {
            "status": "success",
            "message": "Profile updated",
            "data": data
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating profile: {str(e)}")
