from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File
from sqlalchemy.orm import Session
from mentor.config import BACKEND_URL, UPLOADS_DIR
from mentor.database import get_db
from mentor.models.user import User, Profile
from mentor.schemas.user import ProfileResponse, ProfileUpdateRequest
from mentor.dependencies import get_current_user
from mentor.services.auth import is_valid_mobile
import os
import uuid

router = APIRouter(prefix="/api/users", tags=["users"])

MAX_PICTURE_BYTES = 5 * 1024 * 1024
DIFFICULTIES = ("easy", "intermediate", "hard")


def _get_or_create_profile(db: Session, user: User) -> Profile:
    if user.profile:
        return user.profile
    profile = Profile(user_id=user.id, email=user.email)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Get current user's profile."""
    return _get_or_create_profile(db, current_user)


@router.put("/profile", response_model=ProfileResponse)
async def update_profile(
    update_data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update current user's profile."""
    profile = _get_or_create_profile(db, current_user)

    if update_data.mobile is not None:
        mobile = update_data.mobile.strip()
        if mobile:
            if not is_valid_mobile(mobile):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Please enter a valid 10-digit mobile number",
                )
            taken = (
                db.query(Profile)
                .filter(Profile.mobile == mobile, Profile.user_id != current_user.id)
                .first()
            )
            if taken:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Mobile number is already registered",
                )
        profile.mobile = mobile or None

    if update_data.preferred_difficulty is not None:
        if update_data.preferred_difficulty not in DIFFICULTIES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Difficulty must be one of: easy, intermediate, hard",
            )
        profile.preferred_difficulty = update_data.preferred_difficulty

    for field in ("name", "profession", "experience_level", "technology"):
        value = getattr(update_data, field)
        if value is not None:
            setattr(profile, field, value.strip() or None)

    db.commit()
    db.refresh(profile)
    return profile


@router.post("/profile-picture", response_model=ProfileResponse)
async def upload_profile_picture(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Upload and update the user's profile picture."""
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please upload an image file",
        )

    contents = await file.read()
    if len(contents) > MAX_PICTURE_BYTES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Image size must be less than 5MB",
        )

    extension = os.path.splitext(file.filename or "")[1].lower() or ".png"
    filename = f"user_{current_user.id}_{uuid.uuid4().hex}{extension}"
    avatars_dir = os.path.join(UPLOADS_DIR, "avatars")
    os.makedirs(avatars_dir, exist_ok=True)

    with open(os.path.join(avatars_dir, filename), "wb") as output_file:
        output_file.write(contents)

    profile = _get_or_create_profile(db, current_user)
    profile.profile_picture_url = f"{BACKEND_URL}/uploads/avatars/{filename}"
    db.commit()
    db.refresh(profile)
    return profile
