from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.models.user import User
from app.auth.dependencies import get_current_user
from app.auth.security import hash_password, verify_password
from app.schemas.auth import UserResponse, UpdateProfileRequest, HeartbeatResponse

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_profile(
    update_data: UpdateProfileRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Update display name and/or password"""
    if update_data.display_name:
        current_user.display_name = update_data.display_name

    if update_data.new_password:
        if not update_data.current_password:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Current password required to set new password"
            )

        if not verify_password(update_data.current_password, current_user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Current password is incorrect"
            )

        current_user.password_hash = hash_password(update_data.new_password)

    db.commit()
    db.refresh(current_user)
    return current_user


@router.post("/me/heartbeat", response_model=HeartbeatResponse)
async def heartbeat(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Record last-seen activity; clients call this on a fixed interval"""
    now = datetime.now(timezone.utc)
    current_user.last_seen_at = now
    db.commit()
    return HeartbeatResponse(last_seen_at=now)
