from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from database.database import get_session
from handlers.dependencies import get_current_user
from models.user import User
from schemas.user import ProfileUpdate, UserOut
from services.user_service import update_profile

router = APIRouter(prefix="/profile", tags=["profile"])

@router.get("/me", response_model=UserOut)
async def get_profile(user: User = Depends(get_current_user)):
    return UserOut.model_validate(user)

@router.put("/update", response_model=UserOut)
async def update_my_profile(
    body: ProfileUpdate,
    user: User = Depends(get_current_user),
    session: AsyncSession = Depends(get_session)
):
    updated = await update_profile(
        session,
        user.id,
        phone=body.phone,
        address=body.address.model_dump(exclude_none=True) if body.address else None,
        location=body.location.to_location() if body.location else None
    )
    return UserOut.model_validate(updated)
