from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from photospot.database import get_db
from photospot.models.user import User, UserProfile
from photospot.schemas.auth import LoginRequest, LoginResponse
from photospot.services.auth_service import create_access_token, verify_password
from photospot.utils.exceptions import InvalidCredentialsError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login")
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(User, UserProfile.role)
        .outerjoin(UserProfile, UserProfile.user_id == User.id)
        .where(User.email == request.email.strip().lower())
    )
    row = result.first()

    if row is None:
        raise InvalidCredentialsError("Invalid email or password")

    user, role = row
    if not verify_password(request.password, user.password_hash):
        raise InvalidCredentialsError("Invalid email or password")

    role = role or "enthusiast"
    return LoginResponse(
        access_token=create_access_token(user.id, role),
        user_id=user.id,
        role=role,
    ).model_dump(mode="json")
