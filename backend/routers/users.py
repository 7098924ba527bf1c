from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from core.auth import current_active_superuser
from db.database import get_async_session
from db.users import User
from schemas.users import UserRead

router = APIRouter()

# fastapi-users serves /users/me and /users/{id}; this adds the admin listing


@router.get("/", response_model=List[UserRead])
async def list_users(
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session)
):
    """All users, ordered by email (admin only)"""
    result = await db.execute(select(User).order_by(User.email.asc()))
    return result.scalars().all()
