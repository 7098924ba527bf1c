from fastapi import APIRouter, Depends, HTTPException, status, Response, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Dict
from uuid import UUID

from core.auth import current_active_user
from db.cocktail_recipe import CocktailRecipe as CocktailRecipeModel
from db.database import get_async_session
from db.favorite import Favorite as FavoriteModel
from db.users import User
from routers.cocktails import cocktail_query, cocktail_payload, fill_missing_image
from schemas.favorites import FavoriteList, FavoriteToggle

router = APIRouter()


async def _get_favorite(db: AsyncSession, user_id: UUID, cocktail_id: UUID) -> FavoriteModel | None:
    result = await db.execute(
        select(FavoriteModel).where(
            FavoriteModel.user_id == user_id,
            FavoriteModel.cocktail_id == cocktail_id,
        )
    )
    return result.scalar_one_or_none()


@router.get("/", response_model=FavoriteList)
async def list_favorites(
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session)
):
    """Cocktail ids the current user has favorited, oldest first"""
    result = await db.execute(
        select(FavoriteModel.cocktail_id)
        .where(FavoriteModel.user_id == user.id)
        .order_by(FavoriteModel.created_at.asc())
    )
    return FavoriteList(cocktail_ids=list(result.scalars().all()))


@router.get("/cocktails", response_model=List[Dict])
async def list_favorite_cocktails(
    resolve_images: bool = Query(True, description="Look up a picture for cocktails without one"),
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session)
):
    """The current user's favorite cocktails with ingredients and estimated cost, oldest favorite first"""
    result = await db.execute(
        cocktail_query()
        .join(FavoriteModel, FavoriteModel.cocktail_id == CocktailRecipeModel.id)
        .where(FavoriteModel.user_id == user.id)
        .order_by(FavoriteModel.created_at.asc())
    )
    favorites = []
    for cocktail in result.scalars().all():
        payload = cocktail_payload(cocktail)
        if resolve_images:
            payload = await fill_missing_image(payload)
        favorites.append(payload)
    return favorites


@router.post("/{cocktail_id}/toggle", response_model=FavoriteToggle)
async def toggle_favorite(
    cocktail_id: UUID,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session)
):
    """Add the cocktail to the user's favorites, or remove it if it is already there"""
    favorite = await _get_favorite(db, user.id, cocktail_id)
    if favorite:
        await db.delete(favorite)
        await db.commit()
        return FavoriteToggle(cocktail_id=cocktail_id, is_favorite=False)

    if not await db.get(CocktailRecipeModel, cocktail_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cocktail with id {cocktail_id} not found"
        )
    db.add(FavoriteModel(user_id=user.id, cocktail_id=cocktail_id))
    await db.commit()
    return FavoriteToggle(cocktail_id=cocktail_id, is_favorite=True)


@router.delete("/{cocktail_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(
    cocktail_id: UUID,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session)
):
    """Remove a cocktail from the user's favorites; removing a non-favorite is a no-op"""
    favorite = await _get_favorite(db, user.id, cocktail_id)
    if favorite:
        await db.delete(favorite)
        await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
