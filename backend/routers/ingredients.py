from fastapi import APIRouter, Depends, HTTPException, status, Response, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from schemas.ingredient import IngredientCreate, IngredientUpdate, IngredientType
from db.database import get_async_session
from db.ingredient import Ingredient as IngredientModel
from typing import List, Dict
from uuid import UUID
from core.auth import current_active_superuser
from db.users import User

router = APIRouter()


async def _get_ingredient_or_404(db: AsyncSession, ingredient_id: UUID) -> IngredientModel:
    result = await db.execute(select(IngredientModel).where(IngredientModel.id == ingredient_id))
    ingredient = result.scalar_one_or_none()
    if not ingredient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ingredient with id {ingredient_id} not found"
        )
    return ingredient


async def _ensure_name_available(db: AsyncSession, name: str, ingredient_id: UUID | None = None):
    query = select(IngredientModel).where(func.lower(IngredientModel.name) == name.strip().lower())
    if ingredient_id is not None:
        query = query.where(IngredientModel.id != ingredient_id)
    result = await db.execute(query)
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Ingredient '{name}' already exists"
        )


def _apply(ingredient_model: IngredientModel, ingredient: IngredientCreate):
    ingredient_model.name = ingredient.name.strip()
    ingredient_model.type = ingredient.type.value
    ingredient_model.price = ingredient.price
    ingredient_model.bottle_size = ingredient.bottle_size.value if ingredient.bottle_size else None
    ingredient_model.link = ingredient.link or None
    ingredient_model.image_url = ingredient.image_url or None


@router.get("/", response_model=List[Dict])
async def get_ingredients(
    type: IngredientType | None = Query(None, description="Filter by ingredient type"),
    db: AsyncSession = Depends(get_async_session)
):
    """Get all ingredients, ordered by name"""
    query = select(IngredientModel).order_by(func.lower(IngredientModel.name).asc())
    if type is not None:
        query = query.where(IngredientModel.type == type.value)
    result = await db.execute(query)
    ingredients = result.scalars().all()
    return [ingredient.to_schema for ingredient in ingredients]


@router.get("/{ingredient_id}", response_model=Dict)
async def get_ingredient(ingredient_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Get an ingredient by ID"""
    ingredient = await _get_ingredient_or_404(db, ingredient_id)
    return ingredient.to_schema


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_ingredient(
    ingredient: IngredientCreate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session)
):
    """Create a new ingredient (admin only)"""
    await _ensure_name_available(db, ingredient.name)

    ingredient_model = IngredientModel()
    _apply(ingredient_model, ingredient)
    db.add(ingredient_model)
    await db.commit()
    await db.refresh(ingredient_model)
    return ingredient_model.to_schema


@router.put("/{ingredient_id}", response_model=Dict)
async def update_ingredient(
    ingredient_id: UUID,
    ingredient: IngredientUpdate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session)
):
    """Update an existing ingredient (admin only)"""
    ingredient_model = await _get_ingredient_or_404(db, ingredient_id)
    await _ensure_name_available(db, ingredient.name, ingredient_id)

    _apply(ingredient_model, ingredient)
    await db.commit()
    await db.refresh(ingredient_model)
    return ingredient_model.to_schema


@router.delete("/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_ingredient(
    ingredient_id: UUID,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session)
):
    """Delete an ingredient (admin only); removes it from every cocktail using it"""
    ingredient_model = await _get_ingredient_or_404(db, ingredient_id)
    await db.delete(ingredient_model)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
