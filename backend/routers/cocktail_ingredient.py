from fastapi import APIRouter, Depends, HTTPException, status, Response, Query
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, and_
from sqlalchemy.orm import selectinload
from schemas.cocktail_ingredient import (
    CocktailIngredientCreate,
    CocktailIngredientUpdate,
)
from db.database import get_async_session
from db.cocktail_ingredient import CocktailIngredient as CocktailIngredientModel
from db.cocktail_recipe import CocktailRecipe as CocktailRecipeModel
from db.ingredient import Ingredient as IngredientModel
from typing import List, Dict
from uuid import UUID
from core.auth import current_active_superuser
from db.users import User


router = APIRouter()


def _association_query():
    return select(CocktailIngredientModel).options(
        selectinload(CocktailIngredientModel.cocktail),
        selectinload(CocktailIngredientModel.ingredient)
    )


async def _get_association_or_404(db: AsyncSession, cocktail_id: UUID, ingredient_id: UUID) -> CocktailIngredientModel:
    result = await db.execute(
        _association_query().where(
            CocktailIngredientModel.cocktail_id == cocktail_id,
            CocktailIngredientModel.ingredient_id == ingredient_id
        )
    )
    association = result.scalar_one_or_none()
    if not association:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Association between cocktail {cocktail_id} and ingredient {ingredient_id} not found"
        )
    return association


@router.get("/", response_model=List[Dict])
async def get_cocktail_ingredients(
    cocktail_id: UUID | None = Query(None, description="Filter by cocktail ID"),
    ingredient_id: UUID | None = Query(None, description="Filter by ingredient ID"),
    db: AsyncSession = Depends(get_async_session)
):
    """Get all cocktail-ingredient associations, optionally filtered by cocktail_id or ingredient_id"""
    query = _association_query()

    conditions = []
    if cocktail_id is not None:
        conditions.append(CocktailIngredientModel.cocktail_id == cocktail_id)
    if ingredient_id is not None:
        conditions.append(CocktailIngredientModel.ingredient_id == ingredient_id)

    if conditions:
        query = query.where(and_(*conditions))

    result = await db.execute(query)
    return [assoc.to_schema for assoc in result.scalars().all()]


@router.get("/{cocktail_id}/{ingredient_id}", response_model=Dict)
async def get_cocktail_ingredient(
    cocktail_id: UUID,
    ingredient_id: UUID,
    db: AsyncSession = Depends(get_async_session)
):
    """Get a specific cocktail-ingredient association"""
    association = await _get_association_or_404(db, cocktail_id, ingredient_id)
    return association.to_schema


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_cocktail_ingredient(
    association: CocktailIngredientCreate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session)
):
    """Add an ingredient to a cocktail (admin only)"""
    cocktail = await db.get(CocktailRecipeModel, association.cocktail_id)
    if not cocktail:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cocktail with id {association.cocktail_id} not found"
        )

    ingredient = await db.get(IngredientModel, association.ingredient_id)
    if not ingredient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Ingredient with id {association.ingredient_id} not found"
        )

    existing = await db.get(CocktailIngredientModel, (association.cocktail_id, association.ingredient_id))
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Association between cocktail {association.cocktail_id} and ingredient {association.ingredient_id} already exists"
        )

    try:
        db.add(CocktailIngredientModel(
            cocktail_id=association.cocktail_id,
            ingredient_id=association.ingredient_id,
            amount=association.amount,
            unit=association.unit.strip()
        ))
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating association: {str(e)}"
        )

    association_model = await _get_association_or_404(db, association.cocktail_id, association.ingredient_id)
    return association_model.to_schema


@router.put("/{cocktail_id}/{ingredient_id}", response_model=Dict)
async def update_cocktail_ingredient(
    cocktail_id: UUID,
    ingredient_id: UUID,
    association: CocktailIngredientUpdate,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session)
):
    """Change the amount and/or unit of an ingredient in a cocktail (admin only)"""
    association_model = await _get_association_or_404(db, cocktail_id, ingredient_id)

    if association.amount is None and association.unit is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="amount or unit is required for update"
        )

    if association.amount is not None:
        association_model.amount = association.amount
    if association.unit is not None:
        association_model.unit = association.unit.strip()

    await db.commit()
    return association_model.to_schema


@router.delete("/{cocktail_id}/{ingredient_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cocktail_ingredient(
    cocktail_id: UUID,
    ingredient_id: UUID,
    user: User = Depends(current_active_superuser),
    db: AsyncSession = Depends(get_async_session)
):
    """Remove an ingredient from a cocktail (admin only)"""
    association_model = await _get_association_or_404(db, cocktail_id, ingredient_id)
    await db.delete(association_model)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
