import logging

from fastapi import APIRouter, Depends, HTTPException, status, Response, Query
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
from schemas.cocktails import CocktailIngredientInput, CocktailRecipeCreate, CocktailRecipeUpdate
from db.database import get_async_session
from db.cocktail_recipe import CocktailRecipe as CocktailRecipeModel
from db.cocktail_ingredient import CocktailIngredient as CocktailIngredientModel
from db.ingredient import Ingredient as IngredientModel
from typing import List, Dict
from uuid import UUID
from core.auth import current_active_user
from core.cocktaildb_client import find_cocktail_image
from core.config import settings
from db.users import User

logger = logging.getLogger(__name__)

router = APIRouter()


def cocktail_query():
    return select(CocktailRecipeModel).options(
        selectinload(CocktailRecipeModel.cocktail_ingredients).selectinload(CocktailIngredientModel.ingredient),
        selectinload(CocktailRecipeModel.user)
    )


def log_skipped_rows(cocktail: CocktailRecipeModel):
    skipped = cocktail.cost_breakdown.skipped
    if skipped:
        logger.warning(
            "Cocktail %s (%s): %d ingredient row(s) left out of the cost: %s",
            cocktail.id,
            cocktail.name,
            len(skipped),
            ", ".join(f"{s.name or '?'}={s.reason.value}" for s in skipped),
        )


def cocktail_payload(cocktail: CocktailRecipeModel) -> Dict:
    log_skipped_rows(cocktail)
    return cocktail.to_schema


async def fill_missing_image(payload: Dict) -> Dict:
    if not payload["image_url"]:
        payload["image_url"] = await run_in_threadpool(find_cocktail_image, payload["name"])
    return payload


async def get_cocktail_or_404(db: AsyncSession, cocktail_id: UUID) -> CocktailRecipeModel:
    result = await db.execute(cocktail_query().where(CocktailRecipeModel.id == cocktail_id))
    cocktail = result.scalar_one_or_none()
    if not cocktail:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cocktail with id {cocktail_id} not found"
        )
    return cocktail


def _ensure_can_edit(cocktail: CocktailRecipeModel, user: User, action: str):
    if cocktail.user_id != user.id and not user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You are not allowed to {action} this cocktail"
        )


async def _resolve_ingredients(db: AsyncSession, items: List[CocktailIngredientInput]) -> Dict[str, IngredientModel]:
    """Map lower-cased ingredient names to existing ingredients; unknown or repeated names are a 400."""
    names = [(i.name or "").strip().lower() for i in items]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Ingredients listed more than once: {', '.join(duplicates)}"
        )

    found = {}
    if names:
        result = await db.execute(
            select(IngredientModel).where(func.lower(IngredientModel.name).in_(names))
        )
        found = {i.name.lower(): i for i in result.scalars().all()}

    missing = [i.name for i in items if i.name.strip().lower() not in found]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown ingredients: {', '.join(missing)}"
        )
    return found


def _add_ingredient_rows(db: AsyncSession, cocktail_id: UUID, items: List[CocktailIngredientInput], found: Dict[str, IngredientModel]):
    for item in items:
        db.add(CocktailIngredientModel(
            cocktail_id=cocktail_id,
            ingredient_id=found[item.name.strip().lower()].id,
            amount=item.amount,
            unit=item.unit.strip(),
        ))


@router.get("/", response_model=List[Dict])
async def get_cocktails(
    search: str | None = Query(None, description="Case-insensitive match on the cocktail name"),
    db: AsyncSession = Depends(get_async_session)
):
    """Get all cocktail recipes with their estimated cost"""
    query = cocktail_query().order_by(func.lower(CocktailRecipeModel.name).asc())
    if search:
        query = query.where(func.lower(CocktailRecipeModel.name).contains(search.strip().lower()))
    result = await db.execute(query)
    cocktails = result.scalars().all()
    return [cocktail_payload(cocktail) for cocktail in cocktails]


@router.get("/featured", response_model=List[Dict])
async def get_featured_cocktails(
    limit: int = Query(settings.featured_limit, ge=1, le=50),
    resolve_images: bool = Query(True, description="Look up a picture for cocktails without one"),
    db: AsyncSession = Depends(get_async_session)
):
    """Newest cocktails for the home page"""
    result = await db.execute(
        cocktail_query().order_by(CocktailRecipeModel.created_at.desc()).limit(limit)
    )
    featured = []
    for cocktail in result.scalars().all():
        payload = cocktail_payload(cocktail)
        if resolve_images:
            payload = await fill_missing_image(payload)
        featured.append(payload)
    return featured


@router.get("/{cocktail_id}", response_model=Dict)
async def get_cocktail_recipe(cocktail_id: UUID, db: AsyncSession = Depends(get_async_session)):
    """Get a single cocktail recipe by ID"""
    cocktail = await get_cocktail_or_404(db, cocktail_id)
    return cocktail_payload(cocktail)


@router.post("/", response_model=Dict, status_code=status.HTTP_201_CREATED)
async def create_cocktail_recipe(
    cocktail: CocktailRecipeCreate,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session)
):
    """Create a new cocktail recipe"""
    found = await _resolve_ingredients(db, cocktail.ingredients)
    try:
        cocktail_model = CocktailRecipeModel(
            name=cocktail.name.strip(),
            description=cocktail.description,
            image_url=cocktail.image_url,
            user_id=user.id
        )
        db.add(cocktail_model)
        await db.flush()  # Flush to get the ID

        _add_ingredient_rows(db, cocktail_model.id, cocktail.ingredients, found)
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error creating cocktail: {str(e)}"
        )

    # Reload the model with relationships
    db.expunge_all()
    cocktail_model = await get_cocktail_or_404(db, cocktail_model.id)
    return cocktail_payload(cocktail_model)


@router.put("/{cocktail_id}", response_model=Dict)
async def update_cocktail_recipe(
    cocktail_id: UUID,
    cocktail: CocktailRecipeUpdate,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session)
):
    """Update an existing cocktail recipe (owner or admin)"""
    cocktail_model = await get_cocktail_or_404(db, cocktail_id)
    _ensure_can_edit(cocktail_model, user, "update")
    found = await _resolve_ingredients(db, cocktail.ingredients)

    try:
        cocktail_model.name = cocktail.name.strip()
        cocktail_model.description = cocktail.description
        cocktail_model.image_url = cocktail.image_url

        # Replace the ingredient rows
        for assoc in list(cocktail_model.cocktail_ingredients):
            await db.delete(assoc)
        await db.flush()

        _add_ingredient_rows(db, cocktail_id, cocktail.ingredients, found)
        await db.commit()
    except Exception as e:
        await db.rollback()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Error updating cocktail: {str(e)}"
        )

    db.expunge_all()
    cocktail_model = await get_cocktail_or_404(db, cocktail_id)
    return cocktail_payload(cocktail_model)


@router.delete("/{cocktail_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_cocktail_recipe(
    cocktail_id: UUID,
    user: User = Depends(current_active_user),
    db: AsyncSession = Depends(get_async_session)
):
    """Delete a cocktail recipe (owner or admin)"""
    cocktail_model = await get_cocktail_or_404(db, cocktail_id)
    _ensure_can_edit(cocktail_model, user, "delete")
    await db.delete(cocktail_model)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
