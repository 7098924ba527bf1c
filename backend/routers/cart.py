from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.cost_calculator import display_cost
from db.cocktail_recipe import CocktailRecipe as CocktailRecipeModel
from db.database import get_async_session
from routers.cocktails import cocktail_query, log_skipped_rows
from schemas.cart import CartLine, CartQuote, CartQuoteRequest

router = APIRouter()


@router.post("/quote", response_model=CartQuote)
async def quote_cart(cart: CartQuoteRequest, db: AsyncSession = Depends(get_async_session)):
    """Price the cart with current ingredient prices; the cart itself is kept by the client"""
    ids = {item.cocktail_id for item in cart.items}
    cocktails = {}
    if ids:
        result = await db.execute(cocktail_query().where(CocktailRecipeModel.id.in_(ids)))
        cocktails = {c.id: c for c in result.scalars().all()}

    missing = [str(i) for i in ids if i not in cocktails]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Cocktails not found: {', '.join(sorted(missing))}"
        )

    lines = []
    for item in cart.items:
        cocktail = cocktails[item.cocktail_id]
        log_skipped_rows(cocktail)
        unit_price = display_cost(cocktail.cost)
        lines.append(CartLine(
            cocktail_id=cocktail.id,
            name=cocktail.name,
            quantity=item.quantity,
            unit_price=unit_price,
            line_total=round(unit_price * item.quantity, 2),
        ))

    return CartQuote(
        items=lines,
        item_count=sum(line.quantity for line in lines),
        total=round(sum(line.line_total for line in lines), 2),
    )
