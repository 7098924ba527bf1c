import argparse
import asyncio
import sys
from pathlib import Path

"""
Seed demo data (admin user, priced ingredients, cocktails) into the DB.

This script can be run from either:
- backend/: `python scripts/seed_demo_data.py`
- repo root: `python backend/scripts/seed_demo_data.py`

Re-running it updates prices and recipes in place.
"""

# Allow running from repo root by ensuring `backend/` is on sys.path
BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from sqlalchemy import func, select, delete  # noqa: E402
from sqlalchemy.orm import selectinload  # noqa: E402

from db.database import async_session_maker, create_db_and_tables  # noqa: E402
from db.users import User  # noqa: E402
from db.ingredient import Ingredient  # noqa: E402
from db.cocktail_recipe import CocktailRecipe  # noqa: E402
from db.cocktail_ingredient import CocktailIngredient  # noqa: E402
from core.cost_calculator import format_cost  # noqa: E402

from fastapi_users.password import PasswordHelper  # noqa: E402


password_helper = PasswordHelper()

# name, type, bottle price (or piece price), bottle size
INGREDIENTS = [
    ("Tequila Blanco", "spirit", 28.00, "750ml"),
    ("White Rum", "spirit", 22.00, "750ml"),
    ("London Dry Gin", "spirit", 30.00, "750ml"),
    ("Bourbon", "spirit", 35.00, "750ml"),
    ("Vodka", "spirit", 25.00, "1L"),
    ("Cointreau", "liqueur", 38.00, "750ml"),
    ("Campari", "liqueur", 32.00, "1L"),
    ("Sweet Vermouth", "wine", 15.00, "750ml"),
    ("Simple Syrup", "syrup", 6.00, "500ml"),
    ("Angostura Bitters", "bitters", 10.00, "200ml"),
    ("Lime Juice", "juice", 0.40, None),
    ("Lemon Juice", "juice", 0.40, None),
    ("Soda Water", "mixer", 2.00, "1L"),
    ("Mint Sprig", "garnish", 0.25, None),
    ("Orange Peel", "garnish", 0.20, None),
    ("Sugar Cube", "other", 0.05, None),
]

# name, description, [(ingredient, amount, unit)]
COCKTAILS = [
    ("Margarita", "Tequila, lime, and orange liqueur.", [
        ("Tequila Blanco", 2, "oz"),
        ("Cointreau", 1, "oz"),
        ("Lime Juice", 1, "piece"),
    ]),
    ("Daiquiri", "Rum, lime, and simple syrup.", [
        ("White Rum", 2, "oz"),
        ("Lime Juice", 1, "piece"),
        ("Simple Syrup", 0.75, "oz"),
    ]),
    ("Negroni", "Gin, Campari, and sweet vermouth.", [
        ("London Dry Gin", 30, "ml"),
        ("Campari", 30, "ml"),
        ("Sweet Vermouth", 30, "ml"),
        ("Orange Peel", 1, "piece"),
    ]),
    ("Mojito", "Rum, lime, mint, sugar, topped with soda.", [
        ("White Rum", 2, "oz"),
        ("Lime Juice", 1, "piece"),
        ("Simple Syrup", 0.5, "oz"),
        ("Mint Sprig", 2, "piece"),
        ("Soda Water", 3, "oz"),
    ]),
    ("Old Fashioned", "Bourbon, sugar, and bitters.", [
        ("Bourbon", 2, "oz"),
        ("Sugar Cube", 1, "piece"),
        ("Angostura Bitters", 3, "dash"),
        ("Orange Peel", 1, "piece"),
    ]),
]


async def get_or_create_user(session, email: str, password: str) -> User:
    result = await session.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()
    if user:
        return user

    user = User(
        email=email,
        hashed_password=password_helper.hash(password),
        is_active=True,
        is_superuser=True,
        is_verified=True,
    )
    session.add(user)
    await session.flush()
    return user


async def upsert_ingredient(session, name: str, type_: str, price: float, bottle_size: str | None) -> Ingredient:
    result = await session.execute(
        select(Ingredient).where(func.lower(Ingredient.name) == name.strip().lower())
    )
    ingredient = result.scalar_one_or_none()
    if not ingredient:
        ingredient = Ingredient(name=name.strip())
        session.add(ingredient)

    # Keep price up-to-date if you re-run seed with new values
    ingredient.type = type_
    ingredient.price = price
    ingredient.bottle_size = bottle_size
    await session.flush()
    return ingredient


async def upsert_cocktail(session, user_id, name: str, description: str | None, ingredients: list, by_name: dict) -> CocktailRecipe:
    result = await session.execute(
        select(CocktailRecipe).where(func.lower(CocktailRecipe.name) == name.strip().lower())
    )
    cocktail = result.scalar_one_or_none()
    if not cocktail:
        cocktail = CocktailRecipe(user_id=user_id, name=name.strip())
        session.add(cocktail)
    cocktail.description = description
    await session.flush()

    # Replace ingredient associations
    await session.execute(
        delete(CocktailIngredient).where(CocktailIngredient.cocktail_id == cocktail.id)
    )
    for ingredient_name, amount, unit in ingredients:
        session.add(
            CocktailIngredient(
                cocktail_id=cocktail.id,
                ingredient_id=by_name[ingredient_name].id,
                amount=amount,
                unit=unit,
            )
        )
    await session.flush()
    return cocktail


async def seed(admin_email: str, admin_password: str):
    await create_db_and_tables()

    async with async_session_maker() as session:
        user = await get_or_create_user(session, admin_email, admin_password)

        by_name = {}
        for name, type_, price, bottle_size in INGREDIENTS:
            by_name[name] = await upsert_ingredient(session, name, type_, price, bottle_size)

        for name, description, ingredients in COCKTAILS:
            await upsert_cocktail(session, user.id, name, description, ingredients, by_name)

        await session.commit()

        session.expunge_all()
        result = await session.execute(
            select(CocktailRecipe)
            .options(selectinload(CocktailRecipe.cocktail_ingredients).selectinload(CocktailIngredient.ingredient))
            .order_by(CocktailRecipe.name)
        )
        for cocktail in result.scalars().all():
            print(f"{cocktail.name}: ${format_cost(cocktail.cost)}")


def main():
    parser = argparse.ArgumentParser(description="Seed demo ingredients and cocktails")
    parser.add_argument("--admin-email", default="admin@admin.com")
    parser.add_argument("--admin-password", default="admin")
    args = parser.parse_args()
    asyncio.run(seed(args.admin_email, args.admin_password))


if __name__ == "__main__":
    main()
