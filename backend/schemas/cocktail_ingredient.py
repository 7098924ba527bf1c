from pydantic import BaseModel, Field
from uuid import UUID


class CocktailIngredientCreate(BaseModel):
    cocktail_id: UUID
    ingredient_id: UUID
    amount: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1)


class CocktailIngredientUpdate(BaseModel):
    amount: float | None = Field(None, ge=0)
    unit: str | None = Field(None, min_length=1)
