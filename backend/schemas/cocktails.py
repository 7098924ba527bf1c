from pydantic import BaseModel, Field
from typing import List, Optional


# Ingredient line of a cocktail recipe, referenced by name
class CocktailIngredientInput(BaseModel):
    name: str
    amount: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1)


class CocktailRecipeCreate(BaseModel):
    name: str
    description: Optional[str] = None
    ingredients: List[CocktailIngredientInput]
    image_url: Optional[str] = None


class CocktailRecipeUpdate(CocktailRecipeCreate):
    pass
