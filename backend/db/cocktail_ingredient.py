from sqlalchemy import Column, ForeignKey, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from core.cost_calculator import IngredientUsage
from .database import Base


class CocktailIngredient(Base):
    """Association object for many-to-many relationship between CocktailRecipe and Ingredient
    Stores the amount and unit of each ingredient in each recipe"""
    __tablename__ = "cocktail_ingredients"

    cocktail_id = Column(UUID(as_uuid=True), ForeignKey('cocktail_recipes.id', ondelete='CASCADE'), primary_key=True)
    ingredient_id = Column(UUID(as_uuid=True), ForeignKey('ingredients.id', ondelete='CASCADE'), primary_key=True)
    amount = Column(Numeric(10, 3, asdecimal=False), nullable=False)
    unit = Column(String, nullable=False)  # 'oz', 'ml', 'dash', 'piece', ...

    cocktail = relationship("CocktailRecipe", back_populates="cocktail_ingredients")
    ingredient = relationship("Ingredient", back_populates="cocktail_ingredients")

    @property
    def to_usage(self) -> IngredientUsage:
        return IngredientUsage(
            amount=self.amount,
            unit=self.unit,
            ingredient=self.ingredient.to_snapshot if self.ingredient else None,
        )

    @property
    def to_schema(self):
        ingredient = self.ingredient
        return {
            "cocktail_id": str(self.cocktail_id),
            "ingredient_id": str(self.ingredient_id),
            "amount": self.amount,
            "unit": self.unit,
            "cocktail_name": self.cocktail.name if self.cocktail else None,
            "ingredient_name": ingredient.name if ingredient else None,
        }
