import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from core.cost_calculator import CostBreakdown, calculate_cost_breakdown, display_cost
from .database import Base


class CocktailRecipe(Base):
    """CocktailRecipe model - recipes with ingredient amounts; cost is derived, never stored"""
    __tablename__ = "cocktail_recipes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    name = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    cocktail_ingredients = relationship(
        "CocktailIngredient",
        back_populates="cocktail",
        cascade="all, delete-orphan"
    )
    favorites = relationship("Favorite", back_populates="cocktail", cascade="all, delete-orphan")

    user = relationship("User", back_populates="cocktails")

    @property
    def usages(self):
        return [ci.to_usage for ci in self.cocktail_ingredients]

    @property
    def cost_breakdown(self) -> CostBreakdown:
        return calculate_cost_breakdown(self.usages)

    @property
    def cost(self) -> float:
        return self.cost_breakdown.total

    @property
    def to_schema(self):
        """Convert CocktailRecipe model to schema dictionary format"""
        user_data = None
        if self.user:
            user_data = {
                "id": self.user.id,
                "email": self.user.email
            }

        return {
            "id": self.id,
            "user_id": self.user_id,
            "user": user_data,
            "name": self.name,
            "description": self.description,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
            "image_url": self.image_url,
            "cost": display_cost(self.cost),
            "ingredients": [
                {
                    "ingredient_id": ci.ingredient_id,
                    "name": ci.ingredient.name,
                    "amount": ci.amount,
                    "unit": ci.unit,
                    "type": ci.ingredient.type,
                    "price": ci.ingredient.price,
                    "bottle_size": ci.ingredient.bottle_size,
                }
                for ci in self.cocktail_ingredients
                if ci.ingredient is not None
            ]
        }
