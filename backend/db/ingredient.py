import uuid
from datetime import datetime
from sqlalchemy import Column, DateTime, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from core.cost_calculator import IngredientSnapshot, unit_price
from .database import Base


class Ingredient(Base):
    """Ingredient model - priced bottles, garnishes and other shared ingredients"""
    __tablename__ = "ingredients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False, unique=True)  # Unique ingredient names
    type = Column(String, nullable=False, default="spirit", index=True)

    # Price of one bottle, or of one piece for non-bottled items
    price = Column(Numeric(10, 2, asdecimal=False), nullable=True)
    bottle_size = Column(String, nullable=True)  # '750ml', '1L', ... NULL for garnishes
    link = Column(String, nullable=True)
    image_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    cocktail_ingredients = relationship(
        "CocktailIngredient",
        back_populates="ingredient",
        cascade="all, delete-orphan"
    )

    @property
    def to_snapshot(self) -> IngredientSnapshot:
        return IngredientSnapshot(
            price=self.price,
            bottle_size=self.bottle_size,
            type=self.type,
            name=self.name,
        )

    @property
    def to_schema(self):
        """Convert Ingredient model to schema dictionary format"""
        priced = unit_price(self.to_snapshot)
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "price": self.price,
            "bottle_size": self.bottle_size,
            "link": self.link,
            "image_url": self.image_url,
            "price_unit": priced[0] if priced else None,
            "price_per_unit": priced[1] if priced else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
