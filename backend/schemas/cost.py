from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.cost_calculator import IngredientSnapshot, IngredientUsage


class IngredientPricing(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    price: Optional[float] = None
    bottle_size: Optional[str] = Field(None, alias="bottleSize")
    type: Optional[str] = None

    def to_snapshot(self) -> IngredientSnapshot:
        return IngredientSnapshot(price=self.price, bottle_size=self.bottle_size, type=self.type, name=self.name)


class UsageInput(BaseModel):
    # Loose on purpose: bad rows are skipped by the calculator, not rejected
    amount: Optional[float] = None
    unit: Optional[str] = None
    ingredient: Optional[IngredientPricing] = None

    def to_usage(self) -> IngredientUsage:
        return IngredientUsage(
            amount=self.amount,
            unit=self.unit,
            ingredient=self.ingredient.to_snapshot() if self.ingredient else None,
        )


class CostRequest(BaseModel):
    usages: Optional[List[UsageInput]] = None


class LineCostRead(BaseModel):
    index: int
    name: Optional[str] = None
    amount: float
    unit: str
    basis: str
    unit_price: float
    cost: float


class SkippedUsageRead(BaseModel):
    index: int
    name: Optional[str] = None
    unit: Optional[str] = None
    reason: str


class CostBreakdownRead(BaseModel):
    total: float
    display_total: float
    lines: List[LineCostRead]
    skipped: List[SkippedUsageRead]
