from pydantic import BaseModel, Field
from typing import List
from uuid import UUID


class CartItem(BaseModel):
    cocktail_id: UUID
    quantity: int = Field(1, ge=1)


class CartQuoteRequest(BaseModel):
    items: List[CartItem]


class CartLine(BaseModel):
    cocktail_id: UUID
    name: str
    quantity: int
    unit_price: float
    line_total: float


class CartQuote(BaseModel):
    items: List[CartLine]
    item_count: int
    total: float
