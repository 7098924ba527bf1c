from pydantic import BaseModel
from typing import List
from uuid import UUID


class FavoriteList(BaseModel):
    cocktail_ids: List[UUID]


class FavoriteToggle(BaseModel):
    cocktail_id: UUID
    is_favorite: bool
