from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class IngredientType(str, Enum):
    SPIRIT = "spirit"
    LIQUEUR = "liqueur"
    WINE = "wine"
    BEER = "beer"
    MIXER = "mixer"
    SYRUP = "syrup"
    BITTERS = "bitters"
    JUICE = "juice"
    GARNISH = "garnish"
    OTHER = "other"


class BottleSize(str, Enum):
    ML_50 = "50ml"
    ML_200 = "200ml"
    ML_375 = "375ml"
    ML_500 = "500ml"
    ML_750 = "750ml"
    L_1 = "1L"
    L_1_75 = "1.75L"


# Types that may be sold loose (priced per piece) instead of by the bottle
OPTIONALLY_BOTTLED_TYPES = {IngredientType.JUICE, IngredientType.OTHER}


class Ingredient(BaseModel):
    name: str
    type: IngredientType = IngredientType.SPIRIT
    price: Optional[float] = Field(None, ge=0)
    bottle_size: Optional[BottleSize] = None
    link: Optional[str] = None
    image_url: Optional[str] = None


class IngredientCreate(Ingredient):
    @model_validator(mode="after")
    def check_bottle_size(self):
        if self.type == IngredientType.GARNISH:
            self.bottle_size = None
        elif self.type == IngredientType.BITTERS and self.bottle_size is None:
            self.bottle_size = BottleSize.ML_200
        elif self.bottle_size is None and self.type not in OPTIONALLY_BOTTLED_TYPES:
            raise ValueError(f"bottle_size is required for {self.type.value} ingredients")
        return self


class IngredientUpdate(IngredientCreate):
    pass
