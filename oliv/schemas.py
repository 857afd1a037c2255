from typing import List
from pydantic import BaseModel, ConfigDict, Field, field_validator

NO_PRICE = "Precio no disponible"
FALLBACK_IMAGE = "https://images.unsplash.com/photo-1546548970-71785318a17b?w=150&h=150&fit=crop"


class Ingredient(BaseModel):
    name: str = Field(..., json_schema_extra={"example": "pechuga de pollo"})
    amount: str = Field("", json_schema_extra={"example": "200"})
    unit: str = Field("", json_schema_extra={"example": "g"})

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("ingredient name must not be blank")
        return v

    @field_validator("amount", "unit", mode="before")
    @classmethod
    def coerce_to_str(cls, v):
        # recipe payloads sometimes carry numeric amounts
        if v is None:
            return ""
        if isinstance(v, (int, float)):
            return str(v)
        return v


class CatalogProduct(BaseModel):
    name: str
    price: str = NO_PRICE
    image: str = FALLBACK_IMAGE

    model_config = ConfigDict(from_attributes=True)


class MatchedProduct(BaseModel):
    id: str
    name: str
    price: str
    image: str
    original_ingredient: str = Field(..., alias="originalIngredient")
    match_score: float = Field(..., alias="matchScore", ge=0.0, le=1.0)

    model_config = ConfigDict(populate_by_name=True)


class CompareRequest(BaseModel):
    ingredients: List[Ingredient] = Field(
        ...,
        min_length=1,
        json_schema_extra={
            "example": [
                {"name": "pollo", "amount": "400", "unit": "g"},
                {"name": "huevo", "amount": "2", "unit": "ud"},
            ]
        },
    )


class MatchRequest(CompareRequest):
    supermarket: str = Field(..., json_schema_extra={"example": "carrefour"})

    @field_validator("supermarket")
    @classmethod
    def supermarket_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("supermarket must not be blank")
        return v


class MatchResponse(BaseModel):
    products: List[MatchedProduct]


class SupermarketQuote(BaseModel):
    supermarket: str
    total: float
    matched: int
    missing: int
    products: List[MatchedProduct]


class CompareResponse(BaseModel):
    supermarkets: List[SupermarketQuote]


class SupermarketList(BaseModel):
    supermarkets: List[str]
