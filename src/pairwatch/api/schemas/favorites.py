from pydantic import BaseModel, Field, field_validator

from pairwatch.domain.models import FavoriteEntry


class FavoriteCreate(BaseModel):
    symbol: str = Field(min_length=1)

    @field_validator("symbol")
    @classmethod
    def strip_symbol(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("symbol must not be blank")
        return v


class FavoriteList(BaseModel):
    favorites: list[FavoriteEntry]
    total: int
