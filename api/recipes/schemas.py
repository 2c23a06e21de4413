"""
Pydantic schemas for recipe endpoints (request/response models).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RecipeInput(BaseModel):
    # Any "id" in the body is ignored: create assigns one, update takes the path id.
    name: str = Field(..., min_length=1)
    prep_time: float = Field(default=0.0, ge=0.0, alias="preptime")
    difficulty: int = Field(..., ge=1, le=3)
    vegetarian: bool = False

    model_config = ConfigDict(populate_by_name=True)


class Recipe(BaseModel):
    id: int
    name: str
    prep_time: float = Field(alias="preptime")
    difficulty: int
    vegetarian: bool

    model_config = ConfigDict(populate_by_name=True)


class RatedRecipe(Recipe):
    avg_rating: float


class RatingInput(BaseModel):
    rating: int = Field(..., ge=1, le=5)


class Rating(BaseModel):
    rating_id: int
    recipe_id: int
    rating: int


class DeleteResult(BaseModel):
    result: Literal["success"] = "success"


class ErrorResponse(BaseModel):
    error: str
