"""Pydantic models for API request payloads."""

from pydantic import BaseModel, ConfigDict, Field

from meal_scanner.domain.nutrition import NutritionResult


class AnalyzeFoodRequest(BaseModel):
    """Photo analysis request."""

    model_config = ConfigDict(populate_by_name=True)

    image_base64: str | None = Field(default=None, alias="imageBase64")


class SaveMealRequest(BaseModel):
    """Request to log an analysis result to a meal slot."""

    model_config = ConfigDict(populate_by_name=True)

    meal_type: str = Field(alias="mealType")
    data: NutritionResult
