"""Nutrition analysis result models."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Confidence = Literal["high", "medium", "low"]

MACRO_FIELDS = ("calories", "protein", "carbs", "fat", "fiber")


def _zero_if_missing(value: object) -> object:
    return 0.0 if value is None or value == "" else value


class FoodItem(BaseModel):
    """Single food identified in a photo, macros in grams."""

    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    name: str = Field(min_length=1)
    calories: float = Field(default=0.0, ge=0)
    protein: float = Field(default=0.0, ge=0)
    carbs: float = Field(default=0.0, ge=0)
    fat: float = Field(default=0.0, ge=0)
    fiber: float = Field(default=0.0, ge=0)
    serving_size: str = Field(default="", alias="servingSize")

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator(*MACRO_FIELDS, mode="before")
    @classmethod
    def _default_macros(cls, value: object) -> object:
        return _zero_if_missing(value)

    @field_validator("serving_size", mode="before")
    @classmethod
    def _serving_as_text(cls, value: object) -> object:
        if value is None:
            return ""
        if isinstance(value, int | float):
            return str(value)
        return value


class NutritionResult(BaseModel):
    """Normalized output of one photo analysis.

    Totals missing from the model output are filled with the sum of the items.
    """

    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)

    foods: list[FoodItem]
    total_calories: float | None = Field(default=None, ge=0, alias="totalCalories")
    total_protein: float | None = Field(default=None, ge=0, alias="totalProtein")
    total_carbs: float | None = Field(default=None, ge=0, alias="totalCarbs")
    total_fat: float | None = Field(default=None, ge=0, alias="totalFat")
    total_fiber: float | None = Field(default=None, ge=0, alias="totalFiber")
    confidence: Confidence = "low"
    notes: str = ""

    @field_validator("confidence", mode="before")
    @classmethod
    def _normalize_confidence(cls, value: object) -> object:
        if value is None:
            return "low"
        return value.strip().lower() if isinstance(value, str) else value

    @field_validator("notes", mode="before")
    @classmethod
    def _notes_as_text(cls, value: object) -> object:
        return "" if value is None else value

    @model_validator(mode="after")
    def _fill_totals(self) -> "NutritionResult":
        for macro in MACRO_FIELDS:
            attr = f"total_{macro}"
            if getattr(self, attr) is None:
                setattr(self, attr, sum(getattr(food, macro) for food in self.foods))
        return self

    def to_payload(self) -> dict[str, object]:
        """Serialize using the camelCase wire names."""
        return self.model_dump(by_alias=True, mode="json")
