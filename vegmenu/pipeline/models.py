from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt

# Integers stay integers so sums of whole-unit prices stay exact.
Price = Union[NonNegativeInt, Annotated[float, Field(ge=0, allow_inf_nan=False)]]


class MenuItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    price: Price
    description: str | None = None
    raw_text: str | None = None


class Classification(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_vegetarian: bool
    confidence: float = Field(..., ge=0.0, le=1.0, allow_inf_nan=False)
    reasoning: str = Field(..., min_length=1)
    flags: list[str] = Field(default_factory=list)


class ClassifiedMenuItem(MenuItem):
    classification: Classification | None = None

    @classmethod
    def from_item(
        cls, item: MenuItem, classification: Classification | None
    ) -> ClassifiedMenuItem:
        return cls(**item.model_dump(), classification=classification)

    @property
    def is_vegetarian(self) -> bool:
        return self.classification is not None and self.classification.is_vegetarian


class UncertaintyCard(BaseModel):
    flagged_items: list[dict[str, Any]]
    requires_review: bool = True


class MenuProcessingResult(BaseModel):
    vegetarian_items: list[ClassifiedMenuItem] = Field(default_factory=list)
    total_sum: int | float = 0
    uncertainty_card: UncertaintyCard | None = None
    request_id: str


class ClassifyResponse(BaseModel):
    classified_items: list[ClassifiedMenuItem] = Field(default_factory=list)
    total_sum: int | float = 0
