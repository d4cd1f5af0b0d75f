# craftcatalog/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class RatingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    product_id: Optional[str] = Field(default=None, alias="productId")
    rating: int = Field(
        ...,
        description="Note de 1 à 5. Les bornes sont vérifiées par la route, pas par le store.",
    )


class StatusMessage(BaseModel):
    status: str = "ok"
    message: Optional[str] = None
