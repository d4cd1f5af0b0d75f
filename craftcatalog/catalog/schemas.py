"""
Pydantic schema definitions for the catalog records.

A ``Product`` is a top-level catalogue entry which may own an ordered
list of ``SubProduct`` entries and an ordered list of ``Comment``
entries. Attribute names are snake_case in Python; the persisted JSON
document uses the camelCase aliases (``subCategory``, ``subProducts``).
Either spelling is accepted when building a model.

Optional list fields default to ``None`` rather than an empty list: an
absent ``subProducts`` or ``ratings`` on an update payload means "keep
what is stored", while an empty list means "clear it".
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Comment(BaseModel):
    """A free-text comment left on a product."""

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    comment: str = ""


class SubProduct(BaseModel):
    """A second-level entry owned by exactly one product.

    The ``id`` is only unique within the owning product's
    ``sub_products`` list; the same value may appear under another
    product. Entries created without an id are given one by the store.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    brand: Optional[str] = None
    name: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = Field(default=None, alias="subCategory")
    image: Optional[str] = None


class Product(BaseModel):
    """A top-level catalogue entry.

    ``id`` is stored as given but looked up case-insensitively. The
    ``image`` field holds whatever path string the upload handler
    produced; it is never interpreted here.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    brand: Optional[str] = None
    name: Optional[str] = None
    type: Optional[str] = None
    url: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = Field(default=None, alias="subCategory")
    image: Optional[str] = None
    # Append-only from the store's point of view. No range is enforced
    # here; the rating endpoint checks bounds before calling the store.
    ratings: Optional[List[int]] = None
    sub_products: Optional[List[SubProduct]] = Field(default=None, alias="subProducts")
    comments: Optional[List[Comment]] = None

    def average_rating(self) -> Optional[float]:
        """Return the mean of ``ratings`` or ``None`` when there are none."""
        if not self.ratings:
            return None
        return sum(self.ratings) / len(self.ratings)
