"""
JSON encoding and decoding of the full product collection.

The document is a JSON array of product objects. Encoding is stable:
fields are always written in model declaration order with their
camelCase aliases, ``null`` values are kept, and the output ends with a
newline, so encoding the same collection twice yields the same bytes.

Decoding is lenient about property-name casing (``ID``, ``SubProducts``
and ``sub_products`` all land on the same field) but strict about the
document shape.
"""

import json
from typing import Any, Dict, List, Sequence, Type

from pydantic import BaseModel, ValidationError

from ..exceptions import CatalogDecodeError
from .schemas import Comment, Product, SubProduct

# Nested list fields and the model of their items, keyed by canonical name
_NESTED: Dict[str, Type[BaseModel]] = {
    "subProducts": SubProduct,
    "comments": Comment,
}


def _key_map(model: Type[BaseModel]) -> Dict[str, str]:
    names: Dict[str, str] = {}
    for attr, info in model.model_fields.items():
        canonical = info.alias or attr
        names[attr.lower()] = canonical
        names[canonical.lower()] = canonical
    return names


_KEY_MAPS: Dict[Type[BaseModel], Dict[str, str]] = {
    model: _key_map(model) for model in (Product, SubProduct, Comment)
}


def _canonical(entry: Any, model: Type[BaseModel]) -> Any:
    """Rename the keys of ``entry`` to the canonical field names of ``model``."""
    if not isinstance(entry, dict):
        return entry
    names = _KEY_MAPS[model]
    out: Dict[str, Any] = {}
    for key, value in entry.items():
        name = names.get(str(key).lower(), key)
        nested = _NESTED.get(name) if model is Product else None
        if nested is not None and isinstance(value, list):
            value = [_canonical(item, nested) for item in value]
        out[name] = value
    return out


def encode_products(products: Sequence[Product]) -> str:
    """Serialize ``products`` to the persisted JSON text."""
    payload = [p.model_dump(mode="json", by_alias=True) for p in products]
    return json.dumps(payload, ensure_ascii=False, indent=2) + "\n"


def decode_products(text: str, source: str = "<catalog>") -> List[Product]:
    """Parse persisted JSON text into a list of ``Product`` models.

    Parameters
    ----------
    text : str
        The document text. Blank text decodes to an empty list.
    source : str
        Name of the document used in error messages (usually its path).

    Returns
    -------
    List[Product]
        The products in document order.

    Raises
    ------
    CatalogDecodeError
        If the text is not JSON, the top level is not an array, or an
        entry does not validate against the schema.
    """
    if not text.strip():
        return []
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogDecodeError(source, f"invalid JSON: {e}") from e
    if not isinstance(raw, list):
        raise CatalogDecodeError(source, "top-level value must be an array of products")

    products: List[Product] = []
    for idx, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise CatalogDecodeError(source, f"entry {idx} is not an object")
        try:
            products.append(Product.model_validate(_canonical(entry, Product)))
        except ValidationError as e:
            raise CatalogDecodeError(source, f"entry {idx} is invalid: {e}") from e
    return products
