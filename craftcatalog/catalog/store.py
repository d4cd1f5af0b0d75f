"""
CRUD façade over the JSON product catalogue.

``CatalogStore`` is the only writer of the backing file. Every call
takes the file's lock, reloads the collection from disk, applies its
change and, when something changed, saves the whole collection back
before releasing the lock. Nothing is cached between calls, so the
in-memory view can never drift from what was actually persisted.

Business-rule failures (blank ids, unknown records, duplicates) are
reported as ``False`` or ``None``. Only ``PersistenceError`` escapes,
since it signals a real operational problem.

Product ids match case-insensitively; sub-product ids match exactly.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from .ids import IdentifierAllocator
from .persistence import JsonFileGateway
from .schemas import Comment, Product, SubProduct

logger = logging.getLogger(__name__)


def _norm(s: Optional[str]) -> str:
    """Normalize a product id for case-insensitive comparison."""
    return (s or "").lower()


def _find_index(products: List[Product], product_id: Optional[str]) -> int:
    """Return the index of the product matching ``product_id`` or -1."""
    if not product_id:
        return -1
    key = _norm(product_id)
    for idx, product in enumerate(products):
        if _norm(product.id) == key:
            return idx
    return -1


def _find_sub_index(subs: List[SubProduct], sub_id: Optional[str]) -> int:
    if not sub_id:
        return -1
    for idx, sub in enumerate(subs):
        if sub.id == sub_id:
            return idx
    return -1


def _has_repeated_ids(subs: Optional[List[SubProduct]]) -> bool:
    """Return True when two sub-products carry the same non-empty id."""
    ids = [s.id for s in subs or [] if s.id]
    return len(ids) != len(set(ids))


class CatalogStore:
    """Thread-safe store for products and their sub-products.

    Parameters
    ----------
    data_file : str or Path
        Location of the JSON document. It does not need to exist yet.
    allocator : IdentifierAllocator, optional
        Source of ids for sub-products and comments created without one.
    """

    def __init__(
        self,
        data_file: Union[str, Path],
        allocator: Optional[IdentifierAllocator] = None,
    ) -> None:
        self.gateway = JsonFileGateway(data_file)
        self.allocator = allocator or IdentifierAllocator()
        self._lock = self.gateway.lock

    @property
    def data_file(self) -> Path:
        return self.gateway.path

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list(self) -> List[Product]:
        """Return every product in stored order (possibly empty)."""
        with self._lock:
            return self.gateway.load()

    def get_by_id(self, product_id: Optional[str]) -> Optional[Product]:
        """Return the product whose id matches ``product_id`` ignoring case."""
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, product_id)
            return products[idx] if idx >= 0 else None

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------
    def add_rating(self, product_id: Optional[str], value: int) -> bool:
        """Append ``value`` to the product's ratings.

        No bounds are checked; the caller owns rating validation. Values
        that are not plain integers are rejected, since the stored
        document could not be read back.
        """
        if isinstance(value, bool) or not isinstance(value, int):
            logger.debug("Rating rejected, %r is not an integer", value)
            return False
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, product_id)
            if idx < 0:
                logger.debug("Rating rejected, no product %r", product_id)
                return False
            product = products[idx]
            if product.ratings is None:
                product.ratings = []
            product.ratings.append(value)
            self.gateway.save(products)
        logger.info("Added rating %s to product %s", value, product.id)
        return True

    def add_comment(self, product_id: Optional[str], text: Optional[str]) -> bool:
        """Append a comment with a freshly allocated id to the product."""
        if not (text or "").strip():
            return False
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, product_id)
            if idx < 0:
                logger.debug("Comment rejected, no product %r", product_id)
                return False
            product = products[idx]
            if product.comments is None:
                product.comments = []
            comment_id = self.allocator.allocate(c.id for c in product.comments)
            product.comments.append(Comment(id=comment_id, comment=text))
            self.gateway.save(products)
        logger.info("Added comment %s to product %s", comment_id, product.id)
        return True

    def update_product(self, update: Optional[Product]) -> bool:
        """Replace a stored product with ``update``.

        Every field is overwritten, except that ``sub_products``,
        ``ratings`` and ``comments`` keep their stored value when the
        update leaves them as ``None``.
        """
        return self._replace(update, keep_sub_products=False)

    def update_category(self, update: Optional[Product]) -> bool:
        """Replace the top-level fields of a stored product.

        The stored sub-products are always kept, whatever ``update``
        carries. ``ratings`` and ``comments`` follow the same rule as in
        ``update_product``.
        """
        return self._replace(update, keep_sub_products=True)

    def _replace(self, update: Optional[Product], keep_sub_products: bool) -> bool:
        if update is None or not update.id:
            return False
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, update.id)
            if idx < 0:
                logger.debug("Update rejected, no product %r", update.id)
                return False
            existing = products[idx]
            replacement = update.model_copy(deep=True)
            if keep_sub_products or replacement.sub_products is None:
                replacement.sub_products = existing.sub_products
            elif _has_repeated_ids(replacement.sub_products):
                logger.warning("Update rejected, repeated sub-product ids in %r", update.id)
                return False
            if replacement.ratings is None:
                replacement.ratings = existing.ratings
            if replacement.comments is None:
                replacement.comments = existing.comments
            products[idx] = replacement
            self.gateway.save(products)
        logger.info("Updated product %s", update.id)
        return True

    def add_product(self, product: Optional[Product]) -> bool:
        """Insert a new product; duplicate ids (ignoring case) are rejected.

        Sub-products that arrive without an id are given one. A payload
        whose sub-products repeat an id is rejected.
        """
        if product is None or not product.id:
            return False
        if _has_repeated_ids(product.sub_products):
            logger.warning("Product %r has repeated sub-product ids, not adding", product.id)
            return False
        with self._lock:
            products = self.gateway.load()
            if _find_index(products, product.id) >= 0:
                logger.warning("Product %r already exists, not adding", product.id)
                return False
            record = product.model_copy(deep=True)
            for sub in record.sub_products or []:
                if not sub.id:
                    sub.id = self.allocator.allocate(s.id for s in record.sub_products)
            products.append(record)
            self.gateway.save(products)
        logger.info("Added product %s", product.id)
        return True

    def delete_product(self, product_id: Optional[str]) -> bool:
        """Remove a product together with all of its sub-products."""
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, product_id)
            if idx < 0:
                logger.debug("Delete rejected, no product %r", product_id)
                return False
            removed = products.pop(idx)
            self.gateway.save(products)
        logger.info(
            "Deleted product %s with %d sub-products",
            removed.id,
            len(removed.sub_products or []),
        )
        return True

    # ------------------------------------------------------------------
    # Sub-products
    # ------------------------------------------------------------------
    def add_sub_product(self, product_id: Optional[str], sub: Optional[SubProduct]) -> bool:
        """Append ``sub`` to the product's sub-products.

        A missing id is allocated. An explicit id already used by a
        sibling is rejected, as sub-product ids must be unique within
        their parent.
        """
        if sub is None:
            return False
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, product_id)
            if idx < 0:
                logger.debug("Sub-product rejected, no product %r", product_id)
                return False
            product = products[idx]
            if product.sub_products is None:
                product.sub_products = []
            record = sub.model_copy(deep=True)
            if not record.id:
                record.id = self.allocator.allocate(s.id for s in product.sub_products)
            elif _find_sub_index(product.sub_products, record.id) >= 0:
                logger.warning(
                    "Sub-product %r already exists under %s", record.id, product.id
                )
                return False
            product.sub_products.append(record)
            self.gateway.save(products)
        logger.info("Added sub-product %s to product %s", record.id, product.id)
        return True

    def update_sub_product(self, product_id: Optional[str], sub: Optional[SubProduct]) -> bool:
        """Overwrite the sub-product whose id equals ``sub.id`` exactly."""
        if sub is None:
            return False
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, product_id)
            if idx < 0 or products[idx].sub_products is None:
                logger.debug("Sub-product update rejected, no sub-products under %r", product_id)
                return False
            subs = products[idx].sub_products
            sub_idx = _find_sub_index(subs, sub.id)
            if sub_idx < 0:
                logger.debug("No sub-product %r under %r", sub.id, product_id)
                return False
            subs[sub_idx] = sub.model_copy(deep=True)
            self.gateway.save(products)
        logger.info("Updated sub-product %s of product %s", sub.id, product_id)
        return True

    def delete_sub_product(self, product_id: Optional[str], sub_id: Optional[str]) -> bool:
        with self._lock:
            products = self.gateway.load()
            idx = _find_index(products, product_id)
            if idx < 0 or products[idx].sub_products is None:
                logger.debug("Sub-product delete rejected, no sub-products under %r", product_id)
                return False
            subs = products[idx].sub_products
            sub_idx = _find_sub_index(subs, sub_id)
            if sub_idx < 0:
                logger.debug("No sub-product %r under %r", sub_id, product_id)
                return False
            del subs[sub_idx]
            self.gateway.save(products)
        logger.info("Deleted sub-product %s of product %s", sub_id, product_id)
        return True

    def ensure_sub_product_ids(self) -> bool:
        """Give an id to every stored sub-product that lacks one.

        Records written before ids were required may have none. The file
        is only rewritten when at least one id was assigned. Always
        returns ``True``.
        """
        with self._lock:
            products = self.gateway.load()
            assigned = 0
            for product in products:
                for sub in product.sub_products or []:
                    if not sub.id:
                        sub.id = self.allocator.allocate(s.id for s in product.sub_products)
                        assigned += 1
            if assigned:
                self.gateway.save(products)
        if assigned:
            logger.info("Assigned ids to %d sub-products", assigned)
        return True
