"""
File persistence for the product collection.

``JsonFileGateway`` owns the on-disk representation. Loading a missing
file yields an empty collection. Saving writes the encoded document to
a temporary file in the same directory, flushes it to disk and then
swaps it over the target with ``os.replace``, so readers only ever see
the old or the new document, never a half-written one.

To avoid races between several objects pointing at the same file,
every gateway for a given resolved path shares one re-entrant lock,
available as ``JsonFileGateway.lock``.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Dict, List, Sequence, Union

from ..exceptions import PersistenceError
from .codec import decode_products, encode_products
from .schemas import Product

logger = logging.getLogger(__name__)

# One guard per backing file, shared by every gateway in the process
_path_locks: Dict[str, threading.RLock] = {}
_registry_lock = threading.Lock()


def lock_for_path(path: Union[str, Path]) -> threading.RLock:
    """Return the process-wide lock guarding ``path``."""
    key = str(Path(path).resolve())
    with _registry_lock:
        lock = _path_locks.get(key)
        if lock is None:
            lock = threading.RLock()
            _path_locks[key] = lock
        return lock


class JsonFileGateway:
    """Read and atomically write the catalog JSON file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.lock = lock_for_path(self.path)

    def load(self) -> List[Product]:
        """Return the persisted products; an absent file is an empty catalog."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.debug("Catalog file %s does not exist yet, starting empty", self.path)
            return []
        except OSError as e:
            logger.error("Failed to read catalog file %s: %s", self.path, e)
            raise PersistenceError(self.path, f"read failed: {e}") from e
        return decode_products(text, source=str(self.path))

    def save(self, products: Sequence[Product]) -> None:
        """Replace the file contents with ``products``.

        The parent directory is created when missing. On any filesystem
        error the temporary file is removed, the previous document is
        left untouched and ``PersistenceError`` is raised.
        """
        data = encode_products(products).encode("utf-8")
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=str(self.path.parent)
            )
            with os.fdopen(fd, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
            tmp_name = None
        except OSError as e:
            logger.error("Failed to write catalog file %s: %s", self.path, e)
            raise PersistenceError(self.path, f"write failed: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    logger.warning("Could not remove temporary file %s", tmp_name)
        logger.debug("Saved %d products to %s", len(products), self.path)
