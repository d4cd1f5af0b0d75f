"""
Catalog package: records, JSON persistence and the CRUD store.

``CatalogStore`` is the entry point used by request handlers. The
``router`` exposes the read endpoints and rating submission over
HTTP; everything else (forms, uploads, page rendering) calls the
store directly.
"""

from .store import CatalogStore  # noqa: F401
from .router import router as catalog_router  # noqa: F401
