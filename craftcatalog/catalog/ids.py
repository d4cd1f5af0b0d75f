"""Identifier allocation for records created without an id."""

import logging
import uuid
from typing import Callable, Iterable, Optional

logger = logging.getLogger(__name__)


def _random_token() -> str:
    return uuid.uuid4().hex


class IdentifierAllocator:
    """Hand out random string ids that are not already taken in a scope.

    The scope is whatever the caller passes as ``taken``: every product
    id for top-level records, or the sibling ids of one parent for
    sub-products and comments. A clash with ``taken`` is astronomically
    unlikely with 128-bit tokens, but it is still checked and the token
    regenerated.
    """

    def __init__(
        self,
        token_factory: Optional[Callable[[], str]] = None,
        max_attempts: int = 16,
    ) -> None:
        self._token_factory = token_factory or _random_token
        self._max_attempts = max_attempts

    def allocate(self, taken: Iterable[Optional[str]] = ()) -> str:
        """Return a new non-empty id not present in ``taken``.

        Raises
        ------
        RuntimeError
            If ``max_attempts`` consecutive tokens all collided, which
            only happens with a broken ``token_factory``.
        """
        used = {t for t in taken if t}
        for _ in range(self._max_attempts):
            candidate = self._token_factory()
            if candidate and candidate not in used:
                return candidate
            logger.debug("Identifier %r already taken, regenerating", candidate)
        raise RuntimeError(
            f"Could not allocate a unique identifier after {self._max_attempts} attempts"
        )
