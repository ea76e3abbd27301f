"""Error taxonomy for the order lifecycle.

Validation problems reuse Protean's ``ValidationError`` (a ``{field: [messages]}``
dict), the same type the rest of the domain raises. Lookups inside a store
raise Protean's ``ObjectNotFoundError``; the lifecycle manager turns that into
an explicit ``None``.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class StorageError(Exception):
    """The order store is unavailable or failed to persist a change."""


__all__ = ["ObjectNotFoundError", "StorageError", "ValidationError"]
