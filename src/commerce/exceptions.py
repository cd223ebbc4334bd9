"""Error taxonomy for the commerce backend.

Protean's ``ValidationError`` is the "bad request" class and
``ObjectNotFoundError`` the "not found" class. The remaining categories are
defined here on top of ``ProteanExceptionWithMessage`` so they carry the
same ``messages`` payload shape as ``ValidationError``.
"""

from protean.exceptions import ObjectNotFoundError, ProteanExceptionWithMessage, ValidationError

__all__ = [
    "ConflictError",
    "ForbiddenError",
    "InsufficientStockError",
    "InternalError",
    "ObjectNotFoundError",
    "ValidationError",
    "error_messages",
]


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds the product's current stock."""


class ForbiddenError(ProteanExceptionWithMessage):
    """The acting principal does not own the resource it is acting on."""


class ConflictError(ProteanExceptionWithMessage):
    """The request collides with existing state (duplicate review, stale write)."""


class InternalError(ProteanExceptionWithMessage):
    """Unexpected storage or infrastructure failure."""


def error_messages(exc) -> dict:
    """The ``{field: [messages]}`` payload of any error.

    ``ObjectNotFoundError`` keeps its payload in ``args`` rather than
    ``messages``.
    """
    messages = getattr(exc, "messages", None)
    if isinstance(messages, dict) and messages:
        return messages
    if exc.args and isinstance(exc.args[0], dict):
        return exc.args[0]
    return {"error": [str(exc)]}
