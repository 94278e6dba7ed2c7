"""Domain error taxonomy for the Ordering context.

Validation problems use Protean's ``ValidationError`` (field -> messages) and
unknown ids use ``ObjectNotFoundError``. The classes below cover the rest:
each carries the envelope ``code`` the API reports for it.
"""

from protean.exceptions import ValidationError


class OrderingError(Exception):
    """Base class for ordering errors that are not plain validation failures."""

    code = "SERVER_ERROR"

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class Unauthorized(OrderingError):
    """No authenticated user is attached to the request."""

    code = "UNAUTHORIZED"


class Forbidden(OrderingError):
    """The user is known but may not perform the operation."""

    code = "FORBIDDEN"


class InvalidAddress(Forbidden):
    """An address id that does not belong to the user was used for checkout."""


class Conflict(OrderingError):
    code = "CONFLICT"


class InvalidTransition(Conflict):
    """Requested order status change is not allowed by the state machine."""

    def __init__(self, current, target):
        super().__init__(f"Cannot transition order from {current} to {target}")
        self.current = current
        self.target = target


class EmptyCart(ValidationError):
    def __init__(self, messages=None, **kwargs):
        super().__init__(messages or {"cart": ["Cart is empty"]}, **kwargs)
