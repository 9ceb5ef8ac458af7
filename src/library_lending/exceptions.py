"""
Exception hierarchy for the library lending engine.

Only inputs that would break an invariant are raised as exceptions. Ordinary
lending outcomes (no copies left, unknown item at checkout) are returned as
values, see ``models.circulation.CheckoutOutcome``.
"""


class LibraryError(Exception):
    """Base exception for library lending operations."""


class InvalidArgumentError(LibraryError, ValueError):
    """Raised when an argument is rejected before any state is changed."""


class NotFoundError(LibraryError, LookupError):
    """Raised when an item or patron is not found."""
