"""Exception taxonomy for the screening engine.

Store adapters raise StoreUnavailable when the backing store cannot be
reached. The engine never catches store exceptions: whatever an adapter
raises reaches the caller unchanged, so a storage failure can never be
mistaken for a clean screening.
"""


class ScreeningError(Exception):
    """Base class for all screening engine errors."""


class InvalidInput(ScreeningError):
    """Rejected input, raised before any store query is made."""


class StoreUnavailable(ScreeningError):
    """The record store could not be reached or failed mid-query."""


class EntryNotFound(ScreeningError):
    """No watchlist entry exists with the given id."""
