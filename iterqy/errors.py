"""
error taxonomy shared by the sync and async collections.

every error the engine raises on its own is a `CollectionError`. the concrete
kinds also derive from the matching builtin so callers can catch them the
usual python way (e.g. `except TypeError`).
"""


class CollectionError(Exception):
    """base class for every error raised by a collection"""
    pass


class UnexpectedCollectionError(CollectionError):
    """wraps a foreign error that escaped a buffering operator; the original is kept as __cause__"""
    pass


class ItemNotFoundCollectionError(CollectionError, LookupError):
    """raised by the *_or_fail terminals and sole when nothing matches"""
    pass


class MultipleItemsFoundCollectionError(CollectionError, LookupError):
    """raised by sole when more than one item matches"""
    pass


class TypeCollectionError(CollectionError, TypeError):
    """raised when an item (or an argument) has the wrong type or shape"""
    pass


class EmptyCollectionError(CollectionError, ValueError):
    """raised by aggregates that cannot work on an empty collection"""
    pass
