"""
'    .___  __
'    |   |/  |_  ___________  ______.__.
'    |   \   __\/ __ \_  __ \/ ____<   |  |
'    |   ||  | \  ___/|  | \< <_|  |\___  |
'    |___||__|  \___  >__|   \__   |/ ____|
'                   \/          |__|\/
"""

import logging

# expose the main classes
from .iterable_collection import IterableCollection
from .async_iterable_collection import AsyncIterableCollection

# expose the factory functions
from .factories import (
    from_iterable,
    from_async_iterable,
    from_range,
    repeat,
    empty,
    generate,
    concat,
    iterqy,
    C,
    AC
)

# expose settings and errors
from .settings import CollectionSettings
from .errors import (
    CollectionError,
    UnexpectedCollectionError,
    ItemNotFoundCollectionError,
    MultipleItemsFoundCollectionError,
    TypeCollectionError,
    EmptyCollectionError
)

# the library never configures handlers; applications do
logging.getLogger(__name__).addHandler(logging.NullHandler())

# define what `import *` does
__all__ = [
    "IterableCollection",
    "AsyncIterableCollection",
    "from_iterable",
    "from_async_iterable",
    "from_range",
    "repeat",
    "empty",
    "generate",
    "concat",
    "iterqy",
    "C",
    "AC",
    "CollectionSettings",
    "CollectionError",
    "UnexpectedCollectionError",
    "ItemNotFoundCollectionError",
    "MultipleItemsFoundCollectionError",
    "TypeCollectionError",
    "EmptyCollectionError"
]
