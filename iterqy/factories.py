import typing
from .types import *

if typing.TYPE_CHECKING:
    from .async_iterable_collection import AsyncIterableCollection
    from .iterable_collection import IterableCollection
    from .settings import CollectionSettings


def from_iterable(data: Source[T] = None, settings: Optional['CollectionSettings'] = None) -> 'IterableCollection[T]':
    """create collection from iterable, mapping or zero-argument factory"""
    from .iterable_collection import IterableCollection
    return IterableCollection(data, settings)


def from_async_iterable(data: AsyncSource[T] = None,
                        settings: Optional['CollectionSettings'] = None) -> 'AsyncIterableCollection[T]':
    """create async collection from an async iterable, iterable or (async) factory"""
    from .async_iterable_collection import AsyncIterableCollection
    return AsyncIterableCollection(data, settings)


def from_range(start: int, count: int) -> 'IterableCollection[int]':
    """create collection from range"""
    from .iterable_collection import IterableCollection
    return IterableCollection(range(start, start + count))


def repeat(item: T, count: int) -> 'IterableCollection[T]':
    """create collection with repeated item"""
    from .iterable_collection import IterableCollection
    return IterableCollection(lambda: (item for _ in range(count)))


def empty() -> 'IterableCollection[Any]':
    """create empty collection"""
    from .iterable_collection import IterableCollection
    return IterableCollection()


def generate(generator_func: Callable[[], T], count: int) -> 'IterableCollection[T]':
    """generate sequence using a function, called afresh on every enumeration"""
    from .iterable_collection import IterableCollection
    return IterableCollection(lambda: (generator_func() for _ in range(count)))


def concat(*iterables: Source[T]) -> 'IterableCollection[T]':
    """create collection that runs through every source in order"""
    from .iterable_collection import IterableCollection
    return IterableCollection.concat(iterables)


# --- aliases ---
iterqy = from_iterable
C = from_iterable
AC = from_async_iterable
