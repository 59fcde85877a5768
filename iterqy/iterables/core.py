from __future__ import annotations
import typing
from collections import deque
from itertools import islice
from .._shared import adapt_callback, ensure_positive, is_iterable, to_iterable
from ..types import *

if typing.TYPE_CHECKING:
    from ..iterable_collection import IterableCollection

# --- streaming operators: one upstream pull per step, o(1) extra memory ---


class EntriesIterable(Generic[T]):
    """pairs every item with its index, numbered fresh on every enumeration"""
    def __init__(self, collection: 'IterableCollection[T]'):
        self._collection = collection

    def __iter__(self) -> Iterator[Tuple[int, T]]:
        yield from enumerate(self._collection)


class FilterIterable(Generic[T]):
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate):
        self._collection = collection
        self._predicate = adapt_callback(predicate)

    def __iter__(self) -> Iterator[T]:
        for index, item in enumerate(self._collection):
            if self._predicate(item, index, self._collection):
                yield item


class MapIterable(Generic[T, U]):
    def __init__(self, collection: 'IterableCollection[T]', mapper: Mapper):
        self._collection = collection
        self._mapper = adapt_callback(mapper)

    def __iter__(self) -> Iterator[U]:
        for index, item in enumerate(self._collection):
            yield self._mapper(item, index, self._collection)


class FlatMapIterable(Generic[T, U]):
    """mapper returns an iterable per item; the results are flattened one level"""
    def __init__(self, collection: 'IterableCollection[T]', mapper: Mapper):
        self._collection = collection
        self._mapper = adapt_callback(mapper)

    def __iter__(self) -> Iterator[U]:
        for index, item in enumerate(self._collection):
            yield from to_iterable(self._mapper(item, index, self._collection))


class CollapseIterable(Generic[T]):
    """flattens nested iterables one level, strings stay whole"""
    def __init__(self, collection: 'IterableCollection[T]'):
        self._collection = collection

    def __iter__(self) -> Iterator[Any]:
        for item in self._collection:
            if is_iterable(item):
                yield from to_iterable(item)
            else:
                yield item


class UpdateIterable(Generic[T, U]):
    """maps only the items matching the predicate, passes the rest through"""
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate, mapper: Mapper):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._mapper = adapt_callback(mapper)

    def __iter__(self) -> Iterator[Union[T, U]]:
        for index, item in enumerate(self._collection):
            if self._predicate(item, index, self._collection):
                yield self._mapper(item, index, self._collection)
            else:
                yield item


class TapIterable(Generic[T]):
    """hands the whole collection to callback once enumeration starts, then streams it unchanged"""
    def __init__(self, collection: 'IterableCollection[T]', callback: Tap):
        self._collection = collection
        self._callback = callback

    def __iter__(self) -> Iterator[T]:
        self._callback(self._collection)
        yield from self._collection


class TakeIterable(Generic[T]):
    """
    a non-negative limit keeps the first `limit` items.
    a negative limit keeps everything but the last `abs(limit)` items,
    holding back only that many items at a time.
    """
    def __init__(self, collection: 'IterableCollection[T]', limit: int):
        self._collection = collection
        self._limit = limit

    def __iter__(self) -> Iterator[T]:
        if self._limit >= 0:
            yield from islice(self._collection, self._limit)
            return
        held_back = deque()
        for item in self._collection:
            held_back.append(item)
            if len(held_back) > -self._limit:
                yield held_back.popleft()


class SkipIterable(Generic[T]):
    """
    a non-negative offset drops the first `offset` items.
    a negative offset keeps only the last `abs(offset)` items.
    """
    def __init__(self, collection: 'IterableCollection[T]', offset: int):
        self._collection = collection
        self._offset = offset

    def __iter__(self) -> Iterator[T]:
        if self._offset >= 0:
            yield from islice(self._collection, self._offset, None)
            return
        yield from deque(self._collection, maxlen=-self._offset)


class NthIterable(Generic[T]):
    """every `step`-th item, starting with the first"""
    def __init__(self, collection: 'IterableCollection[T]', step: int):
        self._collection = collection
        self._step = step

    def __iter__(self) -> Iterator[T]:
        ensure_positive(self._step, "step")
        yield from islice(self._collection, 0, None, self._step)


class TakeUntilIterable(Generic[T]):
    """stops right before the first matching item"""
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate):
        self._collection = collection
        self._predicate = adapt_callback(predicate)

    def __iter__(self) -> Iterator[T]:
        for index, item in enumerate(self._collection):
            if self._predicate(item, index, self._collection):
                return
            yield item


class SkipUntilIterable(Generic[T]):
    """drops items until the first match, which is the first item emitted"""
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate):
        self._collection = collection
        self._predicate = adapt_callback(predicate)

    def __iter__(self) -> Iterator[T]:
        skipping = True
        for index, item in enumerate(self._collection):
            if skipping and self._predicate(item, index, self._collection):
                skipping = False
            if not skipping:
                yield item


class MergeIterable(Generic[T]):
    """concatenates any number of sources in order"""
    def __init__(self, *iterables: Source[T]):
        self._iterables = iterables

    def __iter__(self) -> Iterator[T]:
        for iterable in self._iterables:
            yield from to_iterable(iterable)


class InsertBeforeIterable(Generic[T, U]):
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate, iterable: Source[U]):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._iterable = iterable

    def __iter__(self) -> Iterator[Union[T, U]]:
        inserted = False
        for index, item in enumerate(self._collection):
            if not inserted and self._predicate(item, index, self._collection):
                yield from to_iterable(self._iterable)
                inserted = True
            yield item


class InsertAfterIterable(Generic[T, U]):
    def __init__(self, collection: 'IterableCollection[T]', predicate: Predicate, iterable: Source[U]):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._iterable = iterable

    def __iter__(self) -> Iterator[Union[T, U]]:
        inserted = False
        for index, item in enumerate(self._collection):
            yield item
            if not inserted and self._predicate(item, index, self._collection):
                yield from to_iterable(self._iterable)
                inserted = True


class WhenIterable(Generic[T, U]):
    """the condition is evaluated when enumeration starts, not when the stage is built"""
    def __init__(self, collection: 'IterableCollection[T]', condition: Callable[[], bool], callback: Modifier):
        self._collection = collection
        self._condition = condition
        self._callback = callback

    def __iter__(self) -> Iterator[Union[T, U]]:
        if self._condition():
            yield from to_iterable(self._callback(self._collection))
        else:
            yield from self._collection


class RepeatIterable(Generic[T]):
    def __init__(self, collection: 'IterableCollection[T]', amount: int):
        self._collection = collection
        self._amount = amount

    def __iter__(self) -> Iterator[T]:
        for _ in range(self._amount):
            yield from self._collection
