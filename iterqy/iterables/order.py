from __future__ import annotations
import logging
import typing
from functools import cmp_to_key
from itertools import islice
from .._shared import adapt_callback
from ..types import *

if typing.TYPE_CHECKING:
    from ..iterable_collection import IterableCollection

logger = logging.getLogger(__name__)

# --- global operators: need the whole upstream before emitting ---


class SortIterable(Generic[T]):
    """stable sort; natural ordering unless a (a, b) -> int comparator is given"""
    def __init__(self, collection: 'IterableCollection[T]', comparator: Optional[Comparator[T]] = None):
        self._collection = collection
        self._comparator = comparator

    def __iter__(self) -> Iterator[T]:
        if self._comparator is None:
            yield from sorted(self._collection)
            return
        compare = adapt_callback(self._comparator, fallback=2)
        yield from sorted(self._collection, key=cmp_to_key(compare))


class ShuffleIterable(Generic[T]):
    """fisher-yates shuffle driven by a () -> float source in [0, 1)"""
    def __init__(self, collection: 'IterableCollection[T]', random_source: RandomSource):
        self._collection = collection
        self._random_source = random_source

    def __iter__(self) -> Iterator[T]:
        items = list(self._collection)
        for i in range(len(items) - 1, 0, -1):
            j = int(self._random_source() * (i + 1))
            items[i], items[j] = items[j], items[i]
        yield from items


class SliceIterable(Generic[T]):
    """
    python slice semantics: negative bounds count from the end, end is exclusive.
    non-negative bounds stream; a negative bound needs the full sequence.
    """
    def __init__(self, collection: 'IterableCollection[T]', start: Optional[int] = None, end: Optional[int] = None):
        self._collection = collection
        self._start = start
        self._end = end

    def __iter__(self) -> Iterator[T]:
        start, end = self._start, self._end
        if (start is None or start >= 0) and (end is None or end >= 0):
            yield from islice(self._collection, start or 0, end)
            return
        yield from list(self._collection)[start:end]


class MemoizedIterable(Generic[T]):
    """
    snapshots a (possibly one-shot) upstream as it is consumed, so it can be
    enumerated any number of times. partially consumed runs keep what they
    pulled; later runs replay the cache and continue from the shared iterator.
    an upstream failure is kept and raised again by every later run once the
    cache is replayed.
    """
    def __init__(self, collection: Iterable[T]):
        self._collection = collection
        self._cache: List[T] = []
        self._source_iterator: Optional[Iterator[T]] = None
        self._is_fully_enumerated = False
        self._error: Optional[Exception] = None

    def _get_iterator(self) -> Iterator[T]:
        if self._source_iterator is None:
            self._source_iterator = iter(self._collection)
        return self._source_iterator

    def __iter__(self) -> Iterator[T]:
        # index based, so interleaved runs never skip what another run appended
        index = 0
        while True:
            if index < len(self._cache):
                yield self._cache[index]
                index += 1
                continue
            if self._is_fully_enumerated:
                return
            if self._error is not None:
                raise self._error
            try:
                item = next(self._get_iterator())
            except StopIteration:
                self._is_fully_enumerated = True
                logger.debug(f"memoized {len(self._cache)} items")
                return
            except Exception as error:
                self._error = error
                raise
            self._cache.append(item)
