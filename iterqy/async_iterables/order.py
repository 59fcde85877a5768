from __future__ import annotations
import asyncio
import logging
import typing
from functools import cmp_to_key
from .._shared import adapt_callback
from ..types import *

if typing.TYPE_CHECKING:
    from ..async_iterable_collection import AsyncIterableCollection

logger = logging.getLogger(__name__)


class AsyncSortIterable(Generic[T]):
    """the comparator runs inside sorted(), so it must be synchronous"""
    def __init__(self, collection: 'AsyncIterableCollection[T]', comparator: Optional[Comparator[T]] = None):
        self._collection = collection
        self._comparator = comparator

    async def __aiter__(self) -> AsyncIterator[T]:
        items = [item async for item in self._collection]
        if self._comparator is None:
            items.sort()
        else:
            items.sort(key=cmp_to_key(adapt_callback(self._comparator, fallback=2)))
        for item in items:
            yield item


class AsyncShuffleIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', random_source: RandomSource):
        self._collection = collection
        self._random_source = random_source

    async def __aiter__(self) -> AsyncIterator[T]:
        items = [item async for item in self._collection]
        for i in range(len(items) - 1, 0, -1):
            j = int(self._random_source() * (i + 1))
            items[i], items[j] = items[j], items[i]
        for item in items:
            yield item


class AsyncSliceIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', start: Optional[int] = None, end: Optional[int] = None):
        self._collection = collection
        self._start = start
        self._end = end

    async def __aiter__(self) -> AsyncIterator[T]:
        start, end = self._start, self._end
        if (start is None or start >= 0) and (end is None or end >= 0):
            start = start or 0
            if end is not None and end <= start:
                return
            index = 0
            async for item in self._collection:
                if index >= start:
                    yield item
                index += 1
                if end is not None and index >= end:
                    return
            return
        items = [item async for item in self._collection]
        for item in items[start:end]:
            yield item


class AsyncMemoizedIterable(Generic[T]):
    """
    async snapshot of the upstream. runs share one upstream iterator and take
    turns pulling from it under a lock, so runs interleaving on the same event
    loop never pull the same item twice. an upstream failure is kept and raised
    again by every later run once the cache is replayed.
    """
    def __init__(self, collection: AsyncIterable[T]):
        self._collection = collection
        self._cache: List[T] = []
        self._source_iterator: Optional[AsyncIterator[T]] = None
        self._is_fully_enumerated = False
        self._error: Optional[Exception] = None
        self._lock = asyncio.Lock()

    def _get_iterator(self) -> AsyncIterator[T]:
        if self._source_iterator is None:
            self._source_iterator = self._collection.__aiter__()
        return self._source_iterator

    async def __aiter__(self) -> AsyncIterator[T]:
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
            async with self._lock:
                # another run may have pulled while this one waited
                if index < len(self._cache) or self._is_fully_enumerated or self._error is not None:
                    continue
                try:
                    item = await anext(self._get_iterator())
                except StopAsyncIteration:
                    self._is_fully_enumerated = True
                    logger.debug(f"memoized {len(self._cache)} items")
                    return
                except Exception as error:
                    self._error = error
                    raise
                self._cache.append(item)
