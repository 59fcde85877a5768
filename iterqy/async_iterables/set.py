from __future__ import annotations
import typing
from .._shared import adapt_callback, aenumerate, aiterate, identity, resolve, wrap_unexpected_async
from ..iterables.set import KeyedBuckets, repeat_fill
from ..types import *

if typing.TYPE_CHECKING:
    from ..async_iterable_collection import AsyncIterableCollection

MakeCollection = Callable[[Any], 'AsyncIterableCollection[Any]']


async def _collect(source: AsyncSource[T]) -> List[T]:
    return [item async for item in aiterate(source)]


class AsyncGroupByIterable(Generic[T, K]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', selector: Optional[AsyncMapper], make_collection: MakeCollection):
        self._collection = collection
        self._selector = adapt_callback(selector or identity)
        self._make_collection = make_collection

    async def __aiter__(self) -> AsyncIterator[Tuple[K, 'AsyncIterableCollection[T]']]:
        buckets: KeyedBuckets[K, List[T]] = KeyedBuckets()
        async for index, item in aenumerate(self._collection):
            key = await resolve(self._selector(item, index, self._collection))
            bucket = buckets.get(key)
            if bucket is None:
                bucket = []
                buckets.put(key, bucket)
            bucket.append(item)
        for key, bucket in buckets.items():
            yield key, self._make_collection(bucket)


class AsyncCountByIterable(Generic[T, K]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', selector: Optional[AsyncMapper]):
        self._collection = collection
        self._selector = adapt_callback(selector or identity)

    async def __aiter__(self) -> AsyncIterator[Tuple[K, int]]:
        counts: KeyedBuckets[K, int] = KeyedBuckets()
        async for index, item in aenumerate(self._collection):
            key = await resolve(self._selector(item, index, self._collection))
            counts.put(key, counts.get(key, 0) + 1)
        for entry in counts.items():
            yield entry


class AsyncUniqueIterable(Generic[T, K]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', selector: Optional[AsyncMapper]):
        self._collection = collection
        self._selector = adapt_callback(selector or identity)

    async def __aiter__(self) -> AsyncIterator[T]:
        seen: KeyedBuckets[K, bool] = KeyedBuckets()
        async for index, item in aenumerate(self._collection):
            key = await resolve(self._selector(item, index, self._collection))
            if key not in seen:
                seen.put(key, True)
                yield item


class AsyncCrossJoinIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', iterables: Tuple[AsyncSource[Any], ...]):
        self._collection = collection
        self._iterables = iterables

    @wrap_unexpected_async
    async def __aiter__(self) -> AsyncIterator[Tuple[Any, ...]]:
        combinations: List[Tuple[Any, ...]] = [()]
        for iterable in (self._collection, *self._iterables):
            items = await _collect(iterable)
            combinations = [combination + (item,) for combination in combinations for item in items]
        for combination in combinations:
            yield combination


class AsyncZipIterable(Generic[T, U]):
    """pulls both sides in lockstep, one item each, and stops with the shorter side"""
    def __init__(self, collection: 'AsyncIterableCollection[T]', iterable: AsyncSource[U]):
        self._collection = collection
        self._iterable = iterable

    async def __aiter__(self) -> AsyncIterator[Tuple[T, U]]:
        other = aiterate(self._iterable).__aiter__()
        try:
            async for item in self._collection:
                try:
                    match = await anext(other)
                except StopAsyncIteration:
                    return
                yield item, match
        finally:
            await other.aclose()


class AsyncPadStartIterable(Generic[T, U]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', max_length: int, fill_items: AsyncSource[U]):
        self._collection = collection
        self._max_length = max_length
        self._fill_items = fill_items

    @wrap_unexpected_async
    async def __aiter__(self) -> AsyncIterator[Union[T, U]]:
        fill_items = await _collect(self._fill_items)
        items = [item async for item in self._collection]
        for item in repeat_fill(fill_items, self._max_length - len(items)):
            yield item
        for item in items:
            yield item


class AsyncPadEndIterable(Generic[T, U]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', max_length: int, fill_items: AsyncSource[U]):
        self._collection = collection
        self._max_length = max_length
        self._fill_items = fill_items

    @wrap_unexpected_async
    async def __aiter__(self) -> AsyncIterator[Union[T, U]]:
        size = 0
        async for item in self._collection:
            size += 1
            yield item
        for item in repeat_fill(await _collect(self._fill_items), self._max_length - size):
            yield item
