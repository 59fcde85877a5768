from __future__ import annotations
import typing
from collections import deque
from .._shared import adapt_callback, aenumerate, aiterate, ensure_positive, is_async_iterable, is_iterable, resolve
from ..types import *

if typing.TYPE_CHECKING:
    from ..async_iterable_collection import AsyncIterableCollection

# --- streaming operators, async: callbacks may return awaitables ---


class AsyncEntriesIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]'):
        self._collection = collection

    async def __aiter__(self) -> AsyncIterator[Tuple[int, T]]:
        async for entry in aenumerate(self._collection):
            yield entry


class AsyncFilterIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate):
        self._collection = collection
        self._predicate = adapt_callback(predicate)

    async def __aiter__(self) -> AsyncIterator[T]:
        async for index, item in aenumerate(self._collection):
            if await resolve(self._predicate(item, index, self._collection)):
                yield item


class AsyncMapIterable(Generic[T, U]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', mapper: AsyncMapper):
        self._collection = collection
        self._mapper = adapt_callback(mapper)

    async def __aiter__(self) -> AsyncIterator[U]:
        async for index, item in aenumerate(self._collection):
            yield await resolve(self._mapper(item, index, self._collection))


class AsyncFlatMapIterable(Generic[T, U]):
    """mapper may return a sync or an async iterable"""
    def __init__(self, collection: 'AsyncIterableCollection[T]', mapper: AsyncMapper):
        self._collection = collection
        self._mapper = adapt_callback(mapper)

    async def __aiter__(self) -> AsyncIterator[U]:
        async for index, item in aenumerate(self._collection):
            async for value in aiterate(await resolve(self._mapper(item, index, self._collection))):
                yield value


class AsyncCollapseIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]'):
        self._collection = collection

    async def __aiter__(self) -> AsyncIterator[Any]:
        async for item in self._collection:
            if is_iterable(item) or is_async_iterable(item):
                async for value in aiterate(item):
                    yield value
            else:
                yield item


class AsyncUpdateIterable(Generic[T, U]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate, mapper: AsyncMapper):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._mapper = adapt_callback(mapper)

    async def __aiter__(self) -> AsyncIterator[Union[T, U]]:
        async for index, item in aenumerate(self._collection):
            if await resolve(self._predicate(item, index, self._collection)):
                yield await resolve(self._mapper(item, index, self._collection))
            else:
                yield item


class AsyncTapIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', callback: Tap):
        self._collection = collection
        self._callback = callback

    async def __aiter__(self) -> AsyncIterator[T]:
        await resolve(self._callback(self._collection))
        async for item in self._collection:
            yield item


class AsyncTakeIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', limit: int):
        self._collection = collection
        self._limit = limit

    async def __aiter__(self) -> AsyncIterator[T]:
        if self._limit == 0:
            return
        if self._limit > 0:
            async for index, item in aenumerate(self._collection, 1):
                yield item
                if index >= self._limit:
                    return
            return
        held_back = deque()
        async for item in self._collection:
            held_back.append(item)
            if len(held_back) > -self._limit:
                yield held_back.popleft()


class AsyncSkipIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', offset: int):
        self._collection = collection
        self._offset = offset

    async def __aiter__(self) -> AsyncIterator[T]:
        if self._offset < 0:
            kept = deque(maxlen=-self._offset)
            async for item in self._collection:
                kept.append(item)
            for item in kept:
                yield item
            return
        async for index, item in aenumerate(self._collection):
            if index >= self._offset:
                yield item


class AsyncNthIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', step: int):
        self._collection = collection
        self._step = step

    async def __aiter__(self) -> AsyncIterator[T]:
        ensure_positive(self._step, "step")
        async for index, item in aenumerate(self._collection):
            if index % self._step == 0:
                yield item


class AsyncTakeUntilIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate):
        self._collection = collection
        self._predicate = adapt_callback(predicate)

    async def __aiter__(self) -> AsyncIterator[T]:
        async for index, item in aenumerate(self._collection):
            if await resolve(self._predicate(item, index, self._collection)):
                return
            yield item


class AsyncSkipUntilIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate):
        self._collection = collection
        self._predicate = adapt_callback(predicate)

    async def __aiter__(self) -> AsyncIterator[T]:
        skipping = True
        async for index, item in aenumerate(self._collection):
            if skipping and await resolve(self._predicate(item, index, self._collection)):
                skipping = False
            if not skipping:
                yield item


class AsyncMergeIterable(Generic[T]):
    def __init__(self, *iterables: AsyncSource[T]):
        self._iterables = iterables

    async def __aiter__(self) -> AsyncIterator[T]:
        for iterable in self._iterables:
            async for item in aiterate(iterable):
                yield item


class AsyncInsertBeforeIterable(Generic[T, U]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate, iterable: AsyncSource[U]):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._iterable = iterable

    async def __aiter__(self) -> AsyncIterator[Union[T, U]]:
        inserted = False
        async for index, item in aenumerate(self._collection):
            if not inserted and await resolve(self._predicate(item, index, self._collection)):
                async for value in aiterate(self._iterable):
                    yield value
                inserted = True
            yield item


class AsyncInsertAfterIterable(Generic[T, U]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate, iterable: AsyncSource[U]):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._iterable = iterable

    async def __aiter__(self) -> AsyncIterator[Union[T, U]]:
        inserted = False
        async for index, item in aenumerate(self._collection):
            yield item
            if not inserted and await resolve(self._predicate(item, index, self._collection)):
                async for value in aiterate(self._iterable):
                    yield value
                inserted = True


class AsyncWhenIterable(Generic[T, U]):
    """condition may be a coroutine function, e.g. the collection's own is_empty"""
    def __init__(self, collection: 'AsyncIterableCollection[T]', condition: Callable[[], Any], callback: Modifier):
        self._collection = collection
        self._condition = condition
        self._callback = callback

    async def __aiter__(self) -> AsyncIterator[Union[T, U]]:
        if await resolve(self._condition()):
            source = await resolve(self._callback(self._collection))
        else:
            source = self._collection
        async for item in aiterate(source):
            yield item


class AsyncRepeatIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', amount: int):
        self._collection = collection
        self._amount = amount

    async def __aiter__(self) -> AsyncIterator[T]:
        for _ in range(self._amount):
            async for item in self._collection:
                yield item
