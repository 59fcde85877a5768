from __future__ import annotations
import typing
from collections import deque
from .._shared import adapt_callback, aenumerate, ensure_positive, resolve, wrap_unexpected_async
from ..types import *

if typing.TYPE_CHECKING:
    from ..async_iterable_collection import AsyncIterableCollection

MakeCollection = Callable[[Any], 'AsyncIterableCollection[Any]']


class AsyncChunkIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', size: int, make_collection: MakeCollection):
        self._collection = collection
        self._size = size
        self._make_collection = make_collection

    async def __aiter__(self) -> AsyncIterator['AsyncIterableCollection[T]']:
        ensure_positive(self._size, "chunk size")
        chunk: List[T] = []
        async for item in self._collection:
            chunk.append(item)
            if len(chunk) == self._size:
                yield self._make_collection(chunk)
                chunk = []
        if chunk:
            yield self._make_collection(chunk)


class AsyncChunkWhileIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate, make_collection: MakeCollection):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._make_collection = make_collection

    async def __aiter__(self) -> AsyncIterator['AsyncIterableCollection[T]']:
        chunk: List[T] = []
        async for index, item in aenumerate(self._collection):
            if index == 0 or await resolve(self._predicate(item, index, self._make_collection(chunk))):
                chunk.append(item)
            else:
                yield self._make_collection(chunk)
                chunk = [item]
        if chunk:
            yield self._make_collection(chunk)


class AsyncSplitIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', amount: int, make_collection: MakeCollection):
        self._collection = collection
        self._amount = amount
        self._make_collection = make_collection

    @wrap_unexpected_async
    async def __aiter__(self) -> AsyncIterator['AsyncIterableCollection[T]']:
        ensure_positive(self._amount, "split amount")
        items = [item async for item in self._collection]
        min_size, rest = divmod(len(items), self._amount)
        start = 0
        for index in range(self._amount):
            end = start + min_size + (1 if index < rest else 0)
            yield self._make_collection(items[start:end])
            start = end


class AsyncSlidingIterable(Generic[T]):
    """same windowing rules as the sync SlidingIterable"""
    def __init__(self, collection: 'AsyncIterableCollection[T]', size: int, step: int, make_collection: MakeCollection):
        self._collection = collection
        self._size = size
        self._step = step
        self._make_collection = make_collection

    @wrap_unexpected_async
    async def __aiter__(self) -> AsyncIterator['AsyncIterableCollection[T]']:
        ensure_positive(self._size, "window size")
        ensure_positive(self._step, "window step")
        window = deque()
        to_skip = 0
        emitted_any, has_fresh = False, False
        async for item in self._collection:
            if to_skip:
                to_skip -= 1
                continue
            window.append(item)
            has_fresh = True
            if len(window) == self._size:
                yield self._make_collection(list(window))
                emitted_any, has_fresh = True, False
                dropped = min(self._step, self._size)
                for _ in range(dropped):
                    window.popleft()
                to_skip = self._step - dropped
        if emitted_any and has_fresh and window:
            yield self._make_collection(list(window))


class AsyncPartitionIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', predicate: AsyncPredicate, make_collection: MakeCollection):
        self._collection = collection
        self._predicate = adapt_callback(predicate)
        self._make_collection = make_collection

    async def __aiter__(self) -> AsyncIterator['AsyncIterableCollection[T]']:
        matched, rest = [], []
        async for index, item in aenumerate(self._collection):
            if await resolve(self._predicate(item, index, self._collection)):
                matched.append(item)
            else:
                rest.append(item)
        yield self._make_collection(matched)
        yield self._make_collection(rest)


class AsyncReverseIterable(Generic[T]):
    def __init__(self, collection: 'AsyncIterableCollection[T]', chunk_size: int):
        self._collection = collection
        self._chunk_size = chunk_size

    @wrap_unexpected_async
    async def __aiter__(self) -> AsyncIterator[T]:
        ensure_positive(self._chunk_size, "chunk size")
        chunks: List[List[T]] = [[]]
        async for item in self._collection:
            if len(chunks[-1]) == self._chunk_size:
                chunks.append([])
            chunks[-1].append(item)
        for chunk in reversed(chunks):
            for item in reversed(chunk):
                yield item
