from __future__ import annotations

import asyncio

import numpy as np
import pandas as pd

from ._shared import (
    MISSING, adapt_callback, aenumerate, aiterate, ensure_number, identity, resolve, resolve_lazyable, to_iterable,
    wrap_unexpected_async, wrap_unexpected_call_async
)
from .async_iterables import *
from .errors import TypeCollectionError
from .iterable_collection import (
    build_map, build_record, middle, raise_empty, raise_multiple_found, raise_not_found, total
)
from .settings import CollectionSettings
from .types import *


def _always(*_: Any) -> bool:
    return True


def _negate(predicate: AsyncPredicate) -> AsyncPredicate:
    test = adapt_callback(predicate)

    async def negated(item, index, collection):
        return not await resolve(test(item, index, collection))
    return negated


class AsyncIterableCollection(Generic[T]):
    """
    async twin of IterableCollection. sources may be async iterables, sync
    iterables, or zero-argument (async) factories; callbacks may return
    awaitables. upstream items are pulled strictly one at a time and never
    reordered. chaining methods are plain methods, terminals are coroutines.
    """

    def __init__(self, source: AsyncSource[T] = None, settings: Optional[CollectionSettings] = None):
        self._source = source
        self._settings = settings or CollectionSettings()

    @wrap_unexpected_async
    async def __aiter__(self) -> AsyncIterator[T]:
        async for item in aiterate(self._source):
            yield item

    def __repr__(self) -> str:
        return f"AsyncIterableCollection(source={type(self._source).__name__})"

    def _make(self, source: AsyncSource[U]) -> 'AsyncIterableCollection[U]':
        return AsyncIterableCollection(source, self._settings)

    @property
    def settings(self) -> CollectionSettings:
        return self._settings

    # --- class level helpers ---

    @classmethod
    def concat(cls, iterables: Iterable[AsyncSource[T]], settings: Optional[CollectionSettings] = None) -> 'AsyncIterableCollection[T]':
        return cls(lambda: AsyncMergeIterable(*to_iterable(iterables)), settings)

    @classmethod
    def difference_of(cls, iterable_a: AsyncSource[T], iterable_b: AsyncSource[T],
                      selector: Optional[AsyncMapper] = None) -> 'AsyncIterableCollection[T]':
        return cls(iterable_a).difference(iterable_b, selector)

    @classmethod
    def zip_of(cls, iterable_a: AsyncSource[T], iterable_b: AsyncSource[U]) -> 'AsyncIterableCollection[Tuple[T, U]]':
        return cls(iterable_a).zip(iterable_b)

    # --- streaming operators ---

    def entries(self) -> 'AsyncIterableCollection[Tuple[int, T]]':
        return self._make(AsyncEntriesIterable(self))

    def keys(self) -> 'AsyncIterableCollection[int]':
        return self.entries().map(lambda entry: entry[0])

    def values(self) -> 'AsyncIterableCollection[T]':
        return self.entries().map(lambda entry: entry[1])

    def filter(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncFilterIterable(self, predicate))

    def reject(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[T]':
        return self.filter(_negate(predicate))

    def map(self, mapper: AsyncMapper) -> 'AsyncIterableCollection[U]':
        return self._make(AsyncMapIterable(self, mapper))

    def flat_map(self, mapper: AsyncMapper) -> 'AsyncIterableCollection[U]':
        return self._make(AsyncFlatMapIterable(self, mapper))

    def collapse(self) -> 'AsyncIterableCollection[Any]':
        return self._make(AsyncCollapseIterable(self))

    def change(self, predicate: AsyncPredicate, mapper: AsyncMapper) -> 'AsyncIterableCollection[Union[T, U]]':
        return self._make(AsyncUpdateIterable(self, predicate, mapper))

    def set(self, index: int, value: Union[T, AsyncMapper]) -> 'AsyncIterableCollection[T]':
        """replace the item at index; a callable value maps the current item"""
        if index < 0:
            return self
        mapper = value if callable(value) else (lambda _: value)
        return self.change(lambda _, item_index: item_index == index, mapper)

    def page(self, page: int, page_size: int) -> 'AsyncIterableCollection[T]':
        if page < 0:
            return self.skip(page * page_size).take(page_size)
        return self.skip((page - 1) * page_size).take(page_size)

    def take(self, limit: int) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncTakeIterable(self, limit))

    def take_until(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncTakeUntilIterable(self, predicate))

    def take_while(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[T]':
        return self.take_until(_negate(predicate))

    def skip(self, offset: int) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncSkipIterable(self, offset))

    def skip_until(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncSkipUntilIterable(self, predicate))

    def skip_while(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[T]':
        return self.skip_until(_negate(predicate))

    def nth(self, step: int) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncNthIterable(self, step))

    def tap(self, callback: Tap) -> 'AsyncIterableCollection[T]':
        """callback(collection) runs, and is awaited if needed, when enumeration starts"""
        return self._make(AsyncTapIterable(self, callback))

    def when(self, condition: bool, callback: Modifier) -> 'AsyncIterableCollection[Any]':
        return self._make(AsyncWhenIterable(self, lambda: condition, callback))

    def when_not(self, condition: bool, callback: Modifier) -> 'AsyncIterableCollection[Any]':
        return self.when(not condition, callback)

    def when_empty(self, callback: Modifier) -> 'AsyncIterableCollection[Any]':
        return self._make(AsyncWhenIterable(self, self.is_empty, callback))

    def when_not_empty(self, callback: Modifier) -> 'AsyncIterableCollection[Any]':
        return self._make(AsyncWhenIterable(self, self.is_not_empty, callback))

    def prepend(self, iterable: AsyncSource[U]) -> 'AsyncIterableCollection[Union[T, U]]':
        return self._make(AsyncMergeIterable(iterable, self))

    def append(self, iterable: AsyncSource[U]) -> 'AsyncIterableCollection[Union[T, U]]':
        return self._make(AsyncMergeIterable(self, iterable))

    def insert_before(self, predicate: AsyncPredicate, iterable: AsyncSource[U]) -> 'AsyncIterableCollection[Union[T, U]]':
        return self._make(AsyncInsertBeforeIterable(self, predicate, iterable))

    def insert_after(self, predicate: AsyncPredicate, iterable: AsyncSource[U]) -> 'AsyncIterableCollection[Union[T, U]]':
        return self._make(AsyncInsertAfterIterable(self, predicate, iterable))

    def repeat(self, amount: int) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncRepeatIterable(self, amount))

    # --- windowing operators ---

    def chunk(self, size: int) -> 'AsyncIterableCollection[AsyncIterableCollection[T]]':
        return self._make(AsyncChunkIterable(self, size, self._make))

    def chunk_while(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[AsyncIterableCollection[T]]':
        return self._make(AsyncChunkWhileIterable(self, predicate, self._make))

    def split(self, amount: int) -> 'AsyncIterableCollection[AsyncIterableCollection[T]]':
        return self._make(AsyncSplitIterable(self, amount, self._make))

    def partition(self, predicate: AsyncPredicate) -> 'AsyncIterableCollection[AsyncIterableCollection[T]]':
        return self._make(AsyncPartitionIterable(self, predicate, self._make))

    def sliding(self, size: int, step: Optional[int] = None) -> 'AsyncIterableCollection[AsyncIterableCollection[T]]':
        step = size - 1 if step is None else step
        return self._make(AsyncSlidingIterable(self, size, step, self._make))

    def reverse(self, chunk_size: Optional[int] = None) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncReverseIterable(self, self._settings.chunk_size if chunk_size is None else chunk_size))

    # --- set and bucket operators ---

    def group_by(self, selector: Optional[AsyncMapper] = None) -> 'AsyncIterableCollection[Tuple[Any, AsyncIterableCollection[T]]]':
        return self._make(AsyncGroupByIterable(self, selector, self._make))

    def count_by(self, selector: Optional[AsyncMapper] = None) -> 'AsyncIterableCollection[Tuple[Any, int]]':
        return self._make(AsyncCountByIterable(self, selector))

    def unique(self, selector: Optional[AsyncMapper] = None) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncUniqueIterable(self, selector))

    def difference(self, iterable: AsyncSource[T], selector: Optional[AsyncMapper] = None) -> 'AsyncIterableCollection[T]':
        select = adapt_callback(selector or identity)
        other = self._make(iterable)

        async def is_absent(item, index, collection):
            key = await resolve(select(item, index, collection))

            async def matches(match, match_index, match_collection):
                return await resolve(select(match, match_index, match_collection)) == key
            return not await other.some(matches)

        return self.filter(is_absent)

    def cross_join(self, *iterables: AsyncSource[Any]) -> 'AsyncIterableCollection[Tuple[Any, ...]]':
        return self._make(AsyncCrossJoinIterable(self, iterables))

    def zip(self, iterable: AsyncSource[U]) -> 'AsyncIterableCollection[Tuple[T, U]]':
        return self._make(AsyncZipIterable(self, iterable))

    def pad_start(self, max_length: int, fill_items: AsyncSource[U]) -> 'AsyncIterableCollection[Union[T, U]]':
        return self._make(AsyncPadStartIterable(self, max_length, fill_items))

    def pad_end(self, max_length: int, fill_items: AsyncSource[U]) -> 'AsyncIterableCollection[Union[T, U]]':
        return self._make(AsyncPadEndIterable(self, max_length, fill_items))

    # --- global operators ---

    def sort(self, comparator: Optional[Comparator[T]] = None) -> 'AsyncIterableCollection[T]':
        """the comparator must be a plain function, not a coroutine function"""
        return self._make(AsyncSortIterable(self, comparator))

    def shuffle(self, random_source: Optional[RandomSource] = None) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncShuffleIterable(self, random_source or self._settings.random_source))

    def slice(self, start: Optional[int] = None, end: Optional[int] = None) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncSliceIterable(self, start, end))

    def memoize(self) -> 'AsyncIterableCollection[T]':
        return self._make(AsyncMemoizedIterable(self))

    # --- time and cancellation ---

    def delay(self, time: TimeSpan) -> 'AsyncIterableCollection[T]':
        """wait `time` (seconds or a timedelta) before each item"""
        return self._make(AsyncDelayIterable(self, time))

    def take_until_abort(self, event: asyncio.Event) -> 'AsyncIterableCollection[T]':
        """stop enumerating once event is set, even while waiting on the upstream"""
        return self._make(AsyncTakeUntilAbortIterable(self, event))

    def take_until_timeout(self, time: TimeSpan) -> 'AsyncIterableCollection[T]':
        """stop enumerating once `time` has passed since enumeration started"""
        return self._make(AsyncTakeUntilTimeoutIterable(self, time))

    # --- terminal: folding ---

    @wrap_unexpected_call_async
    async def pipe(self, callback: Transform[U]) -> U:
        return await resolve(callback(self))

    @wrap_unexpected_call_async
    async def reduce(self, reducer: Reducer, initial: Any = MISSING) -> Any:
        reduce_fn = adapt_callback(reducer, fallback=2)
        output = initial
        async for index, item in aenumerate(self):
            if output is MISSING:
                output = item
                continue
            output = await resolve(reduce_fn(output, item, index, self))
        if output is MISSING:
            raise TypeCollectionError("reduce of an empty collection requires an initial value")
        return output

    async def join(self, separator: str = ",") -> str:
        parts = []
        async for item in self:
            if not isinstance(item, str):
                raise TypeCollectionError(f"item type is invalid, must be a string: {item!r}")
            parts.append(item)
        return separator.join(parts)

    # --- terminal: numeric aggregates ---

    async def _numbers(self) -> List[Union[int, float]]:
        values = [ensure_number(item) async for item in self]
        if not values:
            raise_empty()
        return values

    async def sum(self) -> Union[int, float]:
        return total(await self._numbers())

    async def average(self) -> float:
        values = await self._numbers()
        return sum(values) / len(values)

    async def median(self) -> Union[int, float]:
        return middle(await self._numbers())

    async def min(self) -> Union[int, float]:
        return min(await self._numbers())

    async def max(self) -> Union[int, float]:
        return max(await self._numbers())

    @wrap_unexpected_call_async
    async def percentage(self, predicate: AsyncPredicate) -> float:
        test = adapt_callback(predicate)
        part, size = 0, 0
        async for index, item in aenumerate(self):
            if await resolve(test(item, index, self)):
                part += 1
            size += 1
        if size == 0:
            raise_empty()
        return part * 100 / size

    # --- terminal: queries ---

    @wrap_unexpected_call_async
    async def some(self, predicate: Optional[AsyncPredicate] = None) -> bool:
        return await self.search_first(predicate or _always) != -1

    @wrap_unexpected_call_async
    async def every(self, predicate: AsyncPredicate) -> bool:
        return await self.search_first(_negate(predicate)) == -1

    @wrap_unexpected_call_async
    async def count(self, predicate: Optional[AsyncPredicate] = None) -> int:
        test = adapt_callback(predicate or _always)
        matches = 0
        async for index, item in aenumerate(self):
            if await resolve(test(item, index, self)):
                matches += 1
        return matches

    async def size(self) -> int:
        return await self.count()

    async def is_empty(self) -> bool:
        async for _ in self:
            return False
        return True

    async def is_not_empty(self) -> bool:
        return not await self.is_empty()

    @wrap_unexpected_call_async
    async def search_first(self, predicate: AsyncPredicate) -> int:
        test = adapt_callback(predicate)
        async for index, item in aenumerate(self):
            if await resolve(test(item, index, self)):
                return index
        return -1

    @wrap_unexpected_call_async
    async def search_last(self, predicate: AsyncPredicate) -> int:
        test = adapt_callback(predicate)
        matched_index = -1
        async for index, item in aenumerate(self):
            if await resolve(test(item, index, self)):
                matched_index = index
        return matched_index

    # --- terminal: item lookup ---

    async def first(self, predicate: Optional[AsyncPredicate] = None) -> Optional[T]:
        return await self.first_or(None, predicate)

    @wrap_unexpected_call_async
    async def first_or(self, default: Lazyable[U], predicate: Optional[AsyncPredicate] = None) -> Union[T, U]:
        """a callable default is called, and awaited if needed, only when nothing matches"""
        test = adapt_callback(predicate or _always)
        async for index, item in aenumerate(self):
            if await resolve(test(item, index, self)):
                return item
        return await resolve(resolve_lazyable(default))

    async def first_or_fail(self, predicate: Optional[AsyncPredicate] = None) -> T:
        return await self.first_or(raise_not_found, predicate)

    async def last(self, predicate: Optional[AsyncPredicate] = None) -> Optional[T]:
        return await self.last_or(None, predicate)

    @wrap_unexpected_call_async
    async def last_or(self, default: Lazyable[U], predicate: Optional[AsyncPredicate] = None) -> Union[T, U]:
        test = adapt_callback(predicate or _always)
        matched = MISSING
        async for index, item in aenumerate(self):
            if await resolve(test(item, index, self)):
                matched = item
        if matched is MISSING:
            return await resolve(resolve_lazyable(default))
        return matched

    async def last_or_fail(self, predicate: Optional[AsyncPredicate] = None) -> T:
        return await self.last_or(raise_not_found, predicate)

    async def before(self, predicate: AsyncPredicate) -> Optional[T]:
        return await self.before_or(None, predicate)

    @wrap_unexpected_call_async
    async def before_or(self, default: Lazyable[U], predicate: AsyncPredicate) -> Union[T, U]:
        test = adapt_callback(predicate)
        previous = MISSING
        async for index, item in aenumerate(self):
            if await resolve(test(item, index, self)) and previous is not MISSING:
                return previous
            previous = item
        return await resolve(resolve_lazyable(default))

    async def before_or_fail(self, predicate: AsyncPredicate) -> T:
        return await self.before_or(raise_not_found, predicate)

    async def after(self, predicate: AsyncPredicate) -> Optional[T]:
        return await self.after_or(None, predicate)

    @wrap_unexpected_call_async
    async def after_or(self, default: Lazyable[U], predicate: AsyncPredicate) -> Union[T, U]:
        test = adapt_callback(predicate)
        matched = False
        async for index, item in aenumerate(self):
            if matched:
                return item
            matched = await resolve(test(item, index, self))
        return await resolve(resolve_lazyable(default))

    async def after_or_fail(self, predicate: AsyncPredicate) -> T:
        return await self.after_or(raise_not_found, predicate)

    async def get(self, index: int) -> Optional[T]:
        return await self.first(lambda _, item_index: item_index == index)

    async def get_or_fail(self, index: int) -> T:
        return await self.first_or_fail(lambda _, item_index: item_index == index)

    @wrap_unexpected_call_async
    async def sole(self, predicate: Optional[AsyncPredicate] = None) -> T:
        test = adapt_callback(predicate or _always)
        matched = MISSING
        async for index, item in aenumerate(self):
            if not await resolve(test(item, index, self)):
                continue
            if matched is not MISSING:
                raise_multiple_found()
            matched = item
        if matched is MISSING:
            raise_not_found()
        return matched

    # --- terminal: materializers ---

    @wrap_unexpected_call_async
    async def for_each(self, callback: ForEach) -> None:
        call = adapt_callback(callback)
        async for index, item in aenumerate(self):
            await resolve(call(item, index, self))

    def to_iterator(self) -> AsyncIterator[T]:
        """a fresh async iterator; not a coroutine"""
        return self.__aiter__()

    async def to_list(self) -> List[T]:
        return [item async for item in self]

    @wrap_unexpected_call_async
    async def to_record(self) -> Dict[Union[str, int, float], Any]:
        return build_record(await self.to_list())

    @wrap_unexpected_call_async
    async def to_map(self) -> Dict[Any, Any]:
        return build_map(await self.to_list())

    async def to_numpy(self) -> np.ndarray:
        return np.array(await self.to_list())

    async def to_series(self) -> pd.Series:
        return pd.Series(await self.to_list())

    async def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(await self.to_list())
